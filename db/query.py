"""Typed filters and updates for the document store.

Filters and updates are small immutable value objects instead of ad hoc nested
dicts. They are validated before the store executes them, and know how to
evaluate themselves against a decoded document.

Missing-field semantics follow the usual document-store rules:

- ``where("x").is_null()`` matches documents where ``x`` is null *or* absent.
- ``where("x").ne(v)`` and ``where("x").not_in(vs)`` match absent fields too.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Tuple

OBJECT_ID_PATTERN = re.compile(r"^[a-f0-9]{24}$")

# Fields holding canonical ids of other documents
REFERENCE_FIELDS = frozenset({"parentId", "categoryId"})

_SCALAR_TYPES = (str, int, float, bool, type(None))
_MISSING = object()


class QueryValidationError(ValueError):
    """Raised when a filter or update fails validation."""


def is_object_id(value: Any) -> bool:
    """Check whether a value looks like a canonical document id."""
    return isinstance(value, str) and OBJECT_ID_PATTERN.match(value) is not None


def _check_field(name: Any) -> None:
    if not isinstance(name, str) or not name:
        raise QueryValidationError(f"Invalid field name: {name!r}")
    if name.startswith("$") or "." in name:
        raise QueryValidationError(f"Unsupported field name: {name!r}")


def _check_value(name: str, value: Any) -> None:
    if not isinstance(value, _SCALAR_TYPES):
        raise QueryValidationError(
            f"Unsupported value for '{name}': {type(value).__name__}"
        )


class Filter(ABC):
    """Base class for document filters."""

    @abstractmethod
    def matches(self, document: Dict[str, Any]) -> bool:
        pass

    @abstractmethod
    def validate(self) -> None:
        pass

    def __and__(self, other: "Filter") -> "Filter":
        return And((self, other))

    def __or__(self, other: "Filter") -> "Filter":
        return Or((self, other))


@dataclass(frozen=True)
class Eq(Filter):
    field: str
    value: Any

    def matches(self, document):
        actual = document.get(self.field, _MISSING)
        if self.value is None:
            return actual is _MISSING or actual is None
        return actual is not _MISSING and actual == self.value

    def validate(self):
        _check_field(self.field)
        _check_value(self.field, self.value)


@dataclass(frozen=True)
class Ne(Filter):
    field: str
    value: Any

    def matches(self, document):
        return not Eq(self.field, self.value).matches(document)

    def validate(self):
        _check_field(self.field)
        _check_value(self.field, self.value)


@dataclass(frozen=True)
class In(Filter):
    field: str
    values: Tuple[Any, ...]

    def matches(self, document):
        return any(Eq(self.field, value).matches(document) for value in self.values)

    def validate(self):
        _check_field(self.field)
        for value in self.values:
            _check_value(self.field, value)


@dataclass(frozen=True)
class NotIn(Filter):
    field: str
    values: Tuple[Any, ...]

    def matches(self, document):
        return not In(self.field, self.values).matches(document)

    def validate(self):
        In(self.field, self.values).validate()


@dataclass(frozen=True)
class Exists(Filter):
    field: str
    present: bool = True

    def matches(self, document):
        return (self.field in document) == self.present

    def validate(self):
        _check_field(self.field)


@dataclass(frozen=True)
class NonEmptyString(Filter):
    """Matches documents whose field holds a string other than ''."""

    field: str

    def matches(self, document):
        value = document.get(self.field)
        return isinstance(value, str) and value != ""

    def validate(self):
        _check_field(self.field)


@dataclass(frozen=True)
class And(Filter):
    filters: Tuple[Filter, ...]

    def matches(self, document):
        return all(f.matches(document) for f in self.filters)

    def validate(self):
        if not self.filters:
            raise QueryValidationError("And() needs at least one filter")
        for f in self.filters:
            if not isinstance(f, Filter):
                raise QueryValidationError(f"Not a filter: {f!r}")
            f.validate()


@dataclass(frozen=True)
class Or(Filter):
    filters: Tuple[Filter, ...]

    def matches(self, document):
        return any(f.matches(document) for f in self.filters)

    def validate(self):
        if not self.filters:
            raise QueryValidationError("Or() needs at least one filter")
        for f in self.filters:
            if not isinstance(f, Filter):
                raise QueryValidationError(f"Not a filter: {f!r}")
            f.validate()


class Field:
    """Fluent entry point for building filters on a single field."""

    def __init__(self, name: str):
        self.name = name

    def eq(self, value: Any) -> Filter:
        return Eq(self.name, value)

    def ne(self, value: Any) -> Filter:
        return Ne(self.name, value)

    def is_null(self) -> Filter:
        return Eq(self.name, None)

    def not_in(self, values) -> Filter:
        return NotIn(self.name, tuple(values))

    def exists(self) -> Filter:
        return Exists(self.name, True)

    def missing(self) -> Filter:
        return Exists(self.name, False)

    def non_empty_string(self) -> Filter:
        return NonEmptyString(self.name)


def where(name: str) -> Field:
    """Start a filter on the named field, e.g. ``where("key").eq("infra")``."""
    return Field(name)


def all_of(*filters: Filter) -> Filter:
    return And(tuple(filters))


def any_of(*filters: Filter) -> Filter:
    return Or(tuple(filters))


@dataclass(frozen=True)
class Update:
    """A set of field assignments applied to every matched document.

    Attributes:
        fields: Mapping of field name to the value to store.
    """

    fields: Tuple[Tuple[str, Any], ...]

    @classmethod
    def set(cls, **fields: Any) -> "Update":
        return cls(tuple(sorted(fields.items())))

    def validate(self) -> None:
        if not self.fields:
            raise QueryValidationError("Update must set at least one field")
        for name, value in self.fields:
            _check_field(name)
            if name == "id":
                raise QueryValidationError("Document ids are immutable")
            _check_value(name, value)
            if name in REFERENCE_FIELDS and value is not None and not is_object_id(value):
                raise QueryValidationError(
                    f"'{name}' must be a canonical id, got {value!r}"
                )

    def apply(self, document: Dict[str, Any]) -> bool:
        """Apply the assignments in place.

        Returns:
            True if any field actually changed.
        """
        changed = False
        for name, value in self.fields:
            if name not in document or document[name] != value:
                document[name] = value
                changed = True
        return changed


@dataclass(frozen=True)
class UpdateOp:
    """One entry of a bulk update: filter, update, and whether to hit all matches."""

    filter: Filter
    update: Update
    multi: bool = False

    def validate(self) -> None:
        if not isinstance(self.filter, Filter):
            raise QueryValidationError(f"Not a filter: {self.filter!r}")
        self.filter.validate()
        self.update.validate()
