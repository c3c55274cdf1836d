"""Document store backed by a single SQLite table.

Each collection is a set of JSON documents keyed by a store-generated id. The
store exposes exactly three primitives (find, bulk_update, insert); filters and
updates are the typed values from db.query and are validated before any
connection is opened.
"""

import json
import secrets
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from db.query import Filter, QueryValidationError, UpdateOp


class StoreError(Exception):
    """Raised when the underlying store cannot be reached or fails."""


@dataclass
class BulkResult:
    """Outcome of a bulk update.

    Attributes:
        matched: Number of documents matched by the filters.
        modified: Number of documents whose stored value changed.
    """

    matched: int = 0
    modified: int = 0


def generate_id() -> str:
    """Generate a canonical document id (24 lowercase hex chars)."""
    return secrets.token_hex(12)


class DocumentStore:
    """Document collections stored in SQLite.

    Args:
        db_manager: Database manager providing connections.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    @contextmanager
    def _connection(self):
        try:
            with self.db_manager.connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS documents (
                        id TEXT PRIMARY KEY,
                        collection TEXT NOT NULL,
                        body TEXT NOT NULL
                    )
                    """
                )
                conn.execute(
                    "CREATE INDEX IF NOT EXISTS idx_documents_collection "
                    "ON documents (collection)"
                )
                yield conn
        except (sqlite3.Error, json.JSONDecodeError) as e:
            raise StoreError(f"Document store failure: {e}") from e

    def _load(self, conn, collection: str) -> List[Dict[str, Any]]:
        cursor = conn.execute(
            "SELECT id, body FROM documents WHERE collection = ? ORDER BY rowid",
            (collection,),
        )
        documents = []
        for row in cursor.fetchall():
            document = json.loads(row[1])
            document["id"] = row[0]
            documents.append(document)
        return documents

    def find(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        projection: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Find documents in insertion order.

        Args:
            collection: Collection name.
            filter: Optional filter; all documents when None.
            projection: Optional field names to keep. ``id`` is always kept,
                and fields absent from a document stay absent.

        Returns:
            List of documents as dicts, each including its ``id``.

        Raises:
            QueryValidationError: If the filter is malformed.
            StoreError: If the store fails.
        """
        if filter is not None:
            filter.validate()

        with self._connection() as conn:
            documents = self._load(conn, collection)

        if filter is not None:
            documents = [d for d in documents if filter.matches(d)]

        if projection is not None:
            fields = set(projection)
            documents = [
                {k: v for k, v in d.items() if k == "id" or k in fields}
                for d in documents
            ]

        return documents

    def bulk_update(self, collection: str, ops: Sequence[UpdateOp]) -> BulkResult:
        """Apply update operations in order.

        Every operation is validated before anything is read. Later operations
        see the effects of earlier ones. All changed documents are written
        back and committed together.

        Args:
            collection: Collection name.
            ops: Update operations.

        Returns:
            BulkResult with matched and modified counts.

        Raises:
            QueryValidationError: If any operation is malformed.
            StoreError: If the store fails.
        """
        for op in ops:
            op.validate()

        result = BulkResult()
        if not ops:
            return result

        with self._connection() as conn:
            documents = self._load(conn, collection)
            changed = {}

            for op in ops:
                targets = [d for d in documents if op.filter.matches(d)]
                if not op.multi:
                    targets = targets[:1]

                result.matched += len(targets)
                for document in targets:
                    if op.update.apply(document):
                        changed[document["id"]] = document

            for document_id, document in changed.items():
                body = {k: v for k, v in document.items() if k != "id"}
                conn.execute(
                    "UPDATE documents SET body = ? WHERE id = ?",
                    (json.dumps(body), document_id),
                )
            conn.commit()

        result.modified = len(changed)
        return result

    def insert(self, collection: str, document: Dict[str, Any]) -> str:
        """Insert a document and return its generated id.

        Raises:
            QueryValidationError: If the document carries an id or cannot be
                serialized.
            StoreError: If the store fails.
        """
        if "id" in document:
            raise QueryValidationError("Inserted documents must not carry an id")
        try:
            body = json.dumps(document)
        except (TypeError, ValueError) as e:
            raise QueryValidationError(f"Document is not serializable: {e}") from e

        document_id = generate_id()
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO documents (id, collection, body) VALUES (?, ?, ?)",
                (document_id, collection, body),
            )
            conn.commit()

        return document_id
