"""Configuration management for the category reconciler.

Reads configuration from ~/.config/reconciler.toml (or the file named by the
RECONCILER_CONFIG environment variable) and creates a default config if needed.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
import tomllib
import tomli_w


def get_seed_dir() -> Path:
    """Get the directory holding the bundled seed files."""
    return Path(__file__).parent / "db" / "seed"


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    default_type: str = "EXPENSE"
    batch_size: int = 500
    seed_dir: Path = field(default_factory=get_seed_dir)
    salary_placeholder: str = "Unnamed"

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "reconciler"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="reconciler.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    override = os.environ.get("RECONCILER_CONFIG")
    if override:
        return Path(override)
    return Path.home() / ".config" / "reconciler.toml"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "reconciler"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "reconciler.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    migration_config = data.get("migration", {})
    default_type = migration_config.get("default_type", "EXPENSE")
    batch_size = int(migration_config.get("batch_size", 500))

    seed_config = data.get("seed", {})
    seed_dir = Path(seed_config.get("seed_dir", get_seed_dir()))
    salary_placeholder = seed_config.get("salary_placeholder", "Unnamed")

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        default_type=default_type,
        batch_size=batch_size,
        seed_dir=seed_dir,
        salary_placeholder=salary_placeholder,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "migration": {
            "default_type": config.default_type,
            "batch_size": config.batch_size,
        },
        "seed": {
            "seed_dir": str(config.seed_dir),
            "salary_placeholder": config.salary_placeholder,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
