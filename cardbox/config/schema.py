"""Pydantic models for CardBox configuration.

These models define the structure of config.toml and secrets.env files.
"""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator


class ServerConfig(BaseModel):
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 2
    debug: bool = False
    rate_limit_per_minute: int = 60
    # CORS configuration - empty list means same-origin only
    cors_origins: list[str] = []


class DatabaseConfig(BaseModel):
    """MongoDB database configuration.

    Bulk imports run inside multi-document transactions, so the server must be
    a replica set or a sharded cluster.
    """

    mongodb_url: str = "mongodb://localhost:27017/?replicaSet=rs0"
    mongodb_database: str = "cardbox"
    # Connection pool settings
    min_pool_size: int = 10
    max_pool_size: int = 100


class StorageConfig(BaseModel):
    """File storage configuration."""

    data_dir: Path = Field(default_factory=lambda: Path("data"))
    max_upload_mb: int = 10

    @property
    def max_upload_bytes(self) -> int:
        """Get max upload size in bytes."""
        return self.max_upload_mb * 1024 * 1024


class ImportConfig(BaseModel):
    """Spreadsheet bulk import configuration."""

    max_rows: int = 5000
    min_year: int = 1900
    max_year: int = 2025
    # Status assigned to rows whose status column is blank or unrecognised
    default_status: str = "Unlisted"

    @model_validator(mode="after")
    def _check_year_bounds(self) -> "ImportConfig":
        if self.min_year > self.max_year:
            raise ValueError("import.min_year must not exceed import.max_year")
        return self


class CardboxConfig(BaseModel):
    """Main CardBox configuration loaded from config.toml."""

    app_name: str = "CardBox"
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    # "import" is a keyword, so the attribute is aliased
    bulk_import: ImportConfig = Field(default_factory=ImportConfig, alias="import")

    model_config = {"populate_by_name": True}


class SecretsConfig(BaseModel):
    """Secrets loaded from secrets.env file.

    These are sensitive values that should not be stored in config.toml.
    """

    secret_key: str | None = None
