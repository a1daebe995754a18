"""Pydantic models for database configuration."""

from pydantic import BaseModel, Field


class DatabaseProfile(BaseModel):
    """Database connection profile from db.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: str = "mssql"


class CompareSettings(BaseModel):
    """Default comparison selection from the ``[compare]`` table."""

    schema_: bool = Field(default=True, alias="schema")
    data: bool = True

    model_config = {"populate_by_name": True}


class DatabaseConfig(BaseModel):
    """Complete database configuration from db.toml."""

    profiles: dict[str, DatabaseProfile]
    compare: CompareSettings = Field(default_factory=CompareSettings)
