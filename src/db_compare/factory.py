"""Connection reference resolution and catalog client factory.

A connection reference is either a profile name from ``db.toml`` or a
direct connection URL / ODBC connection string.  Passwords are
substituted into profile URLs here and must never reach a log line:
use ``redact_url()`` before logging anything connection-related.
"""

import re
from pathlib import Path
from urllib.parse import quote

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from db_compare.adapters.base import CatalogClient
from db_compare.adapters.sqlserver import AsyncSqlServerClient
from db_compare.config.loader import load_db_config
from db_compare.config.models import DatabaseProfile

PASSWORD_PLACEHOLDER = "[YOUR-PASSWORD]"

_ODBC_SECRET = re.compile(r"\b(PWD|Password)\s*=\s*(\{[^}]*\}|[^;]*)", re.IGNORECASE)


class ProfileNotFoundError(Exception):
    """Raised when a profile name is not defined in db.toml."""

    pass


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with the URL-quoted password substituted for
        ``[YOUR-PASSWORD]``

    Example:
        >>> p = DatabaseProfile(url="mssql://sa:[YOUR-PASSWORD]@db/app", db_password="p@ss")
        >>> resolve_url(p)
        'mssql://sa:p%40ss@db/app'
    """
    url = profile.url
    if profile.db_password and PASSWORD_PLACEHOLDER in url:
        url = url.replace(PASSWORD_PLACEHOLDER, quote(profile.db_password, safe=""))
    return url


def redact_url(database_url: str) -> str:
    """Hide the password in a connection URL or ODBC string.

    Examples:
        >>> redact_url("mssql://sa:secret@db:1433/app")
        'mssql://sa:***@db:1433/app'
        >>> redact_url("Driver={ODBC Driver 18 for SQL Server};Server=db;PWD=secret")
        'Driver={ODBC Driver 18 for SQL Server};Server=db;PWD=***'
    """
    if "://" in database_url:
        try:
            return make_url(database_url).render_as_string(hide_password=True)
        except ArgumentError:
            pass
    return _ODBC_SECRET.sub(lambda m: f"{m.group(1)}=***", database_url)


def is_direct_url(reference: str) -> bool:
    """Whether *reference* is a URL / ODBC string rather than a profile name."""
    return "://" in reference or "=" in reference


def resolve_reference(reference: str, config_path: Path | None = None) -> str:
    """Turn a profile name or direct URL into a connection URL.

    Args:
        reference: Profile name from db.toml, or a connection URL / ODBC
            connection string (returned unchanged).
        config_path: Optional path to db.toml.

    Returns:
        Connection URL.

    Raises:
        ProfileNotFoundError: If the profile is not defined.
        FileNotFoundError: If db.toml is needed but missing.
    """
    if is_direct_url(reference):
        return reference

    config = load_db_config(config_path)
    if reference not in config.profiles:
        available = ", ".join(config.profiles.keys()) or "(none)"
        raise ProfileNotFoundError(
            f"Profile '{reference}' not found in db.toml. Available: {available}"
        )
    return resolve_url(config.profiles[reference])


def get_client(
    profile_name: str | None = None,
    database_url: str | None = None,
    config_path: Path | None = None,
    connect_timeout: int = 10,
) -> CatalogClient:
    """Create a catalog client for a profile or direct URL.

    No caching -- every call returns a new, unopened client.  Open it
    with ``async with``.

    Args:
        profile_name: Profile name from db.toml.  Ignored when
            *database_url* is given.
        database_url: Direct connection URL.
        config_path: Optional path to db.toml.
        connect_timeout: Login timeout in seconds.

    Returns:
        An ``AsyncSqlServerClient``.

    Raises:
        ValueError: If neither argument is given.
        ProfileNotFoundError: If the profile is not defined.
    """
    if database_url is None:
        if profile_name is None:
            raise ValueError("Either profile_name or database_url is required")
        database_url = resolve_reference(profile_name, config_path)
    return AsyncSqlServerClient(database_url, connect_timeout=connect_timeout)
