"""db_schema package.

SQLite DDL used by league_repo.LeagueRepo.init_db().

Public API:
- apply_schema(...)
"""

from .init import apply_schema  # noqa: F401

__all__ = ["apply_schema"]
