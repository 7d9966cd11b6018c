"""
Database engine configuration.

This module builds the async SQLAlchemy engine for the parcel store.
The engine is owned by the caller and handed to the store explicitly.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.orm import declarative_base
from parcels.app.core.config import Settings, settings as default_settings

# Create declarative base for models
Base = declarative_base()


def build_engine(config: Settings = None) -> AsyncEngine:
    """
    Create an async engine from settings.
    
    Pool sizing only applies to server databases; SQLite picks its own pool.
    """
    config = config or default_settings
    options = {"echo": config.db_echo, "future": True}
    if not config.database_url.startswith("sqlite"):
        options["pool_size"] = config.db_pool_size
        options["max_overflow"] = config.db_max_overflow
    return create_async_engine(config.database_url, **options)
