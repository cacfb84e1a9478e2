from .database import create_engine, create_session_factory, create_schema
from .stores import StoreBundle, build_stores, memory_stores, sql_stores

__all__ = [
    "create_engine",
    "create_session_factory",
    "create_schema",
    "StoreBundle",
    "build_stores",
    "memory_stores",
    "sql_stores",
]
