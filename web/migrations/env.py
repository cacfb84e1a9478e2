from __future__ import annotations

"""Alembic environment for the busline schema.

The application talks to the database through an async driver
(``postgresql+asyncpg://`` or ``sqlite+aiosqlite://``); migrations run on
the matching sync driver instead, derived from the same ``DB_DSN``.

    cd web
    DB_DSN=postgresql+asyncpg://... alembic upgrade head
    DB_DSN=postgresql+asyncpg://... alembic revision --autogenerate -m "<message>"
"""

import os, sys, re
from logging.config import fileConfig

from sqlalchemy import pool, create_engine
from alembic import context

# busline lives next to this directory under web/
WEB_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if WEB_ROOT not in sys.path:
    sys.path.append(WEB_ROOT)

from busline.models import Base  # noqa: E402

DB_DSN = os.getenv("DB_DSN", "")
if not DB_DSN:
    raise RuntimeError("DB_DSN must be set to run migrations")

config = context.config

# routes/bookings/subjects/attendance_records are created with the sync driver
SYNC_DSN = re.sub(r"\+(asyncpg|aiosqlite)", "", DB_DSN, count=1)
config.set_main_option("sqlalchemy.url", SYNC_DSN)

fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    """Emit the migration SQL without connecting."""
    context.configure(
        url=SYNC_DSN,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived sync connection."""
    connectable = create_engine(SYNC_DSN, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
