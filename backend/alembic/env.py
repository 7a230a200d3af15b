from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
import os
import logging
import sys
from pathlib import Path

# The backend directory holds the 'backoffice' package; Alembic may run with CWD elsewhere.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)
logger = logging.getLogger("alembic.env")

from backoffice.models.base import Base  # noqa: E402
from backoffice.models import booking, employee  # noqa: F401,E402

target_metadata = Base.metadata

if not os.getenv("DATABASE_URL"):
    raise SystemExit("DATABASE_URL env var is required for migrations")

# same driver normalization as the application engine
from backoffice.db.session import SQLALCHEMY_DATABASE_URL as DB_URL  # noqa: E402


def run_migrations_offline():
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        {"sqlalchemy.url": DB_URL},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        logger.info("Running migrations against %s", connection.engine.url.render_as_string(hide_password=True))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
