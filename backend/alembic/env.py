"""Alembic environment for the event feed schema.

The database URL comes from ``matty.config.settings`` unless one is passed
on the command line, e.g. ``alembic -x db_url=sqlite:///./other.db upgrade head``.
"""
from logging.config import fileConfig
import os
import sys

from sqlalchemy import engine_from_config, pool
from alembic import context

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from matty.config import settings
from matty.database import Base

# Register every table with Base.metadata for autogenerate
from matty.models.user import User  # noqa: F401
from matty.models.interest import Interest, UserInterest  # noqa: F401
from matty.models.event import Event  # noqa: F401
from matty.models.participant import EventParticipant  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", context.get_x_argument(as_dictionary=True).get("db_url", settings.DATABASE_URL))

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _is_sqlite() -> bool:
    return config.get_main_option("sqlalchemy.url").startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL for the configured URL without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        # SQLite cannot ALTER most constraints in place
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=_is_sqlite(),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
