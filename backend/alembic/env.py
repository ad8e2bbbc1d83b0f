"""
Alembic environment for the blog schema.

Migrations run through the application's engine so every connection gets the
same PRAGMAs (foreign_keys in particular). When started from the app, the
caller hands over an open connection in config.attributes and logging is
left as the app configured it.
"""
from logging.config import fileConfig

from alembic import context

from blog_api.config import settings
from blog_api.database import Base, engine
import blog_api.models  # noqa: F401 - posts, categories, post_categories

config = context.config
connection = config.attributes.get("connection")

# Standalone `alembic upgrade head` from the CLI
if connection is None and config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

config.set_main_option("sqlalchemy.url", f"sqlite:///{settings.database_path}")

target_metadata = Base.metadata


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        render_as_batch=True,  # ALTER TABLE on SQLite goes through batch mode
        compare_type=True,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit the migration SQL instead of applying it."""
    _configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    if connection is not None:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
        return

    with engine.connect() as conn:
        _configure(connection=conn)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
