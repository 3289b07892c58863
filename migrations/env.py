# migrations/env.py
import os
from alembic import context
from sqlalchemy import engine_from_config, pool
from dotenv import load_dotenv

# (1) carregar .env antes de ler settings
load_dotenv()

from app.db.base import Base  # noqa: E402
from app.db.session import SQLALCHEMY_DATABASE_URL  # noqa: E402

config = context.config

# (2) Alembic usa a mesma URL (já normalizada) da aplicação
config.set_main_option("sqlalchemy.url", SQLALCHEMY_DATABASE_URL)

target_metadata = Base.metadata

def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = engine_from_config(config.get_section(config.config_ini_section), prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
