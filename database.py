from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from config import load_settings

Base = declarative_base()


def make_engine(database_url):
    return create_engine(database_url)


def make_session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(engine):
    # models must be imported so their tables are registered on Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def check_connection(engine):
    """Run a trivial query and return a short description of the server."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
        dialect = conn.dialect
        version = ".".join(str(p) for p in (dialect.server_version_info or ()))
    return f"{dialect.name} {version}".strip()


def connect_to_db(database_url=None):
    database_url = database_url or load_settings().database_url
    engine = make_engine(database_url)
    try:
        info = check_connection(engine)
        print("✅ Connected to database successfully!")
        print("Database version:", info)
        return True
    except Exception as e:
        print("❌ Database connection failed:", e)
        return False
    finally:
        engine.dispose()
        print("🔒 Connection closed.")


if __name__ == "__main__":
    connect_to_db()
