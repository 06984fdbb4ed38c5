"""
Database connection configuration using SQLModel and PostgreSQL
"""
import os
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

# Get database configuration from environment variables
ADMIN_USER = os.getenv("ADMIN_USER", "postgres")
PASSWORD = os.getenv("PASSWORD", "password")
HOST = os.getenv("HOST", "localhost")
DB_NAME = os.getenv("DB_NAME", "sgip_db")
DB_PORT = os.getenv("DB_PORT", "5432")

# Create PostgreSQL connection string (DATABASE_URL wins when set)
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql://{ADMIN_USER}:{PASSWORD}@{HOST}:{DB_PORT}/{DB_NAME}"
)

ECHO_SQL = bool(os.getenv("DEBUG", "false").lower() == "true")


def build_engine(database_url: str):
    """Create a SQLModel engine for the given URL"""
    if database_url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive between sessions
        return create_engine(
            database_url,
            echo=ECHO_SQL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    return create_engine(
        database_url,
        echo=ECHO_SQL,
        pool_size=5,
        max_overflow=10
    )


# Create SQLModel engine
engine = build_engine(DATABASE_URL)


def init_db(target_engine=None):
    """Initialize database tables"""
    import models  # noqa: F401  (registers every table on SQLModel.metadata)
    SQLModel.metadata.create_all(target_engine or engine)


def get_session():
    """FastAPI dependency yielding a database session"""
    with Session(engine) as session:
        yield session


