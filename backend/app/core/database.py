from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from .config import settings


def build_engine(database_url: str, echo: bool = False):
    """Create an engine with pool settings suited to the backend in use"""
    if database_url.startswith("sqlite"):
        # SQLite: one shared connection for in-memory databases, file otherwise
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if ":memory:" in database_url else None,
            echo=echo,
        )

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=5,  # Number of persistent connections
        max_overflow=10,  # Number of connections that can be created beyond pool_size
        pool_timeout=30,  # Timeout in seconds to get a connection from the pool
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Test connections before using them (prevents stale connections)
        echo=echo,
        connect_args={
            "options": "-c timezone=utc",
            "connect_timeout": 10,  # Connection timeout in seconds
        }
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Dependency for FastAPI to get database session.
    Automatically handles session lifecycle and cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        # Rollback on any exception
        db.rollback()
        raise e
    finally:
        db.close()
