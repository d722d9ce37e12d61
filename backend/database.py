from threading import Lock
from typing import Any, Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend.core import config


Base = declarative_base()


class Database:
    """Owns the pooled engine for one application instance.

    The engine is created on first use and kept for the lifetime of the
    process; request handlers borrow sessions from it via ``get_db``.
    """

    def __init__(self, url: str | None = None, **engine_options: Any) -> None:
        self.url = url or config.DATABASE_URL
        self._engine_options = engine_options
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None
        self._lock = Lock()

    def _default_engine_options(self) -> dict[str, Any]:
        if self.url.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {
            "pool_size": config.DB_POOL_SIZE,
            "max_overflow": 0,
            "pool_timeout": config.DB_POOL_TIMEOUT_SECONDS,
            "pool_recycle": config.DB_POOL_RECYCLE_SECONDS,
            "pool_pre_ping": True,
        }

    @property
    def engine(self) -> Engine:
        return self._connect()

    def _connect(self) -> Engine:
        if self._engine is not None:
            return self._engine

        with self._lock:
            if self._engine is None:
                options = self._engine_options or self._default_engine_options()
                self._engine = create_engine(self.url, **options)
                self._session_factory = sessionmaker(
                    autocommit=False,
                    autoflush=False,
                    bind=self._engine,
                )
        return self._engine

    def session(self) -> Session:
        self._connect()
        return self._session_factory()

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None


def ensure_education_schema(database: Database) -> None:
    # Users is owned by the timesheet system; only our own table is created here.
    from backend.models.education_entry import EducationEntry
    from backend.models.user import User  # noqa: F401  referenced by the UserID foreign key

    Base.metadata.create_all(bind=database.engine, tables=[EducationEntry.__table__])


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
