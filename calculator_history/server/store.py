"""Record store holding the history of operations."""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from sqlalchemy import DateTime, Engine, Float, String, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from calculator_history.common.errors import StoreFailure
from calculator_history.common.logger import logger
from calculator_history.common.models import OperationRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class OperationRow(Base):
    """ORM mapping of the ``Operations`` table."""

    __tablename__ = "Operations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    num1: Mapped[float] = mapped_column(Float, nullable=False)
    num2: Mapped[float] = mapped_column(Float, nullable=False)
    operation: Mapped[str] = mapped_column(String(1), nullable=False)
    result: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops the offset of stored timestamps, which are always written in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: OperationRow) -> OperationRecord:
    return OperationRecord(
        id=row.id,
        num1=row.num1,
        num2=row.num2,
        operation=row.operation,
        result=row.result,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class OperationStore(ABC):
    """Narrow contract between the history service and the persistence engine."""

    @abstractmethod
    def create(self, num1: float, num2: float, operation: str, result: float) -> OperationRecord:
        """Persist a new operation and return it with its assigned id."""

    @abstractmethod
    def list_all(self) -> List[OperationRecord]:
        """Return every operation in insertion order."""

    @abstractmethod
    def get_by_id(self, operation_id: int) -> Optional[OperationRecord]:
        """Return one operation, or None if absent."""

    @abstractmethod
    def update(
        self, operation_id: int, num1: float, num2: float, operation: str, result: float
    ) -> Optional[OperationRecord]:
        """Overwrite all fields of one operation, or return None if absent."""

    @abstractmethod
    def delete_by_id(self, operation_id: int) -> bool:
        """Delete one operation and report whether it existed."""

    @abstractmethod
    def delete_all(self) -> int:
        """Delete every operation and return how many were removed."""

    def close(self) -> None:
        """Release resources held by the store."""


class SqlOperationStore(BaseModel, OperationStore):
    """
    Record store backed by a relational database through SQLAlchemy.

    Every call runs in its own transaction; any database error is raised as StoreFailure.
    """

    # Allow arbitrary types like sqlalchemy.Engine
    model_config = ConfigDict(arbitrary_types_allowed=True)

    engine: Engine = Field(..., description="SQLAlchemy engine of the database")

    _sessions: sessionmaker = PrivateAttr()

    def model_post_init(self, __context) -> None:
        self._sessions = sessionmaker(bind=self.engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SqlOperationStore":
        """
        Connect to a database and create the operations table if it does not exist yet.

        SQLite connections are shared across request threads; in-memory SQLite keeps a single connection
        so that every session sees the same database.

        :param str database_url: SQLAlchemy database URL

        :return: Ready to use store
        :rtype: SqlOperationStore
        :raises StoreFailure: If the database cannot be reached
        """
        kwargs = {}
        if database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool

        try:
            engine = create_engine(database_url, **kwargs)
            Base.metadata.create_all(engine)
        except SQLAlchemyError as exc:
            logger.error(f"🗄️❌ Could not initialise database: {exc}")
            raise StoreFailure("Failed to connect to database", details=str(exc)) from exc

        logger.info(f"🗄️ Database connected and table created (if not exists): {engine.url.render_as_string()}")
        return cls(engine=engine)

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """
        Open a session inside a transaction, committed on success.

        Integers too large for the database driver are reported the same way as database errors.

        :raises StoreFailure: If the database raised an error
        """
        try:
            with self._sessions.begin() as session:
                yield session
        except (SQLAlchemyError, OverflowError) as exc:
            raise StoreFailure("Record store operation failed", details=str(exc)) from exc

    def create(self, num1: float, num2: float, operation: str, result: float) -> OperationRecord:
        with self._transaction() as session:
            row = OperationRow(num1=num1, num2=num2, operation=operation, result=result)
            session.add(row)
            # Flush and reload so the record holds the values as stored
            session.flush()
            session.refresh(row)
            return _to_record(row)

    def list_all(self) -> List[OperationRecord]:
        with self._transaction() as session:
            rows = session.scalars(select(OperationRow).order_by(OperationRow.id)).all()
            return [_to_record(row) for row in rows]

    def get_by_id(self, operation_id: int) -> Optional[OperationRecord]:
        with self._transaction() as session:
            row = session.get(OperationRow, operation_id)
            return _to_record(row) if row is not None else None

    def update(
        self, operation_id: int, num1: float, num2: float, operation: str, result: float
    ) -> Optional[OperationRecord]:
        with self._transaction() as session:
            row = session.get(OperationRow, operation_id)
            if row is None:
                return None
            row.num1 = num1
            row.num2 = num2
            row.operation = operation
            row.result = result
            session.flush()
            session.refresh(row)
            return _to_record(row)

    def delete_by_id(self, operation_id: int) -> bool:
        with self._transaction() as session:
            row = session.get(OperationRow, operation_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def delete_all(self) -> int:
        with self._transaction() as session:
            return session.execute(delete(OperationRow)).rowcount

    def close(self) -> None:
        self.engine.dispose()
