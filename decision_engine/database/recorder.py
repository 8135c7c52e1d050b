"""
Decision recorder.

Persists every produced decision as an immutable audit record. Recording is
append-only: each call inserts one row and nothing is ever updated, so
concurrent appends need no ordering or locking between them.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Dict, Any

from sqlalchemy import select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from decision_engine.database.models import Base, DecisionRecordModel
from decision_engine.exceptions import CollaboratorError

logger = logging.getLogger(__name__)

PREDICTION = "prediction"
WEBHOOK_SIGNAL = "webhook_signal"


class DecisionRecorder(ABC):
    """Append-only sink for decision records."""

    @abstractmethod
    async def record(self, entity_type: str, payload: Dict[str, Any]) -> None:
        """
        Append one record.

        Raises:
            CollaboratorError: if the store rejects the write
        """

    @abstractmethod
    async def get_records(
        self,
        entity_type: Optional[str] = None,
        symbol: Optional[str] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """
        Most recent records first.

        Raises:
            CollaboratorError: if the store cannot be read
        """

    async def health_check(self) -> bool:
        """Whether the store is reachable."""
        return True


async def record_safely(
    recorder: Optional[DecisionRecorder],
    entity_type: str,
    payload: Dict[str, Any],
) -> bool:
    """
    Record without letting a store failure reach the caller.

    Returns:
        True if the record was written
    """
    if recorder is None:
        logger.debug(f"No decision recorder configured, {entity_type} not persisted")
        return False

    try:
        await recorder.record(entity_type, payload)
        return True
    except CollaboratorError as e:
        logger.warning(f"Decision record dropped: {e}")
    except Exception as e:
        logger.warning(f"Decision record dropped: unexpected {type(e).__name__}: {e}")
    return False


def _ensure_sqlite_dir(database_url: str):
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


class SqlDecisionRecorder(DecisionRecorder):
    """Decision recorder backed by an async SQLAlchemy engine."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine = None
        self._session_factory = None

    @classmethod
    def from_config(cls, config) -> "SqlDecisionRecorder":
        return cls(config.database_url, echo=config.database_echo)

    async def connect(self, create_tables: bool = True):
        """Initialize the connection pool and, optionally, the schema."""
        if self._engine:
            return

        try:
            _ensure_sqlite_dir(self.database_url)
            self._engine = create_async_engine(self.database_url, echo=self.echo)
            self._session_factory = async_sessionmaker(
                self._engine, expire_on_commit=False, class_=AsyncSession
            )
            if create_tables:
                async with self._engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            logger.info("Connected to decision store")
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to connect to decision store: {e}")
            raise CollaboratorError("decision store", str(e), e) from e

    async def disconnect(self):
        """Close the connection pool."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
            logger.info("Disconnected from decision store")

    async def health_check(self) -> bool:
        """Check store connectivity."""
        if not self._engine:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Decision store health check failed: {e}")
            return False

    async def record(self, entity_type: str, payload: Dict[str, Any]) -> None:
        if self._session_factory is None:
            raise CollaboratorError("decision store", "not connected")

        async with self._session_factory() as session:
            try:
                session.add(DecisionRecordModel(
                    entity_type=entity_type,
                    entity_id=payload.get("id"),
                    symbol=payload.get("symbol"),
                    payload=payload,
                ))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise CollaboratorError("decision store", str(e), e) from e

    async def get_records(
        self,
        entity_type: Optional[str] = None,
        symbol: Optional[str] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Most recent records first."""
        if self._session_factory is None:
            raise CollaboratorError("decision store", "not connected")

        stmt = select(DecisionRecordModel)
        if entity_type:
            stmt = stmt.where(DecisionRecordModel.entity_type == entity_type)
        if symbol:
            stmt = stmt.where(DecisionRecordModel.symbol == symbol)
        stmt = stmt.order_by(DecisionRecordModel.id.desc()).limit(limit)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                models = result.scalars().all()
            except SQLAlchemyError as e:
                raise CollaboratorError("decision store", str(e), e) from e

            return [
                {
                    "entity_type": m.entity_type,
                    "entity_id": m.entity_id,
                    "symbol": m.symbol,
                    "payload": m.payload,
                    "recorded_at": m.recorded_at,
                }
                for m in models
            ]


class InMemoryDecisionRecorder(DecisionRecorder):
    """Process-local recorder for tests and dry runs."""

    def __init__(self):
        self.records: List[Dict[str, Any]] = []
        self._lock = asyncio.Lock()

    async def record(self, entity_type: str, payload: Dict[str, Any]) -> None:
        async with self._lock:
            self.records.append({
                "entity_type": entity_type,
                "entity_id": payload.get("id"),
                "symbol": payload.get("symbol"),
                "payload": dict(payload),
                "recorded_at": datetime.now(timezone.utc),
            })

    async def get_records(
        self,
        entity_type: Optional[str] = None,
        symbol: Optional[str] = None,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        matching = [
            r for r in reversed(self.records)
            if (entity_type is None or r["entity_type"] == entity_type)
            and (symbol is None or r["symbol"] == symbol)
        ]
        return matching[:limit]

