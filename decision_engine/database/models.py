from datetime import datetime
from sqlalchemy import String, DateTime, Integer, JSON, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class DecisionRecordModel(Base):
    """Append-only audit trail of predictions and accepted signals."""
    __tablename__ = "decision_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)  # 'prediction', 'webhook_signal'
    entity_id: Mapped[str] = mapped_column(String, nullable=True)
    symbol: Mapped[str] = mapped_column(String, nullable=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)

    recorded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('idx_decision_records_type_time', 'entity_type', 'recorded_at'),
        Index('idx_decision_records_symbol', 'symbol'),
    )
