"""SQLAlchemy ORM models."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from livecounter.adapters.persistence.database import Base


class CounterStateModel(Base):
    __tablename__ = "counter_state"
    __table_args__ = (
        CheckConstraint("value >= 0", name="ck_counter_state_value_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    counter_key: Mapped[str] = mapped_column(String(200), unique=True, nullable=False)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )
