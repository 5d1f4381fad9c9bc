from datetime import datetime

from sqlalchemy import String, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserStateRecord(Base):
    __tablename__ = "user_states"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # int и str ID хранятся одинаково, как строка
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
