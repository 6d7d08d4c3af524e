"""Fan submission records in a relational database (SQLAlchemy async)."""

import logging
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class FanSubmission(Base):
    __tablename__ = "fan_submissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320))
    message: Mapped[str] = mapped_column(Text)
    file: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "file": self.file,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def _async_url(url: str) -> str:
    """Accept plain postgres:// URLs (as hosting providers hand them out)."""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


class SqlRecordStore:
    def __init__(self, database_url: str):
        self.engine = create_async_engine(_async_url(database_url), pool_pre_ping=True)
        self._sessions = async_sessionmaker(self.engine, expire_on_commit=False)

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Ensured table %s exists", FanSubmission.__tablename__)

    async def insert(self, record: dict) -> dict:
        """Insert one submission and return the stored row."""
        row = FanSubmission(
            name=record["name"],
            email=record["email"],
            message=record["message"],
            file=record.get("file"),
        )
        async with self._sessions() as session:
            session.add(row)
            await session.commit()
            await session.refresh(row)
        return row.to_dict()

    async def dispose(self) -> None:
        await self.engine.dispose()
