from __future__ import annotations

import os
import datetime as dt
from typing import Optional

from sqlalchemy import (
    create_engine,
    BigInteger,
    DateTime,
    Integer,
    Text,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, Session

from .config import settings


DATABASE_URL = settings.get("database_url", "sqlite:///storage/lookit.sqlite3")


def utcnow() -> dt.datetime:
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class VirtualFittingORM(Base):
    __tablename__ = "virtual_fitting"

    # BigInteger does not autoincrement on SQLite, so fall back to Integer there.
    id: Mapped[int] = mapped_column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, index=True)
    result_image_url: Mapped[str] = mapped_column(Text)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


def make_engine(url: Optional[str] = None) -> Engine:
    url = url or DATABASE_URL
    kwargs = {}
    if url.startswith("sqlite"):
        # Pool workers write from their own threads
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, echo=False, future=True, **kwargs)


engine = make_engine()


def init_db(bind: Optional[Engine] = None) -> None:
    bind = bind or engine
    # Ensure storage dir exists for SQLite
    if str(bind.url).startswith("sqlite:///storage"):
        os.makedirs("storage", exist_ok=True)
    Base.metadata.create_all(bind)


class FittingRepository:
    def __init__(self, bind: Optional[Engine] = None) -> None:
        self.engine = bind or engine

    def save(self, fitting: VirtualFittingORM) -> VirtualFittingORM:
        with Session(self.engine) as s:
            s.add(fitting)
            s.commit()
            s.refresh(fitting)
            # Detach for safe return
            s.expunge(fitting)
            return fitting

    def find_all_by_user_id(self, user_id: int) -> list[VirtualFittingORM]:
        with Session(self.engine) as s:
            stmt = select(VirtualFittingORM).where(VirtualFittingORM.user_id == user_id).order_by(VirtualFittingORM.id)
            rows = list(s.scalars(stmt))
            for r in rows:
                s.expunge(r)
            return rows
