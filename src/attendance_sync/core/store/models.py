"""SQLAlchemy tables backing the local replica.

Primary keys mirror upstream ids, so autoincrement is disabled on every table.
"""

from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from attendance_sync.core.contracts.entity import EntityType


class Base(DeclarativeBase):
    pass


class MemberRow(Base):
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String, nullable=False)


class ConcertRow(Base):
    __tablename__ = "concerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String, nullable=False)


class RehearsalRow(Base):
    __tablename__ = "rehearsals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    title: Mapped[str] = mapped_column(String, nullable=False)


ROW_MODELS: dict[EntityType, type[MemberRow] | type[ConcertRow] | type[RehearsalRow]] = {
    EntityType.MEMBER: MemberRow,
    EntityType.CONCERT: ConcertRow,
    EntityType.REHEARSAL: RehearsalRow,
}
