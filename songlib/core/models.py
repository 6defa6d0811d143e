"""
SongLibrary ORM Models
그룹 / 곡 테이블 정의
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Group(Base):
    """공연 그룹 (곡이 처음 참조할 때 생성, 삭제/수정 없음)"""
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)

    songs: Mapped[List["Song"]] = relationship(back_populates="group")

    def __repr__(self) -> str:
        return f"Group(id={self.id!r}, name={self.name!r})"


class Song(Base):
    """곡"""
    __tablename__ = "songs"

    id: Mapped[int] = mapped_column(primary_key=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=False, index=True)
    song: Mapped[str] = mapped_column(String(255), nullable=False)
    release_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    link: Mapped[str] = mapped_column(String(1024), nullable=False, default="")

    group: Mapped[Group] = relationship(back_populates="songs")

    def __repr__(self) -> str:
        return f"Song(id={self.id!r}, song={self.song!r}, group_id={self.group_id!r})"
