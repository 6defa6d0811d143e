"""
SongLibrary Song Schemas
곡 관련 스키마
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..core.query import SongRecord

# 발매일이 없는 곡은 0001-01-01 로 응답
ZERO_DATE = date.min


class SongResponse(BaseModel):
    """곡 정보 (그룹 이름 포함)"""
    id: int
    song: str
    group: str
    link: str
    release_date: str = Field(alias="releaseDate", examples=["2006-07-16"])
    text: str

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_record(cls, record: SongRecord) -> "SongResponse":
        return cls(
            id=record.id,
            song=record.song,
            group=record.group,
            link=record.link,
            release_date=(record.release_date or ZERO_DATE).isoformat(),
            text=record.text
        )


class CreateSongRequest(BaseModel):
    """곡 생성 요청"""
    group: str = Field(..., min_length=1, examples=["Muse"])
    song: str = Field(..., min_length=1, examples=["Supermassive Black Hole"])


class UpdateSongRequest(BaseModel):
    """곡 수정 요청 (null 또는 빈 문자열인 필드는 변경하지 않음)"""
    group: Optional[str] = None
    song: Optional[str] = None
    release_date: Optional[str] = Field(default=None, alias="releaseDate", examples=["2006-07-16"])
    text: Optional[str] = None
    link: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class SongTextResponse(BaseModel):
    """가사 전체 또는 한 절"""
    text: str
