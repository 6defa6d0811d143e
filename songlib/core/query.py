"""
SongLibrary Query Builder
필터 / 페이지네이션 파라미터를 곡 목록 쿼리로 변환
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy import Select, false, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StoreError
from .models import Group, Song

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_BIGINT = 2 ** 63 - 1
# songs.id / groups.id 는 INTEGER 컬럼
MAX_ID = 2 ** 31 - 1
INT_PATTERN = re.compile(r"[+-]?[0-9]+")


@dataclass
class SongRecord:
    """그룹 이름이 포함된 곡 레코드 (응답용)"""
    id: int
    song: str
    group: str
    link: str
    release_date: Optional[date]
    text: str

    @classmethod
    def from_row(cls, song: Song, group_name: str) -> "SongRecord":
        return cls(
            id=song.id,
            song=song.song,
            group=group_name,
            link=song.link or "",
            release_date=song.release_date,
            text=song.text or "",
        )


def parse_int(value: Any) -> Optional[int]:
    """
    부호 있는 10진수 문자열만 정수로 변환 (그 외에는 None)

    공백, 밑줄, ASCII 이외의 숫자는 허용하지 않는다.
    """
    if value is None or not INT_PATTERN.fullmatch(str(value)):
        return None
    return int(value)


def parse_positive_int(value: Any, default: int) -> int:
    """
    1 이상의 정수로 변환, 실패하면 기본값

    page / limit 는 잘못된 값이어도 에러 대신 기본값을 사용한다.
    BIGINT 범위를 넘는 값도 기본값.
    """
    number = parse_int(value)
    if number is None or number < 1 or number > MAX_BIGINT:
        return default
    return number


def parse_date(value: str) -> date:
    """YYYY-MM-DD 파싱 (실패 시 ValueError)"""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


@dataclass
class SongFilters:
    """곡 목록 필터 (모든 필드 선택, AND 결합)"""
    song_id: Optional[int] = None
    invalid_id: bool = False
    group: Optional[str] = None
    song: Optional[str] = None
    text: Optional[str] = None
    link: Optional[str] = None
    release_date: Optional[date] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_params(
        cls,
        id: Optional[str] = None,
        group: Optional[str] = None,
        song: Optional[str] = None,
        text: Optional[str] = None,
        link: Optional[str] = None,
        release_date: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> "SongFilters":
        """
        쿼리 파라미터(문자열) → 필터

        - 빈 문자열은 지정하지 않은 것으로 취급
        - releaseDate 파싱 실패 시 필터 생략 (에러 아님)
        - 숫자가 아니거나 범위를 벗어난 id 는 아무 곡과도 일치하지 않음
        - offset 이 BIGINT 범위를 넘으면 첫 페이지
        """
        filters = cls(
            group=group or None,
            song=song or None,
            text=text or None,
            link=link or None,
            page=parse_positive_int(page, DEFAULT_PAGE),
            limit=parse_positive_int(limit, DEFAULT_LIMIT),
        )

        if filters.offset > MAX_BIGINT:
            logger.warning(f"Offset out of range, page reset: page={page}, limit={limit}")
            filters.page = DEFAULT_PAGE

        if id:
            song_id = parse_int(id)
            if song_id is None or not 1 <= song_id <= MAX_ID:
                logger.warning(f"Invalid id filter: {id}")
                filters.invalid_id = True
            else:
                filters.song_id = song_id

        if release_date:
            try:
                filters.release_date = parse_date(release_date)
            except ValueError:
                logger.warning(f"Invalid releaseDate filter ignored: {release_date}")

        return filters


def build_song_query(filters: SongFilters) -> Select:
    """필터 → SELECT (songs JOIN groups), id 순 정렬 후 limit/offset"""
    query = select(Song, Group.name).join(Group, Song.group_id == Group.id)

    if filters.invalid_id:
        query = query.where(false())
    elif filters.song_id is not None:
        query = query.where(Song.id == filters.song_id)
    if filters.group is not None:
        query = query.where(Group.name == filters.group)
    if filters.song is not None:
        query = query.where(Song.song == filters.song)
    if filters.text is not None:
        query = query.where(Song.text.contains(filters.text, autoescape=True))
    if filters.link is not None:
        query = query.where(Song.link == filters.link)
    if filters.release_date is not None:
        query = query.where(Song.release_date == filters.release_date)

    return query.order_by(Song.id).limit(filters.limit).offset(filters.offset)


def list_songs(session: Session, filters: SongFilters) -> List[SongRecord]:
    """필터링된 곡 목록 조회 (일치하는 곡이 없으면 빈 리스트)"""
    logger.debug(f"Song filters: {filters}")
    try:
        rows = session.execute(build_song_query(filters)).all()
    except SQLAlchemyError as e:
        logger.error(f"Song list query failed: {e}")
        raise StoreError("Song list query failed") from e

    logger.info(f"Song list query returned {len(rows)} rows (page={filters.page}, limit={filters.limit})")
    return [SongRecord.from_row(song, group_name) for song, group_name in rows]
