"""
SongLibrary Song Service
곡 생성 / 가사 조회 / 부분 수정 / 삭제
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import (
    EnrichmentError,
    InvalidDateError,
    InvalidVerseError,
    SongNotFoundError,
    SongTextNotFoundError,
    StoreError,
)
from .lookup import SongInfoClient
from .models import Group, Song
from .query import MAX_ID, SongRecord, parse_date, parse_int

logger = logging.getLogger(__name__)

VERSE_SEPARATOR = "\n\n"


def split_verses(text: str) -> List[str]:
    """가사를 빈 줄 기준으로 절 단위 분리"""
    return text.replace("\r\n", "\n").split(VERSE_SEPARATOR)


class SongService:
    """곡 하나에 대한 작업 (세션과 외부 API 클라이언트를 주입받음)"""

    def __init__(self, session: Session, lookup: Optional[SongInfoClient] = None):
        self._session = session
        self._lookup = lookup

    def _get_song(self, song_id: int) -> Song:
        if not 1 <= song_id <= MAX_ID:
            logger.warning(f"Song id out of range: {song_id}")
            raise SongNotFoundError(song_id)
        try:
            song = self._session.get(Song, song_id)
        except SQLAlchemyError as e:
            logger.error(f"Song lookup failed (id={song_id}): {e}")
            raise StoreError("Song lookup failed") from e
        if song is None:
            logger.warning(f"Song not found: {song_id}")
            raise SongNotFoundError(song_id)
        return song

    def find_or_create_group(self, name: str) -> Group:
        """
        이름으로 그룹 조회, 없으면 생성

        그룹 생성은 곡 저장과 별도로 커밋된다. 동시에 같은 이름으로 생성하면
        unique 제약 위반이 나므로 롤백 후 먼저 생성된 행을 다시 조회한다.
        """
        stmt = select(Group).where(Group.name == name)
        try:
            group = self._session.scalars(stmt).first()
            if group is not None:
                return group

            group = Group(name=name)
            self._session.add(group)
            try:
                self._session.commit()
            except IntegrityError:
                self._session.rollback()
                logger.warning(f"Group created concurrently, re-selecting: {name}")
                return self._session.scalars(stmt).one()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Group find-or-create failed ({name}): {e}")
            raise StoreError("Group find-or-create failed") from e

        logger.info(f"Group created: {group}")
        return group

    def create(self, group_name: str, title: str) -> SongRecord:
        """
        곡 생성

        1. 그룹 find-or-create
        2. 외부 API 로 발매일/가사/링크 보강 (실패해도 생성은 계속)
        3. 저장
        """
        logger.debug(f"Create song - group: {group_name}, song: {title}")
        group = self.find_or_create_group(group_name)

        song = Song(group_id=group.id, song=title, text="", link="")

        external = self._lookup.fetch(group_name, title) if self._lookup is not None else None
        if external is not None:
            if external.release_date:
                try:
                    song.release_date = parse_date(external.release_date)
                except ValueError as e:
                    logger.error(f"Invalid releaseDate from lookup: {external.release_date!r}")
                    raise EnrichmentError(f"Invalid releaseDate from lookup: {external.release_date}") from e
            song.text = external.text
            song.link = external.link
        else:
            logger.warning("No external song data, creating without enrichment")

        try:
            self._session.add(song)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Song save failed: {e}")
            raise StoreError("Song save failed") from e

        logger.info(f"Song created: {song}")
        return SongRecord.from_row(song, group.name)

    def read_text(self, song_id: int, verse: Optional[str] = None) -> str:
        """
        가사 조회

        verse 가 주어지면 1부터 시작하는 해당 절만 반환한다.
        """
        song = self._get_song(song_id)
        if not song.text:
            logger.warning(f"Song has no text: {song_id}")
            raise SongTextNotFoundError(song_id)

        if verse is None or verse == "":
            return song.text

        verses = split_verses(song.text)
        number = parse_int(verse)
        if number is None or number < 1 or number > len(verses):
            logger.warning(f"Invalid verse number: {verse} (verses={len(verses)})")
            raise InvalidVerseError(f"Invalid verse number: {verse}")

        logger.info(f"Returning verse {number} of song {song_id}")
        return verses[number - 1]

    def update(
        self,
        song_id: int,
        group: Optional[str] = None,
        song: Optional[str] = None,
        release_date: Optional[str] = None,
        text: Optional[str] = None,
        link: Optional[str] = None,
    ) -> SongRecord:
        """
        부분 수정

        None 또는 빈 문자열인 필드는 변경하지 않는다.
        날짜 형식이 틀리면 아무것도 저장하지 않고 InvalidDateError.
        """
        record = self._get_song(song_id)

        parsed_date = None
        if release_date:
            try:
                parsed_date = parse_date(release_date)
            except ValueError as e:
                logger.warning(f"Invalid releaseDate: {release_date}")
                raise InvalidDateError("Invalid date format, expected YYYY-MM-DD") from e

        if group:
            target = self.find_or_create_group(group)
            record.group_id = target.id
            group_name = target.name
        else:
            group_name = self._group_name(record.group_id)

        if song:
            record.song = song
        if parsed_date is not None:
            record.release_date = parsed_date
        if text:
            record.text = text
        if link:
            record.link = link

        try:
            self._session.add(record)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Song update failed (id={song_id}): {e}")
            raise StoreError("Song update failed") from e

        logger.info(f"Song updated: {record}")
        return SongRecord.from_row(record, group_name)

    def _group_name(self, group_id: int) -> str:
        try:
            group = self._session.get(Group, group_id)
        except SQLAlchemyError as e:
            logger.error(f"Group lookup failed (id={group_id}): {e}")
            raise StoreError("Group lookup failed") from e
        return group.name if group is not None else ""

    def delete(self, song_id: int) -> None:
        """곡 삭제 (그룹은 유지)"""
        record = self._get_song(song_id)
        try:
            self._session.delete(record)
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Song delete failed (id={song_id}): {e}")
            raise StoreError("Song delete failed") from e
        logger.info(f"Song deleted: {song_id}")
