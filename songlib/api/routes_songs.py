"""
SongLibrary Songs API
곡 목록 / 가사 / 생성 / 수정 / 삭제 라우터
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request
from sqlalchemy.orm import Session

from ..core.database import get_session
from ..core.errors import (
    EnrichmentError,
    InvalidDateError,
    InvalidVerseError,
    SongNotFoundError,
    SongTextNotFoundError,
    StoreError,
)
from ..core.query import MAX_ID, SongFilters, list_songs
from ..core.songs import SongService
from ..schemas.common import ErrorResponse, MessageResponse
from ..schemas.songs import CreateSongRequest, SongResponse, SongTextResponse, UpdateSongRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["songs"])

INTERNAL_ERROR = "Internal server error"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Song not found"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def get_song_service(request: Request, session: Session = Depends(get_session)) -> SongService:
    return SongService(session, request.app.state.lookup_client)


@router.get(
    "/songs",
    response_model=List[SongResponse],
    responses={500: ERROR_RESPONSES[500]}
)
def get_songs(
    session: Session = Depends(get_session),
    id: Optional[str] = Query(default=None, description="곡 ID"),
    group: Optional[str] = Query(default=None, description="그룹 이름"),
    song: Optional[str] = Query(default=None, description="곡 제목"),
    text: Optional[str] = Query(default=None, description="가사 일부"),
    link: Optional[str] = Query(default=None, description="링크"),
    release_date: Optional[str] = Query(default=None, alias="releaseDate", description="발매일 (YYYY-MM-DD)"),
    page: Optional[str] = Query(default=None, description="페이지 번호 (기본 1)"),
    limit: Optional[str] = Query(default=None, description="페이지 크기 (기본 10)")
) -> List[SongResponse]:
    """
    곡 목록 (필터 + 페이지네이션)

    - 모든 필터는 선택이며 AND 로 결합
    - text: 부분 일치, 나머지는 완전 일치
    - 잘못된 page/limit 는 기본값, 잘못된 releaseDate 는 무시
    """
    logger.info("Song list request")
    filters = SongFilters.from_params(
        id=id,
        group=group,
        song=song,
        text=text,
        link=link,
        release_date=release_date,
        page=page,
        limit=limit
    )

    try:
        records = list_songs(session, filters)
    except StoreError:
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return [SongResponse.from_record(record) for record in records]


@router.get(
    "/songs/{song_id}/text",
    response_model=SongTextResponse,
    responses=ERROR_RESPONSES
)
def get_song_text(
    song_id: int = Path(..., ge=1, le=MAX_ID, description="곡 ID"),
    verse: Optional[str] = Query(default=None, description="절 번호 (1부터)"),
    service: SongService = Depends(get_song_service)
) -> SongTextResponse:
    """
    가사 조회

    - verse 없음: 전체 가사
    - verse 있음: 빈 줄로 구분된 해당 절
    """
    logger.info(f"Song text request: id={song_id}, verse={verse}")
    try:
        text = service.read_text(song_id, verse)
    except SongNotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    except SongTextNotFoundError:
        raise HTTPException(status_code=404, detail="Song text not found")
    except InvalidVerseError:
        raise HTTPException(status_code=400, detail="Invalid verse number")
    except StoreError:
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return SongTextResponse(text=text)


@router.post(
    "/songs",
    response_model=SongResponse,
    responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]}
)
def create_song(
    payload: CreateSongRequest,
    service: SongService = Depends(get_song_service)
) -> SongResponse:
    """
    곡 추가

    외부 API 에서 발매일/가사/링크를 가져와 채운다. 외부 API 실패 시 해당 필드 없이 저장.
    """
    logger.info(f"Create song request: group={payload.group}, song={payload.song}")
    try:
        record = service.create(payload.group, payload.song)
    except (StoreError, EnrichmentError):
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return SongResponse.from_record(record)


@router.put(
    "/songs/{song_id}",
    response_model=SongResponse,
    responses=ERROR_RESPONSES
)
def update_song(
    payload: UpdateSongRequest,
    song_id: int = Path(..., ge=1, le=MAX_ID, description="곡 ID"),
    service: SongService = Depends(get_song_service)
) -> SongResponse:
    """
    곡 수정

    전달하지 않았거나 빈 값인 필드는 그대로 유지
    """
    logger.info(f"Update song request: id={song_id}")
    try:
        record = service.update(
            song_id,
            group=payload.group,
            song=payload.song,
            release_date=payload.release_date,
            text=payload.text,
            link=payload.link
        )
    except SongNotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    except InvalidDateError:
        raise HTTPException(status_code=400, detail="Invalid date format, expected YYYY-MM-DD")
    except StoreError:
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return SongResponse.from_record(record)


@router.delete(
    "/songs/{song_id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES
)
def delete_song(
    song_id: int = Path(..., ge=1, le=MAX_ID, description="곡 ID"),
    service: SongService = Depends(get_song_service)
) -> MessageResponse:
    """곡 삭제"""
    logger.info(f"Delete song request: id={song_id}")
    try:
        service.delete(song_id)
    except SongNotFoundError:
        raise HTTPException(status_code=404, detail="Song not found")
    except StoreError:
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

    return MessageResponse(message="Song deleted")
