"""
SongLibrary Health Check API
헬스 체크 라우터
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    database_connected: bool
    lookup_enabled: bool


@router.get("/health", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """
    서버 상태 확인

    - DB 연결 상태
    - 외부 곡 정보 API 설정 여부
    """
    state = request.app.state

    database_connected = state.db.ping()
    lookup_enabled = state.lookup_client.enabled

    # DB 가 필수
    status = "ok" if database_connected else "degraded"

    return HealthResponse(
        status=status,
        database_connected=database_connected,
        lookup_enabled=lookup_enabled
    )
