"""
SongLibrary Backend Main Application
FastAPI 앱 및 startup/shutdown 이벤트
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.database import Database
from .core.lookup import SongInfoClient
from .api import routes_health, routes_songs
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 라이프사이클 관리"""
    # Startup
    config: Settings = app.state.config
    logger.info("SongLibrary Backend Starting...")

    app.state.db = Database(config.database_url)
    if config.AUTO_MIGRATE:
        app.state.db.create_schema()

    if getattr(app.state, "lookup_client", None) is None:
        app.state.lookup_client = SongInfoClient(config.API_BASE_URL, timeout=config.LOOKUP_TIMEOUT_SEC)
    if not app.state.lookup_client.enabled:
        logger.warning("API_BASE_URL not set, songs will be created without enrichment")

    logger.info("SongLibrary Backend Ready!")

    yield

    # Shutdown
    logger.info("SongLibrary Backend Shutting down...")
    app.state.db.dispose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """모든 HTTP 에러를 {"message": ...} 형태로"""
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 검증 실패는 422 대신 400"""
    logger.warning(f"Invalid request {request.method} {request.url.path}: {exc.errors()}")
    if any(err.get("loc", ("",))[0] == "path" for err in exc.errors()):
        message = "Invalid ID"
    else:
        message = "Invalid request data"
    return JSONResponse(status_code=400, content={"message": message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """처리되지 않은 예외도 {"message": ...} 형태의 500 으로"""
    logger.error(f"Unhandled error {request.method} {request.url.path}: {exc!r}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    lookup_client: Optional[SongInfoClient] = None
) -> FastAPI:
    """
    앱 생성

    Args:
        settings: 설정 (None 이면 환경변수에서 로드)
        lookup_client: 외부 곡 정보 클라이언트 (None 이면 설정으로 생성)
    """
    config = settings or get_settings()
    setup_logging(config.LOG_LEVEL)

    app = FastAPI(
        title="SongLibrary API",
        description="곡 라이브러리 API",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.config = config
    app.state.lookup_client = lookup_client

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # 라우터 등록
    app.include_router(routes_health.router)
    app.include_router(routes_songs.router)

    @app.get("/")
    def root():
        """루트 엔드포인트"""
        return {
            "service": "SongLibrary API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    return app


app = create_app()
