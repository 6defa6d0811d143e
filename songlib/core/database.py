"""
SongLibrary Database
SQLAlchemy 엔진 / 세션 관리
"""

import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """
    엔진 생성

    인메모리 SQLite 는 모든 세션이 같은 연결을 쓰도록 StaticPool 사용
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


class Database:
    """DB 핸들 (앱 시작 시 한 번 생성해서 app.state 에 보관)"""

    def __init__(self, database_url: str):
        """
        Args:
            database_url: SQLAlchemy URL (예: postgresql+psycopg://user:pw@localhost:5432/songs)
        """
        self.engine = create_db_engine(database_url)
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.info(f"DB 엔진 생성: {self.engine.url.render_as_string(hide_password=True)}")

    def create_schema(self) -> None:
        """없는 테이블 생성"""
        Base.metadata.create_all(self.engine)
        logger.info("테이블 자동 생성 완료")

    def ping(self) -> bool:
        """DB 연결 테스트"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"DB 연결 실패: {e}")
            return False

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("DB 연결 풀 종료")


def get_session(request: Request) -> Iterator[Session]:
    """요청당 세션 하나 (FastAPI 의존성)"""
    session = request.app.state.db.session_factory()
    try:
        yield session
    finally:
        session.close()
