"""
SongLibrary Configuration
환경변수 기반 설정 관리
"""

from typing import Tuple
from pydantic_settings import BaseSettings
from pydantic import Field
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database settings
    DB_HOST: str = Field(default="localhost", description="DB 호스트")
    DB_PORT: int = Field(default=5432, ge=1, le=65535, description="DB 포트")
    DB_USER: str = Field(default="postgres", description="DB 사용자")
    DB_PASSWORD: str = Field(default="", description="DB 비밀번호")
    DB_NAME: str = Field(default="songs", description="DB 이름")
    DATABASE_URL: str = Field(
        default="",
        description="SQLAlchemy 접속 URL (설정 시 DB_* 값보다 우선)"
    )
    AUTO_MIGRATE: bool = Field(default=True, description="시작 시 테이블 자동 생성")

    # External lookup settings
    API_BASE_URL: str = Field(default="", description="외부 곡 정보 API 주소 (비어 있으면 보강 생략)")
    LOOKUP_TIMEOUT_SEC: float = Field(default=5.0, gt=0.0, description="외부 API 타임아웃 (초)")

    # Server settings
    SERVICE_ADDRESS: str = Field(default="127.0.0.1:8080", description="서버 바인드 주소 (host:port)")
    LOG_LEVEL: str = Field(default="DEBUG", description="로그 레벨")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def database_url(self) -> str:
        """DATABASE_URL 이 없으면 DB_* 값으로 PostgreSQL URL 구성"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg",
            username=self.DB_USER,
            password=self.DB_PASSWORD or None,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)

    @property
    def bind_address(self) -> Tuple[str, int]:
        """SERVICE_ADDRESS 를 (host, port) 로 분리"""
        host, _, port = self.SERVICE_ADDRESS.rpartition(":")
        return host or "0.0.0.0", int(port)


def get_settings() -> Settings:
    return Settings()
