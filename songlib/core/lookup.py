"""
SongLibrary External Lookup
외부 곡 정보 API 클라이언트 (발매일 / 가사 / 링크)
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class ExternalSongData:
    """외부 API 응답"""
    release_date: str = ""
    text: str = ""
    link: str = ""


class SongInfoClient:
    """
    외부 곡 정보 API 클라이언트

    GET {base_url}/info?group=...&song=...
    실패(연결 오류, 200 이외 상태, JSON 디코딩 오류)는 모두 None 으로 반환한다.
    """

    def __init__(self, base_url: str, timeout: float = 5.0):
        """
        Args:
            base_url: API 주소 (비어 있으면 조회하지 않음)
            timeout: 요청 타임아웃 (초)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def fetch(self, group: str, song: str) -> Optional[ExternalSongData]:
        """곡 정보 조회 (실패 시 None)"""
        if not self.enabled:
            logger.warning("API_BASE_URL not set, skipping song lookup")
            return None

        url = f"{self.base_url}/info"
        logger.info(f"외부 API 요청: {url} (group={group}, song={song})")

        try:
            response = requests.get(
                url,
                params={"group": group, "song": song},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"외부 API 요청 실패: {e}")
            return None

        if response.status_code != 200:
            logger.warning(f"외부 API 응답 상태 오류: {response.status_code}")
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"외부 API 응답 디코딩 실패: {e}")
            return None

        if not isinstance(payload, dict):
            logger.error(f"외부 API 응답 형식 오류: {type(payload).__name__}")
            return None

        data = ExternalSongData(
            release_date=str(payload.get("releaseDate") or ""),
            text=str(payload.get("text") or ""),
            link=str(payload.get("link") or "")
        )
        logger.info(f"외부 API 데이터 수신: {data}")
        return data
