"""
SongLibrary Errors
도메인 예외 정의
"""


class SongLibraryError(Exception):
    """모든 서비스 예외의 기반 클래스"""


class StoreError(SongLibraryError):
    """DB 조회/저장 실패 (상세 내용은 로그에만 남김)"""


class SongNotFoundError(SongLibraryError):
    """곡 없음"""

    def __init__(self, song_id: int):
        super().__init__(f"Song not found: {song_id}")
        self.song_id = song_id


class SongTextNotFoundError(SongLibraryError):
    """곡은 있지만 가사가 비어 있음"""

    def __init__(self, song_id: int):
        super().__init__(f"Song text not found: {song_id}")
        self.song_id = song_id


class InvalidVerseError(SongLibraryError):
    """절 번호가 숫자가 아니거나 범위를 벗어남"""


class InvalidDateError(SongLibraryError):
    """날짜 형식 오류 (YYYY-MM-DD 기대)"""


class EnrichmentError(SongLibraryError):
    """외부 API 응답의 발매일을 해석할 수 없음"""
