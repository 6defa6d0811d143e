"""
SongLibrary Common Schemas
공통 스키마
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """에러 응답"""
    message: str


class MessageResponse(BaseModel):
    """성공 메시지 응답"""
    message: str
