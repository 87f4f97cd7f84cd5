from typing import Dict, List, Optional

from pydantic import BaseModel, field_validator

from services.chromatic import parse_key


def _check_key(v: Optional[str]) -> Optional[str]:
    if v is not None:
        parse_key(v)
    return v


class SongCreateRequest(BaseModel):
    title: str
    artist: Optional[str] = None
    original_key: str = "C"
    content: str
    instrument_parts: Dict[str, str] = {}

    @field_validator("title", "content")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be a non-empty string")
        return v

    @field_validator("original_key")
    @classmethod
    def original_key_known(cls, v: str) -> str:
        return _check_key(v)


class SongUpdateRequest(BaseModel):
    title: Optional[str] = None
    artist: Optional[str] = None
    original_key: Optional[str] = None
    content: Optional[str] = None
    instrument_parts: Optional[Dict[str, str]] = None

    @field_validator("original_key")
    @classmethod
    def original_key_known(cls, v: Optional[str]) -> Optional[str]:
        return _check_key(v)


class SongRecord(BaseModel):
    id: str
    title: str
    artist: str
    original_key: str
    content: str
    instrument_parts: Dict[str, str] = {}
    created_at: Optional[str] = None


class SongListResponse(BaseModel):
    songs: List[SongRecord]

