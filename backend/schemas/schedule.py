from typing import Dict, List, Optional

from pydantic import BaseModel, field_validator

from schemas.transpose import RenderResponse


class ScheduleCreateRequest(BaseModel):
    name: str
    date: str
    song_ids: List[str] = []
    assignments: Dict[str, str] = {}

    @field_validator("name", "date")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must be a non-empty string")
        return v


class ScheduleUpdateRequest(BaseModel):
    name: Optional[str] = None
    date: Optional[str] = None
    song_ids: Optional[List[str]] = None
    assignments: Optional[Dict[str, str]] = None


class ScheduleRecord(BaseModel):
    id: str
    name: str
    date: str
    song_ids: List[str]
    assignments: Dict[str, str] = {}
    created_at: Optional[str] = None


class ScheduleListResponse(BaseModel):
    schedules: List[ScheduleRecord]


class ScheduleSongRender(RenderResponse):
    schedule_id: str
    position: int
    set_length: int
    previous_song_id: Optional[str] = None
    next_song_id: Optional[str] = None


class MemberCreateRequest(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must be a non-empty string")
        return v


class MemberListResponse(BaseModel):
    members: List[str]
