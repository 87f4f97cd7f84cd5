from typing import Dict, List, Optional

from pydantic import BaseModel, field_validator

from services.chromatic import parse_key


class TransposeRequest(BaseModel):
    content: str
    source_key: str
    target_key: Optional[str] = None
    nashville: bool = False

    @field_validator("source_key", "target_key")
    @classmethod
    def key_must_be_known(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            parse_key(v)
        return v


class RenderedLine(BaseModel):
    text: str
    is_chord_line: bool


class TransposeResponse(BaseModel):
    source_key: str
    target_key: str
    display_key: str
    nashville: bool
    interval_semitones: int
    content: str
    lines: List[RenderedLine]


class RenderResponse(TransposeResponse):
    song_id: str
    title: str
    artist: str
    part: str


class KeysResponse(BaseModel):
    keys: List[str]
    aliases: Dict[str, str]
    nashville_degrees: List[str]
