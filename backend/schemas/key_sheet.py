from typing import List, Optional

from pydantic import BaseModel, field_validator

from services.chromatic import parse_key


class KeySheetRequest(BaseModel):
    target_keys: Optional[List[str]] = None
    nashville: bool = False
    include_original: bool = True

    @field_validator("target_keys")
    @classmethod
    def target_keys_known(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None:
            for key in v:
                parse_key(key)
        return v


class KeySheetEntry(BaseModel):
    key: str
    interval_semitones: int
    file_name: str


class KeySheetArtifact(BaseModel):
    artifact_id: str
    song_id: str
    source_key: str
    nashville: bool
    keys_included: List[str]
    entries: List[KeySheetEntry]
    dir_path: str
    zip_path: str
    created_at: str


class KeySheetExportResponse(BaseModel):
    export_id: str
    song_id: str
    status: str
    artifact: Optional[KeySheetArtifact] = None
    error: Optional[str] = None
