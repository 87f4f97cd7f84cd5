import uuid
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from database import get_db
from models import KeySheetExport, Song
from routes.transpose import build_transpose_response
from schemas.key_sheet import KeySheetArtifact, KeySheetExportResponse, KeySheetRequest
from schemas.song import SongCreateRequest, SongListResponse, SongRecord, SongUpdateRequest
from schemas.transpose import RenderResponse
from services.chromatic import is_known_key, normalize_key
from workers.queue import get_queue
from workers.tasks import process_key_sheet_export

router = APIRouter()
logger = logging.getLogger(__name__)

LYRICS_PART = "Lyrics"


def _song_to_record(song: Song) -> SongRecord:
    try:
        return SongRecord(
            id=song.id,
            title=song.title,
            artist=song.artist,
            original_key=song.original_key,
            content=song.content,
            instrument_parts=song.instrument_parts or {},
            created_at=song.created_at.isoformat() if song.created_at else None,
        )
    except ValidationError as exc:
        logger.error("Song %s: invalid stored record: %s", song.id, exc)
        raise HTTPException(status_code=500, detail="Invalid song record")


def _load_song(song_id: str, db: Session) -> Song:
    song = db.query(Song).filter(Song.id == song_id).first()
    if not song:
        raise HTTPException(status_code=404, detail="Song not found")
    return song


def _export_to_response(export: KeySheetExport) -> KeySheetExportResponse:
    artifact = None
    if export.result_json is not None:
        try:
            artifact = KeySheetArtifact(**export.result_json)
        except ValidationError as exc:
            logger.error("Export %s: invalid artifact schema: %s", export.id, exc)
            raise HTTPException(
                status_code=500,
                detail="Invalid key sheet schema in result_json",
            )
    return KeySheetExportResponse(
        export_id=export.id,
        song_id=export.song_id,
        status=export.status,
        artifact=artifact,
        error=export.error,
    )


@router.post("/songs")
def create_song(req: SongCreateRequest, db: Session = Depends(get_db)) -> dict:
    song = Song(
        id=str(uuid.uuid4()),
        title=req.title,
        artist=req.artist or "Unknown",
        original_key=normalize_key(req.original_key),
        content=req.content,
        instrument_parts=req.instrument_parts,
    )
    db.add(song)
    db.commit()
    db.refresh(song)

    logger.info("Created song %s (%r in %s)", song.id, song.title, song.original_key)
    return _song_to_record(song).model_dump()


@router.get("/songs")
def list_songs(db: Session = Depends(get_db)) -> dict:
    songs = db.query(Song).order_by(Song.created_at).all()
    return SongListResponse(songs=[_song_to_record(s) for s in songs]).model_dump()


@router.get("/songs/{song_id}")
def get_song(song_id: str, db: Session = Depends(get_db)) -> dict:
    return _song_to_record(_load_song(song_id, db)).model_dump()


@router.put("/songs/{song_id}")
def update_song(
    song_id: str,
    req: SongUpdateRequest,
    db: Session = Depends(get_db),
) -> dict:
    song = _load_song(song_id, db)

    # Only overwrite fields that were provided
    updates = req.model_dump(exclude_none=True)
    for field in ("title", "content"):
        if field in updates and not updates[field].strip():
            raise HTTPException(status_code=400, detail=f"{field} must be a non-empty string")
    if "original_key" in updates:
        updates["original_key"] = normalize_key(updates["original_key"])

    for field, value in updates.items():
        setattr(song, field, value)
    db.commit()
    db.refresh(song)

    return _song_to_record(song).model_dump()


@router.delete("/songs/{song_id}")
def delete_song(song_id: str, db: Session = Depends(get_db)) -> dict:
    song = _load_song(song_id, db)
    db.delete(song)
    db.commit()
    logger.info("Deleted song %s", song_id)
    return {"deleted": song_id}


def render_song_record(
    song: Song,
    target_key: Optional[str] = None,
    nashville: bool = False,
    part: str = LYRICS_PART,
) -> RenderResponse:
    """Render one part of a song in target_key, or as Nashville numbers."""
    if target_key is not None and not is_known_key(target_key):
        raise HTTPException(status_code=400, detail=f"Invalid target_key: {target_key!r}")
    target_key = target_key or song.original_key

    if part == LYRICS_PART:
        content = song.content
    else:
        parts = song.instrument_parts or {}
        if part not in parts:
            raise HTTPException(status_code=404, detail=f"Instrument part not found: {part!r}")
        content = parts[part]

    # Instrument parts are free-form notes and are shown as written
    transposed = build_transpose_response(
        content,
        song.original_key,
        target_key,
        nashville,
        transform=(part == LYRICS_PART),
    )

    return RenderResponse(
        song_id=song.id,
        title=song.title,
        artist=song.artist,
        part=part,
        **transposed.model_dump(),
    )


@router.get("/songs/{song_id}/render")
def render_song(
    song_id: str,
    target_key: Optional[str] = None,
    nashville: bool = False,
    part: str = LYRICS_PART,
    db: Session = Depends(get_db),
) -> dict:
    song = _load_song(song_id, db)
    return render_song_record(song, target_key, nashville, part).model_dump()


@router.post("/songs/{song_id}/key-sheets")
def create_key_sheets(
    song_id: str,
    req: KeySheetRequest,
    db: Session = Depends(get_db),
) -> dict:
    song = _load_song(song_id, db)

    export = KeySheetExport(
        id=str(uuid.uuid4()),
        song_id=song.id,
        status="CREATED",
        nashville=req.nashville,
        include_original=req.include_original,
        target_keys=req.target_keys,
    )
    db.add(export)
    db.commit()
    db.refresh(export)

    get_queue().enqueue(process_key_sheet_export, export.id)

    logger.info("Created and enqueued key sheet export %s (song=%s)", export.id, song.id)
    return _export_to_response(export).model_dump()


@router.get("/key-sheets/{export_id}")
def get_key_sheets(export_id: str, db: Session = Depends(get_db)) -> dict:
    export = db.query(KeySheetExport).filter(KeySheetExport.id == export_id).first()
    if not export:
        raise HTTPException(status_code=404, detail="Key sheet export not found")
    return _export_to_response(export).model_dump()
