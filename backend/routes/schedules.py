import uuid
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from database import get_db
from models import Member, Schedule, Song
from routes.songs import LYRICS_PART, render_song_record
from schemas.schedule import (
    MemberCreateRequest,
    MemberListResponse,
    ScheduleCreateRequest,
    ScheduleListResponse,
    ScheduleRecord,
    ScheduleSongRender,
    ScheduleUpdateRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _schedule_to_record(schedule: Schedule) -> ScheduleRecord:
    try:
        return ScheduleRecord(
            id=schedule.id,
            name=schedule.name,
            date=schedule.date,
            song_ids=schedule.song_ids or [],
            assignments=schedule.assignments or {},
            created_at=schedule.created_at.isoformat() if schedule.created_at else None,
        )
    except ValidationError as exc:
        logger.error("Schedule %s: invalid stored record: %s", schedule.id, exc)
        raise HTTPException(status_code=500, detail="Invalid schedule record")


def _load_schedule(schedule_id: str, db: Session) -> Schedule:
    schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
    if not schedule:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


def _check_song_ids(song_ids: List[str], db: Session) -> None:
    if not song_ids:
        return
    known = {row.id for row in db.query(Song.id).filter(Song.id.in_(song_ids)).all()}
    unknown = [sid for sid in song_ids if sid not in known]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown song id(s): {unknown}")


def _clean_assignments(assignments: Dict[str, str], db: Session) -> Dict[str, str]:
    """Drop unassigned roles and reject members that are not on the roster."""
    cleaned = {role: member for role, member in assignments.items() if member}
    roster = {m.name for m in db.query(Member).all()}
    unknown = sorted(set(cleaned.values()) - roster)
    if unknown:
        raise HTTPException(status_code=400, detail=f"Unknown member(s): {unknown}")
    return cleaned


def _resolve_songs(schedule: Schedule, db: Session) -> List[Song]:
    """Return the schedule's songs in set order.

    Songs deleted after the schedule was saved are skipped.
    """
    song_ids = schedule.song_ids or []
    if not song_ids:
        return []
    by_id = {s.id: s for s in db.query(Song).filter(Song.id.in_(song_ids)).all()}
    return [by_id[sid] for sid in song_ids if sid in by_id]


@router.post("/schedules")
def create_schedule(req: ScheduleCreateRequest, db: Session = Depends(get_db)) -> dict:
    _check_song_ids(req.song_ids, db)
    assignments = _clean_assignments(req.assignments, db)

    schedule = Schedule(
        id=str(uuid.uuid4()),
        name=req.name,
        date=req.date,
        song_ids=list(req.song_ids),
        assignments=assignments,
    )
    db.add(schedule)
    db.commit()
    db.refresh(schedule)

    logger.info(
        "Created schedule %s (%r on %s, %d song(s))",
        schedule.id, schedule.name, schedule.date, len(schedule.song_ids),
    )
    return _schedule_to_record(schedule).model_dump()


@router.get("/schedules")
def list_schedules(db: Session = Depends(get_db)) -> dict:
    schedules = db.query(Schedule).order_by(Schedule.date, Schedule.created_at).all()
    return ScheduleListResponse(
        schedules=[_schedule_to_record(s) for s in schedules],
    ).model_dump()


@router.get("/schedules/{schedule_id}")
def get_schedule(schedule_id: str, db: Session = Depends(get_db)) -> dict:
    return _schedule_to_record(_load_schedule(schedule_id, db)).model_dump()


@router.put("/schedules/{schedule_id}")
def update_schedule(
    schedule_id: str,
    req: ScheduleUpdateRequest,
    db: Session = Depends(get_db),
) -> dict:
    schedule = _load_schedule(schedule_id, db)

    # Only overwrite fields that were provided
    updates = req.model_dump(exclude_none=True)
    for field in ("name", "date"):
        if field in updates and not updates[field].strip():
            raise HTTPException(status_code=400, detail=f"{field} must be a non-empty string")
    if "song_ids" in updates:
        _check_song_ids(updates["song_ids"], db)
    if "assignments" in updates:
        # Assignment edits are merged role by role; an empty member unassigns
        merged = {**(schedule.assignments or {}), **updates["assignments"]}
        updates["assignments"] = _clean_assignments(merged, db)

    for field, value in updates.items():
        setattr(schedule, field, value)
    for field in ("song_ids", "assignments"):
        if field in updates:
            flag_modified(schedule, field)
    db.commit()
    db.refresh(schedule)

    return _schedule_to_record(schedule).model_dump()


@router.delete("/schedules/{schedule_id}")
def delete_schedule(schedule_id: str, db: Session = Depends(get_db)) -> dict:
    schedule = _load_schedule(schedule_id, db)
    db.delete(schedule)
    db.commit()
    logger.info("Deleted schedule %s", schedule_id)
    return {"deleted": schedule_id}


@router.get("/schedules/{schedule_id}/songs/{position}/render")
def render_schedule_song(
    schedule_id: str,
    position: int,
    target_key: Optional[str] = None,
    nashville: bool = False,
    part: str = LYRICS_PART,
    db: Session = Depends(get_db),
) -> dict:
    """Render the song at a 1-based position in the set, with its neighbours."""
    schedule = _load_schedule(schedule_id, db)
    songs = _resolve_songs(schedule, db)

    if position < 1 or position > len(songs):
        raise HTTPException(
            status_code=404,
            detail=f"No song at position {position} (set has {len(songs)})",
        )

    index = position - 1
    rendered = render_song_record(songs[index], target_key, nashville, part)

    return ScheduleSongRender(
        schedule_id=schedule.id,
        position=position,
        set_length=len(songs),
        previous_song_id=songs[index - 1].id if index > 0 else None,
        next_song_id=songs[index + 1].id if index + 1 < len(songs) else None,
        **rendered.model_dump(),
    ).model_dump()


@router.get("/members")
def list_members(db: Session = Depends(get_db)) -> dict:
    members = db.query(Member).order_by(Member.created_at).all()
    return MemberListResponse(members=[m.name for m in members]).model_dump()


@router.post("/members")
def add_member(req: MemberCreateRequest, db: Session = Depends(get_db)) -> dict:
    if db.query(Member).filter(Member.name == req.name).first():
        raise HTTPException(status_code=400, detail=f"Member already exists: {req.name!r}")
    db.add(Member(name=req.name))
    db.commit()
    logger.info("Added member %r", req.name)
    return list_members(db)


@router.delete("/members/{name}")
def remove_member(name: str, db: Session = Depends(get_db)) -> dict:
    member = db.query(Member).filter(Member.name == name).first()
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")

    # Free up any roles the member held
    for schedule in db.query(Schedule).all():
        assignments = schedule.assignments or {}
        if name in assignments.values():
            schedule.assignments = {r: m for r, m in assignments.items() if m != name}
            flag_modified(schedule, "assignments")

    db.delete(member)
    db.commit()
    logger.info("Removed member %r", name)
    return list_members(db)
