import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text

from database import Base


class Song(Base):
    __tablename__ = "songs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    artist = Column(String, nullable=False, default="Unknown")
    original_key = Column(String, nullable=False, default="C")
    content = Column(Text, nullable=False)
    instrument_parts = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class KeySheetExport(Base):
    __tablename__ = "key_sheet_exports"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    song_id = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default="CREATED")
    nashville = Column(Boolean, nullable=False, default=False)
    include_original = Column(Boolean, nullable=False, default=True)
    target_keys = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    result_json = Column(JSON, nullable=True)
    error = Column(Text, nullable=True)


class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    date = Column(String, nullable=False)
    song_ids = Column(JSON, nullable=False, default=list)
    assignments = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Member(Base):
    __tablename__ = "members"

    name = Column(String, primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)
