import logging

from config import settings
from database import SessionLocal
from models import KeySheetExport, Song
from services.key_sheets import build_key_sheet_pack

logger = logging.getLogger(__name__)


def process_key_sheet_export(export_id: str) -> None:
    db = SessionLocal()
    export = None
    try:
        export = db.query(KeySheetExport).filter(KeySheetExport.id == export_id).first()
        if not export:
            logger.error("Key sheet export %s not found", export_id)
            return

        song = db.query(Song).filter(Song.id == export.song_id).first()
        if not song:
            raise LookupError(f"Song {export.song_id} no longer exists")

        export.status = "RUNNING"
        db.commit()
        logger.info("Export %s: RUNNING (song=%s)", export_id, song.id)

        artifact = build_key_sheet_pack(
            song_id=song.id,
            title=song.title,
            content=song.content,
            source_key=song.original_key,
            data_dir=settings.data_dir,
            target_keys=export.target_keys,
            include_original=export.include_original,
            nashville=export.nashville,
        )

        export.result_json = artifact.model_dump()
        export.status = "READY"
        db.commit()
        logger.info("Export %s: READY (%s)", export_id, artifact.zip_path)

    except Exception as exc:
        logger.exception("Export %s failed: %s", export_id, exc)
        if export is not None:
            db.rollback()
            export.status = "FAILED"
            export.error = str(exc)
            db.commit()
    finally:
        db.close()
