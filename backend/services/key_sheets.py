import json
import logging
import os
import uuid
import zipfile
from datetime import datetime, timezone

from schemas.key_sheet import KeySheetArtifact, KeySheetEntry
from services.chromatic import ALL_KEYS, normalize_key, semitone_interval
from services.transposer import get_transposed_content

logger = logging.getLogger(__name__)

NASHVILLE_FILE_NAME = "nashville.txt"


def _safe_key(key: str) -> str:
    return key.replace("#", "sharp").replace("b", "flat")


def build_key_sheet_pack(
    song_id: str,
    title: str,
    content: str,
    source_key: str,
    data_dir: str,
    target_keys: list[str] | None = None,
    include_original: bool = True,
    nashville: bool = False,
) -> KeySheetArtifact:
    """Write the chart in each requested key, a manifest, and a ZIP archive."""

    source_key = normalize_key(source_key)

    # Nashville numbers do not depend on the target key, so one sheet covers it
    if nashville:
        keys_to_generate = [source_key]
    elif target_keys is None:
        keys_to_generate = list(ALL_KEYS)
    else:
        keys_to_generate = []
        for key in target_keys:
            key = normalize_key(key)
            if key not in keys_to_generate:
                keys_to_generate.append(key)

    if not nashville and include_original and source_key not in keys_to_generate:
        keys_to_generate.insert(0, source_key)

    artifact_id = str(uuid.uuid4())
    pack_dir = os.path.join(data_dir, "key_sheets", song_id, artifact_id)
    os.makedirs(pack_dir, exist_ok=True)

    entries: list[KeySheetEntry] = []

    for key in keys_to_generate:
        sheet = get_transposed_content(content, source_key, key, nashville)
        file_name = NASHVILLE_FILE_NAME if nashville else f"{_safe_key(key)}.txt"

        with open(os.path.join(pack_dir, file_name), "w", encoding="utf-8") as f:
            f.write(f"{title} ({'Nashville' if nashville else key})\n\n")
            f.write(sheet)
            f.write("\n")

        entries.append(KeySheetEntry(
            key=key,
            interval_semitones=semitone_interval(source_key, key),
            file_name=file_name,
        ))

    manifest = {
        "artifact_id": artifact_id,
        "song_id": song_id,
        "title": title,
        "source_key": source_key,
        "nashville": nashville,
        "keys": [e.model_dump() for e in entries],
    }
    manifest_path = os.path.join(pack_dir, "manifest.json")
    with open(manifest_path, "w") as f:
        json.dump(manifest, f, indent=2)

    zip_path = os.path.join(pack_dir, "key_sheets.zip")
    with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
        for entry in entries:
            zf.write(os.path.join(pack_dir, entry.file_name), arcname=entry.file_name)
        zf.write(manifest_path, arcname="manifest.json")

    logger.info(
        "Built key sheet pack %s for song %s (%d sheet(s))",
        artifact_id, song_id, len(entries),
    )

    return KeySheetArtifact(
        artifact_id=artifact_id,
        song_id=song_id,
        source_key=source_key,
        nashville=nashville,
        keys_included=[e.key for e in entries],
        entries=entries,
        dir_path=pack_dir,
        zip_path=zip_path,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
