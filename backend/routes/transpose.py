import logging

from fastapi import APIRouter

from schemas.transpose import KeysResponse, RenderedLine, TransposeRequest, TransposeResponse
from services.chromatic import ALL_KEYS, ENHARMONIC_MAP, normalize_key, semitone_interval
from services.transposer import (
    NASHVILLE_DEGREES,
    display_key,
    get_transposed_content,
    render_lines,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def build_transpose_response(
    content: str,
    source_key: str,
    target_key: str,
    nashville: bool,
    transform: bool = True,
) -> TransposeResponse:
    """Transpose a chart and package it with per-line chord flags.

    With transform=False the content is passed through as written.
    """
    source_key = normalize_key(source_key)
    target_key = normalize_key(target_key)
    if transform:
        transposed = get_transposed_content(content, source_key, target_key, nashville)
    else:
        transposed = content
    return TransposeResponse(
        source_key=source_key,
        target_key=target_key,
        display_key=display_key(target_key, nashville),
        nashville=nashville,
        interval_semitones=semitone_interval(source_key, target_key),
        content=transposed,
        lines=[
            RenderedLine(text=text, is_chord_line=flag)
            for text, flag in render_lines(content, transposed)
        ],
    )


@router.get("/keys")
def list_keys() -> dict:
    return KeysResponse(
        keys=ALL_KEYS,
        aliases=dict(ENHARMONIC_MAP),
        nashville_degrees=list(NASHVILLE_DEGREES),
    ).model_dump()


@router.post("/transpose")
def transpose_content(req: TransposeRequest) -> dict:
    target_key = req.target_key or req.source_key
    response = build_transpose_response(
        req.content, req.source_key, target_key, req.nashville
    )
    logger.info(
        "Transposed %d line(s) %s -> %s (nashville=%s)",
        len(response.lines), response.source_key, response.target_key, req.nashville,
    )
    return response.model_dump()
