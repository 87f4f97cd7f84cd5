import logging
import re
from typing import List, NamedTuple, Optional, Tuple

from services.chromatic import CHROMATIC_SCALE, index_of
from services.classifier import is_chord_line, is_chord_token

logger = logging.getLogger(__name__)

# Semitones above the key -> major-scale degree label
NASHVILLE_DEGREES = (
    "1", "b2", "2", "b3", "3", "4",
    "b5", "5", "b6", "6", "b7", "7",
)

NASHVILLE_DISPLAY_KEY = "#"

# Regex: root is a capital letter optionally followed by # or b
_ROOT_RE = re.compile(r"^([A-G][#b]?)(.*)$", re.DOTALL)

# Anything that starts like a chord, up to the next space, tab or newline
_CHORD_RUN_RE = re.compile(r"[A-G][#b]?[^ \n\t]*")


class ChordToken(NamedTuple):
    root: str
    suffix: str
    bass: Optional[str] = None


def parse_chord(token: str) -> Optional[ChordToken]:
    """Split a chord symbol like 'Am7/G' into root, suffix and bass note.

    Returns None if the token does not start with a root.
    """
    main, slash, bass = token.partition("/")
    m = _ROOT_RE.match(main)
    if not m:
        return None
    return ChordToken(root=m.group(1), suffix=m.group(2), bass=bass if slash else None)


def _transpose_part(
    part: str, source_index: int, diff: int, nashville: bool
) -> str:
    chord = parse_chord(part)
    if chord is None:
        return part

    root_index = index_of(chord.root)
    if root_index is None:
        logger.debug("Leaving chord with unresolvable root as-is: %r", part)
        return part

    if nashville:
        interval = (root_index - source_index + 12) % 12
        return NASHVILLE_DEGREES[interval] + chord.suffix

    return CHROMATIC_SCALE[(root_index + diff) % 12] + chord.suffix


def transpose_chord(
    token: str, source_key: str, target_key: str, nashville: bool = False
) -> str:
    """Transpose a chord symbol from source_key to target_key.

    Slash chords are handled part by part. Only roots change; suffixes are
    kept verbatim and new roots are always spelled with sharps. In Nashville
    mode the root becomes its degree relative to source_key and target_key
    is ignored.
    """
    source_index = index_of(source_key)
    target_index = index_of(target_key)
    if source_index is None or (target_index is None and not nashville):
        logger.debug(
            "Cannot transpose %r from %r to %r: unknown key",
            token, source_key, target_key,
        )
        return token

    diff = 0 if nashville else (target_index - source_index + 12) % 12
    return "/".join(
        _transpose_part(part, source_index, diff, nashville)
        for part in token.split("/")
    )


def _transpose_line(
    line: str, source_key: str, target_key: str, nashville: bool
) -> str:
    def _replace(m: re.Match) -> str:
        run = m.group(0)
        if not is_chord_token(run):
            return run
        return transpose_chord(run, source_key, target_key, nashville)

    return _CHORD_RUN_RE.sub(_replace, line)


def get_transposed_content(
    content: str, source_key: str, target_key: str, nashville: bool = False
) -> str:
    """Transpose every chord line in a chart, leaving lyric lines untouched."""
    lines = content.split("\n")
    return "\n".join(
        _transpose_line(line, source_key, target_key, nashville)
        if is_chord_line(line) else line
        for line in lines
    )


def render_lines(
    content: str, transposed: Optional[str] = None
) -> List[Tuple[str, bool]]:
    """Pair each output line with whether it is a chord line.

    Classification is done on the source chart, so Nashville numbers are
    still flagged as chord lines.
    """
    # Classifying the rendered line instead would drop the highlight on
    # Nashville numbers, which never match the chord pattern
    source_lines = content.split("\n")
    output_lines = source_lines if transposed is None else transposed.split("\n")
    return [
        (out, is_chord_line(src))
        for src, out in zip(source_lines, output_lines)
    ]


def display_key(target_key: str, nashville: bool = False) -> str:
    return NASHVILLE_DISPLAY_KEY if nashville else target_key
