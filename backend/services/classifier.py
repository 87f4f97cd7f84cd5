import re

# One chord symbol: root, optional accidental, quality/extension markers,
# optional slash bass note
CHORD_SHAPE_RE = re.compile(
    r"^[A-G][#b]?(?:m|maj|min|sus|dim|aug|add|7|9|11|13)*(?:/[A-G][#b]?)?$"
)

_WHITESPACE_RE = re.compile(r"\s+")


def is_chord_token(token: str) -> bool:
    return CHORD_SHAPE_RE.fullmatch(token) is not None


def is_chord_line(line: str) -> bool:
    """Return True if more than half of the line's tokens look like chords.

    Chord charts space chord names out over the lyric below them, so a strict
    majority vote is enough to tell the two kinds of line apart. Lyric lines
    made mostly of words like "A" or "Am" will still be taken for chords.
    """
    stripped = line.strip()
    if not stripped:
        return False

    tokens = _WHITESPACE_RE.split(stripped)
    chord_count = sum(1 for t in tokens if is_chord_token(t))
    return chord_count / len(tokens) > 0.5
