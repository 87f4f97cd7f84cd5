from types import MappingProxyType
from typing import Optional

# The 12 pitch classes in canonical sharp spelling, starting from C
CHROMATIC_SCALE = (
    "C", "C#", "D", "D#", "E", "F",
    "F#", "G", "G#", "A", "A#", "B",
)

# Flat-spelled key names -> canonical sharp spelling
ENHARMONIC_MAP = MappingProxyType({
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
})

ALL_KEYS = list(CHROMATIC_SCALE)

_INDEX = MappingProxyType({name: i for i, name in enumerate(CHROMATIC_SCALE)})


def normalize_key(spelling: str) -> str:
    """Resolve an enharmonic alias to its canonical spelling.

    Unknown spellings are returned unchanged.
    """
    return ENHARMONIC_MAP.get(spelling, spelling)


def index_of(pitch_class: str) -> Optional[int]:
    """Return the position (0-11) of a pitch class, or None if unknown."""
    return _INDEX.get(normalize_key(pitch_class))


def at(index: int) -> str:
    return CHROMATIC_SCALE[index % 12]


def is_known_key(key: str) -> bool:
    return index_of(key) is not None


def parse_key(key: str) -> int:
    """Return semitone value (0-11) for a key string like 'C', 'F#', 'Bb'.

    Raises ValueError if the key is not recognized.
    """
    idx = index_of(key)
    if idx is None:
        raise ValueError(f"Unknown key: {key!r}")
    return idx


def semitone_interval(source_key: str, target_key: str) -> int:
    """Return the upward semitone distance from source to target (0-11).

    Raises ValueError if either key is not recognized.
    """
    return (parse_key(target_key) - parse_key(source_key) + 12) % 12
