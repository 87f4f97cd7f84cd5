"""
Tests for chord transposition and Nashville Number rendering.
"""

import pytest

from conftest import AMAZING_GRACE
from services.chromatic import CHROMATIC_SCALE
from services.classifier import is_chord_line
from services.transposer import (
    NASHVILLE_DEGREES,
    ChordToken,
    display_key,
    get_transposed_content,
    parse_chord,
    render_lines,
    transpose_chord,
)


class TestParseChord:
    """Tests for splitting a chord symbol into its parts."""

    def test_plain_chord(self):
        assert parse_chord("G") == ChordToken(root="G", suffix="", bass=None)

    def test_suffix_and_bass(self):
        assert parse_chord("Am7/G") == ChordToken(root="A", suffix="m7", bass="G")

    def test_flat_root(self):
        chord = parse_chord("Bbmaj7")
        assert chord.root == "Bb"
        assert chord.suffix == "maj7"

    def test_no_root(self):
        assert parse_chord("xyz") is None
        assert parse_chord("") is None


class TestTransposeChord:
    """Tests for transposing a single chord token."""

    def test_g_to_c(self):
        assert transpose_chord("G", "G", "C") == "C"

    def test_dominant_seventh(self):
        assert transpose_chord("D7", "G", "C") == "G7"

    def test_slash_chord(self):
        assert transpose_chord("C/E", "C", "D") == "D/F#"

    def test_flat_root_is_read(self):
        assert transpose_chord("Bb", "F", "G") == "C"

    def test_output_always_sharp(self):
        assert transpose_chord("C", "C", "Eb") == "D#"
        assert transpose_chord("F", "C", "Bb") == "D#"

    def test_wraps_past_b(self):
        assert transpose_chord("A", "C", "E") == "C#"

    @pytest.mark.parametrize("suffix", ["", "m", "m7", "maj7", "sus4", "dim", "7b9", "(add9)"])
    def test_suffix_preserved(self, suffix):
        assert transpose_chord("E" + suffix, "C", "D") == "F#" + suffix
        assert transpose_chord("E" + suffix, "C", "C", True) == "3" + suffix

    def test_unresolvable_root_unchanged(self):
        assert transpose_chord("Cb", "C", "D") == "Cb"
        assert transpose_chord("E#m", "C", "D") == "E#m"

    def test_unresolvable_bass_only_that_part_unchanged(self):
        assert transpose_chord("G/Fb", "G", "A") == "A/Fb"

    def test_non_chord_unchanged(self):
        assert transpose_chord("hello", "C", "D") == "hello"

    def test_unknown_source_key_unchanged(self):
        assert transpose_chord("G", "H", "C") == "G"

    def test_unknown_target_key_unchanged(self):
        assert transpose_chord("G", "G", "H") == "G"

    @pytest.mark.parametrize("key", CHROMATIC_SCALE)
    def test_identity(self, key):
        for root in CHROMATIC_SCALE:
            assert transpose_chord(root + "m7", key, key) == root + "m7"

    def test_identity_canonicalizes_flats(self):
        assert transpose_chord("Ebm", "C", "C") == "D#m"

    @pytest.mark.parametrize("source", CHROMATIC_SCALE)
    def test_round_trip(self, source):
        for target in CHROMATIC_SCALE:
            for root in CHROMATIC_SCALE:
                there = transpose_chord(root + "sus", source, target)
                assert transpose_chord(there, target, source) == root + "sus"


class TestNashville:
    """Tests for scale-degree rendering."""

    def test_tonic(self):
        assert transpose_chord("G", "G", "G", True) == "1"

    def test_target_key_ignored(self):
        assert transpose_chord("D7", "G", "A", True) == "57"
        assert transpose_chord("D7", "G", "H", True) == "57"

    def test_slash_chord(self):
        assert transpose_chord("C/E", "C", "C", True) == "1/3"

    def test_flat_key(self):
        assert transpose_chord("Ab", "Eb", "Eb", True) == "4"

    def test_table_is_total(self):
        assert len(NASHVILLE_DEGREES) == 12
        assert len(set(NASHVILLE_DEGREES)) == 12
        for interval, root in enumerate(CHROMATIC_SCALE):
            assert transpose_chord(root, "C", "C", True) == NASHVILLE_DEGREES[interval]

    def test_chromatic_degrees(self):
        assert [transpose_chord(r, "C", "C", True) for r in ("C#", "D#", "F#", "G#", "A#")] == [
            "b2", "b3", "b5", "b6", "b7",
        ]

    def test_minor_key_still_major_relative(self):
        assert transpose_chord("C", "A", "A", True) == "b3"


class TestTransposedContent:
    """Tests for transposing a whole chart."""

    def test_two_line_block(self):
        assert get_transposed_content("G   C\nGrace", "G", "A") == "A   D\nGrace"

    def test_full_song(self):
        result = get_transposed_content(AMAZING_GRACE, "G", "C")
        lines = result.split("\n")
        assert lines[0] == "C           F      C"
        assert lines[1] == "Amazing grace! how sweet the sound,"
        assert lines[2] == "           C             G7"
        assert lines[4] == "  C               F      C"
        assert lines[6] == "     C      G7      C"
        assert lines[7] == "Was blind, but now I see."

    def test_line_count_and_lyrics_preserved(self):
        result = get_transposed_content(AMAZING_GRACE, "G", "D#")
        original = AMAZING_GRACE.split("\n")
        lines = result.split("\n")
        assert len(lines) == len(original)
        assert lines[0] == "D#           G#      D#"
        assert lines[1::2] == original[1::2]

    def test_nashville_song(self):
        result = get_transposed_content(AMAZING_GRACE, "G", "G", True)
        lines = result.split("\n")
        assert lines[0] == "1           4      1"
        assert lines[6] == "     1      57      1"

    def test_lyric_lines_byte_identical(self):
        content = "  Amazing grace!  \n\tBe still, my soul\n\n"
        assert get_transposed_content(content, "C", "F") == content

    def test_punctuated_chord_left_alone(self):
        assert get_transposed_content("G  C  D  Em.", "G", "A") == "A  D  E  Em."

    def test_unresolvable_root_on_chord_line(self):
        assert get_transposed_content("Cb  G", "G", "A") == "Cb  A"

    def test_unknown_source_key_returns_input(self):
        assert get_transposed_content(AMAZING_GRACE, "H", "C") == AMAZING_GRACE

    def test_empty_content(self):
        assert get_transposed_content("", "C", "D") == ""

    def test_does_not_mutate_input(self):
        content = "G   C\nGrace"
        get_transposed_content(content, "G", "A")
        assert content == "G   C\nGrace"


class TestDisplayHelpers:
    """Tests for per-line flags and the displayed key."""

    def test_render_lines_without_transposition(self):
        assert render_lines("G  C\nla la") == [("G  C", True), ("la la", False)]

    def test_render_lines_flags_nashville_output(self):
        content = "G  C\nla la"
        transposed = get_transposed_content(content, "G", "G", True)
        assert render_lines(content, transposed) == [("1  4", True), ("la la", False)]
        # The rendered numbers alone would not be recognised as chords
        assert is_chord_line("1  4") is False

    def test_display_key(self):
        assert display_key("A") == "A"
        assert display_key("A", nashville=True) == "#"
