"""Tests for filename validation."""

import pytest

from safe_backup.errors import ErrorKind, ValidationError
from safe_backup.validator import (
    ALLOWED_CHARACTERS,
    MAX_NAME_LENGTH,
    Filename,
    check,
    validate,
)


def rejected_kind(raw, **kwargs):
    with pytest.raises(ValidationError) as excinfo:
        validate(raw, **kwargs)
    return excinfo.value.kind


class TestAccepted:
    """Names that must pass."""

    @pytest.mark.parametrize("raw", [
        "report.txt",
        "a",
        "Data_2024-01.csv",
        ".bashrc",
        "archive.tar.gz",
        "x" * MAX_NAME_LENGTH,
    ])
    def test_valid_names(self, raw):
        name = validate(raw)
        assert isinstance(name, Filename)
        assert name.value == raw
        assert str(name) == raw

    def test_equality_and_hash(self):
        assert validate("a.txt") == validate("a.txt")
        assert len({validate("a.txt"), validate("a.txt")}) == 1

    def test_filename_cannot_be_built_directly(self):
        with pytest.raises(TypeError):
            Filename("../../etc/passwd")

    def test_allow_list_is_conservative(self):
        assert "/" not in ALLOWED_CHARACTERS
        assert "\\" not in ALLOWED_CHARACTERS
        assert "\x00" not in ALLOWED_CHARACTERS
        assert " " not in ALLOWED_CHARACTERS
        assert set("._-") <= ALLOWED_CHARACTERS


class TestEmptyAndLength:
    """Empty and oversized input."""

    @pytest.mark.parametrize("raw", ["", " ", "   ", "\t", "\n"])
    def test_empty_or_whitespace(self, raw):
        assert rejected_kind(raw) is ErrorKind.EMPTY_NAME

    def test_too_long(self):
        assert rejected_kind("a" * (MAX_NAME_LENGTH + 1)) is ErrorKind.NAME_TOO_LONG

    def test_very_long_input(self):
        assert rejected_kind("A" * 100_000) is ErrorKind.NAME_TOO_LONG

    def test_length_counts_utf8_bytes(self):
        # 128 two-byte characters = 256 bytes
        assert rejected_kind("é" * 128) is ErrorKind.NAME_TOO_LONG

    def test_custom_limit(self):
        assert rejected_kind("abcdef", max_length=5) is ErrorKind.NAME_TOO_LONG
        assert validate("abcde", max_length=5).value == "abcde"

    def test_length_checked_before_characters(self):
        assert rejected_kind("/" * 300) is ErrorKind.NAME_TOO_LONG


class TestTraversal:
    """Separators and dot-dot forms."""

    @pytest.mark.parametrize("raw", [
        "../../etc/passwd",
        "dir/file.txt",
        "a\\b",
        "..\\..\\windows\\win.ini",
        "file.txt/",
        "x/../y",
    ])
    def test_separators(self, raw):
        assert rejected_kind(raw) is ErrorKind.PATH_TRAVERSAL

    @pytest.mark.parametrize("raw", [".", "..", "...", "notes..txt", "..hidden"])
    def test_dot_forms(self, raw):
        assert rejected_kind(raw) is ErrorKind.PATH_TRAVERSAL


class TestAbsolute:
    """Root markers."""

    @pytest.mark.parametrize("raw", [
        "/etc/passwd",
        "/",
        "\\\\server\\share",
        "~",
        "~root",
        "C:",
        "c:evil.txt",
        "Z:\\boot.ini",
    ])
    def test_root_markers(self, raw):
        assert rejected_kind(raw) is ErrorKind.ABSOLUTE_PATH


class TestCharacters:
    """Characters outside the allow-list."""

    @pytest.mark.parametrize("raw", [
        "file\x00.txt",
        "a\x01b",
        "line\nbreak",
        "tab\there",
        "bell\x07",
        "del\x7f",
        "has space.txt",
        "semi;colon",
        "pipe|name",
        "star*",
        "quote\"",
        "dollar$HOME",
        "back`tick`",
        "한글.txt",
        "bidi\u202etxt.exe",
    ])
    def test_invalid_characters(self, raw):
        assert rejected_kind(raw) is ErrorKind.INVALID_CHARACTER

    def test_non_string_input(self):
        assert rejected_kind(b"bytes.txt") is ErrorKind.INVALID_CHARACTER

    def test_reason_escapes_character(self):
        with pytest.raises(ValidationError) as excinfo:
            validate("ab\x00c")
        assert "'\\x00'" in excinfo.value.reason
        assert "position 2" in excinfo.value.reason


class TestCheck:
    """Non-raising helper."""

    def test_ok(self):
        assert check("report.txt") == (True, "OK")

    def test_rejected(self):
        ok, message = check("")
        assert ok is False
        assert "empty" in message
