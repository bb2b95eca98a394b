"""
Name Validator
==============
사용자가 입력한 파일 이름을 검사합니다.
파일 시스템에 접근하지 않는 순수 함수들로만 구성됩니다.

Rules are checked in order and the first violation wins:

1. empty or whitespace-only          -> EMPTY_NAME
2. longer than ``MAX_NAME_LENGTH``   -> NAME_TOO_LONG
3. leading ``/``, ``\\``, ``~``, ``C:`` -> ABSOLUTE_PATH
4. any ``/`` or ``\\``               -> PATH_TRAVERSAL
5. ``.``, ``..`` or containing ``..`` -> PATH_TRAVERSAL
6. outside ``ALLOWED_CHARACTERS``    -> INVALID_CHARACTER
"""

import re
import string
from typing import Tuple

from safe_backup.errors import ErrorKind, ValidationError

# 고정 길이 버퍼 상한 (UTF-8 바이트 기준)
MAX_NAME_LENGTH = 255

ALLOWED_CHARACTERS = frozenset(string.ascii_letters + string.digits + "._-")

PATH_SEPARATORS = ("/", "\\")

_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")

_TOKEN = object()


class Filename:
    """검증을 통과한 파일 이름. ``validate()`` 만이 생성할 수 있습니다."""

    __slots__ = ("_value",)

    def __init__(self, value: str, _token: object = None):
        if _token is not _TOKEN:
            raise TypeError("Filename instances are created by validate()")
        self._value = value

    @property
    def value(self) -> str:
        return self._value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Filename({self._value!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Filename):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


def _encoded_length(raw: str) -> int:
    return len(raw.encode("utf-8", errors="surrogatepass"))


def validate(raw: str, max_length: int = MAX_NAME_LENGTH) -> Filename:
    """
    Classify *raw* and wrap it as a :class:`Filename`.

    Raises:
        ValidationError: with the ``ErrorKind`` of the first broken rule.
    """
    if not isinstance(raw, str):
        raise ValidationError(ErrorKind.INVALID_CHARACTER, f"expected str, got {type(raw).__name__}")

    if not raw.strip():
        raise ValidationError(ErrorKind.EMPTY_NAME)

    size = _encoded_length(raw)
    if size > max_length:
        raise ValidationError(ErrorKind.NAME_TOO_LONG, f"{size} bytes, limit is {max_length}")

    if raw.startswith(PATH_SEPARATORS) or raw.startswith("~") or _DRIVE_LETTER.match(raw):
        raise ValidationError(ErrorKind.ABSOLUTE_PATH, ascii(raw))

    if any(sep in raw for sep in PATH_SEPARATORS):
        raise ValidationError(ErrorKind.PATH_TRAVERSAL, "path separators are not allowed")

    if raw in (".", "..") or ".." in raw:
        raise ValidationError(ErrorKind.PATH_TRAVERSAL, "'..' is not allowed")

    for position, char in enumerate(raw):
        if char not in ALLOWED_CHARACTERS:
            raise ValidationError(
                ErrorKind.INVALID_CHARACTER,
                f"{ascii(char)} at position {position}",
            )

    return Filename(raw, _token=_TOKEN)


def check(raw: str, max_length: int = MAX_NAME_LENGTH) -> Tuple[bool, str]:
    """
    검증 결과만 필요할 때 사용
    Returns:
        (is_valid, message)
    """
    try:
        validate(raw, max_length=max_length)
    except ValidationError as e:
        return False, e.reason
    return True, "OK"
