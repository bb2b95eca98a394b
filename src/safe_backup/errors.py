"""
Error Taxonomy
==============
SafeBackup 전체에서 사용하는 에러 종류와 예외 계층.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    INVALID_CHARACTER = "invalid_character"
    PATH_TRAVERSAL = "path_traversal"
    ABSOLUTE_PATH = "absolute_path"
    FILE_NOT_FOUND = "file_not_found"
    ALREADY_EXISTS = "already_exists"
    NOT_A_FILE = "not_a_file"
    IO_FAILURE = "io_failure"


# 사용자에게 보여줄 기본 메시지
MESSAGES = {
    ErrorKind.EMPTY_NAME: "Filename cannot be empty",
    ErrorKind.NAME_TOO_LONG: "Filename is too long",
    ErrorKind.INVALID_CHARACTER: "Filename contains invalid characters",
    ErrorKind.PATH_TRAVERSAL: "Path traversal is not allowed",
    ErrorKind.ABSOLUTE_PATH: "Absolute paths are not allowed",
    ErrorKind.FILE_NOT_FOUND: "File does not exist",
    ErrorKind.ALREADY_EXISTS: "A backup with this name already exists",
    ErrorKind.NOT_A_FILE: "Not a regular file",
    ErrorKind.IO_FAILURE: "I/O error",
}


class SafeBackupError(Exception):
    """모든 SafeBackup 예외의 기반 클래스"""

    def __init__(self, kind: ErrorKind, detail: str = "", cause: Optional[BaseException] = None):
        self.kind = kind
        self.detail = detail
        self.cause = cause
        super().__init__(self.reason)

    @property
    def reason(self) -> str:
        """Human-readable reason, e.g. ``File does not exist: 'a.txt'``."""
        base = MESSAGES.get(self.kind, self.kind.value)
        if self.detail:
            base = f"{base}: {self.detail}"
        if self.cause is not None:
            base = f"{base} ({self.cause})"
        return base


class ValidationError(SafeBackupError):
    """Raw filename rejected by the validator."""


class ResolutionError(SafeBackupError):
    """Filename could not be proven to stay inside its root."""


class OperationError(SafeBackupError):
    """Existence checks or file transfer failed."""


class ConfigError(Exception):
    """시작 시점의 설정 오류 (루트 디렉토리 충돌 등)"""
