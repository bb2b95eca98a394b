"""
Operation Records
=================
작업 한 건의 결과와 진행 단계를 기록합니다.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from safe_backup.errors import ErrorKind


class OperationKind(Enum):
    BACKUP = "backup"
    DELETE = "delete"
    RESTORE = "restore"


class Stage(Enum):
    VALIDATING = "validating"
    RESOLVING = "resolving"
    CHECKING = "checking"
    TRANSFERRING = "transferring"
    REPORTING = "reporting"


class Outcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OperationRecord:
    kind: OperationKind
    filename: str  # raw input as received, may be hostile
    outcome: Outcome = Outcome.SUCCESS
    error: Optional[ErrorKind] = None
    reason: str = ""
    stage: Stage = Stage.VALIDATING
    timestamp: datetime = field(default_factory=utcnow)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    def describe(self) -> str:
        """한 줄 요약 (로그/화면 출력용). 파일 이름은 ascii()로 이스케이프."""
        parts = [self.kind.value.upper(), ascii(self.filename), self.outcome.value.upper()]
        if self.error is not None:
            parts.append(f"[{self.error.name}: {self.reason}]")
        elif self.reason:
            parts.append(f"[{self.reason}]")
        return " ".join(parts)
