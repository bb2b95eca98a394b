"""
Audit Log
=========
작업 결과(OperationRecord)를 로그 파일에 한 줄씩 추가합니다.
"""

import logging
import sys
from pathlib import Path
from typing import List, Union

from safe_backup.records import OperationRecord, utcnow

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class _AuditFileHandler(logging.FileHandler):
    def handleError(self, record):
        logger.error(f"Audit log write failed: {self.baseFilename}", exc_info=sys.exc_info())


class AuditLog:
    """Append-only, human-readable audit trail."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._logger = logging.Logger(f"safe_backup.audit[{self.path}]", level=logging.INFO)
        self._handler = _AuditFileHandler(self.path, mode="a", encoding="utf-8", delay=True)
        self._handler.setFormatter(logging.Formatter("%(message)s"))
        self._logger.addHandler(self._handler)

    def __call__(self, record: OperationRecord) -> None:
        self.record(record)

    def record(self, record: OperationRecord) -> None:
        stamp = record.timestamp.strftime(TIMESTAMP_FORMAT)
        self._write(f"[{stamp}] {record.describe()}")

    def note(self, message: str) -> None:
        """레코드가 없는 이벤트 (알 수 없는 명령 등) 기록"""
        stamp = utcnow().strftime(TIMESTAMP_FORMAT)
        # 개행 문자로 로그 줄을 위조하지 못하도록 이스케이프
        safe = message.encode("unicode_escape").decode("ascii")
        self._write(f"[{stamp}] {safe}")

    def _write(self, line: str) -> None:
        try:
            self._logger.info(line)
        except OSError as e:
            logger.error(f"Audit log write failed: {self.path}: {e}")

    def read_lines(self) -> List[str]:
        if not self.path.exists():
            return []
        return self.path.read_text(encoding="utf-8").splitlines()

    def close(self) -> None:
        self._handler.close()
        self._logger.removeHandler(self._handler)
