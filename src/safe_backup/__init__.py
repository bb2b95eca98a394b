"""
SafeBackup
==========
파일 이름 검증을 거치는 안전한 백업 / 삭제 / 복원 도구

사용법:
    from safe_backup import BackupConfig, FileOperationEngine

    config = BackupConfig.from_env().prepare()
    engine = FileOperationEngine(config)
    record = engine.backup("report.txt")
"""

from safe_backup.config import BackupConfig
from safe_backup.engine import FileOperationEngine
from safe_backup.errors import ErrorKind, SafeBackupError
from safe_backup.records import OperationKind, OperationRecord, Outcome
from safe_backup.validator import Filename, validate

__version__ = "0.1.0"
__all__ = [
    "BackupConfig",
    "FileOperationEngine",
    "ErrorKind",
    "SafeBackupError",
    "OperationKind",
    "OperationRecord",
    "Outcome",
    "Filename",
    "validate",
]
