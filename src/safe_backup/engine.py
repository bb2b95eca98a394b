"""
File Operation Engine
=====================
백업 / 삭제 / 복원 작업을 수행합니다.

Each operation walks the same stages::

    VALIDATING -> RESOLVING -> CHECKING -> TRANSFERRING -> REPORTING

and ends in exactly one ``OperationRecord`` (SUCCESS, FAILURE or
CANCELLED). Operational failures never escape as exceptions; the caller
always gets a record back.
"""

import hashlib
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Optional

from safe_backup.config import BackupConfig
from safe_backup.errors import ErrorKind, OperationError, SafeBackupError
from safe_backup.records import OperationKind, OperationRecord, Outcome, Stage
from safe_backup.resolver import ResolvedPath, resolve
from safe_backup.validator import Filename, check, validate

logger = logging.getLogger(__name__)

AuditSink = Callable[[OperationRecord], None]
Confirm = Callable[[Filename], bool]

CHUNK_SIZE = 64 * 1024

STAGING_PREFIX = ".sb-"
STAGING_SUFFIX = ".part"


def file_hash(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove partial file {path}: {e}")


def copy_verified(source: Path, destination: Path) -> str:
    """
    Copy *source* to *destination* byte for byte.

    The data is staged in a temporary file beside the destination, checked
    against the source digest, then renamed into place. On any failure the
    staged file is removed and *destination* is left untouched.

    Returns:
        SHA-256 hex digest of the copied content.
    """
    # 임시 파일 이름 길이는 대상 이름과 무관해야 함 (255 바이트 제한)
    try:
        fd, staged_name = tempfile.mkstemp(prefix=STAGING_PREFIX, suffix=STAGING_SUFFIX, dir=destination.parent)
    except OSError as e:
        raise OperationError(ErrorKind.IO_FAILURE, f"cannot stage copy of {destination.name!r}", cause=e) from e
    staged = Path(staged_name)
    try:
        digest = hashlib.sha256()
        with open(source, "rb") as src, os.fdopen(fd, "wb") as dst:
            for chunk in iter(lambda: src.read(CHUNK_SIZE), b""):
                digest.update(chunk)
                dst.write(chunk)
            dst.flush()
            os.fsync(dst.fileno())

        expected = digest.hexdigest()
        if file_hash(staged) != expected:
            raise OperationError(ErrorKind.IO_FAILURE, f"verification of {destination.name!r} failed")

        shutil.copymode(source, staged)
        os.replace(staged, destination)
    except OSError as e:
        _discard(staged)
        raise OperationError(ErrorKind.IO_FAILURE, f"copy to {destination.name!r} failed", cause=e) from e
    except BaseException:
        _discard(staged)
        raise
    return expected


class FileOperationEngine:
    """작업 디렉토리와 백업 디렉토리 사이의 파일 작업 관리"""

    def __init__(self, config: BackupConfig, audit: Optional[AuditSink] = None):
        self.config = config
        self.audit = audit

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    def backup(self, raw: str) -> OperationRecord:
        """작업 디렉토리의 파일을 백업 디렉토리로 복사 (기존 백업은 덮어쓰지 않음)"""
        return self._run(OperationKind.BACKUP, raw, self._backup)

    def delete(self, raw: str, confirm: Optional[Confirm] = None) -> OperationRecord:
        """작업 디렉토리의 파일 삭제. *confirm* 이 False 를 반환하면 취소."""
        return self._run(OperationKind.DELETE, raw, self._delete, confirm=confirm)

    def restore(self, raw: str) -> OperationRecord:
        """백업 디렉토리의 파일로 작업 디렉토리 파일을 복원 (덮어쓰기)"""
        return self._run(OperationKind.RESTORE, raw, self._restore)

    def run(self, kind: OperationKind, raw: str, confirm: Optional[Confirm] = None) -> OperationRecord:
        if kind is OperationKind.BACKUP:
            return self.backup(raw)
        if kind is OperationKind.DELETE:
            return self.delete(raw, confirm=confirm)
        if kind is OperationKind.RESTORE:
            return self.restore(raw)
        raise ValueError(f"Unsupported operation: {kind!r}")

    def list_files(self, which: str = "work") -> List[str]:
        """
        폴더 내 파일 목록 반환
        Only regular files whose names would pass validation are listed.
        """
        if which == "work":
            root = self.config.work_root
        elif which == "backup":
            root = self.config.backup_root
        else:
            raise ValueError(f"Unknown root: {which!r}")

        files = []
        for p in Path(root).iterdir():
            if p.is_file() and not p.is_symlink() and check(p.name, self.config.max_name_length)[0]:
                files.append(p.name)
        return sorted(files)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _run(self, kind: OperationKind, raw: str, step, **kwargs) -> OperationRecord:
        record = OperationRecord(kind=kind, filename=raw if isinstance(raw, str) else repr(raw))
        try:
            step(record, raw, **kwargs)
        except SafeBackupError as e:
            record.outcome = Outcome.FAILURE
            record.error = e.kind
            record.reason = e.reason
        except OSError as e:
            record.outcome = Outcome.FAILURE
            record.error = ErrorKind.IO_FAILURE
            record.reason = SafeBackupError(ErrorKind.IO_FAILURE, cause=e).reason

        if record.outcome is Outcome.FAILURE:
            logger.info(f"{kind.value} failed at {record.stage.value}: {record.reason}")
        else:
            record.stage = Stage.REPORTING
            logger.debug(record.describe())

        self._report(record)
        return record

    def _report(self, record: OperationRecord) -> None:
        if self.audit is None:
            return
        try:
            self.audit(record)
        except Exception:
            logger.exception(f"Audit sink failed for {record.describe()}")

    def _validate(self, record: OperationRecord, raw: str) -> Filename:
        record.stage = Stage.VALIDATING
        return validate(raw, max_length=self.config.max_name_length)

    @staticmethod
    def _require_file(target: ResolvedPath, what: str) -> None:
        if not target.exists():
            raise OperationError(ErrorKind.FILE_NOT_FOUND, f"{what} {target.name.value!r}")
        if not target.is_file():
            raise OperationError(ErrorKind.NOT_A_FILE, f"{what} {target.name.value!r}")

    def _backup(self, record: OperationRecord, raw: str) -> None:
        name = self._validate(record, raw)

        record.stage = Stage.RESOLVING
        source = resolve(name, self.config.work_root)
        destination = resolve(name, self.config.backup_root)

        record.stage = Stage.CHECKING
        self._require_file(source, "source file")
        if os.path.lexists(destination.path):
            raise OperationError(ErrorKind.ALREADY_EXISTS, repr(name.value))

        record.stage = Stage.TRANSFERRING
        copy_verified(source.path, destination.path)
        record.reason = f"backup created in {destination.root.name}/"

    def _delete(self, record: OperationRecord, raw: str, confirm: Optional[Confirm] = None) -> None:
        name = self._validate(record, raw)

        record.stage = Stage.RESOLVING
        target = resolve(name, self.config.work_root)

        record.stage = Stage.CHECKING
        self._require_file(target, "file")
        if confirm is not None and not confirm(name):
            record.outcome = Outcome.CANCELLED
            record.reason = "deletion cancelled by user"
            return

        record.stage = Stage.TRANSFERRING
        try:
            # 링크 대상이 아니라 사용자가 지정한 항목 자체를 삭제
            target.entry.unlink()
        except FileNotFoundError as e:
            raise OperationError(ErrorKind.FILE_NOT_FOUND, f"file {name.value!r}", cause=e) from e
        except OSError as e:
            raise OperationError(ErrorKind.IO_FAILURE, f"cannot delete {name.value!r}", cause=e) from e
        record.reason = "file deleted"

    def _restore(self, record: OperationRecord, raw: str) -> None:
        name = self._validate(record, raw)

        record.stage = Stage.RESOLVING
        source = resolve(name, self.config.backup_root)
        destination = resolve(name, self.config.work_root)

        record.stage = Stage.CHECKING
        self._require_file(source, "backup")
        if destination.exists() and not destination.is_file():
            raise OperationError(ErrorKind.NOT_A_FILE, f"destination {name.value!r}")

        record.stage = Stage.TRANSFERRING
        copy_verified(source.path, destination.path)
        record.reason = f"restored from {source.root.name}/"
