"""Pytest configuration and fixtures."""

import pytest

from safe_backup.audit import AuditLog
from safe_backup.config import BackupConfig
from safe_backup.engine import FileOperationEngine


@pytest.fixture
def config(tmp_path):
    """Prepared configuration with both roots under tmp_path."""
    return BackupConfig(
        work_root=tmp_path / "files",
        backup_root=tmp_path / "backups",
        log_file=tmp_path / "logfile.txt",
    ).prepare()


@pytest.fixture
def audit(config):
    log = AuditLog(config.log_file)
    yield log
    log.close()


@pytest.fixture
def engine(config, audit):
    return FileOperationEngine(config, audit=audit)


@pytest.fixture
def outside(tmp_path):
    """A directory next to the roots that must never be touched."""
    path = tmp_path / "outside"
    path.mkdir()
    secret = path / "secret.txt"
    secret.write_bytes(b"top secret")
    return path


@pytest.fixture
def work_file(config):
    """Create a file in the working directory and return its path."""
    def _make(name, data=b"hello"):
        path = config.work_root / name
        path.write_bytes(data)
        return path
    return _make
