"""
Configuration
=============
작업 디렉토리 / 백업 디렉토리 / 로그 파일 설정.
시작 시 한 번 생성되고 이후에는 변경되지 않습니다.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Union

from safe_backup.errors import ConfigError
from safe_backup.validator import MAX_NAME_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_WORK_DIR = "files"
DEFAULT_BACKUP_DIR = "backups"
DEFAULT_LOG_FILE = "logfile.txt"
DEFAULT_LOG_LEVEL = "WARNING"

ENV_PREFIX = "SAFE_BACKUP_"


def _env_int(env: Mapping[str, str], key: str, default: int, maximum: Optional[int] = None) -> int:
    raw = env.get(ENV_PREFIX + key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{key}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {ENV_PREFIX}{key}={raw!r}, using {default}")
        return default
    if maximum is not None and value > maximum:
        logger.warning(f"{ENV_PREFIX}{key}={raw!r} exceeds the filesystem limit, capped at {maximum}")
        return maximum
    return value


@dataclass(frozen=True)
class BackupConfig:
    work_root: Path
    backup_root: Path
    log_file: Path
    max_name_length: int = MAX_NAME_LENGTH
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(
        cls,
        base_dir: Union[str, Path, None] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "BackupConfig":
        """
        환경 변수에서 설정 읽기 (SAFE_BACKUP_WORK_DIR, SAFE_BACKUP_BACKUP_DIR,
        SAFE_BACKUP_LOG_FILE, SAFE_BACKUP_MAX_NAME, SAFE_BACKUP_LOG_LEVEL).
        Relative paths are anchored at *base_dir* (default: current directory).
        """
        env = os.environ if env is None else env
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        return cls(
            work_root=base / env.get(ENV_PREFIX + "WORK_DIR", DEFAULT_WORK_DIR),
            backup_root=base / env.get(ENV_PREFIX + "BACKUP_DIR", DEFAULT_BACKUP_DIR),
            log_file=base / env.get(ENV_PREFIX + "LOG_FILE", DEFAULT_LOG_FILE),
            max_name_length=_env_int(env, "MAX_NAME", MAX_NAME_LENGTH, maximum=MAX_NAME_LENGTH),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    def with_overrides(self, **overrides) -> "BackupConfig":
        """None 이 아닌 값만 덮어쓴 새 설정 반환 (CLI 플래그용)"""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def prepare(self) -> "BackupConfig":
        """
        Create both roots if absent and return a copy with canonical paths.

        Raises:
            ConfigError: roots overlap or cannot be created.
        """
        try:
            self.work_root.mkdir(parents=True, exist_ok=True)
            self.backup_root.mkdir(parents=True, exist_ok=True)
            work = self.work_root.resolve(strict=True)
            backup = self.backup_root.resolve(strict=True)
        except OSError as e:
            raise ConfigError(f"Cannot prepare storage directories: {e}") from e

        if work == backup:
            raise ConfigError(f"Working and backup directories must differ (both {work})")
        if work in backup.parents or backup in work.parents:
            raise ConfigError(f"Working and backup directories must not be nested ({work}, {backup})")

        log_file = self.log_file.parent.resolve() / self.log_file.name
        logger.debug(f"Roots ready: work={work} backup={backup} log={log_file}")
        return replace(self, work_root=work, backup_root=backup, log_file=log_file)
