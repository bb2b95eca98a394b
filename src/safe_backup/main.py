"""
SafeBackup CLI 진입점
====================
python -m safe_backup [--interactive]
python -m safe_backup backup report.txt
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from safe_backup.audit import AuditLog
from safe_backup.config import BackupConfig
from safe_backup.engine import FileOperationEngine
from safe_backup.errors import ConfigError
from safe_backup.records import OperationKind
from safe_backup.shell import BackupShell

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

logger = logging.getLogger(__name__)


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(level: str = "WARNING", console: Optional[Console] = None):
    """진단 로그는 stderr 로 (감사 로그와 별개). 알 수 없는 레벨은 WARNING."""
    logging.basicConfig(
        level=LOG_LEVELS.get(str(level).upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safe-backup",
        description="SafeBackup - 파일 이름 검증을 거치는 안전한 백업/삭제/복원 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
예제:
  safe-backup                         # 대화형 모드
  safe-backup backup report.txt       # 단일 작업 실행
  safe-backup delete report.txt --yes
        """,
    )

    parser.add_argument(
        "command",
        nargs="?",
        choices=[k.value for k in OperationKind],
        help="실행할 작업",
    )

    parser.add_argument(
        "filename",
        nargs="?",
        help="대상 파일 이름 (디렉토리 경로 불가)",
    )

    parser.add_argument(
        "--interactive", "-i",
        action="store_true",
        help="대화형 모드 실행",
    )

    parser.add_argument(
        "--work-dir",
        type=Path,
        default=None,
        help="작업 디렉토리 (default: ./files)",
    )

    parser.add_argument(
        "--backup-dir",
        type=Path,
        default=None,
        help="백업 디렉토리 (default: ./backups)",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="감사 로그 파일 (default: ./logfile.txt)",
    )

    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        default=False,
        help="삭제 확인 질문 생략",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=False,
        help="진단 로그 출력 (DEBUG)",
    )

    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    console = console or Console()

    if args.command and not args.filename:
        parser.error(f"'{args.command}' requires a filename")

    config = BackupConfig.from_env().with_overrides(
        work_root=args.work_dir,
        backup_root=args.backup_dir,
        log_file=args.log_file,
        log_level="DEBUG" if args.verbose else None,
    )
    configure_logging(config.log_level)

    try:
        config = config.prepare()
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        return EXIT_USAGE

    audit = AuditLog(config.log_file)
    engine = FileOperationEngine(config, audit=audit)
    shell = BackupShell(engine, console=console, audit=audit, assume_yes=args.yes)

    try:
        if args.command and not args.interactive:
            record = shell.execute(args.command, args.filename)
            return EXIT_OK if record.ok else EXIT_FAILED

        shell.interactive()
        return EXIT_OK
    finally:
        audit.close()


if __name__ == "__main__":
    sys.exit(main())
