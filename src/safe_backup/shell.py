"""
SafeBackup Shell
================
대화형 메뉴. 명령과 파일 이름을 입력받아 엔진에 전달하고 결과를 출력합니다.
"""

from typing import IO, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from safe_backup.audit import AuditLog
from safe_backup.engine import FileOperationEngine
from safe_backup.records import OperationKind, OperationRecord, Outcome
from safe_backup.validator import Filename

# 검증 전에 자르는 입력 길이 상한 (검증기는 그 이하에서 다시 검사)
MAX_INPUT_LENGTH = 4096

QUIT_COMMANDS = ("quit", "exit", "q")

OUTCOME_STYLES = {
    Outcome.SUCCESS: ("✅", "green"),
    Outcome.FAILURE: ("❌", "bold red"),
    Outcome.CANCELLED: ("⚠️", "yellow"),
}


class BackupShell:
    def __init__(
        self,
        engine: FileOperationEngine,
        console: Optional[Console] = None,
        audit: Optional[AuditLog] = None,
        stream: Optional[IO[str]] = None,
        assume_yes: bool = False,
    ):
        self.engine = engine
        self.console = console or Console()
        self.audit = audit
        self.stream = stream
        self.assume_yes = assume_yes

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def read(self, prompt: str) -> str:
        """Read one line; raises EOFError when the input stream is exhausted."""
        line = self.console.input(prompt, stream=self.stream)
        if self.stream is not None and line == "":
            raise EOFError
        line = line.rstrip("\r\n")
        if len(line) > MAX_INPUT_LENGTH:
            # 과도하게 긴 입력은 잘라서 검증기가 NAME_TOO_LONG 으로 거부하게 함
            line = line[: MAX_INPUT_LENGTH + 1]
        return line.strip()

    def confirm_delete(self, name: Filename) -> bool:
        if self.assume_yes:
            return True
        answer = self.read(f"Are you sure you want to delete [bold]{name.value}[/bold]? (yes/no): ")
        return answer.lower() == "yes"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    def show_banner(self):
        self.console.print(Panel(
            "[bold]🗄️  SafeBackup[/bold]\n"
            f"Working directory: [cyan]{escape(str(self.engine.config.work_root))}[/cyan]\n"
            f"Backup directory:  [cyan]{escape(str(self.engine.config.backup_root))}[/cyan]\n"
            "Commands: backup, delete, restore, list, help\n"
            "종료: 'quit' 또는 'exit'",
            border_style="blue",
        ))

    def show_help(self):
        table = Table(title="Commands", expand=False)
        table.add_column("Command", style="bold cyan")
        table.add_column("Description")
        table.add_row("backup", "Copy a file from the working directory into the backup directory")
        table.add_row("delete", "Remove a file from the working directory")
        table.add_row("restore", "Copy a backup over the working file")
        table.add_row("list", "Show files in both directories")
        table.add_row("quit", "Leave SafeBackup")
        self.console.print(table)

    def show_files(self):
        table = Table(title="Files", expand=False)
        table.add_column("Name")
        table.add_column("Working", justify="center")
        table.add_column("Backup", justify="center")

        working = set(self.engine.list_files("work"))
        backups = set(self.engine.list_files("backup"))
        for name in sorted(working | backups):
            table.add_row(
                name,
                Text("●", style="green") if name in working else Text("-", style="dim"),
                Text("●", style="green") if name in backups else Text("-", style="dim"),
            )
        if not working and not backups:
            table.add_row(Text("(empty)", style="dim"), "", "")
        self.console.print(table)

    def show_record(self, record: OperationRecord):
        icon, style = OUTCOME_STYLES[record.outcome]
        text = Text(f"{icon} {record.kind.value} {ascii(record.filename)}: ", style=style)
        if record.error is not None:
            text.append(f"{record.error.name} - {record.reason}")
        else:
            text.append(record.reason or record.outcome.value)
        self.console.print(text)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def execute(self, command: str, raw_name: str) -> OperationRecord:
        kind = OperationKind(command.lower())
        record = self.engine.run(kind, raw_name, confirm=self.confirm_delete)
        self.show_record(record)
        return record

    def unknown_command(self, command: str):
        self.console.print(Text(f"Unknown command: {ascii(command)}", style="yellow"))
        if self.audit is not None:
            self.audit.note(f"Unknown command attempted: {command!r}")

    def interactive(self) -> int:
        """대화형 모드. 처리한 작업 수를 반환."""
        self.show_banner()
        handled = 0

        while True:
            try:
                command = self.read("\n[bold cyan]Command:[/bold cyan] ").lower()

                if command in QUIT_COMMANDS:
                    self.console.print("[dim]👋 Bye![/dim]")
                    break

                if not command:
                    continue

                if command == "help":
                    self.show_help()
                    continue

                if command == "list":
                    self.show_files()
                    continue

                if command not in {k.value for k in OperationKind}:
                    self.unknown_command(command)
                    continue

                raw_name = self.read("[bold cyan]File name:[/bold cyan] ")
                self.execute(command, raw_name)
                handled += 1

            except (KeyboardInterrupt, EOFError):
                self.console.print("\n[dim]👋 Bye![/dim]")
                break

        return handled
