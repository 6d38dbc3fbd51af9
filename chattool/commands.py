import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from rich.console import Console
from rich.table import Table
from rich.text import Text

from chattool.api_client import CompletionClient
from chattool.config_loader import DEFAULT_CONFIG, SessionConfig
from chattool.context_harvest import build_file_listing, tree_message
from chattool.errors import ArtifactError, ArtifactNotFound, PathInvalid
from chattool.file_utils import code_review_message, file_message, ingest_file
from chattool.spreadsheet import spreadsheet_message, summarize_workbook
from chattool.transcript import Transcript

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Exit:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class SetRoot:
    path: str


@dataclass(frozen=True)
class ShowTree:
    max_files: int


@dataclass(frozen=True)
class SendFile:
    path: str


@dataclass(frozen=True)
class SendRelativeFile:
    rel_path: str


@dataclass(frozen=True)
class SummarizeSpreadsheet:
    path: str


@dataclass(frozen=True)
class PasteCode:
    pass


@dataclass(frozen=True)
class FreeText:
    text: str


Command = Union[
    Exit, Reset, Help, SetRoot, ShowTree, SendFile, SendRelativeFile,
    SummarizeSpreadsheet, PasteCode, FreeText,
]

COMMANDS: List[Tuple[str, str]] = [
    ("/exit", "quit"),
    ("/reset", "clear conversation"),
    ("/help", "show commands"),
    ("/solution <path>", "set repo/solution root folder"),
    ("/tree [maxFiles]", "show a quick file list from root"),
    ("/file <absolutePath>", "send a file"),
    ("/open <relativePathFromRoot>", "send a file relative to root"),
    ("/excel <path>", "summarize a workbook and ask for a reader program"),
    ("/code", "paste multi-line code (end with a single line: END)"),
]


def get_slash_commands() -> List[str]:
    return [usage.split()[0] for usage, _ in COMMANDS]


def _arg(line: str, prefix: str) -> str:
    return line[len(prefix):].strip().strip('"')


def parse_command(line: Optional[str], default_tree_max: int = 80) -> Optional[Command]:
    """Classify one input line. Blank input gives None."""
    if line is None or not line.strip():
        return None
    lowered = line.lower()
    if lowered == "/exit":
        return Exit()
    if lowered == "/reset":
        return Reset()
    if lowered == "/help":
        return Help()
    if lowered.startswith("/solution "):
        return SetRoot(_arg(line, "/solution "))
    if lowered.startswith("/tree"):
        max_files = default_tree_max
        parts = line.split()
        if len(parts) >= 2:
            try:
                parsed = int(parts[1])
            except ValueError:
                parsed = 0
            if parsed > 0:
                max_files = parsed
        return ShowTree(max_files)
    if lowered.startswith("/excel "):
        return SummarizeSpreadsheet(_arg(line, "/excel "))
    if lowered.startswith("/file "):
        return SendFile(_arg(line, "/file "))
    if lowered.startswith("/open "):
        return SendRelativeFile(_arg(line, "/open "))
    if lowered == "/code":
        return PasteCode()
    return FreeText(line)


class Dispatcher:
    """Executes parsed commands against a session's config and transcript."""

    def __init__(
        self,
        client: CompletionClient,
        settings: Optional[Dict[str, Any]] = None,
        console: Optional[Console] = None,
        read_line: Optional[Callable[[str], str]] = None,
    ):
        self.client = client
        chat = dict(DEFAULT_CONFIG["chat"])
        chat.update((settings or {}).get("chat", {}) or {})
        self.chat = chat
        self.console = console or Console()
        self.read_line = read_line or input

    def _say(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def dispatch(self, config: SessionConfig, transcript: Transcript, line: Optional[str]) -> bool:
        """Handle one input line. Returns False when the session should end."""
        cmd = parse_command(line, default_tree_max=int(self.chat["tree_max_files"]))
        if cmd is None:
            return True
        logger.info("command kind=%s", type(cmd).__name__)
        return self.execute(config, transcript, cmd)

    def execute(self, config: SessionConfig, transcript: Transcript, cmd: Command) -> bool:
        if isinstance(cmd, Exit):
            return False
        if isinstance(cmd, Reset):
            transcript.clear()
            self._say("Conversation cleared.")
            return True
        if isinstance(cmd, Help):
            self.print_help()
            return True
        if isinstance(cmd, SetRoot):
            try:
                root = config.set_root(cmd.path)
            except PathInvalid as e:
                logger.info("root_rejected path=%s", cmd.path)
                self._say(str(e))
                return True
            logger.info("root_set path=%s", root)
            self._say(f"Root folder set to: {root}")
            return True
        if isinstance(cmd, ShowTree):
            listing = build_file_listing(config.root, cmd.max_files)
            self._say(listing)
            self.send(transcript, tree_message(config.root, listing))
            return True
        if isinstance(cmd, (SendFile, SendRelativeFile)):
            if isinstance(cmd, SendFile):
                path = Path(cmd.path)
            else:
                path = config.root / cmd.rel_path
            try:
                block = ingest_file(path)
            except ArtifactError as e:
                logger.info("file_rejected path=%s reason=%s", path, type(e).__name__)
                self._say(f"ERROR: {e}")
                return True
            self.send(transcript, file_message(path, block))
            return True
        if isinstance(cmd, SummarizeSpreadsheet):
            try:
                summary = summarize_workbook(cmd.path, max_rows=int(self.chat["spreadsheet_max_rows"]))
            except ArtifactNotFound as e:
                self._say(str(e))
                return True
            except ArtifactError as e:
                logger.info("workbook_rejected path=%s", cmd.path)
                self._say(f"ERROR: {e}")
                return True
            self.send(transcript, spreadsheet_message(summary))
            return True
        if isinstance(cmd, PasteCode):
            code = self.read_paste()
            self.send(transcript, code_review_message(code, language=str(self.chat["paste_language"])))
            return True
        if isinstance(cmd, FreeText):
            self.send(transcript, cmd.text)
            return True
        raise TypeError(f"unknown command: {cmd!r}")

    def read_paste(self) -> str:
        terminator = str(self.chat["paste_terminator"])
        self._say(f"Paste your code now. Type {terminator} on its own line to finish:")
        lines: List[str] = []
        while True:
            try:
                line = self.read_line("")
            except EOFError:
                break
            if line.strip().lower() == terminator.lower():
                break
            lines.append(line + "\n")
        return "".join(lines)

    def send(self, transcript: Transcript, content: str) -> str:
        transcript.append_user(content)
        with self.console.status("Waiting for reply..."):
            reply = self.client.complete(transcript)
        self._say(f"\n{self.chat['assistant_label']}: {reply}")
        transcript.append_assistant(reply)
        return reply

    def print_help(self) -> None:
        table = Table(title="Commands", show_header=True, header_style="cyan")
        table.add_column("command", style="white")
        table.add_column("description", style="dim")
        for usage, desc in COMMANDS:
            table.add_row(Text(usage), Text(desc))
        self.console.print(table)
