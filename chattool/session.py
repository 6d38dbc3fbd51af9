import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from rich.console import Console

from chattool.commands import COMMANDS, Dispatcher, get_slash_commands
from chattool.config_loader import SessionConfig
from chattool.transcript import Transcript

logger = logging.getLogger(__name__)

PROMPT = "\nYou: "


def setup_readline(cfg: Dict[str, Any], slash_commands: List[str]) -> Tuple[Optional[object], Optional[Path]]:
    try:
        import readline as _readline
    except ImportError:
        return None, None

    def completer(text: str, state: int) -> Optional[str]:
        buffer = _readline.get_line_buffer()
        if not buffer.startswith("/") or " " in buffer:
            return None
        matches = [c for c in slash_commands if c.startswith(buffer.lower())]
        if state < len(matches):
            return matches[state]
        return None

    _readline.set_completer(completer)
    _readline.parse_and_bind("tab: complete")
    _readline.parse_and_bind("set completion-ignore-case on")

    history_path = None
    try:
        logs_dir = Path(cfg.get("data_paths", {}).get("logs", "logs"))
        logs_dir.mkdir(parents=True, exist_ok=True)
        history_path = logs_dir / "chat_history.txt"
        if history_path.exists():
            _readline.read_history_file(str(history_path))
        _readline.set_history_length(1000)
    except OSError:
        history_path = None
    return _readline, history_path


def save_history(readline_mod: Optional[object], history_path: Optional[Path]) -> None:
    if not readline_mod or not history_path:
        return
    try:
        readline_mod.write_history_file(str(history_path))
    except OSError as e:
        logger.warning("history_save_failed path=%s error=%s", history_path, e)


def print_banner(console: Console, root: Path) -> None:
    console.print("Claude Chat Tool (Console)", style="bold cyan")
    console.print("Commands:", markup=False)
    for usage, desc in COMMANDS:
        console.print(f"  {usage:<30}{desc}", markup=False, highlight=False, soft_wrap=True)
    console.print()
    console.print(f"Root folder: {root}", markup=False, highlight=False, soft_wrap=True)


def run_session(
    config: SessionConfig,
    dispatcher: Dispatcher,
    read_line: Optional[Callable[[str], str]] = None,
    transcript: Optional[Transcript] = None,
) -> Transcript:
    """Read and dispatch lines until /exit, EOF or Ctrl-C. Returns the transcript."""
    read_line = read_line or dispatcher.read_line
    transcript = transcript if transcript is not None else Transcript()
    console = dispatcher.console
    print_banner(console, config.root)
    logger.info("session_start root=%s", config.root)
    reason = "exit"
    while True:
        try:
            line = read_line(PROMPT)
        except (EOFError, KeyboardInterrupt):
            console.print("\nGoodbye.")
            reason = "eof"
            break
        if not dispatcher.dispatch(config, transcript, line):
            console.print("Goodbye.")
            break
    logger.info("session_end reason=%s messages=%d", reason, len(transcript))
    return transcript


def start_chat(cfg: Dict[str, Any], config: SessionConfig, dispatcher: Dispatcher) -> int:
    readline_mod, history_path = setup_readline(cfg, get_slash_commands())
    try:
        run_session(config, dispatcher)
    finally:
        save_history(readline_mod, history_path)
    return 0
