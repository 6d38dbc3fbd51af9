import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Union

from chattool.errors import (
    ArtifactBinaryRejected,
    ArtifactNotFound,
    ArtifactTooLarge,
    ArtifactUnreadable,
)

logger = logging.getLogger(__name__)

MAX_SEND_BYTES = 300_000
BINARY_EXTS = {".dll", ".exe", ".png", ".jpg", ".jpeg", ".gif", ".zip", ".pdf"}

LANGUAGE_HINTS: Dict[str, str] = {
    ".cs": "csharp",
    ".json": "json",
    ".xml": "xml",
    ".csproj": "xml",
    ".sln": "",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".md": "markdown",
    ".yml": "yaml",
    ".yaml": "yaml",
    ".sh": "bash",
    ".sql": "sql",
    ".html": "html",
    ".css": "css",
}


@dataclass(frozen=True)
class ArtifactBlock:
    label: str
    language_hint: str
    body: str

    def render(self) -> str:
        return f"```{self.language_hint}\n{self.body}\n```"


def language_hint_for(path: Path) -> str:
    return LANGUAGE_HINTS.get(path.suffix.lower(), "")


def decode_text(data: bytes) -> str:
    """Decode file bytes, honouring a UTF-8 or UTF-16 byte order mark.

    The mark itself is dropped. Without one the bytes are read as UTF-8 and
    invalid sequences become U+FFFD.
    """
    if data.startswith(codecs.BOM_UTF8):
        return data.decode("utf-8-sig", errors="replace")
    if data.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return data.decode("utf-16", errors="replace")
    return data.decode("utf-8", errors="replace")


def ingest_file(path: Union[str, Path], max_bytes: int = MAX_SEND_BYTES) -> ArtifactBlock:
    """Read ``path`` into an :class:`ArtifactBlock`.

    Checks run in a fixed order: existence, size, extension. The body is the
    file text exactly as stored (no newline translation, no truncation)
    apart from a leading byte order mark.
    """
    path = Path(path)
    try:
        if not path.is_file():
            raise ArtifactNotFound(path)
        size = path.stat().st_size
    except OSError as exc:
        raise ArtifactUnreadable(path, str(exc)) from exc
    if size > max_bytes:
        raise ArtifactTooLarge(path, size)
    ext = path.suffix.lower()
    if ext in BINARY_EXTS:
        raise ArtifactBinaryRejected(path, ext)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ArtifactUnreadable(path, str(exc)) from exc
    text = decode_text(data)
    logger.info("file_ingested path=%s bytes=%d", path, size)
    return ArtifactBlock(label=path.name, language_hint=language_hint_for(path), body=text)


def file_message(path: Union[str, Path], block: ArtifactBlock) -> str:
    return f"Here is the file `{block.label}` from `{path}`:\n\n{block.render()}"


def code_review_message(code: str, language: str = "csharp") -> str:
    block = ArtifactBlock(label="pasted code", language_hint=language, body=code)
    return f"Please review this code and help me improve/fix it:\n\n{block.render()}"
