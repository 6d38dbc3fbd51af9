from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class ChatToolError(Exception):
    """Base class for errors reported to the user as plain text."""


class ConfigurationMissing(ChatToolError):
    """Startup cannot continue (no credential)."""


class PathInvalid(ChatToolError):
    def __init__(self, path: PathLike):
        self.path = path
        super().__init__(f"Folder not found: {path}")


class ArtifactError(ChatToolError):
    """An artifact could not be turned into a transcript entry."""


class ArtifactNotFound(ArtifactError):
    def __init__(self, path: PathLike):
        self.path = path
        super().__init__(f"File not found: {path}")


class ArtifactTooLarge(ArtifactError):
    def __init__(self, path: PathLike, size: int):
        self.path = path
        self.size = size
        super().__init__(f"File too large to send ({size} bytes). Consider sending a smaller snippet.")


class ArtifactBinaryRejected(ArtifactError):
    def __init__(self, path: PathLike, ext: str):
        self.path = path
        self.ext = ext
        super().__init__(f"Refusing to send binary file type: {ext}")


class ArtifactUnreadable(ArtifactError):
    def __init__(self, path: PathLike, reason: str):
        self.path = path
        super().__init__(f"Failed reading file: {reason}")


class SpreadsheetUnreadable(ArtifactError):
    def __init__(self, path: PathLike, reason: str):
        self.path = path
        super().__init__(f"Could not read workbook {path}: {reason}")
