from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    content: str

    def to_wire(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class Transcript:
    """Ordered conversation history sent on every request.

    Entries are only ever appended; ``clear`` empties the list in place so
    the same object lives for the whole session. Consecutive user entries
    are allowed (a tree listing followed by a file, for example).
    """

    def __init__(self, messages: Optional[List[Message]] = None):
        self._messages: List[Message] = list(messages or [])

    def append(self, role: Role, content: str) -> Message:
        msg = Message(role=role, content=content)
        self._messages.append(msg)
        return msg

    def append_user(self, content: str) -> Message:
        return self.append(Role.USER, content)

    def append_assistant(self, content: str) -> Message:
        return self.append(Role.ASSISTANT, content)

    def clear(self) -> None:
        self._messages.clear()

    def last(self) -> Optional[Message]:
        return self._messages[-1] if self._messages else None

    def to_wire(self) -> List[Dict[str, str]]:
        return [m.to_wire() for m in self._messages]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))

    def __getitem__(self, idx: int) -> Message:
        return self._messages[idx]
