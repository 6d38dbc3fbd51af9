from typing import List, Optional

from pydantic import BaseModel, Field


class WireMessage(BaseModel):
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class MessagesRequest(BaseModel):
    model: str
    max_tokens: int = Field(..., ge=1)
    messages: List[WireMessage] = Field(default_factory=list)


class ContentBlock(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None


class MessagesResponse(BaseModel):
    id: Optional[str] = None
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    content: List[ContentBlock] = Field(default_factory=list)

    def first_text(self) -> Optional[str]:
        if not self.content:
            return None
        return self.content[0].text
