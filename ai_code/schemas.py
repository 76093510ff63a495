from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    # forwarded upstream as-is, so unknown keys must survive validation
    model_config = ConfigDict(extra="allow")

    role: str
    content: Any  # plain text or a list of content parts


class ChatRequest(BaseModel):
    mode: Any = None  # unknown, missing or non-string -> "code"
    messages: list[ChatMessage] = Field(default_factory=list)

    def upstream_messages(self) -> list[dict]:
        return [message.model_dump() for message in self.messages]


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
