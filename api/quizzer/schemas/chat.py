from pydantic import BaseModel, Field


class InboundFrame(BaseModel):
    role: str = Field(min_length=1)  # "meta" or "user"; anything else is not handled
    content: str


class AssistantFrame(BaseModel):
    role: str = "assistant"
    content: str
    id: int  # random tag, not guaranteed unique


class ErrorFrame(BaseModel):
    role: str = "error"
    kind: str
    message: str
