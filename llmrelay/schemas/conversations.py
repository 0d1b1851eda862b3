from typing import Literal

from pydantic import Field

from llmrelay.schemas.base import RecordModel

MessageRole = Literal["user", "assistant"]


class Conversation(RecordModel):
    id: str
    title: str
    user_id: str
    timestamp: int  # creation time, Unix epoch ms


class ConversationCreate(RecordModel):
    title: str = "New Conversation"
    user_id: str = Field(min_length=1)


class ConversationUpdate(RecordModel):
    title: str | None = None


class Message(RecordModel):
    id: str
    conversation_id: str
    content: str
    role: MessageRole
    provider: str | None = None
    model: str | None = None
    timestamp: int  # Unix epoch ms


class MessageCreate(RecordModel):
    conversation_id: str = Field(min_length=1)
    message: str = Field(min_length=1)
    role: MessageRole
    provider: str | None = None
    model: str | None = None


class SendMessageRequest(RecordModel):
    conversation_id: str = Field(min_length=1)
    user_input: str = Field(min_length=1)
    provider: str = Field(min_length=1)
    model: str = Field(min_length=1)
    user_id: str = Field(min_length=1)


class SendMessageResponse(RecordModel):
    message: str
