import time
import uuid

import structlog

from llmrelay.core.exceptions import ConversationNotFoundError
from llmrelay.core.store import CONVERSATIONS, MESSAGES, RecordStore
from llmrelay.schemas.conversations import (
    Conversation,
    ConversationCreate,
    ConversationUpdate,
    Message,
    MessageRole,
)

logger = structlog.get_logger()


def _now_ms() -> int:
    return int(time.time() * 1000)


class ConversationService:
    def __init__(self, store: RecordStore):
        self._store = store

    def list_conversations(self, user_id: str | None = None) -> list[Conversation]:
        records = self._store.load(CONVERSATIONS)
        if user_id is not None:
            records = [r for r in records if r.get("userId") == user_id]
        return [Conversation.model_validate(r) for r in records]

    def create_conversation(self, data: ConversationCreate) -> Conversation:
        conv = Conversation(
            id=str(uuid.uuid4()),
            title=data.title,
            user_id=data.user_id,
            timestamp=_now_ms(),
        )
        with self._store.transaction(CONVERSATIONS) as records:
            records.append(conv.to_record())
        logger.info("conversation_created", conversation_id=conv.id, user_id=conv.user_id)
        return conv

    def find_conversation(self, conversation_id: str) -> Conversation | None:
        for record in self._store.load(CONVERSATIONS):
            if record.get("id") == conversation_id:
                return Conversation.model_validate(record)
        return None

    def get_conversation(self, conversation_id: str) -> Conversation:
        conv = self.find_conversation(conversation_id)
        if conv is None:
            raise ConversationNotFoundError(conversation_id)
        return conv

    def update_conversation(self, conversation_id: str, data: ConversationUpdate) -> Conversation:
        with self._store.transaction(CONVERSATIONS) as records:
            for index, record in enumerate(records):
                if record.get("id") != conversation_id:
                    continue
                conv = Conversation.model_validate(record)
                if data.title is not None:
                    conv = conv.model_copy(update={"title": data.title})
                records[index] = conv.to_record()
                break
            else:
                raise ConversationNotFoundError(conversation_id)

        logger.info("conversation_updated", conversation_id=conversation_id)
        return conv

    def delete_conversation(self, conversation_id: str) -> None:
        """Delete a conversation and all of its messages."""
        with self._store.transaction(CONVERSATIONS) as records:
            remaining = [r for r in records if r.get("id") != conversation_id]
            if len(remaining) == len(records):
                raise ConversationNotFoundError(conversation_id)
            records[:] = remaining

        with self._store.transaction(MESSAGES) as messages:
            messages[:] = [m for m in messages if m.get("conversationId") != conversation_id]
        logger.info("conversation_deleted", conversation_id=conversation_id)

    def add_message(
        self,
        conversation_id: str,
        content: str,
        role: MessageRole,
        provider: str | None = None,
        model: str | None = None,
    ) -> Message:
        """Append a message. The conversation must already exist."""
        if self.find_conversation(conversation_id) is None:
            logger.warning("conversation_not_found", conversation_id=conversation_id)
            raise ConversationNotFoundError(conversation_id)

        msg = Message(
            id=str(uuid.uuid4()),
            conversation_id=conversation_id,
            content=content,
            role=role,
            provider=provider,
            model=model,
            timestamp=_now_ms(),
        )
        with self._store.transaction(MESSAGES) as records:
            records.append(msg.to_record())
        logger.info("message_added", conversation_id=conversation_id, message_id=msg.id, role=role)
        return msg

    def get_messages(self, conversation_id: str) -> list[Message]:
        """Messages of a conversation in insertion order."""
        messages = [
            Message.model_validate(r)
            for r in self._store.load(MESSAGES)
            if r.get("conversationId") == conversation_id
        ]
        logger.debug("messages_fetched", conversation_id=conversation_id, count=len(messages))
        return messages
