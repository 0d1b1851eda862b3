from fastapi import APIRouter, Depends, Query

from llmrelay.dependencies import get_conversation_service
from llmrelay.schemas.conversations import Conversation, ConversationCreate, ConversationUpdate
from llmrelay.services.conversations import ConversationService

router = APIRouter()


@router.get("/conversations")
async def list_conversations(
    user_id: str | None = Query(None, alias="userId"),
    service: ConversationService = Depends(get_conversation_service),
) -> list[Conversation]:
    """List conversations, optionally only those owned by one user."""
    return service.list_conversations(user_id=user_id)


@router.post("/conversations", status_code=201)
async def create_conversation(
    body: ConversationCreate,
    service: ConversationService = Depends(get_conversation_service),
) -> Conversation:
    return service.create_conversation(body)


@router.get("/conversations/{conversation_id}")
async def get_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
) -> Conversation:
    return service.get_conversation(conversation_id)


@router.put("/conversations/{conversation_id}")
async def update_conversation(
    conversation_id: str,
    body: ConversationUpdate,
    service: ConversationService = Depends(get_conversation_service),
) -> Conversation:
    """Update conversation title."""
    return service.update_conversation(conversation_id, body)


@router.delete("/conversations/{conversation_id}", status_code=204)
async def delete_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
) -> None:
    """Delete a conversation and all its messages."""
    service.delete_conversation(conversation_id)
