from fastapi import APIRouter, Depends

from llmrelay.dependencies import get_conversation_service, get_dispatcher
from llmrelay.schemas.conversations import Message, MessageCreate, SendMessageRequest, SendMessageResponse
from llmrelay.services.conversations import ConversationService
from llmrelay.services.dispatch.dispatcher import Dispatcher

router = APIRouter()


@router.post("/send-message")
async def send_message(
    body: SendMessageRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> SendMessageResponse:
    """Relay one chat turn to the chosen provider and record both sides."""
    reply = await dispatcher.dispatch(
        conversation_id=body.conversation_id,
        user_input=body.user_input,
        provider_name=body.provider,
        model=body.model,
        user_id=body.user_id,
    )
    return SendMessageResponse(message=reply)


@router.post("/messages", status_code=201)
async def add_message(
    body: MessageCreate,
    service: ConversationService = Depends(get_conversation_service),
) -> Message:
    """Append a message directly, without calling a provider."""
    return service.add_message(
        body.conversation_id,
        body.message,
        body.role,
        provider=body.provider,
        model=body.model,
    )


@router.get("/messages/{conversation_id}")
async def get_messages(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
) -> list[Message]:
    return service.get_messages(conversation_id)
