"""Direct message routes.

Any authenticated user may message any other user; only the two participants
can read a message.
"""

from typing import Optional

from fastapi import APIRouter

from core.authorization import Action, ResourceFacts, authorize
from core.dependencies import (
    IdentityDep,
    MessageManagerDep,
    RelationshipStoreDep,
    enforce,
)
from schemas.message import (
    Conversation,
    ConversationListResponse,
    Message,
    MessageListResponse,
    Participant,
    SendMessageRequest,
)

router = APIRouter(prefix="/api", tags=["Messages"])


@router.post("/messages", response_model=Message, summary="Send a message")
def send_message(
    req: SendMessageRequest,
    message_manager: MessageManagerDep,
    relationships: RelationshipStoreDep,
    identity: IdentityDep,
) -> Message:
    # The caller is always the sender
    facts = ResourceFacts(
        exists=relationships.user_exists(req.receiver_id),
        is_participant=True,
    )
    enforce(authorize(identity, Action.SEND_MESSAGE, facts))

    model = message_manager.send(
        sender_id=identity.user_id,
        receiver_id=req.receiver_id,
        content=req.content,
        file_url=req.file_url,
    )
    return Message.model_validate(model)


@router.get("/messages", response_model=MessageListResponse, summary="List messages")
def list_messages(
    message_manager: MessageManagerDep,
    identity: IdentityDep,
    user_id: Optional[str] = None,
) -> MessageListResponse:
    """List the caller's messages.

    With ``user_id``, returns the conversation with that user oldest first;
    otherwise every message the caller sent or received, newest first. Both
    queries are restricted to messages the caller participates in.
    """
    if user_id:
        models = message_manager.conversation(identity.user_id, user_id)
    else:
        models = message_manager.list_for_user(identity.user_id)
    return MessageListResponse(messages=[Message.model_validate(m) for m in models])


@router.get("/messages/{message_id}", response_model=Message, summary="Get a message")
def get_message(
    message_id: str,
    message_manager: MessageManagerDep,
    identity: IdentityDep,
) -> Message:
    model = message_manager.find(message_id)
    facts = ResourceFacts(
        exists=model is not None,
        is_participant=model is not None
        and identity.user_id in (model.sender_id, model.receiver_id),
    )
    enforce(authorize(identity, Action.READ_MESSAGE, facts), conceal="Message")
    return Message.model_validate(message_manager.get(message_id))


@router.patch("/messages/{message_id}/read", response_model=Message, summary="Mark as read")
def mark_message_read(
    message_id: str,
    message_manager: MessageManagerDep,
    identity: IdentityDep,
) -> Message:
    model = message_manager.find(message_id)
    facts = ResourceFacts(
        exists=model is not None,
        is_owner=model is not None and model.receiver_id == identity.user_id,
    )
    enforce(authorize(identity, Action.MARK_MESSAGE_READ, facts), conceal="Message")
    return Message.model_validate(message_manager.mark_read(message_id))


@router.get(
    "/conversations",
    response_model=ConversationListResponse,
    summary="Latest message per conversation",
)
def list_conversations(
    message_manager: MessageManagerDep,
    identity: IdentityDep,
) -> ConversationListResponse:
    conversations = [
        Conversation(
            message_id=c["message_id"],
            other_user=Participant.model_validate(c["other_user"]),
            last_message=c["last_message"],
            file_url=c["file_url"],
            timestamp=c["timestamp"],
            unread=c["unread"],
        )
        for c in message_manager.conversations(identity.user_id)
    ]
    return ConversationListResponse(conversations=conversations)
