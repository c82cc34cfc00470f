"""Direct message schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    receiver_id: str = Field(min_length=1)
    content: str = Field(min_length=1)
    file_url: Optional[str] = None


class Participant(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    role: str


class Message(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    message_id: str
    sender_id: str
    receiver_id: str
    content: str
    file_url: Optional[str] = None
    read: bool
    created_at: str
    sender: Optional[Participant] = None
    receiver: Optional[Participant] = None


class MessageListResponse(BaseModel):
    messages: List[Message]


class Conversation(BaseModel):
    """Latest message exchanged with one counterpart."""

    message_id: str
    other_user: Participant
    last_message: str
    file_url: Optional[str] = None
    timestamp: str
    unread: bool


class ConversationListResponse(BaseModel):
    conversations: List[Conversation]
