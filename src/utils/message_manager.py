"""Direct messages between users."""

import logging
import uuid
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import or_, and_
from sqlalchemy.orm import Session, joinedload

from core.exceptions import MessageNotFoundError
from models.message import MessageModel

logger = logging.getLogger(__name__)


class MessageManager:
    """Manages message persistence using SQLAlchemy."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(MessageModel).options(
            joinedload(MessageModel.sender), joinedload(MessageModel.receiver)
        )

    def send(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        file_url: Optional[str] = None,
    ) -> MessageModel:
        model = MessageModel(
            message_id=str(uuid.uuid4()),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            file_url=file_url,
            read=False,
            created_at=datetime.now(pytz.utc).isoformat(),
        )
        self.db.add(model)
        self.db.commit()
        logger.info("Message %s sent from %s to %s", model.message_id, sender_id, receiver_id)
        return self.get(model.message_id)

    def get(self, message_id: str) -> MessageModel:
        model = self._query().filter(MessageModel.message_id == message_id).first()
        if model is None:
            raise MessageNotFoundError(message_id)
        return model

    def find(self, message_id: str) -> Optional[MessageModel]:
        return (
            self.db.query(MessageModel)
            .filter(MessageModel.message_id == message_id)
            .first()
        )

    def conversation(self, user_id: str, other_user_id: str) -> List[MessageModel]:
        """Messages between two users, oldest first."""
        return (
            self._query()
            .filter(
                or_(
                    and_(
                        MessageModel.sender_id == user_id,
                        MessageModel.receiver_id == other_user_id,
                    ),
                    and_(
                        MessageModel.sender_id == other_user_id,
                        MessageModel.receiver_id == user_id,
                    ),
                )
            )
            .order_by(MessageModel.created_at.asc())
            .all()
        )

    def list_for_user(self, user_id: str) -> List[MessageModel]:
        """Every message the user sent or received, newest first."""
        return (
            self._query()
            .filter(
                or_(MessageModel.sender_id == user_id, MessageModel.receiver_id == user_id)
            )
            .order_by(MessageModel.created_at.desc())
            .all()
        )

    def conversations(self, user_id: str) -> List[dict]:
        """Latest message per counterpart, newest conversation first."""
        latest = {}
        for message in self.list_for_user(user_id):
            other = message.receiver if message.sender_id == user_id else message.sender
            # list_for_user is newest first, so the first hit is the latest
            if other.user_id not in latest:
                latest[other.user_id] = {
                    "message_id": message.message_id,
                    "other_user": other,
                    "last_message": message.content,
                    "file_url": message.file_url,
                    "timestamp": message.created_at,
                    "unread": message.receiver_id == user_id and not message.read,
                }
        return list(latest.values())

    def mark_read(self, message_id: str) -> MessageModel:
        model = self.get(message_id)
        if not model.read:
            model.read = True
            self.db.commit()
        return model
