from sqlalchemy import Boolean, Column, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base


class MessageModel(Base):
    __tablename__ = "messages"

    message_id = Column(String, primary_key=True, index=True)
    sender_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    receiver_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    content = Column(Text, nullable=False)
    file_url = Column(String, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, nullable=False, index=True)

    sender = relationship("UserModel", foreign_keys=[sender_id])
    receiver = relationship("UserModel", foreign_keys=[receiver_id])
