from sqlalchemy import Boolean, Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base


class ParentLinkModel(Base):
    __tablename__ = "parent_links"
    __table_args__ = (
        UniqueConstraint(
            "parent_id",
            "student_id",
            name="uq_parent_links_parent_student",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    parent_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    student_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, nullable=False)

    student = relationship("UserModel", foreign_keys=[student_id])
