from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base


class StudentClassModel(Base):
    __tablename__ = "student_classes"
    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "class_id",
            name="uq_student_classes_student_class",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    class_id = Column(
        String, ForeignKey("classes.class_id", ondelete="CASCADE"), index=True, nullable=False
    )
    created_at = Column(String, nullable=False)

    class_ = relationship("ClassModel", back_populates="enrollments")
    student = relationship("UserModel")
