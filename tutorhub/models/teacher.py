"""Teacher and review model definitions."""

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from tutorhub.database import Base
from tutorhub.models.user import _utcnow


class Teacher(Base):
    """A tutor offering lessons. Active as soon as it is registered."""
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone_number = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    subjects = Column(JSON, nullable=False, default=list)
    location = Column(String, nullable=True)
    availability = Column(JSON, nullable=False, default=list)
    hourly_rate = Column(Float, nullable=True)
    qualifications = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    reviews = relationship(
        "Review",
        back_populates="teacher",
        order_by="Review.id",
        lazy="selectin",
    )


class Review(Base):
    """A rating left on a teacher by a user account."""
    __tablename__ = "teacher_reviews"
    __table_args__ = (UniqueConstraint("teacher_id", "reviewer_id", name="uq_review_teacher_reviewer"),)

    id = Column(Integer, primary_key=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    teacher = relationship("Teacher", back_populates="reviews")
