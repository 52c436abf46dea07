"""User model definitions."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from tutorhub.database import Base


LEARNER_ROLE = 'learner'
PARENT_ROLE = 'parent'
USER_ROLES = (LEARNER_ROLE, PARENT_ROLE)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A learner or parent account. Starts pending until the email is confirmed."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone_number = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=LEARNER_ROLE)  # learner/parent
    confirmed = Column(Boolean, nullable=False, default=False)
    confirmation_token_hash = Column(String, index=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
