from datetime import datetime, timedelta, timezone

import jwt

from tutorhub.core import config

USER_KIND = "user"
TEACHER_KIND = "teacher"
ACCOUNT_KINDS = (USER_KIND, TEACHER_KIND)


def build_subject(kind: str, account_id: int) -> str:
    return f"{kind}:{account_id}"


def parse_subject(subject: str | None) -> tuple[str, int]:
    """Split ``"<kind>:<id>"`` into its parts. Raises ValueError if malformed."""
    if not subject or ":" not in subject:
        raise ValueError("Token subject is missing or malformed")
    kind, _, raw_id = subject.partition(":")
    if kind not in ACCOUNT_KINDS:
        raise ValueError(f"Unknown account kind: {kind}")
    return kind, int(raw_id)


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    now = datetime.now(timezone.utc)
    expire = now + timedelta(minutes=expire_minutes)
    payload = {"sub": subject, "exp": expire, "iat": now}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def create_account_token(kind: str, account_id: int, expires_minutes: int | None = None) -> str:
    return create_access_token(build_subject(kind, account_id), expires_minutes)


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
