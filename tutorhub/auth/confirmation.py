import hashlib
import hmac
import secrets

TOKEN_BYTES = 20


def fingerprint(secret: str) -> str:
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def issue_confirmation_token() -> tuple[str, str]:
    """Return ``(secret, fingerprint)``. Only the fingerprint may be stored."""
    secret = secrets.token_hex(TOKEN_BYTES)
    return secret, fingerprint(secret)


def matches(secret: str, stored_fingerprint: str | None) -> bool:
    if not secret or not stored_fingerprint:
        return False
    return hmac.compare_digest(fingerprint(secret), stored_fingerprint)
