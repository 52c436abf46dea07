"""Password hashing for user and teacher accounts.

Hashes are salted ``pbkdf2_sha256`` produced by passlib. Workflows call
:func:`apply_password` explicitly before persisting an account; it only
re-hashes when the plaintext differs from what is already stored.
"""
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        # Stored value is not a hash passlib recognises.
        return False


def verify_account_password(account, plain: str) -> bool:
    """Check ``plain`` against ``account``, spending the same hashing work when it is None."""
    if account is None:
        pwd_context.dummy_verify()
        return False
    return verify_password(plain, account.hashed_password)


def apply_password(account, plain: str | None) -> bool:
    """Set ``account.hashed_password`` from ``plain`` if it changed.

    Returns True when a new hash was written.
    """
    if plain is None:
        return False
    if account.hashed_password and verify_password(plain, account.hashed_password):
        return False
    account.hashed_password = hash_password(plain)
    return True
