"""Persistence for user and teacher accounts.

The store wraps a SQLAlchemy session handed in by the caller; route
handlers get one per request through :func:`get_store`.
"""

import logging
from typing import Callable, TypeVar

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tutorhub.core.errors import ConflictError, DatabaseUnavailableError
from tutorhub.database import MAX_ID, MIN_ID, Base, get_db
from tutorhub.models.user import User

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=Base)
T = TypeVar('T')


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_email(self, model: type[ModelT], email: str) -> ModelT | None:
        return self._read(
            lambda: self.db.query(model).filter(model.email == normalize_email(email)).first()
        )

    def find_by_id(self, model: type[ModelT], account_id: int) -> ModelT | None:
        # Ids outside the integer key range cannot exist.
        if not MIN_ID <= account_id <= MAX_ID:
            return None
        return self._read(lambda: self.db.get(model, account_id))

    def find_by_confirmation_fingerprint(self, fingerprint: str) -> User | None:
        return self._read(
            lambda: self.db.query(User)
            .filter(
                User.confirmation_token_hash == fingerprint,
                User.confirmed.is_(False),
            )
            .first()
        )

    def list_all(self, model: type[ModelT]) -> list[ModelT]:
        return self._read(lambda: self.db.query(model).order_by(model.id).all())

    def create(self, model: type[ModelT], conflict_detail: str | None = None, **fields) -> ModelT:
        if 'email' in fields:
            fields['email'] = normalize_email(fields['email'])
        account = model(**fields)
        self.db.add(account)
        self._commit(conflict_detail or f'{model.__name__} already exists')
        self._read(lambda: self.db.refresh(account))
        return account

    def save(self, account: ModelT, conflict_detail: str | None = None) -> ModelT:
        """Persist attributes changed on ``account`` since it was loaded."""
        if getattr(account, 'email', None):
            account.email = normalize_email(account.email)
        self.db.add(account)
        self._commit(conflict_detail or f'{type(account).__name__} already exists')
        self._read(lambda: self.db.refresh(account))
        return account

    def _read(self, query: Callable[[], T]) -> T:
        try:
            return query()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Database read failed')
            raise DatabaseUnavailableError() from exc

    def _commit(self, conflict_detail: str) -> None:
        # The unique index on email decides races between concurrent creates.
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info('Unique constraint rejected write: %s', conflict_detail)
            raise ConflictError(conflict_detail) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception('Database write failed')
            raise DatabaseUnavailableError() from exc


def get_store(db: Session = Depends(get_db)) -> AccountStore:
    return AccountStore(db)
