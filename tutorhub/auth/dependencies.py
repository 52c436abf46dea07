from dataclasses import dataclass

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tutorhub.auth import jwt_handler
from tutorhub.core.errors import UnauthorizedError
from tutorhub.models.teacher import Teacher
from tutorhub.models.user import User
from tutorhub.services.account_store import AccountStore, get_store

# auto_error=False so a missing header is reported as 401 "no token"
# rather than FastAPI's default 403.
security = HTTPBearer(auto_error=False)

ACCOUNT_MODELS = {
    jwt_handler.USER_KIND: User,
    jwt_handler.TEACHER_KIND: Teacher,
}


@dataclass
class CurrentAccount:
    kind: str
    account: User | Teacher


def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    store: AccountStore = Depends(get_store),
) -> CurrentAccount:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authorized, no token")

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
        kind, account_id = jwt_handler.parse_subject(payload.get("sub"))
    except (jwt.PyJWTError, ValueError) as exc:
        raise UnauthorizedError("Not authorized, token failed") from exc

    account = store.find_by_id(ACCOUNT_MODELS[kind], account_id)
    if account is None:
        raise UnauthorizedError("Not authorized, account not found")
    return CurrentAccount(kind=kind, account=account)


def get_current_user(current: CurrentAccount = Depends(get_current_account)) -> User:
    if current.kind != jwt_handler.USER_KIND:
        raise UnauthorizedError("Not authorized, token failed")
    return current.account


def get_current_teacher(current: CurrentAccount = Depends(get_current_account)) -> Teacher:
    if current.kind != jwt_handler.TEACHER_KIND:
        raise UnauthorizedError("Not authorized, token failed")
    return current.account
