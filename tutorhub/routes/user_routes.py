import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, EmailStr, field_validator

from tutorhub.auth import confirmation, jwt_handler
from tutorhub.auth.dependencies import get_current_user
from tutorhub.auth.passwords import hash_password, verify_account_password
from tutorhub.core import config
from tutorhub.core.errors import (
    AccountNotConfirmedError,
    ConflictError,
    InvalidOrExpiredTokenError,
    UnauthorizedError,
)
from tutorhub.models.user import LEARNER_ROLE, USER_ROLES, User
from tutorhub.services import mailer
from tutorhub.services.account_store import AccountStore, get_store

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
INVALID_CREDENTIALS = 'Invalid email or password'
REGISTRATION_MESSAGE = 'Registration successful. Please check your email to confirm your account.'


def normalize_email_value(value: str) -> str:
    return value.strip().lower()


def validate_required_text(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('This field is required.')
    return normalized


class RegisterUserRequest(BaseModel):
    full_name: str
    email: EmailStr
    phone_number: str
    password: str
    role: str = LEARNER_ROLE

    @field_validator('full_name', 'phone_number')
    @classmethod
    def validate_text(cls, value: str) -> str:
        return validate_required_text(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email_value(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in USER_ROLES:
            raise ValueError('Role must be either learner or parent.')
        return normalized


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return normalize_email_value(value)


class UserResponse(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    role: str
    confirmed: bool

    class Config:
        from_attributes = True


class RegisterUserResponse(UserResponse):
    message: str


class LoginUserResponse(UserResponse):
    token: str


class MessageResponse(BaseModel):
    message: str


@router.post('/register', response_model=RegisterUserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    data: RegisterUserRequest,
    background_tasks: BackgroundTasks,
    store: AccountStore = Depends(get_store),
):
    if store.find_by_email(User, data.email):
        raise ConflictError('User already exists')

    secret, fingerprint = confirmation.issue_confirmation_token()
    user = store.create(
        User,
        conflict_detail='User already exists',
        full_name=data.full_name,
        email=data.email,
        phone_number=data.phone_number,
        hashed_password=hash_password(data.password),
        role=data.role,
        confirmed=False,
        confirmation_token_hash=fingerprint,
    )
    logger.info('Registered %s account %s', user.role, user.id)

    background_tasks.add_task(
        mailer.dispatch_confirmation_email,
        user.email,
        user.full_name,
        config.confirmation_link(secret),
    )

    return RegisterUserResponse(
        **UserResponse.model_validate(user).model_dump(),
        message=REGISTRATION_MESSAGE,
    )


@router.post('/login', response_model=LoginUserResponse)
def login_user(data: LoginRequest, store: AccountStore = Depends(get_store)):
    user = store.find_by_email(User, data.email)
    if not verify_account_password(user, data.password):
        logger.info('Failed user login attempt')
        raise UnauthorizedError(INVALID_CREDENTIALS)

    if not user.confirmed:
        raise AccountNotConfirmedError()

    token = jwt_handler.create_account_token(jwt_handler.USER_KIND, user.id)
    return LoginUserResponse(**UserResponse.model_validate(user).model_dump(), token=token)


@router.get('/confirm/{token}', response_model=MessageResponse)
def confirm_user(token: str, store: AccountStore = Depends(get_store)):
    user = store.find_by_confirmation_fingerprint(confirmation.fingerprint(token))
    if user is None:
        raise InvalidOrExpiredTokenError()

    user.confirmed = True
    user.confirmation_token_hash = None
    store.save(user)
    logger.info('Confirmed user account %s', user.id)

    return {'message': 'Account confirmed. You can now log in.'}


@router.get('/profile', response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user
