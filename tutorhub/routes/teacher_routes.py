import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field, field_validator

from tutorhub.auth import jwt_handler
from tutorhub.auth.dependencies import get_current_teacher, get_current_user
from tutorhub.auth.passwords import apply_password, hash_password, verify_account_password
from tutorhub.core.errors import (
    AccountNotConfirmedError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from tutorhub.models.teacher import Review, Teacher
from tutorhub.models.user import User
from tutorhub.routes.user_routes import (
    INVALID_CREDENTIALS,
    MIN_PASSWORD_LENGTH,
    LoginRequest,
    normalize_email_value,
    validate_required_text,
)
from tutorhub.services.account_store import AccountStore, get_store

router = APIRouter(tags=['teachers'])

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
MAX_REVIEW_COMMENT_LENGTH = 1000
TEACHER_NOT_FOUND = 'Teacher not found'


def clean_string_list(values: list[str]) -> list[str]:
    return [value.strip() for value in values if value and value.strip()]


def validate_password_value(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
    return value


class RegisterTeacherRequest(BaseModel):
    full_name: str
    email: EmailStr
    phone_number: str
    password: str
    subjects: list[str] = Field(default_factory=list)
    location: str | None = None
    availability: list[str] = Field(default_factory=list)
    hourly_rate: float | None = Field(default=None, ge=0)
    qualifications: list[str] = Field(default_factory=list)

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
        return validate_password_value(value)

    @field_validator('subjects', 'availability', 'qualifications')
    @classmethod
    def validate_lists(cls, values: list[str]) -> list[str]:
        return clean_string_list(values)


class UpdateTeacherRequest(BaseModel):
    """Every field is optional; only the ones sent are applied."""

    full_name: str | None = None
    email: EmailStr | None = None
    phone_number: str | None = None
    password: str | None = None
    subjects: list[str] | None = None
    location: str | None = None
    availability: list[str] | None = None
    hourly_rate: float | None = Field(default=None, ge=0)
    qualifications: list[str] | None = None

    @field_validator('full_name', 'phone_number')
    @classmethod
    def validate_text(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError('This field cannot be null.')
        return validate_required_text(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError('Email cannot be null.')
        return normalize_email_value(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        if value is None:
            raise ValueError('Password cannot be null.')
        return validate_password_value(value)

    @field_validator('subjects', 'availability', 'qualifications')
    @classmethod
    def validate_lists(cls, values: list[str] | None) -> list[str]:
        return clean_string_list(values or [])


class CreateReviewRequest(BaseModel):
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING)
    comment: str = ''

    @field_validator('comment')
    @classmethod
    def validate_comment(cls, value: str) -> str:
        normalized = value.strip()
        if len(normalized) > MAX_REVIEW_COMMENT_LENGTH:
            raise ValueError(f'Comment must be {MAX_REVIEW_COMMENT_LENGTH} characters or fewer.')
        return normalized


class ReviewResponse(BaseModel):
    id: int
    reviewer_id: int
    rating: int
    comment: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class TeacherResponse(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    subjects: list[str]
    location: str | None = None
    availability: list[str]
    hourly_rate: float | None = None
    qualifications: list[str]
    reviews: list[ReviewResponse] = []

    class Config:
        from_attributes = True


class TeacherWithTokenResponse(TeacherResponse):
    token: str


def get_teacher_or_404(teacher_id: int, store: AccountStore) -> Teacher:
    teacher = store.find_by_id(Teacher, teacher_id)
    if teacher is None:
        raise NotFoundError(TEACHER_NOT_FOUND)
    return teacher


def with_token(teacher: Teacher) -> TeacherWithTokenResponse:
    token = jwt_handler.create_account_token(jwt_handler.TEACHER_KIND, teacher.id)
    return TeacherWithTokenResponse(**TeacherResponse.model_validate(teacher).model_dump(), token=token)


@router.get('', response_model=list[TeacherResponse])
def list_teachers(store: AccountStore = Depends(get_store)):
    return store.list_all(Teacher)


@router.post('', response_model=TeacherWithTokenResponse, status_code=status.HTTP_201_CREATED)
def register_teacher(data: RegisterTeacherRequest, store: AccountStore = Depends(get_store)):
    if store.find_by_email(Teacher, data.email):
        raise ConflictError('Teacher already exists')

    teacher = store.create(
        Teacher,
        conflict_detail='Teacher already exists',
        full_name=data.full_name,
        email=data.email,
        phone_number=data.phone_number,
        hashed_password=hash_password(data.password),
        subjects=data.subjects,
        location=data.location,
        availability=data.availability,
        hourly_rate=data.hourly_rate,
        qualifications=data.qualifications,
    )
    logger.info('Registered teacher account %s', teacher.id)

    return with_token(teacher)


@router.post('/login', response_model=TeacherWithTokenResponse)
def login_teacher(data: LoginRequest, store: AccountStore = Depends(get_store)):
    teacher = store.find_by_email(Teacher, data.email)
    if not verify_account_password(teacher, data.password):
        logger.info('Failed teacher login attempt')
        raise UnauthorizedError(INVALID_CREDENTIALS)

    return with_token(teacher)


@router.get('/{teacher_id}', response_model=TeacherResponse)
def get_teacher(teacher_id: int, store: AccountStore = Depends(get_store)):
    return get_teacher_or_404(teacher_id, store)


@router.put('/{teacher_id}', response_model=TeacherResponse)
def update_teacher(
    teacher_id: int,
    data: UpdateTeacherRequest,
    current_teacher: Teacher = Depends(get_current_teacher),
    store: AccountStore = Depends(get_store),
):
    teacher = get_teacher_or_404(teacher_id, store)
    if teacher.id != current_teacher.id:
        raise ForbiddenError('Not authorized to update this teacher')

    changes = data.model_dump(exclude_unset=True)
    password = changes.pop('password', None)
    for field_name, value in changes.items():
        setattr(teacher, field_name, value)
    apply_password(teacher, password)

    teacher = store.save(teacher, conflict_detail='Email is already used by another teacher')
    logger.info('Updated teacher %s fields: %s', teacher.id, sorted(changes))

    return teacher


@router.post(
    '/{teacher_id}/reviews',
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_review(
    teacher_id: int,
    data: CreateReviewRequest,
    current_user: User = Depends(get_current_user),
    store: AccountStore = Depends(get_store),
):
    if not current_user.confirmed:
        raise AccountNotConfirmedError('Please confirm your email before leaving a review')

    teacher = get_teacher_or_404(teacher_id, store)
    if any(review.reviewer_id == current_user.id for review in teacher.reviews):
        raise ConflictError('You have already reviewed this teacher')

    return store.create(
        Review,
        conflict_detail='You have already reviewed this teacher',
        teacher_id=teacher.id,
        reviewer_id=current_user.id,
        rating=data.rating,
        comment=data.comment,
    )
