import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from tutorhub.auth import jwt_handler, passwords
from tutorhub.auth.passwords import hash_password, verify_password
from tutorhub.models.teacher import Teacher
from tutorhub.models.user import User
from tutorhub.routes.teacher_routes import (
    CreateReviewRequest,
    RegisterTeacherRequest,
    UpdateTeacherRequest,
    create_review,
    get_teacher,
    list_teachers,
    login_teacher,
    register_teacher,
    update_teacher,
)
from tutorhub.routes.user_routes import LoginRequest


def _register_teacher(store, email: str = 'tom@example.com', **overrides):
    fields = {
        'full_name': 'Tom Teacher',
        'email': email,
        'phone_number': '555-0101',
        'password': 'pw123',
        'subjects': ['Physics', ' '],
        'location': 'Downtown',
        'availability': ['Mon 16:00-18:00'],
        'hourly_rate': 30,
        'qualifications': ['BSc Physics'],
    }
    fields.update(overrides)
    return register_teacher(RegisterTeacherRequest(**fields), store=store)


def _create_user(store, confirmed: bool = True) -> User:
    return store.create(
        User,
        full_name='Ada Learner',
        email='ada@example.com',
        phone_number='555-0100',
        hashed_password=hash_password('pw123'),
        role='parent',
        confirmed=confirmed,
    )


def test_register_teacher_is_active_and_receives_token(store, db) -> None:
    response = _register_teacher(store)

    teacher = db.get(Teacher, response.id)
    payload = jwt_handler.decode_access_token(response.token)
    assert payload['sub'] == f'teacher:{teacher.id}'
    assert response.subjects == ['Physics']
    assert response.reviews == []
    assert teacher.hashed_password != 'pw123'
    assert 'hashed_password' not in response.model_dump()


def test_register_teacher_rejects_duplicate_email(store) -> None:
    _register_teacher(store)

    with pytest.raises(HTTPException) as exception_info:
        _register_teacher(store, email='TOM@example.com')

    assert exception_info.value.status_code == 409
    assert exception_info.value.detail == 'Teacher already exists'


def test_register_teacher_request_rejects_negative_rate() -> None:
    with pytest.raises(ValidationError):
        RegisterTeacherRequest(
            full_name='Tom',
            email='tom@example.com',
            phone_number='555-0101',
            password='pw123',
            hourly_rate=-1,
        )


def test_login_teacher(store) -> None:
    _register_teacher(store)

    response = login_teacher(LoginRequest(email='tom@example.com', password='pw123'), store=store)
    assert response.token

    with pytest.raises(HTTPException) as exception_info:
        login_teacher(LoginRequest(email='tom@example.com', password='wrong'), store=store)
    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid email or password'


def test_list_and_get_teachers(store) -> None:
    first = _register_teacher(store)
    _register_teacher(store, email='second@example.com', full_name='Second Teacher')

    assert [teacher.email for teacher in list_teachers(store=store)] == ['tom@example.com', 'second@example.com']
    assert get_teacher(first.id, store=store).full_name == 'Tom Teacher'


def test_get_teacher_returns_not_found(store) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_teacher(999, store=store)

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Teacher not found'


def test_update_teacher_only_changes_sent_fields(store) -> None:
    created = _register_teacher(store)
    teacher = store.find_by_id(Teacher, created.id)
    original_hash = teacher.hashed_password

    updated = update_teacher(
        created.id,
        UpdateTeacherRequest(subjects=['Math']),
        current_teacher=teacher,
        store=store,
    )

    assert updated.subjects == ['Math']
    assert updated.full_name == 'Tom Teacher'
    assert updated.location == 'Downtown'
    assert updated.availability == ['Mon 16:00-18:00']
    assert updated.hourly_rate == 30
    assert updated.qualifications == ['BSc Physics']
    assert updated.hashed_password == original_hash


def test_update_teacher_rehashes_only_changed_password(store) -> None:
    created = _register_teacher(store)
    teacher = store.find_by_id(Teacher, created.id)
    original_hash = teacher.hashed_password

    update_teacher(created.id, UpdateTeacherRequest(password='pw123'), current_teacher=teacher, store=store)
    assert teacher.hashed_password == original_hash

    update_teacher(created.id, UpdateTeacherRequest(password='new-password'), current_teacher=teacher, store=store)
    assert teacher.hashed_password != original_hash
    assert verify_password('new-password', teacher.hashed_password)


def test_update_teacher_rejects_other_teachers(store) -> None:
    owner = _register_teacher(store)
    other = _register_teacher(store, email='other@example.com')

    with pytest.raises(HTTPException) as exception_info:
        update_teacher(
            owner.id,
            UpdateTeacherRequest(location='Uptown'),
            current_teacher=store.find_by_id(Teacher, other.id),
            store=store,
        )

    assert exception_info.value.status_code == 403
    assert store.find_by_id(Teacher, owner.id).location == 'Downtown'


def test_update_teacher_email_collision_is_conflict(store) -> None:
    owner = _register_teacher(store)
    _register_teacher(store, email='taken@example.com')
    teacher = store.find_by_id(Teacher, owner.id)

    with pytest.raises(HTTPException) as exception_info:
        update_teacher(owner.id, UpdateTeacherRequest(email='taken@example.com'), current_teacher=teacher, store=store)

    assert exception_info.value.status_code == 409
    assert store.find_by_id(Teacher, owner.id).email == 'tom@example.com'


def test_update_teacher_request_rejects_null_identity_fields() -> None:
    with pytest.raises(ValidationError):
        UpdateTeacherRequest(full_name=None)


def test_create_review(store) -> None:
    teacher = _register_teacher(store)
    user = _create_user(store)

    review = create_review(
        teacher.id,
        CreateReviewRequest(rating=5, comment=' Great teacher '),
        current_user=user,
        store=store,
    )

    assert review.reviewer_id == user.id
    assert review.comment == 'Great teacher'
    assert [item.rating for item in get_teacher(teacher.id, store=store).reviews] == [5]


def test_create_review_rejects_second_review(store) -> None:
    teacher = _register_teacher(store)
    user = _create_user(store)
    create_review(teacher.id, CreateReviewRequest(rating=4), current_user=user, store=store)

    with pytest.raises(HTTPException) as exception_info:
        create_review(teacher.id, CreateReviewRequest(rating=1), current_user=user, store=store)

    assert exception_info.value.status_code == 409


def test_create_review_requires_confirmed_user(store) -> None:
    teacher = _register_teacher(store)
    user = _create_user(store, confirmed=False)

    with pytest.raises(HTTPException) as exception_info:
        create_review(teacher.id, CreateReviewRequest(rating=4), current_user=user, store=store)

    assert exception_info.value.status_code == 403


@pytest.mark.parametrize('rating', [0, 6])
def test_create_review_request_rejects_out_of_range_rating(rating: int) -> None:
    with pytest.raises(ValidationError):
        CreateReviewRequest(rating=rating)


def test_teacher_update_over_http(client) -> None:
    created = client.post(
        '/api/teachers',
        json={
            'full_name': 'Tom Teacher',
            'email': 'tom@example.com',
            'phone_number': '555-0101',
            'password': 'pw123',
            'subjects': ['Physics'],
            'location': 'Downtown',
        },
    )
    assert created.status_code == 201
    teacher_id = created.json()['id']
    token = created.json()['token']

    unauthenticated = client.put(f'/api/teachers/{teacher_id}', json={'subjects': ['Math']})
    assert unauthenticated.status_code == 401

    updated = client.put(
        f'/api/teachers/{teacher_id}',
        json={'subjects': ['Math']},
        headers={'Authorization': f'Bearer {token}'},
    )
    assert updated.status_code == 200
    assert updated.json()['subjects'] == ['Math']
    assert updated.json()['location'] == 'Downtown'

    listed = client.get('/api/teachers')
    assert listed.status_code == 200
    assert [teacher['id'] for teacher in listed.json()] == [teacher_id]

    assert client.get(f'/api/teachers/{teacher_id}').json()['subjects'] == ['Math']
    assert client.get('/api/teachers/999').status_code == 404


def test_teacher_id_beyond_integer_range_is_not_found(client) -> None:
    response = client.get('/api/teachers/99999999999999999999')

    assert response.status_code == 404
    assert response.json() == {'detail': 'Teacher not found'}


@pytest.mark.parametrize('email', ['a@b@c.com', 'a@.com', 'a<b>@x.com'])
def test_teacher_requests_reject_malformed_email(email: str) -> None:
    with pytest.raises(ValidationError):
        RegisterTeacherRequest(full_name='Tom', email=email, phone_number='555-0101', password='pw123')
    with pytest.raises(ValidationError):
        UpdateTeacherRequest(email=email)


def test_login_teacher_unknown_email_still_runs_password_hashing(store, monkeypatch: pytest.MonkeyPatch) -> None:
    dummy_calls = []
    monkeypatch.setattr(passwords.pwd_context, 'dummy_verify', lambda: dummy_calls.append(True))

    with pytest.raises(HTTPException) as exception_info:
        login_teacher(LoginRequest(email='nobody@example.com', password='pw123'), store=store)

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid email or password'
    assert dummy_calls == [True]
