from datetime import datetime, timedelta, timezone

import jwt
import pytest

from tutorhub.auth import jwt_handler
from tutorhub.core import config


def test_account_token_round_trips_subject() -> None:
    token = jwt_handler.create_account_token(jwt_handler.USER_KIND, 42)

    payload = jwt_handler.decode_access_token(token)

    assert payload['sub'] == 'user:42'
    assert 'exp' in payload
    assert jwt_handler.parse_subject(payload['sub']) == ('user', 42)


def test_decode_rejects_expired_token() -> None:
    payload = {'sub': 'teacher:1', 'exp': datetime.now(timezone.utc) - timedelta(minutes=1)}
    token = jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)

    with pytest.raises(jwt.ExpiredSignatureError):
        jwt_handler.decode_access_token(token)


def test_decode_rejects_token_signed_with_other_secret() -> None:
    token = jwt.encode({'sub': 'user:1'}, 'another-secret-key-for-tutorhub-suite-02', algorithm=config.JWT_ALGORITHM)

    with pytest.raises(jwt.InvalidSignatureError):
        jwt_handler.decode_access_token(token)


@pytest.mark.parametrize('subject', [None, '', '42', 'admin:1', 'user:abc'])
def test_parse_subject_rejects_malformed_values(subject) -> None:
    with pytest.raises(ValueError):
        jwt_handler.parse_subject(subject)
