import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from backend.auth.dependencies import get_current_customer_email


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme='Bearer', credentials=token)


def test_get_current_customer_email_reads_normalized_subject(issue_token) -> None:
    token = issue_token(' Peter@Example.com ')

    assert get_current_customer_email(_credentials(token)) == 'peter@example.com'


def test_get_current_customer_email_rejects_garbage_token() -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_current_customer_email(_credentials('not-a-jwt'))

    assert exception_info.value.status_code == 401
    assert exception_info.value.detail == 'Invalid token'


def test_get_current_customer_email_rejects_expired_token(issue_token) -> None:
    token = issue_token('peter@example.com', expires_minutes=-1)

    with pytest.raises(HTTPException) as exception_info:
        get_current_customer_email(_credentials(token))

    assert exception_info.value.status_code == 401


def test_get_current_customer_email_rejects_token_signed_with_other_key() -> None:
    token = jwt.encode({'sub': 'peter@example.com'}, 'some-other-secret', algorithm='HS256')

    with pytest.raises(HTTPException) as exception_info:
        get_current_customer_email(_credentials(token))

    assert exception_info.value.detail == 'Invalid token'


def test_get_current_customer_email_rejects_blank_subject(issue_token) -> None:
    token = issue_token('   ')

    with pytest.raises(HTTPException) as exception_info:
        get_current_customer_email(_credentials(token))

    assert exception_info.value.detail == 'Invalid token subject'
