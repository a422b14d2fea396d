from datetime import timedelta

import pytest

from review_cards.services.auth import AdminAuth
from review_cards.services.exceptions import AuthError

ADMIN_MOBILE = "9000000001"
ADMIN_PASSWORD = "s3cret-pass"


def test_login_issues_token(settings):
    auth = AdminAuth(settings)
    resp = auth.login(f" {ADMIN_MOBILE} ", ADMIN_PASSWORD)
    assert auth.is_authenticated(resp.token)
    assert not auth.is_authenticated("not-a-token")
    assert not auth.is_authenticated(None)


def test_bad_credentials(settings):
    auth = AdminAuth(settings)
    with pytest.raises(AuthError) as e:
        auth.login(ADMIN_MOBILE, "wrong")
    assert e.value.configured


def test_login_disabled_without_credentials(settings):
    settings.admin_password = None
    auth = AdminAuth(settings)
    assert not auth.configured
    with pytest.raises(AuthError) as e:
        auth.login(ADMIN_MOBILE, ADMIN_PASSWORD)
    assert not e.value.configured


def test_logout(settings):
    auth = AdminAuth(settings)
    token = auth.login(ADMIN_MOBILE, ADMIN_PASSWORD).token
    auth.logout(token)
    assert not auth.is_authenticated(token)
    auth.logout(None)


def test_expired_token_rejected(settings):
    auth = AdminAuth(settings)
    token = auth.login(ADMIN_MOBILE, ADMIN_PASSWORD).token
    auth._sessions[token] -= timedelta(days=365)
    assert not auth.is_authenticated(token)
    assert token not in auth._sessions
