from __future__ import annotations

import hmac
import logging
import secrets
import threading
from datetime import datetime, timedelta
from typing import Dict, Optional

from review_cards.config import Settings
from review_cards.core.models import LoginResponse, utcnow
from .exceptions import AuthError

logger = logging.getLogger(__name__)


class AdminAuth:
    """
    Single admin account checked against ADMIN_MOBILE / ADMIN_PASSWORD.

    Successful logins get an opaque bearer token that lives in process memory until it
    expires or the admin logs out. Restarting the server logs everybody out.
    """

    def __init__(self, settings: Settings):
        self._mobile = settings.admin_mobile
        self._password = settings.admin_password
        self._ttl = timedelta(minutes=settings.session_ttl_minutes)
        self._sessions: Dict[str, datetime] = {}
        self._lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._mobile and self._password)

    def login(self, mobile: str, password: str) -> LoginResponse:
        if not self.configured:
            raise AuthError("Admin login is not configured", configured=False)
        ok_mobile = hmac.compare_digest(mobile.strip().encode(), self._mobile.encode())
        ok_password = hmac.compare_digest(password.encode(), self._password.encode())
        if not (ok_mobile and ok_password):
            logger.info("Rejected admin login for mobile ending %s", mobile.strip()[-4:])
            raise AuthError("Invalid mobile number or password")

        token = secrets.token_urlsafe(32)
        expires_at = utcnow() + self._ttl
        with self._lock:
            self._purge()
            self._sessions[token] = expires_at
        logger.info("Admin logged in")
        return LoginResponse(token=token, expires_at=expires_at)

    def logout(self, token: Optional[str]) -> None:
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def is_authenticated(self, token: Optional[str]) -> bool:
        if not token:
            return False
        with self._lock:
            expires_at = self._sessions.get(token)
            if expires_at is None:
                return False
            if expires_at <= utcnow():
                del self._sessions[token]
                return False
            return True

    def _purge(self) -> None:
        now = utcnow()
        for t in [t for t, exp in self._sessions.items() if exp <= now]:
            del self._sessions[t]

