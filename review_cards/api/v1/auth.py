from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from review_cards.core.models import LoginRequest, LoginResponse
from review_cards.services.auth import AdminAuth
from review_cards.services.exceptions import AuthError
from .deps import bearer_token, get_auth, require_admin

router = APIRouter(tags=["auth"])


@router.post("/api/v1/auth/login", response_model=LoginResponse)
def login(payload: LoginRequest, auth: AdminAuth = Depends(get_auth)):
    try:
        return auth.login(payload.mobile, payload.password)
    except AuthError as e:
        raise HTTPException(status_code=401 if e.configured else 503, detail=str(e))


@router.post("/api/v1/auth/logout")
def logout(token: str = Depends(require_admin), auth: AdminAuth = Depends(get_auth)):
    auth.logout(token)
    return {"ok": True}


@router.get("/api/v1/auth/status")
def status(token: Optional[str] = Depends(bearer_token), auth: AdminAuth = Depends(get_auth)):
    return {"authenticated": auth.is_authenticated(token)}
