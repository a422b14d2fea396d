from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from review_cards.config import Settings
from review_cards.core.uniqueness import UniquenessTracker
from review_cards.services.auth import AdminAuth
from review_cards.services.exceptions import RepoError
from review_cards.services.llm import build_generators
from review_cards.services.repo.store import ApiConfigStore, CardStore, build_api_config_store, build_card_store
from review_cards.services.reviews import ReviewGenerator

logger = logging.getLogger(__name__)

# ---- Shared state (built once in create_app) ---------------------------------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_auth(request: Request) -> AdminAuth:
    return request.app.state.auth

def get_tracker(request: Request) -> UniquenessTracker:
    return request.app.state.tracker

# ---- Stores -------------------------------------------------------------------

def get_card_store(settings: Settings = Depends(get_settings)) -> CardStore:
    return build_card_store(settings)

def get_api_config_store(settings: Settings = Depends(get_settings)) -> ApiConfigStore:
    return build_api_config_store(settings)

# ---- Generation ---------------------------------------------------------------

def get_review_generator(
    settings: Settings = Depends(get_settings),
    tracker: UniquenessTracker = Depends(get_tracker),
    configs: ApiConfigStore = Depends(get_api_config_store),
) -> ReviewGenerator:
    try:
        stored = configs.get_all()
    except RepoError as e:
        logger.warning("Could not load API configurations, using env keys: %s", e)
        stored = []
    return ReviewGenerator(build_generators(stored, settings), tracker, settings)

# ---- Auth ---------------------------------------------------------------------

_bearer = HTTPBearer(auto_error=False)

def bearer_token(creds: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Optional[str]:
    return creds.credentials if creds else None

def require_admin(
    token: Optional[str] = Depends(bearer_token),
    auth: AdminAuth = Depends(get_auth),
) -> str:
    if not auth.is_authenticated(token):
        raise HTTPException(status_code=401, detail="Admin login required",
                            headers={"WWW-Authenticate": "Bearer"})
    return token
