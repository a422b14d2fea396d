from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from review_cards.core.models import (
    ApiConfiguration,
    ApiConfigurationCreate,
    ApiConfigurationUpdate,
    ApiConfigurationView,
    utcnow,
)
from review_cards.services.exceptions import RepoError
from review_cards.services.repo.store import ApiConfigStore
from .deps import get_api_config_store, require_admin

router = APIRouter(tags=["api-configs"], dependencies=[Depends(require_admin)])


@router.get("/api/v1/api-configs", response_model=List[ApiConfigurationView])
def list_configs(store: ApiConfigStore = Depends(get_api_config_store)):
    try:
        configs = sorted(store.get_all(), key=lambda c: (c.priority, c.created_at))
        return [c.public() for c in configs]
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/v1/api-configs", response_model=ApiConfigurationView, status_code=status.HTTP_201_CREATED)
def create_config(payload: ApiConfigurationCreate, store: ApiConfigStore = Depends(get_api_config_store)):
    try:
        config = ApiConfiguration(**payload.model_dump())
        store.add(config)
        return config.public()
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/api/v1/api-configs/{config_id}", response_model=ApiConfigurationView)
def update_config(config_id: str, payload: ApiConfigurationUpdate,
                  store: ApiConfigStore = Depends(get_api_config_store)):
    try:
        current = store.get(config_id)
        if current is None:
            raise HTTPException(status_code=404, detail="API configuration not found")
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        updated = current.model_copy(update={**changes, "updated_at": utcnow()})
        store.update(updated)
        return updated.public()
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/v1/api-configs/{config_id}")
def delete_config(config_id: str, store: ApiConfigStore = Depends(get_api_config_store)):
    try:
        if store.get(config_id) is None:
            raise HTTPException(status_code=404, detail="API configuration not found")
        store.delete(config_id)
        return {"ok": True}
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
