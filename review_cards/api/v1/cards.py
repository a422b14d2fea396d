from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from review_cards.core.models import (
    MigrationResult,
    ReviewCard,
    ReviewCardCreate,
    ReviewCardUpdate,
    generate_slug,
    utcnow,
)
from review_cards.services.exceptions import RepoError
from review_cards.services.repo.store import CardStore
from .deps import get_card_store, require_admin

router = APIRouter(tags=["cards"])

# ---- Admin routes --------------------------------------------------------------

@router.get("/api/v1/cards", response_model=List[ReviewCard], dependencies=[Depends(require_admin)])
def list_cards(store: CardStore = Depends(get_card_store)):
    try:
        return store.get_all()
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/v1/cards", response_model=ReviewCard, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def create_card(payload: ReviewCardCreate, store: CardStore = Depends(get_card_store)):
    try:
        card = ReviewCard(
            **payload.model_dump(),
            slug=store.unique_slug(generate_slug(payload.business_name)),
        )
        store.add(card)
        return card
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/api/v1/cards/{card_id}", response_model=ReviewCard, dependencies=[Depends(require_admin)])
def update_card(card_id: str, payload: ReviewCardUpdate, store: CardStore = Depends(get_card_store)):
    try:
        current = store.get(card_id)
        if current is None:
            raise HTTPException(status_code=404, detail="Card not found")
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        updated = current.model_copy(update={**changes, "updated_at": utcnow()})
        store.update(updated)
        return updated
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/api/v1/cards/{card_id}", dependencies=[Depends(require_admin)])
def delete_card(card_id: str, store: CardStore = Depends(get_card_store)):
    try:
        if store.get(card_id) is None:
            raise HTTPException(status_code=404, detail="Card not found")
        store.delete(card_id)
        return {"ok": True}
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/v1/cards/migrate", response_model=MigrationResult, dependencies=[Depends(require_admin)])
def migrate_cards(store: CardStore = Depends(get_card_store)):
    try:
        return store.migrate_from_local()
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/api/v1/cards/sync", dependencies=[Depends(require_admin)])
def sync_cards(store: CardStore = Depends(get_card_store)):
    return {"synced": store.sync()}

# ---- Public routes -------------------------------------------------------------

@router.get("/api/v1/cards/slug/{slug}", response_model=ReviewCard)
def get_card_by_slug(slug: str, store: CardStore = Depends(get_card_store)):
    try:
        card = store.get_by_slug(slug)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card
