from __future__ import annotations

from fastapi import APIRouter

from review_cards.core.catalog import Options, options

router = APIRouter(tags=["options"])


@router.get("/api/v1/options", response_model=Options)
def list_options():
    """Languages, tones, use cases, categories and service presets for the card forms."""
    return options()
