from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException, Request

from review_cards.config import Settings
from review_cards.core.models import (
    CardReviewRequest,
    GeneratedReview,
    ReviewRequest,
    TaglineRequest,
    TaglineResponse,
    UsageStats,
)
from review_cards.core.uniqueness import UniquenessTracker
from review_cards.services.exceptions import RepoError
from review_cards.services.metrics import MetricsLogger
from review_cards.services.repo.store import CardStore
from review_cards.services.reviews import ReviewGenerator
from .deps import get_card_store, get_review_generator, get_settings, get_tracker, require_admin

router = APIRouter(tags=["reviews"])


def _log_generation(settings: Settings, name: str, t0: float, extra: dict, request: Request) -> None:
    MetricsLogger(settings).log_request(name, (time.perf_counter() - t0) * 1000.0, request, extra=extra)


def _generate(generator: ReviewGenerator, settings: Settings, req: ReviewRequest, request: Request) -> GeneratedReview:
    t0 = time.perf_counter()
    review = generator.generate_review(req)
    _log_generation(settings, "review_generate", t0, {
        "rating": review.rating,
        "language": review.language,
        "source": review.source,
        "provider": review.provider,
        "model": review.model,
        "attempts": review.attempts,
        "chars": len(review.text),
    }, request)
    return review


@router.post("/api/v1/reviews/generate", response_model=GeneratedReview)
def generate_review(
    payload: ReviewRequest,
    request: Request,
    generator: ReviewGenerator = Depends(get_review_generator),
    settings: Settings = Depends(get_settings),
):
    return _generate(generator, settings, payload, request)


@router.post("/api/v1/cards/slug/{slug}/review", response_model=GeneratedReview)
def generate_review_for_card(
    slug: str,
    payload: CardReviewRequest,
    request: Request,
    store: CardStore = Depends(get_card_store),
    generator: ReviewGenerator = Depends(get_review_generator),
    settings: Settings = Depends(get_settings),
):
    try:
        card = store.get_by_slug(slug)
    except RepoError as e:
        raise HTTPException(status_code=500, detail=str(e))
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")

    req = ReviewRequest(
        business_name=card.business_name,
        category=card.category,
        type=card.type,
        highlights=card.description or None,
        selected_services=payload.services,
        star_rating=payload.star_rating,
        language=payload.language,
        tone=payload.tone,
        use_case=payload.use_case,
    )
    return _generate(generator, settings, req, request)


@router.post("/api/v1/taglines", response_model=TaglineResponse, dependencies=[Depends(require_admin)])
def generate_tagline(
    payload: TaglineRequest,
    request: Request,
    generator: ReviewGenerator = Depends(get_review_generator),
    settings: Settings = Depends(get_settings),
):
    t0 = time.perf_counter()
    result = generator.generate_tagline(payload.business_name, payload.category, payload.type)
    _log_generation(settings, "tagline_generate", t0, {"source": result.source}, request)
    return result


@router.get("/api/v1/reviews/stats", response_model=UsageStats, dependencies=[Depends(require_admin)])
def review_stats(tracker: UniquenessTracker = Depends(get_tracker)):
    return UsageStats(**tracker.stats())


@router.delete("/api/v1/reviews/hashes", dependencies=[Depends(require_admin)])
def clear_hashes(tracker: UniquenessTracker = Depends(get_tracker)):
    tracker.clear()
    return {"ok": True}
