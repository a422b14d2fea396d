from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence, Tuple

from review_cards.config import Settings
from review_cards.core.fallbacks import fallback_review, fallback_tagline
from review_cards.core.models import GeneratedReview, ReviewRequest, TaglineResponse
from review_cards.core.prompts import (
    REVIEW_STRUCTURES,
    WRITING_STYLES,
    build_review_prompt,
    build_tagline_prompt,
    clean_output,
    pick_language,
    pick_services,
)
from review_cards.core.uniqueness import UniquenessTracker, content_hash
from .exceptions import LLMError
from .llm import TextGenerator

logger = logging.getLogger(__name__)


class ReviewGenerator:
    """
    Call-check-retry loop around the configured LLM providers.

    Each attempt builds a fresh prompt (services, structure and style are re-picked),
    asks the providers in priority order and takes the first answer. The answer is
    accepted when it fits the character band and the tracker considers it unique.
    After `max_retries` failed attempts a canned review is returned instead.
    """

    def __init__(
        self,
        generators: Sequence[TextGenerator],
        tracker: UniquenessTracker,
        settings: Settings,
        rng: Optional[random.Random] = None,
    ):
        self.generators = list(generators)
        self.tracker = tracker
        self.settings = settings
        self.rng = rng or random.Random()

    def _ask(self, prompt: str) -> Tuple[str, TextGenerator]:
        errors: List[str] = []
        for gen in self.generators:
            try:
                return gen.generate(prompt), gen
            except LLMError as e:
                logger.warning("Provider %s:%s failed: %s", gen.provider, gen.model, e)
                errors.append(str(e))
        raise LLMError("; ".join(errors) or "No LLM provider configured")

    def generate_review(self, request: ReviewRequest, max_retries: Optional[int] = None) -> GeneratedReview:
        retries = max_retries or request.max_retries or self.settings.review_max_retries
        min_chars = request.min_chars or self.settings.review_min_chars
        max_chars = request.max_chars or self.settings.review_max_chars
        if min_chars > max_chars:
            min_chars = max_chars
        language = pick_language(request.language, self.rng)

        if not self.generators:
            logger.info("No LLM provider configured; using fallback review for %r", request.business_name)
            return fallback_review(request, language, max_chars, rng=self.rng)

        for attempt in range(1, retries + 1):
            prompt = build_review_prompt(
                request,
                language=language,
                services=pick_services(request.selected_services, self.rng),
                structure=self.rng.choice(REVIEW_STRUCTURES),
                style=self.rng.choice(WRITING_STYLES),
                min_chars=min_chars,
                max_chars=max_chars,
            )
            try:
                raw, gen = self._ask(prompt)
            except LLMError as e:
                logger.error("Review generation error (attempt %d/%d): %s", attempt, retries, e)
                continue

            text = clean_output(raw)
            n = len(text)
            logger.debug("Attempt %d: %s produced %d chars: %r", attempt, gen.provider, n, text)

            if not (min_chars <= n <= max_chars):
                logger.info("Review rejected (attempt %d/%d): length %d outside %d-%d",
                            attempt, retries, n, min_chars, max_chars)
                continue
            if not self.tracker.is_unique(text):
                logger.info("Review rejected (attempt %d/%d): not unique (phrase overlap %.2f)",
                            attempt, retries, self.tracker.phrase_overlap(text))
                continue

            self.tracker.mark_used(text)
            logger.info("Review accepted (attempt %d/%d): %d chars from %s:%s",
                        attempt, retries, n, gen.provider, gen.model)
            return GeneratedReview(
                text=text,
                hash=content_hash(text),
                language=language,
                rating=request.star_rating,
                source="ai",
                provider=gen.provider,
                model=gen.model,
                attempts=attempt,
            )

        logger.warning("All %d attempts failed for %r; using fallback review", retries, request.business_name)
        return fallback_review(request, language, max_chars, rng=self.rng, attempts=retries)

    def generate_tagline(self, business_name: str, category: str, type_: str) -> TaglineResponse:
        prompt = build_tagline_prompt(business_name, category, type_)
        try:
            raw, _gen = self._ask(prompt)
            tagline = clean_output(raw)
            if tagline:
                return TaglineResponse(tagline=tagline, source="ai")
        except LLMError as e:
            logger.error("Tagline generation error: %s", e)
        return TaglineResponse(tagline=fallback_tagline(category, self.rng), source="fallback")

