# review_cards/core/fallbacks.py
from __future__ import annotations

import hashlib
import random
import time
from typing import Dict, List, Optional

from .models import GeneratedReview, ReviewRequest
from .uniqueness import normalize

# {name} is replaced with the business name.
FALLBACK_REVIEWS: Dict[int, Dict[str, List[str]]] = {
    1: {
        "English": [
            "Had issues with service at {name}. Staff wasn't very helpful and waited too long. Expected better quality for what we paid.",
            "Not satisfied with my visit to {name}. Several problems came up and they didn't handle them well. Needs improvement.",
            "Disappointing experience here. {name} didn't meet expectations and service was below average. Won't be returning soon.",
            "Faced multiple issues during my visit. Staff at {name} seemed overwhelmed and couldn't resolve basic problems effectively.",
        ],
        "Gujarati": [
            "{name} ma seva thodi kharab lagi. Staff pan jyada madad nathi karyu ane wait karvanu padyu. Sudharani jarur chhe.",
            "Yahan experience saaru nathi rahyu. {name} ma ketlik samasyao hati ane solve nathi thai. Better expect karyu hatu.",
            "Niraash thayo visit ma. Service quality achhi nathi ane staff pan responsive nathi. Improvement ni jarur chhe.",
        ],
        "Hindi": [
            "{name} mein service theek nahi thi. Staff se madad nahi mili aur kaafi wait karna pada. Better expected tha.",
            "Yahan ka experience disappointing raha. Kuch problems hui jo properly handle nahi hui. Improvement ki zarurat hai.",
            "Visit se satisfied nahi hua. {name} ki service average se niche lagi. Staff bhi jyada helpful nahi tha.",
        ],
    },
    2: {
        "English": [
            "Average experience at {name}. Some things were good but faced a few issues. Staff tried helping but could be better organized.",
            "Mixed feelings about my visit. {name} has potential but needs to work on service quality. Some aspects were decent though.",
            "Okay service overall but room for improvement. Had some problems but staff was trying their best. Expected slightly better.",
            "Decent place but not exceptional. {name} handled most things well but few areas need attention. Would give another chance.",
        ],
        "Gujarati": [
            "{name} ma experience average rahyo. Kuch cheejo saari hati pan kuch problems pan hati. Staff try karyu pan better ho sake.",
            "Mixed feelings chhe visit baad. Kuch aspects achha laga pan service ma improvement jarur chhe. Overall okay rahyu.",
            "Decent service mili pan exceptional nathi. {name} ma kuch areas ma sudharani jarur chhe. Phir se chance aapi sakiye.",
        ],
        "Hindi": [
            "{name} mein experience average raha. Kuch cheezein theek thi lekin kuch issues bhi the. Staff helpful tha but improve kar sakte.",
            "Mixed experience raha yahan. Service decent thi but kuch areas mein better ho sakta hai. Overall okay tha visit.",
            "Theek-thaak service mili. {name} mein potential hai but thoda aur attention chahiye. Staff cooperative tha though.",
        ],
    },
    3: {
        "English": [
            "Good experience at {name} overall. Service was decent and staff was helpful. Some minor areas could improve but satisfied with visit.",
            "Pleasant visit here. {name} provided good service and handled things well. Nothing extraordinary but met expectations nicely.",
            "Decent service and friendly staff. {name} managed everything properly. Average experience but would consider visiting again.",
            "Fair experience with good aspects. Service quality was reasonable and staff was cooperative. {name} did a decent job overall.",
        ],
        "Gujarati": [
            "{name} ma saaru experience rahyu. Service decent hati ane staff helpful hata. Kuch minor improvements ho sake pan overall satisfied.",
            "Pleasant visit rahyu yahan. Good service mili ane properly handle karyu. Expectations meet thai gayi. Decent place chhe.",
            "Fair experience hatu. {name} ma service quality reasonable hati ane staff cooperative hata. Overall theek rahyu.",
        ],
        "Hindi": [
            "{name} mein achha experience raha. Service decent thi aur staff helpful tha. Kuch areas improve ho sakte but overall satisfied.",
            "Pleasant visit tha yahan. Good service mili aur properly handle kiya. Expectations meet hui. Decent place hai.",
            "Fair experience tha overall. Service quality reasonable thi aur staff cooperative tha. {name} ne decent job kiya.",
        ],
    },
    4: {
        "English": [
            "Really good experience at {name}! Professional service and quality work. Staff was friendly and helpful. Minor wait but totally worth it.",
            "Excellent service here. {name} exceeded expectations with great staff and quality. Definitely recommend to others. Very satisfied!",
            "Impressed with the service quality. {name} handled everything professionally. Friendly staff and good experience overall. Will return!",
            "Great visit! Professional team at {name} provided excellent service. Quality work and helpful staff. Highly recommend this place.",
        ],
        "Gujarati": [
            "{name} ma khub saaru experience rahyu! Professional service ane quality work. Staff friendly ane helpful hata. Recommend karis.",
            "Excellent service mili yahan. {name} expectations exceed karyu great staff sathe. Definitely recommend karis others ne.",
            "Impressed thayo service quality thi. Professional team ane excellent service. Friendly staff ane good experience. Will return!",
        ],
        "Hindi": [
            "{name} mein bahut achha experience raha! Professional service aur quality work. Staff friendly aur helpful tha. Recommend karunga.",
            "Excellent service mili yahan. {name} ne expectations exceed kiye great staff ke saath. Definitely recommend others ko.",
            "Impressed hua service quality se. Professional team aur excellent service. Friendly staff aur good experience. Will return!",
        ],
    },
    5: {
        "English": [
            "Outstanding experience at {name}! Exceptional service quality and amazing staff. Everything was perfect. Highly recommend to everyone!",
            "Absolutely fantastic! {name} provided excellent service with professional staff. Quality work and great experience. Will definitely return!",
            "Superb service and wonderful staff! {name} exceeded all expectations. Professional, friendly, and top-quality. Highly recommended place!",
            "Amazing experience here! {name} delivered exceptional service with caring staff. Everything was handled perfectly. 5 stars deserved!",
        ],
        "Gujarati": [
            "{name} ma outstanding experience rahyu! Exceptional service quality ane amazing staff. Sab perfect hatu. Highly recommend!",
            "Absolutely fantastic! {name} excellent service provide karyu professional staff sathe. Quality work ane great experience!",
            "Superb service ane wonderful staff! {name} expectations exceed karyu. Professional, friendly ane top-quality. Highly recommended!",
        ],
        "Hindi": [
            "{name} mein outstanding experience raha! Exceptional service quality aur amazing staff. Sab perfect tha. Highly recommend!",
            "Absolutely fantastic! {name} ne excellent service provide kiya professional staff ke saath. Quality work aur great experience!",
            "Superb service aur wonderful staff! {name} ne expectations exceed kiye. Professional, friendly aur top-quality. Highly recommended!",
        ],
    },
}

SUFFIXES = ["", " Really good!", " Worth it!", " Satisfied!", " Great place!", " Recommended!"]

FALLBACK_TAGLINES: Dict[str, List[str]] = {
    "Services": ["Excellence in Every Service", "Your Service Solution", "Quality You Can Trust"],
    "Food & Beverage": ["Taste the Difference", "Fresh & Delicious Always", "Where Flavor Meets Quality"],
    "Health & Medical": ["Your Health, Our Priority", "Caring for Your Wellness", "Expert Care Always"],
    "Education": ["Learning Made Easy", "Knowledge for Success", "Education Excellence"],
    "Professional Businesses": ["Professional Solutions", "Expert Services", "Business Excellence"],
}


def _templates_for(rating: int, language: str) -> List[str]:
    by_lang = FALLBACK_REVIEWS.get(rating) or FALLBACK_REVIEWS[5]
    if language in by_lang:
        return by_lang[language]
    # "Hindi + Gujarati" -> "Hindi"
    first = language.split("+")[0].strip()
    return by_lang.get(first) or by_lang["English"]


def fallback_review(
    request: ReviewRequest,
    language: Optional[str],
    max_chars: int,
    rng: Optional[random.Random] = None,
    now_ms: Optional[int] = None,
    attempts: int = 0,
) -> GeneratedReview:
    """Canned review for the rating/language; never recorded as used."""
    rng = rng or random.Random()
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    language = language or "English"

    text = rng.choice(_templates_for(request.star_rating, language)).format(name=request.business_name)
    suffix = SUFFIXES[now_ms % len(SUFFIXES)]
    if len(text + suffix) <= max_chars:
        text += suffix

    digest = hashlib.blake2b(f"{normalize(text)}{now_ms}".encode("utf-8"), digest_size=8).hexdigest()
    return GeneratedReview(
        text=text,
        hash=digest,
        language=language,
        rating=request.star_rating,
        source="fallback",
        attempts=attempts,
    )


def fallback_tagline(category: str, rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    choices = FALLBACK_TAGLINES.get(category) or FALLBACK_TAGLINES["Services"]
    return rng.choice(choices)
