# review_cards/core/prompts.py
from __future__ import annotations

import random
from typing import List, Optional, Sequence

from .catalog import BASE_LANGUAGES, business_context
from .models import ReviewRequest


SENTIMENT_GUIDE = {
    1: "Disappointed and frustrated, mentioning specific problems that affected the experience negatively",
    2: "Below expectations with some issues, but acknowledging effort while pointing out areas needing improvement",
    3: "Balanced perspective with both positive and negative aspects, realistic and fair assessment",
    4: "Satisfied and pleased with good service, minor suggestions for improvement, would recommend",
    5: "Extremely happy and impressed, exceptional experience that exceeded expectations, enthusiastic recommendation",
}

LANGUAGE_INSTRUCTIONS = {
    "English": "Write in natural, conversational English like a genuine local customer. "
               "Use varied sentence structures and authentic expressions.",
    "Gujarati": "Write entirely in Gujarati using English transliteration. Use natural Gujarati expressions "
                "and sentence patterns. Vary sentence structure - some short, some longer. Place business name "
                "naturally within sentences, never at the beginning.",
    "Hindi": "Write entirely in Hindi using English transliteration. Use authentic Hindi expressions and varied "
             "sentence structures. Mix formal and informal tone naturally. Place business name organically "
             "within sentences, avoid starting with it.",
}

TONE_GUIDE = {
    "Friendly": "warm and approachable, like telling a friend",
    "Professional": "measured and polished, focused on facts",
    "Casual": "relaxed and informal, short everyday phrasing",
    "Grateful": "thankful, highlighting how the staff helped",
}

USE_CASE_GUIDE = {
    "Customer review": "a customer who paid for the product or service",
    "Student feedback": "a student or parent describing their learning experience",
    "Patient experience": "a patient or family member describing their care",
}

REVIEW_STRUCTURES = [
    "experience_first", "recommendation_first", "specific_detail_first",
    "comparison_based", "story_telling", "direct_feedback",
]

WRITING_STYLES = [
    "conversational", "descriptive", "concise", "enthusiastic",
    "analytical", "personal", "professional",
]


def pick_language(language: Optional[str], rng: random.Random) -> str:
    """Requested language, or a random base language when none was given."""
    if language and language.strip():
        return language.strip()
    return rng.choice(BASE_LANGUAGES)


def pick_services(services: Sequence[str], rng: random.Random, limit: int = 3) -> List[str]:
    shuffled = list(services)
    rng.shuffle(shuffled)
    return shuffled[:limit]


def language_instruction(language: str) -> str:
    if language in LANGUAGE_INSTRUCTIONS:
        return LANGUAGE_INSTRUCTIONS[language]
    parts = [p.strip() for p in language.split("+") if p.strip()]
    if len(parts) > 1:
        return (
            f"Mix {' and '.join(parts)} naturally the way bilingual locals talk, switching between "
            "them mid-sentence where it feels natural. Use English transliteration for Hindi and Gujarati words."
        )
    return f"Write entirely in {language}, in natural everyday phrasing a local customer would use."


def build_review_prompt(
    request: ReviewRequest,
    language: str,
    services: Sequence[str],
    structure: str,
    style: str,
    min_chars: int,
    max_chars: int,
) -> str:
    context = business_context(request.category, request.business_name)
    tone = request.tone or "Friendly"
    use_case = request.use_case or "Customer review"

    service_instructions = ""
    if services:
        service_instructions = (
            f"\nFocus on these specific aspects naturally: {', '.join(services)}. \n"
            "Mention them in different ways - some as direct experience, others as observations."
        )
    highlights = f"\nHighlights: {request.highlights.strip()}" if request.highlights and request.highlights.strip() else ""

    return f"""You are generating authentic, natural-sounding Google Maps reviews that feel completely human-written. Each review must be unique in structure, vocabulary, and approach.

BUSINESS DETAILS:
Name: "{request.business_name}"
Type: {request.type or 'Business'} in {request.category or 'General'}
Context: {context}{highlights}
Rating: {request.star_rating}/5 stars
Language: {language}
Tone: {tone} ({TONE_GUIDE.get(tone, tone)})
Reviewer: {USE_CASE_GUIDE.get(use_case, use_case)}
Writing Style: {style}
Review Structure: {structure}
{service_instructions}

CRITICAL REQUIREMENTS:
- EXACT character count: {min_chars}-{max_chars} characters (including spaces and punctuation)
- {language_instruction(language)}
- Write like a real person sharing their genuine experience
- Use varied sentence structures (mix short and long sentences)
- Include specific, believable details that show personal experience
- Avoid generic phrases, templates, or AI-like patterns
- Use natural, conversational language with regional authenticity
- Vary vocabulary - don't repeat words or phrases from previous reviews
- Include realistic imperfections in language (like real people write)
- Mention specific aspects: {context}
- NO hashtags, NO emojis, NO excessive punctuation
- Make each review structurally different from others
- Sentiment: {SENTIMENT_GUIDE[request.star_rating]}

UNIQUENESS REQUIREMENTS:
- Never use the same opening or closing phrases
- Vary sentence patterns and word choices completely
- Create different narrative approaches each time
- Use different ways to express similar sentiments
- Avoid repetitive structures or templates

Generate ONLY the review text (no quotes, formatting, or explanations):"""


def build_tagline_prompt(business_name: str, category: str, type_: str) -> str:
    return f"""Generate a catchy, professional tagline for "{business_name}" which is a {type_ or 'business'} in the {category or 'Services'} category.

Requirements:
- Keep it under 8 words
- Make it memorable and professional
- Reflect the business type and category
- Use action words or emotional appeal
- Avoid clichés like "Your trusted partner"
- Make it unique and specific to the business

Return only the tagline, no quotes or extra text."""


def clean_output(text: str) -> str:
    """Strip whitespace and wrapping quotes models like to add."""
    t = (text or "").strip()
    while len(t) >= 2 and t[0] == t[-1] and t[0] in "\"'“”`":
        t = t[1:-1].strip()
    if len(t) >= 2 and t[0] == "“" and t[-1] == "”":
        t = t[1:-1].strip()
    return t
