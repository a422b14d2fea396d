# review_cards/core/models.py
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, List, Literal, Optional
from urllib.parse import urlsplit
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator, validator


Provider = Literal["gemini", "openai"]
Tone = Literal["Professional", "Friendly", "Casual", "Grateful"]
UseCase = Literal["Customer review", "Student feedback", "Patient experience"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


# ---------- Helpers ----------

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str) -> str:
    """URL slug for a business name: lowercase ascii words joined by '-'."""
    slug = _SLUG_STRIP.sub("-", name.lower()).strip("-")
    return slug or "card"


def normalize_tags(tags: Iterable[str]) -> List[str]:
    """Trim, lowercase and de-duplicate service tags, keeping first-seen order."""
    out: List[str] = []
    for t in tags:
        t = (t or "").strip().lower()
        if t and t not in out:
            out.append(t)
    return out


def validate_google_maps_url(url: str) -> bool:
    """True for Google Maps place/review links (long, short and write-review forms)."""
    try:
        parts = urlsplit((url or "").strip())
    except ValueError:
        return False
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return False
    host = parts.hostname.lower()
    path = parts.path or ""

    if host in ("g.page", "maps.app.goo.gl"):
        return True
    if host == "goo.gl" and path.startswith("/maps"):
        return True
    if host == "g.co" and path.startswith("/kgs"):
        return True
    if host == "search.google.com" and path.startswith("/local/writereview"):
        return True

    labels = host.split(".")
    if labels[0] == "www":
        labels = labels[1:]
    if len(labels) >= 3 and labels[0] == "maps" and labels[1] == "google":
        return True
    if len(labels) >= 2 and labels[0] == "google" and path.startswith("/maps"):
        return True
    return False


# ---------- Review cards ----------

class ReviewCard(BaseModel):
    """A business profile customers open to get review text."""
    id: str = Field(default_factory=new_id)
    business_name: str = Field(..., min_length=1)
    category: str = ""
    type: str = ""
    description: str = ""
    location: str = ""
    services: List[str] = Field(default_factory=list)
    slug: str
    logo_url: str = ""
    google_maps_url: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @validator("description", "location", "logo_url", "category", "type", pre=True)
    def _none_to_empty(cls, v):
        return v or ""

    @validator("services", pre=True)
    def _services_list(cls, v):
        return normalize_tags(v or [])


class _CardFields(BaseModel):
    @validator("business_name", check_fields=False)
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("business_name cannot be blank")
        return v

    @validator("google_maps_url", check_fields=False)
    def _maps_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not validate_google_maps_url(v):
            raise ValueError("Please enter a valid Google Maps review URL")
        return v

    @validator("services", check_fields=False)
    def _tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return normalize_tags(v)

    @validator("category", "type", "description", "location", check_fields=False)
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v is not None else None


class ReviewCardCreate(_CardFields):
    business_name: str
    category: str = ""
    type: str = ""
    description: str = ""
    location: str = ""
    services: List[str] = Field(default_factory=list)
    logo_url: str = ""
    google_maps_url: str


class ReviewCardUpdate(_CardFields):
    """Partial update; the slug is kept so shared links stay valid."""
    business_name: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    services: Optional[List[str]] = None
    logo_url: Optional[str] = None
    google_maps_url: Optional[str] = None


# ---------- Review generation ----------

class ReviewRequest(BaseModel):
    business_name: str = Field(..., min_length=1)
    category: str = ""
    type: str = ""
    highlights: Optional[str] = None
    selected_services: List[str] = Field(default_factory=list)
    star_rating: int = Field(..., ge=1, le=5)
    language: Optional[str] = None
    tone: Optional[Tone] = None
    use_case: Optional[UseCase] = None
    min_chars: Optional[int] = Field(None, ge=1)
    max_chars: Optional[int] = Field(None, ge=1)
    max_retries: Optional[int] = Field(None, ge=1, le=10)

    @model_validator(mode="after")
    def _band_order(self) -> "ReviewRequest":
        if self.min_chars is not None and self.max_chars is not None and self.min_chars > self.max_chars:
            raise ValueError("min_chars must not exceed max_chars")
        return self


class CardReviewRequest(BaseModel):
    """Customer-side options when generating from a saved card."""
    star_rating: int = Field(5, ge=1, le=5)
    language: Optional[str] = "English"
    tone: Optional[Tone] = "Friendly"
    use_case: Optional[UseCase] = None
    services: List[str] = Field(default_factory=list)


class GeneratedReview(BaseModel):
    text: str
    hash: str
    language: str
    rating: int
    source: Literal["ai", "fallback"] = "ai"
    provider: Optional[str] = None
    model: Optional[str] = None
    attempts: int = 0


class TaglineRequest(BaseModel):
    business_name: str = Field(..., min_length=1)
    category: str = ""
    type: str = ""


class TaglineResponse(BaseModel):
    tagline: str
    source: Literal["ai", "fallback"]


class UsageStats(BaseModel):
    total_generated: int
    tracked_hashes: int


# ---------- Provider configuration ----------

class ApiConfiguration(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(..., min_length=1)
    provider: Provider
    api_key: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    is_active: bool = True
    priority: int = Field(1, ge=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def public(self) -> "ApiConfigurationView":
        key = self.api_key
        hint = ("*" * 4) + key[-4:] if len(key) > 4 else "*" * len(key)
        return ApiConfigurationView(
            **self.model_dump(exclude={"api_key"}),
            api_key_hint=hint,
        )


class ApiConfigurationView(BaseModel):
    id: str
    name: str
    provider: Provider
    api_key_hint: str
    model: str
    is_active: bool
    priority: int
    created_at: datetime
    updated_at: datetime


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("value cannot be blank")
    return v


class ApiConfigurationCreate(BaseModel):
    name: str = Field(..., min_length=1)
    provider: Provider
    api_key: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    is_active: bool = True
    priority: int = Field(1, ge=1)

    @validator("name", "api_key", "model")
    def _strip(cls, v: str) -> str:
        return _not_blank(v)


class ApiConfigurationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    provider: Optional[Provider] = None
    api_key: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    is_active: Optional[bool] = None
    priority: Optional[int] = Field(None, ge=1)

    @validator("name", "api_key", "model")
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return _not_blank(v)


# ---------- Auth / storage results ----------

class LoginRequest(BaseModel):
    mobile: str
    password: str


class LoginResponse(BaseModel):
    token: str
    expires_at: datetime


class MigrationResult(BaseModel):
    migrated: int = 0
    already_present: int = 0
    failed: int = 0
    cleared_local: bool = False
    skipped: bool = False
