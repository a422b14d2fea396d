from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import Optional, List
from dotenv import load_dotenv
load_dotenv()  # populates os.environ from .env


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # LLM providers (env defaults; api_configurations rows take precedence)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"

    # Review generation
    review_min_chars: int = Field(150, ge=1)
    review_max_chars: int = Field(200, ge=1)
    review_max_retries: int = Field(5, ge=1, le=20)
    review_temperature: float = Field(0.9, ge=0, le=2)
    # Share of already-used 2/3-word phrases at which a review counts as a near-duplicate.
    # 0 rejects on any reused phrase.
    phrase_overlap_threshold: float = Field(0.5, ge=0, le=1)

    # Storage
    data_dir: str = Field("data")
    cards_file: str = Field("data/review_cards.json")
    api_configs_file: str = Field("data/api_configurations.json")
    metrics_file: str = Field("latency_log.jsonl")
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Admin login
    admin_mobile: Optional[str] = None
    admin_password: Optional[str] = None
    session_ttl_minutes: int = Field(720, ge=1)

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://127.0.0.1:5173"])

    # Logging / tracing
    log_level: str = Field("INFO")
    otel_enabled: bool = Field(False)
    otel_endpoint: str = Field("http://127.0.0.1:4318/v1/traces")
    otel_service_name: str = Field("review-cards-api")

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_mobile and self.admin_password)
