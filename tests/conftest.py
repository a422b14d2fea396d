import random
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from review_cards.api.v1.deps import get_review_generator
from review_cards.config import Settings
from review_cards.main import create_app
from review_cards.services.exceptions import LLMError
from review_cards.services.llm import TextGenerator
from review_cards.services.reviews import ReviewGenerator

ADMIN_MOBILE = "9000000001"
ADMIN_PASSWORD = "s3cret-pass"


class FakeGenerator(TextGenerator):
    """Replays canned replies; an Exception in the list is raised instead of returned."""

    def __init__(self, replies: List, provider: str = "fake", model: str = "fake-1"):
        self.replies = list(replies)
        self.provider = provider
        self.model = model
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise LLMError(f"{self.provider} has no more replies")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def settings(tmp_path) -> Settings:
    d = tmp_path / "data"
    return Settings(
        data_dir=str(d),
        cards_file=str(d / "review_cards.json"),
        api_configs_file=str(d / "api_configurations.json"),
        supabase_url=None,
        supabase_key=None,
        gemini_api_key=None,
        openai_api_key=None,
        admin_mobile=ADMIN_MOBILE,
        admin_password=ADMIN_PASSWORD,
        review_min_chars=20,
        review_max_chars=120,
        review_max_retries=3,
        otel_enabled=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(client):
    resp = client.post("/api/v1/auth/login", json={"mobile": ADMIN_MOBILE, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def use_generators(app, settings):
    """Route review generation through the given fake generators."""

    def _install(*generators: TextGenerator, seed: Optional[int] = 0) -> None:
        app.dependency_overrides[get_review_generator] = lambda: ReviewGenerator(
            list(generators), app.state.tracker, settings, rng=random.Random(seed)
        )

    yield _install
    app.dependency_overrides.clear()
