from types import SimpleNamespace

import pytest

from review_cards.core.models import ReviewCard
from review_cards.services.exceptions import RepoError
from review_cards.services.repo.supabase_repo import SupabaseCardRepo

ROW = {
    "id": "1b4e28ba-2fa1-41d2-883f-0016d3cca427",
    "business_name": "Annapurna",
    "category": "Food & Beverage",
    "type": "Restaurant",
    "description": None,
    "location": "Surat",
    "services": ["taste"],
    "slug": "annapurna",
    "logo_url": None,
    "google_maps_url": "https://maps.app.goo.gl/abc123",
    "created_at": "2025-07-01T10:00:00+00:00",
    "updated_at": "2025-07-01T10:00:00+00:00",
}


class FakeQuery:
    """Records the builder chain; execute() returns the table's canned rows or raises."""

    def __init__(self, client, table):
        self.client = client
        self.calls = [("table", table)]
        client.queries.append(self)

    def __getattr__(self, name):
        if name not in ("select", "order", "eq", "limit", "insert", "update", "delete"):
            raise AttributeError(name)

        def step(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return step

    def execute(self):
        if self.client.error is not None:
            raise self.client.error
        return SimpleNamespace(data=self.client.rows)


class FakeClient:
    def __init__(self, rows=None, error=None):
        self.rows = rows if rows is not None else []
        self.error = error
        self.queries = []

    def table(self, name):
        return FakeQuery(self, name)


def _card():
    return ReviewCard(id=ROW["id"], business_name="Annapurna", slug="annapurna",
                      google_maps_url=ROW["google_maps_url"])


def test_list_is_newest_first():
    client = FakeClient(rows=[ROW])
    cards = SupabaseCardRepo(client).list()
    assert [c.slug for c in cards] == ["annapurna"]
    assert cards[0].description == ""
    assert client.queries[0].calls == [
        ("table", "review_cards"),
        ("select", ("*",), {}),
        ("order", ("created_at",), {"desc": True}),
    ]


def test_get_by_slug_takes_first_match():
    client = FakeClient(rows=[ROW])
    card = SupabaseCardRepo(client).get_by_slug("annapurna")
    assert card.id == ROW["id"]
    assert client.queries[0].calls[1:] == [
        ("select", ("*",), {}),
        ("eq", ("slug", "annapurna"), {}),
        ("limit", (1,), {}),
    ]


def test_lookup_miss_is_none():
    assert SupabaseCardRepo(FakeClient(rows=[])).get("nope") is None


def test_insert_update_delete_chains():
    client = FakeClient()
    repo = SupabaseCardRepo(client)
    card = _card()
    repo.insert(card)
    repo.update(card)
    repo.delete(card.id)

    insert, update, delete = (q.calls for q in client.queries)
    assert insert[1][0] == "insert"
    assert insert[1][1][0][0]["id"] == card.id
    assert update[1][0] == "update" and "id" not in update[1][1][0]
    assert update[2] == ("eq", ("id", card.id), {})
    assert delete[1:] == [("delete", (), {}), ("eq", ("id", card.id), {})]


def test_ping_selects_one_id():
    client = FakeClient()
    SupabaseCardRepo(client).ping()
    assert client.queries[0].calls[1:] == [("select", ("id",), {}), ("limit", (1,), {})]


@pytest.mark.parametrize("call", [
    lambda repo: repo.list(),
    lambda repo: repo.get_by_slug("annapurna"),
    lambda repo: repo.insert(_card()),
    lambda repo: repo.update(_card()),
    lambda repo: repo.delete("x"),
    lambda repo: repo.ping(),
])
def test_client_errors_become_repo_error(call):
    repo = SupabaseCardRepo(FakeClient(error=ConnectionError("connection refused")))
    with pytest.raises(RepoError):
        call(repo)


def test_malformed_row_becomes_repo_error():
    with pytest.raises(RepoError):
        SupabaseCardRepo(FakeClient(rows=[{"id": "x"}])).list()
