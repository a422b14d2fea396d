from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from supabase import Client, create_client

from review_cards.config import Settings
from review_cards.core.models import ApiConfiguration, ReviewCard, utcnow
from review_cards.services.exceptions import RepoError

M = TypeVar("M", bound=BaseModel)

_UUID = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.I)


def is_valid_uuid(value: str) -> bool:
    return bool(_UUID.match(value or ""))


@lru_cache(maxsize=4)
def _client_for(url: str, key: str) -> Client:
    return create_client(url, key)


def make_client(settings: Settings) -> Optional[Client]:
    """Supabase client, or None when SUPABASE_URL/SUPABASE_KEY are not both set."""
    if not settings.supabase_configured:
        return None
    try:
        return _client_for(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        raise RepoError(f"Could not initialize Supabase client: {e}") from e


class SupabaseRecordRepo(Generic[M]):
    """One Postgres table behind the Supabase REST API. Every failure surfaces as RepoError."""
    model: Type[M]
    table: str
    # Columns stored as NULL instead of an empty string.
    nullable: tuple = ()

    def __init__(self, client: Client):
        self._client = client

    def _table(self):
        return self._client.table(self.table)

    # -- row mapping --

    def from_row(self, row: Dict[str, Any]) -> M:
        return self.model.model_validate(row)

    def _base_row(self, record: M) -> Dict[str, Any]:
        row = record.model_dump(mode="json")
        for col in self.nullable:
            if row.get(col) == "":
                row[col] = None
        return row

    def to_insert(self, record: M) -> Dict[str, Any]:
        row = self._base_row(record)
        # Let Postgres generate the id for legacy, non-uuid ids.
        if not is_valid_uuid(row.get("id", "")):
            row.pop("id", None)
        return row

    def to_update(self, record: M) -> Dict[str, Any]:
        row = self._base_row(record)
        row.pop("id", None)
        row.pop("created_at", None)
        row["updated_at"] = utcnow().isoformat()
        return row

    # -- queries --

    def list(self) -> List[M]:
        try:
            res = self._table().select("*").order("created_at", desc=True).execute()
            return [self.from_row(r) for r in (res.data or [])]
        except Exception as e:
            raise RepoError(f"Supabase select from {self.table} failed: {e}") from e

    def find_by(self, column: str, value: Any) -> Optional[M]:
        try:
            res = self._table().select("*").eq(column, value).limit(1).execute()
            rows = res.data or []
            return self.from_row(rows[0]) if rows else None
        except Exception as e:
            raise RepoError(f"Supabase lookup {self.table}.{column} failed: {e}") from e

    def get(self, record_id: str) -> Optional[M]:
        return self.find_by("id", record_id)

    def insert(self, record: M) -> None:
        try:
            self._table().insert([self.to_insert(record)]).execute()
        except Exception as e:
            raise RepoError(f"Supabase insert into {self.table} failed: {e}") from e

    def update(self, record: M) -> None:
        try:
            self._table().update(self.to_update(record)).eq("id", getattr(record, "id")).execute()
        except Exception as e:
            raise RepoError(f"Supabase update of {self.table} failed: {e}") from e

    def delete(self, record_id: str) -> None:
        try:
            self._table().delete().eq("id", record_id).execute()
        except Exception as e:
            raise RepoError(f"Supabase delete from {self.table} failed: {e}") from e

    def ping(self) -> None:
        try:
            self._table().select("id").limit(1).execute()
        except Exception as e:
            raise RepoError(f"Supabase connection test on {self.table} failed: {e}") from e


class SupabaseCardRepo(SupabaseRecordRepo[ReviewCard]):
    model = ReviewCard
    table = "review_cards"
    nullable = ("description", "location", "logo_url")

    def get_by_slug(self, slug: str) -> Optional[ReviewCard]:
        return self.find_by("slug", slug)


class SupabaseApiConfigRepo(SupabaseRecordRepo[ApiConfiguration]):
    model = ApiConfiguration
    table = "api_configurations"
