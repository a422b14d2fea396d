from __future__ import annotations

import logging
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

from review_cards.config import Settings
from review_cards.core.models import ApiConfiguration, MigrationResult, ReviewCard
from review_cards.services.exceptions import RepoError
from .json_repo import JSONApiConfigRepo, JSONCardRepo, JSONRecordRepo
from .supabase_repo import SupabaseApiConfigRepo, SupabaseCardRepo, SupabaseRecordRepo, make_client

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class DualWriteStore(Generic[M]):
    """
    Local cache first, Supabase second.

    Writes land in the local cache (a failure there is an error) and are then pushed
    to Supabase on a best-effort basis: remote failures are logged and swallowed, so
    the last writer wins and nothing is reconciled. Reads prefer Supabase and refresh
    the cache from it, falling back to the cache when the remote is down.
    """

    def __init__(self, local: JSONRecordRepo[M], remote: Optional[SupabaseRecordRepo[M]] = None):
        self.local = local
        self.remote = remote

    @property
    def remote_configured(self) -> bool:
        return self.remote is not None

    def get_all(self) -> List[M]:
        if self.remote is None:
            return self.local.list()
        try:
            records = self.remote.list()
        except RepoError as e:
            logger.warning("Supabase read failed, falling back to local cache: %s", e)
            return self.local.list()
        try:
            self.local.replace_all(records)
        except RepoError as e:
            logger.warning("Could not refresh local cache: %s", e)
        logger.debug("Fetched %d records from %s", len(records), self.remote.table)
        return records

    def get(self, record_id: str) -> Optional[M]:
        if self.remote is not None:
            try:
                found = self.remote.get(record_id)
                if found is not None:
                    return found
            except RepoError as e:
                logger.warning("Supabase lookup failed, using local cache: %s", e)
        return self.local.get(record_id)

    def add(self, record: M) -> None:
        self.local.add(record)
        if self.remote is None:
            return
        try:
            self.remote.insert(record)
        except RepoError as e:
            logger.error("Remote insert failed (kept in local cache): %s", e)

    def update(self, record: M) -> None:
        if not self.local.update(record):
            # Known remotely but missing from a stale cache.
            self.local.add(record)
        if self.remote is None:
            return
        try:
            self.remote.update(record)
        except RepoError as e:
            logger.error("Remote update failed (kept local changes): %s", e)

    def delete(self, record_id: str) -> None:
        self.local.delete(record_id)
        if self.remote is None:
            return
        try:
            self.remote.delete(record_id)
        except RepoError as e:
            logger.error("Remote delete failed (kept local changes): %s", e)

    def sync(self) -> Optional[int]:
        """Overwrite the local cache with the remote rows. None when skipped or failed."""
        if self.remote is None:
            logger.info("Supabase not configured, sync skipped")
            return None
        try:
            records = self.remote.list()
            self.local.replace_all(records)
        except RepoError as e:
            logger.error("Error syncing %s: %s", self.remote.table, e)
            return None
        logger.info("Data sync completed - %d records synced", len(records))
        return len(records)


class CardStore(DualWriteStore[ReviewCard]):
    local: JSONCardRepo
    remote: Optional[SupabaseCardRepo]

    def get_by_slug(self, slug: str) -> Optional[ReviewCard]:
        if self.remote is not None:
            try:
                card = self.remote.get_by_slug(slug)
                if card is not None:
                    return card
                logger.debug("Card %r not in Supabase, checking local cache", slug)
            except RepoError as e:
                logger.warning("Supabase lookup failed, using local cache: %s", e)
        return self.local.get_by_slug(slug)

    def unique_slug(self, base: str, exclude_id: Optional[str] = None) -> str:
        taken = {c.slug for c in self.get_all() if c.id != exclude_id}
        slug, n = base, 2
        while slug in taken:
            slug = f"{base}-{n}"
            n += 1
        return slug

    def migrate_from_local(self) -> MigrationResult:
        """
        Push cached cards that Supabase does not have yet (matched by slug).

        The cache is cleared only when every card made it across.
        """
        if self.remote is None:
            logger.info("Supabase not configured, skipping migration")
            return MigrationResult(skipped=True)
        try:
            self.remote.ping()
        except RepoError as e:
            logger.error("Supabase connection test failed, skipping migration: %s", e)
            return MigrationResult(skipped=True)

        cards = self.local.list()
        result = MigrationResult()
        if not cards:
            logger.info("No local cards to migrate")
            return result

        logger.info("Starting migration of %d cards to Supabase", len(cards))
        for card in cards:
            try:
                if self.remote.get_by_slug(card.slug) is not None:
                    result.already_present += 1
                    continue
                self.remote.insert(card)
                result.migrated += 1
            except RepoError as e:
                logger.error("Failed to migrate card %r: %s", card.business_name, e)
                result.failed += 1

        logger.info("Migration completed: %d migrated, %d already present, %d failed",
                    result.migrated, result.already_present, result.failed)
        if result.failed == 0:
            self.local.clear()
            result.cleared_local = True
        return result


class ApiConfigStore(DualWriteStore[ApiConfiguration]):
    local: JSONApiConfigRepo
    remote: Optional[SupabaseApiConfigRepo]


def _client_or_none(settings: Settings):
    try:
        return make_client(settings)
    except RepoError as e:
        logger.error("%s; continuing with the local cache only", e)
        return None


def build_card_store(settings: Settings) -> CardStore:
    client = _client_or_none(settings)
    return CardStore(JSONCardRepo(settings), SupabaseCardRepo(client) if client is not None else None)


def build_api_config_store(settings: Settings) -> ApiConfigStore:
    client = _client_or_none(settings)
    return ApiConfigStore(JSONApiConfigRepo(settings), SupabaseApiConfigRepo(client) if client is not None else None)
