"""
Case Storage Service
Persists intake records to the Supabase ``cases`` table and merges later turns into them
"""

import os
from datetime import datetime, timezone

import httpx
from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import Client, ClientOptions, create_client

from src.config.logging_config import setup_logger
from src.config.settings import config
from src.services.errors import CaseStoreError
from src.services.protocols import CaseStore

from .models import CaseFacts, case_facts_from_row, case_summary, merge_case_facts

logger = setup_logger(__name__)


class SupabaseCaseStore:
    """
    CRUD for the ``cases`` table.

    Columns: id, client_name, contact_info, employer_name, incident_date,
    incident_description, disciplinary_hearing_held, merits_assessed, summary,
    facts (jsonb), created_at, updated_at. Concurrent updates to one case are
    last-writer-wins.

    Calls run in a worker thread under the persist stage timeout, and a timed-out
    thread is not cancelled. Each request is capped at a third of the stage timeout
    (persist makes at most two), so the worker abandons its requests before the stage
    reports a timeout instead of writing a row the caller never hears about.
    """

    def __init__(self, url: str | None = None, key: str | None = None, table: str | None = None):
        self.url = url or os.getenv("SUPABASE_URL")
        self.key = key or os.getenv("SUPABASE_KEY")
        if not self.url or not self.key:
            raise ValueError("Supabase URL and KEY required")
        self.table = table or config.CASES_TABLE
        self.request_timeout = config.STAGE_TIMEOUT_SECONDS / 3
        self._client: Client | None = None

    @property
    def client(self) -> Client:
        if self._client is None:
            options = ClientOptions(postgrest_client_timeout=self.request_timeout)
            self._client = create_client(self.url, self.key, options=options)
        return self._client

    def insert_case(self, row: dict) -> str:
        try:
            result = self.client.table(self.table).insert(row).execute()
        except (PostgrestAPIError, httpx.HTTPError, OSError) as e:
            logger.error("Failed to insert case: %s", e)
            raise CaseStoreError("persist", str(e)) from e
        if not result.data:
            raise CaseStoreError("persist", "insert returned no row")
        return str(result.data[0]["id"])

    def get_case(self, case_id: str) -> dict | None:
        try:
            result = self.client.table(self.table).select("*").eq("id", case_id).limit(1).execute()
        except (PostgrestAPIError, httpx.HTTPError, OSError) as e:
            logger.error("Failed to load case %s: %s", case_id, e)
            raise CaseStoreError("persist", str(e)) from e
        return result.data[0] if result.data else None

    def update_case(self, case_id: str, row: dict) -> None:
        try:
            self.client.table(self.table).update(row).eq("id", case_id).execute()
        except (PostgrestAPIError, httpx.HTTPError, OSError) as e:
            logger.error("Failed to update case %s: %s", case_id, e)
            raise CaseStoreError("persist", str(e)) from e

    def list_cases(self) -> list[dict]:
        try:
            result = self.client.table(self.table).select("*").order("updated_at", desc=True).execute()
        except (PostgrestAPIError, httpx.HTTPError, OSError) as e:
            logger.error("Failed to list cases: %s", e)
            raise CaseStoreError("list", str(e)) from e
        return result.data or []


def build_case_row(facts: CaseFacts) -> dict:
    """Columns written on every insert/update; updated_at and the facts blob always refresh."""
    return {
        **facts.model_dump(),
        "summary": case_summary(facts),
        "facts": facts.model_dump(),
        "updated_at": datetime.now(timezone.utc).isoformat(),
    }


def persist_case(store: CaseStore, case_id: str | None, facts: CaseFacts) -> tuple[str, CaseFacts]:
    """
    Create or merge-update the case and return ``(case_id, stored_facts)``.

    Without a case_id a new row is inserted. With one, the stored record is merged
    with ``facts`` so a field known earlier is never reset to unknown. An id with no
    stored row starts a new case.
    """
    if case_id:
        existing = store.get_case(case_id)
        if existing is not None:
            merged = merge_case_facts(case_facts_from_row(existing), facts)
            store.update_case(case_id, build_case_row(merged))
            logger.info("Updated case %s", case_id)
            return case_id, merged
        logger.warning("Case %s not found; starting a new case", case_id)

    new_id = store.insert_case(build_case_row(facts))
    logger.info("Created case %s", new_id)
    return new_id, facts
