"""Task-tracking record stores: Supabase (default) and Airtable."""

from __future__ import annotations

import logging
import os
from typing import Any, Protocol, cast

import httpx
from supabase import Client, create_client

from meeting_governance.config import settings
from meeting_governance.errors import RecordStoreError

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    def create(self, base_id: str, table: str, fields: dict[str, Any]) -> str: ...


def get_supabase_client() -> Client:
    """Create and return a Supabase client from environment variables."""
    return create_client(
        os.getenv("SUPABASE_URL", settings.supabase_url),
        os.getenv("SUPABASE_KEY", settings.supabase_key),
    )


class SupabaseRecordStore:
    """Inserts task rows into ``{base_id}.{table}``; the base id is the Postgres schema."""

    def __init__(self, client: Client | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def create(self, base_id: str, table: str, fields: dict[str, Any]) -> str:
        try:
            result = self.client.schema(base_id).table(table).insert(fields).execute()
        except Exception as exc:
            raise RecordStoreError(f"Supabase insert into {base_id}.{table} failed: {exc}") from exc

        rows = cast(list[dict[str, Any]], result.data)
        if not rows:
            raise RecordStoreError(f"Supabase insert into {base_id}.{table} returned no row")
        return str(rows[0]["id"])


class AirtableRecordStore:
    """Creates records through the Airtable REST API."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(timeout=settings.http_timeout_seconds)
        self._api_url = (api_url or settings.airtable_api_url).rstrip("/")
        key = api_key if api_key is not None else settings.airtable_api_key
        self._headers = {"Authorization": f"Bearer {key}"}

    def create(self, base_id: str, table: str, fields: dict[str, Any]) -> str:
        url = f"{self._api_url}/{base_id}/{table}"
        try:
            response = self._client.post(url, headers=self._headers, json={"fields": fields})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise RecordStoreError(
                f"Airtable returned {exc.response.status_code} for {base_id}/{table}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"Airtable request failed: {exc}") from exc
        return str(response.json()["id"])


def get_record_store() -> RecordStore:
    """Return the record store selected by ``settings.record_backend``."""
    backend = settings.record_backend.lower()
    if backend == "airtable":
        return AirtableRecordStore()
    if backend == "supabase":
        return SupabaseRecordStore()
    raise ValueError(f"Unknown record backend: {settings.record_backend}")
