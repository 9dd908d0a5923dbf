"""Record store backed by Supabase, passed explicitly into each component."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.config import AppConfig
from src.utils.errors import SupabaseError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)


class RecordStore(ABC):
    """Generic table store: lookups by key, inserts, partial updates, upserts."""

    @abstractmethod
    def get(self, table: str, key: str, value: Any) -> Optional[dict]:
        """Return the first record where `key == value`, or None."""

    @abstractmethod
    def select(self, table: str, key: str, value: Any) -> list[dict]:
        """Return all records where `key == value`."""

    @abstractmethod
    def insert(self, table: str, fields: dict) -> dict:
        """Insert a record and return it with generated columns."""

    @abstractmethod
    def update(self, table: str, key: str, value: Any, fields: dict) -> dict:
        """Update only `fields` on the record where `key == value`."""

    @abstractmethod
    def upsert(self, table: str, fields: dict, on_conflict: str) -> dict:
        """Insert or update on the `on_conflict` column and return the record."""


def create_supabase_client(config: AppConfig) -> Client:
    """Create a Supabase client for one handler invocation."""
    if not config.supabase_url or not config.supabase_service_role_key:
        raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )
    client = create_client(config.supabase_url, config.supabase_service_role_key, options)
    logger.info("Supabase client initialized", supabase_url=config.supabase_url)
    return client


class SupabaseRecordStore(RecordStore):
    """RecordStore over supabase-py table queries."""

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_config(cls, config: AppConfig) -> "SupabaseRecordStore":
        return cls(create_supabase_client(config))

    def get(self, table: str, key: str, value: Any) -> Optional[dict]:
        try:
            result = self.client.table(table).select("*").eq(key, value).limit(1).execute()
            return result.data[0] if result.data else None
        except Exception as e:
            raise SupabaseError(f"Failed to get {table} by {key}: {e}")

    def select(self, table: str, key: str, value: Any) -> list[dict]:
        try:
            result = self.client.table(table).select("*").eq(key, value).execute()
            return result.data if result.data else []
        except Exception as e:
            raise SupabaseError(f"Failed to select {table} by {key}: {e}")

    def insert(self, table: str, fields: dict) -> dict:
        try:
            result = self.client.table(table).insert(fields).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to insert into {table}: {e}")
        if result.data:
            return result.data[0]
        raise SupabaseError(f"Failed to insert into {table}: no data returned")

    def update(self, table: str, key: str, value: Any, fields: dict) -> dict:
        try:
            result = self.client.table(table).update(fields).eq(key, value).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update {table}: {e}")
        if result.data:
            return result.data[0]
        raise SupabaseError(f"Failed to update {table}: {value}")

    def upsert(self, table: str, fields: dict, on_conflict: str) -> dict:
        try:
            result = self.client.table(table).upsert(fields, on_conflict=on_conflict).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to upsert into {table}: {e}")
        if result.data:
            return result.data[0]
        raise SupabaseError(f"Failed to upsert into {table}: no data returned")
