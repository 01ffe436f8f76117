"""Supabase client wrapper with async context manager support."""

import os
from typing import Any, Optional
from supabase import create_client, acreate_client, Client, AsyncClient
from supabase.client import ClientOptions
from rems.utils.errors import SupabaseError, NotFoundError
import logging

logger = logging.getLogger(__name__)

# Global client instances (singleton pattern)
_client: Optional[Client] = None
_async_client: Optional[AsyncClient] = None


def _get_credentials() -> tuple[str, str]:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

    if not url or not key:
        raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
    return url, key


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url, key = _get_credentials()
        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )
        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"url": url})

    return _client


async def get_async_supabase_client() -> AsyncClient:
    """Get or create the async client; only realtime channels need it."""
    global _async_client

    if _async_client is None:
        url, key = _get_credentials()
        _async_client = await acreate_client(url, key)
        logger.info("Supabase async client initialized", extra={"url": url})

    return _async_client


async def close_supabase_client() -> None:
    """Close Supabase client connections."""
    global _client, _async_client
    if _client:
        _client = None
        logger.info("Supabase client closed")
    if _async_client:
        _async_client = None
        logger.info("Supabase async client closed")


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False


# Generic table helpers. Every mutation is a single-row statement.
async def select_rows(
    table: str,
    filters: Optional[dict[str, Any]] = None,
    order_by: Optional[str] = None,
    descending: bool = False,
    in_filters: Optional[dict[str, list]] = None,
    columns: str = "*",
) -> list[dict]:
    """Select rows matching equality (and optional IN) predicates."""
    async with SupabaseClient() as client:
        try:
            query = client.table(table).select(columns)
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            for column, values in (in_filters or {}).items():
                query = query.in_(column, values)
            if order_by:
                query = query.order(order_by, desc=descending)
            result = query.execute()
        except Exception as e:
            raise SupabaseError(f"Failed to select from {table}: {e}")
    return result.data if result.data else []


async def get_row(table: str, row_id: str) -> Optional[dict]:
    """Get a row by primary key."""
    rows = await select_rows(table, {"id": row_id})
    return rows[0] if rows else None


async def count_rows(
    table: str,
    filters: Optional[dict[str, Any]] = None,
    in_filters: Optional[dict[str, list]] = None,
) -> int:
    """Exact row count for the given predicates."""
    async with SupabaseClient() as client:
        try:
            query = client.table(table).select("id", count="exact")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            for column, values in (in_filters or {}).items():
                query = query.in_(column, values)
            result = query.execute()
        except Exception as e:
            raise SupabaseError(f"Failed to count {table}: {e}")
    if result.count is not None:
        return result.count
    return len(result.data or [])


async def insert_row(table: str, row: dict) -> dict:
    """Insert one row and return it as stored."""
    async with SupabaseClient() as client:
        try:
            result = client.table(table).insert(row).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to insert into {table}: {e}")
    if result.data and len(result.data) > 0:
        return result.data[0]
    raise SupabaseError(f"Failed to insert into {table}: no data returned")


async def update_row(table: str, row_id: str, updates: dict, **match: Any) -> dict:
    """Update one row by id (plus optional ownership columns)."""
    async with SupabaseClient() as client:
        try:
            query = client.table(table).update(updates).eq("id", row_id)
            for column, value in match.items():
                query = query.eq(column, value)
            result = query.execute()
        except Exception as e:
            raise SupabaseError(f"Failed to update {table}: {e}")
    if result.data and len(result.data) > 0:
        return result.data[0]
    raise NotFoundError(table, row_id)


async def delete_row(table: str, row_id: str, **match: Any) -> dict:
    """Delete one row by id (plus optional ownership columns)."""
    async with SupabaseClient() as client:
        try:
            query = client.table(table).delete().eq("id", row_id)
            for column, value in match.items():
                query = query.eq(column, value)
            result = query.execute()
        except Exception as e:
            raise SupabaseError(f"Failed to delete from {table}: {e}")
    if result.data and len(result.data) > 0:
        return result.data[0]
    raise NotFoundError(table, row_id)
