"""Supabase client handles.

``SupabaseClients`` bundles the two clients the API talks through: the
*public* client (anon key) for end-user auth flows and the *admin* client
(service-role key) for table, storage and auth-admin calls.  The pair is
built once per process and handed to request handlers via the
``get_clients`` dependency.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from supabase import Client, PostgrestAPIError, create_client

from app.core.config import Settings, settings

# PostgREST code for ".single()" matching zero rows
NOT_FOUND_CODE = "PGRST116"


@dataclass(frozen=True)
class SupabaseClients:
    """Process-wide Supabase client handles."""

    public: Client
    admin: Client


def create_clients(config: Settings) -> SupabaseClients:
    """Create the public and admin clients from *config*."""
    return SupabaseClients(
        public=create_client(config.SUPABASE_URL, config.SUPABASE_ANON_KEY),
        admin=create_client(config.SUPABASE_URL, config.admin_key),
    )


def get_clients(request: Request) -> SupabaseClients:
    """Return the clients stored on ``app.state``, creating them on first use."""
    clients: SupabaseClients | None = getattr(request.app.state, "supabase", None)
    if clients is None:
        clients = create_clients(settings)
        request.app.state.supabase = clients
    return clients


def is_not_found(exc: BaseException) -> bool:
    """True when *exc* is PostgREST's "no rows" error rather than a failure."""
    return isinstance(exc, PostgrestAPIError) and exc.code == NOT_FOUND_CODE
