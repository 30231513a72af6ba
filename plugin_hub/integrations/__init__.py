"""Clients for the external Supabase projects."""

from plugin_hub.integrations.supabase_auth import IdentityBridge, SupabaseIdentityBridge
from plugin_hub.integrations.supabase_query import QueryGateway, SupabaseQueryGateway

__all__ = [
    "IdentityBridge",
    "QueryGateway",
    "SupabaseIdentityBridge",
    "SupabaseQueryGateway",
]
