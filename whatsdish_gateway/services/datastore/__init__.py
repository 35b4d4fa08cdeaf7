"""
Data Store Package

Usage:
    from whatsdish_gateway.services.datastore import SupabaseDataStore

    store = SupabaseDataStore(config, http)
    result = await store.fetch_menu("7")
"""

from whatsdish_gateway.services.datastore.base import MENU_SELECT, BaseDataStore, QueryResult
from whatsdish_gateway.services.datastore.supabase import SupabaseDataStore

__all__ = [
    "BaseDataStore",
    "QueryResult",
    "SupabaseDataStore",
    "MENU_SELECT",
]
