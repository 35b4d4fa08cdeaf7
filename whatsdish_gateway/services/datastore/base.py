"""
Data Store Abstract Base Class

Read-only access to the managed store holding restaurant and menu records.
Implementations never raise for query failures; they report them in the
QueryResult so the router decides what the client sees.

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


# Menu items with their nested modifier and option groups
MENU_SELECT = (
    "*,"
    "modifier_groups(*,modifier_items(id,name,name_zh,price)),"
    "option_groups(*,options(id,name,name_zh,price))"
)


@dataclass
class QueryResult:
    """
    Outcome of a store query.

    Attributes:
        rows: Returned records (None when the query failed)
        error: Error message reported by the store
    """
    rows: Optional[list[dict[str, Any]]] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


class BaseDataStore(ABC):
    """Abstract base class for the restaurant/menu store."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the store provider name."""
        pass

    @abstractmethod
    async def fetch(
        self,
        table: str,
        select: str = "*",
        filters: Optional[dict[str, str]] = None,
    ) -> QueryResult:
        """
        Fetch records from a table.

        Args:
            table: Table name (e.g. "restaurants")
            select: Column/embedding selection
            filters: Equality filters, column -> value

        Returns:
            QueryResult: Rows or the store's error
        """
        pass

    async def fetch_menu(self, restaurant_id: str) -> QueryResult:
        """Menu items and their modifiers/options for one restaurant."""
        return await self.fetch(
            "menu_items",
            select=MENU_SELECT,
            filters={"restaurant_id": restaurant_id},
        )

    async def fetch_restaurants(self) -> QueryResult:
        """All restaurants."""
        return await self.fetch("restaurants")
