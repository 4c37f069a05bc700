"""Accumulating, de-duplicated cursor pagination for reviews and follow lists."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Generic, Hashable, List, Optional, TypeVar

from tastyplates.services.schemas import Page

from . import messages
from .lifetime import Lifetime
from .notifications import Notifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchPage = Callable[[str, Optional[str]], Awaitable[Page]]


def _item_id(item: Any) -> Hashable:
    return item.id


class PaginatedList(Generic[T]):
    """Items of one parent context (a profile, a restaurant) loaded page by page.

    Scroll-triggered and button-triggered loads both call ``load_page``.
    Failed loads leave the list untouched and are logged; they are also
    toasted when a notifier was given.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        context_id: Optional[str] = None,
        notifier: Optional[Notifier] = None,
        lifetime: Optional[Lifetime] = None,
        key: Callable[[T], Hashable] = _item_id,
        failure_message: str = messages.LOAD_FAILED,
    ):
        self.fetch_page = fetch_page
        self.notifier = notifier
        self.lifetime = lifetime
        self.key = key
        self.failure_message = failure_message
        self.context_id: Optional[str] = None
        self.items: List[T] = []
        self.next_cursor: Optional[str] = None
        self.has_more = True
        self.loading = False
        self._generation = 0
        if context_id is not None:
            self.reset(context_id)

    def reset(self, context_id: Optional[str]) -> None:
        """Switch to another parent context, dropping everything accumulated."""
        self._generation += 1
        self.context_id = None if context_id is None else str(context_id)
        self.items = []
        self.next_cursor = None
        self.has_more = True
        self.loading = False

    def _live(self) -> bool:
        return self.lifetime is None or self.lifetime.alive

    async def load_page(self, cursor: Optional[str] = None) -> Optional[Page]:
        """Load one page; ``cursor=None`` is the first page of the context.

        Returns the fetched page, or None when the load was skipped, failed
        or became stale.
        """
        if self.loading or self.context_id is None:
            return None

        generation = self._generation
        context_id = self.context_id
        self.loading = True
        try:
            page = await self.fetch_page(context_id, cursor)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(f"Loading page {cursor!r} of {context_id} failed")
            if self.notifier is not None and self._live():
                self.notifier.error(self.failure_message)
            return None
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation or not self._live():
            logger.debug(f"Dropping stale page {cursor!r} of {context_id}")
            return None

        if cursor is None:
            self.items = []
        self._append(page.items)
        self.next_cursor = page.next_cursor
        self.has_more = page.has_more and page.next_cursor is not None
        return page

    async def load_more(self) -> Optional[Page]:
        if not self.has_more:
            return None
        return await self.load_page(self.next_cursor)

    def _append(self, new_items: List[T]) -> None:
        seen = {self.key(item) for item in self.items}
        for item in new_items:
            item_key = self.key(item)
            if item_key in seen:
                continue
            seen.add(item_key)
            self.items.append(item)
