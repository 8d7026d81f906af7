"""Page collection over boto3 paginators."""

import threading
from typing import Iterable, Optional


class TraversalCancelled(Exception):
    """Raised when the cancellation event is set between two page fetches."""


def collect_pages(
    pages: Iterable[dict],
    result_key: str,
    stop_if_first_page_empty: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> list:
    """Drain a lazy page iterable (e.g. paginator.paginate()) and return every item.

    Pages are pulled one at a time, so the cancellation event is checked before
    each fetch. A page with no items does not end the traversal unless it is the
    first one and stop_if_first_page_empty is set. Any exception raised while
    fetching a page propagates and the pages collected so far are dropped.
    """
    items = []
    page_iterator = iter(pages)
    first_page = True

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise TraversalCancelled()

        page = next(page_iterator, None)
        if page is None:
            return items

        page_items = page.get(result_key, [])
        if first_page and stop_if_first_page_empty and not page_items:
            return []
        first_page = False

        items.extend(page_items)
