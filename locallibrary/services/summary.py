"""Landing page counts across the whole catalog."""
import asyncio

from locallibrary.core.exceptions import StoreError
from locallibrary.core.logging import get_logger
from locallibrary.models import Author, Book, BookInstance, BookInstanceStatus, Genre
from locallibrary.services.outcomes import Render
from locallibrary.store import Store

logger = get_logger("summary")

INDEX_TITLE = "Local Library Home"

COUNTS = (
    ("book_count", Book, ()),
    ("book_instance_count", BookInstance, ()),
    (
        "book_instance_available_count",
        BookInstance,
        (BookInstance.status == BookInstanceStatus.AVAILABLE,),
    ),
    ("author_count", Author, ()),
    ("genre_count", Genre, ()),
)


class SummaryService:
    """Service for the catalog summary page."""

    def __init__(self, store: Store):
        self.store = store

    async def index(self) -> Render:
        """All counts, or the failure instead of any of them."""
        try:
            results = await asyncio.gather(
                *(self.store.count(model, *criteria) for _, model, criteria in COUNTS)
            )
        except StoreError as exc:
            logger.error(f"Catalog counts unavailable: {exc.message}")
            return Render("index", {"title": INDEX_TITLE, "error": exc.message})

        data = {name: count for (name, _, _), count in zip(COUNTS, results)}
        return Render("index", {"title": INDEX_TITLE, "data": data})
