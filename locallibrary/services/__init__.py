"""Business logic services."""
from locallibrary.services.catalog import Dependent, EntityManager, EntityType, Reference
from locallibrary.services.entities import AUTHOR, BOOK, BOOK_INSTANCE, ENTITY_TYPES, GENRE
from locallibrary.services.outcomes import Outcome, Redirect, Render
from locallibrary.services.summary import SummaryService

__all__ = [
    "AUTHOR",
    "BOOK",
    "BOOK_INSTANCE",
    "Dependent",
    "ENTITY_TYPES",
    "EntityManager",
    "EntityType",
    "GENRE",
    "Outcome",
    "Redirect",
    "Reference",
    "Render",
    "SummaryService",
]
