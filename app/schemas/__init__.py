"""Beanie ODM schemas for MongoDB collections."""

from .admin import Admin
from .event import (
    EVENT_FIELDS,
    EVENT_SERVICE_FIELDS,
    EVENT_UPDATABLE_FIELDS,
    SLUG_FIELDS,
    Event,
)
from .event_status import EventStatus
from .init import DOCUMENT_MODELS, init_beanie_odm

__all__ = [
    "Admin",
    "DOCUMENT_MODELS",
    "EVENT_FIELDS",
    "EVENT_SERVICE_FIELDS",
    "EVENT_UPDATABLE_FIELDS",
    "Event",
    "EventStatus",
    "SLUG_FIELDS",
    "init_beanie_odm",
]
