"""Beanie initialization for ODM."""

from beanie import init_beanie
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.schemas.admin import Admin
from app.schemas.event import Event

# Admin and Event live in separate collections ("admin", "event")
DOCUMENT_MODELS = [
    Admin,
    Event,
]


async def init_beanie_odm(database: AsyncIOMotorDatabase) -> None:
    """Register every document model on the database and create their indexes."""
    await init_beanie(
        database=database,  # type: ignore[arg-type]
        document_models=DOCUMENT_MODELS,
    )
    logger.debug(f"Beanie models registered: {[model.__name__ for model in DOCUMENT_MODELS]}")


__all__ = ["DOCUMENT_MODELS", "init_beanie_odm"]
