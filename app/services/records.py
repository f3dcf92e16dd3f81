"""
Persistence for generated images.

Every query is scoped to the acting user: a record owned by somebody else is
never selected, and deleting it behaves as if it did not exist.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import GeneratedImage

logger = logging.getLogger(__name__)


class RecordNotFound(Exception):
    """The record does not exist or is not owned by the acting user."""


class EmptyImageReference(ValueError):
    """A record cannot be created without an image reference."""


class ImageRecordStore:
    def __init__(self, db: AsyncSession, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    async def create(self, prompt: str, image_url: str) -> GeneratedImage:
        if not image_url:
            raise EmptyImageReference("Cannot store an image record without an image reference")

        record = GeneratedImage(
            user_id=self.owner_id,
            prompt=prompt,
            image_url=image_url,
        )
        self.db.add(record)
        await self.db.commit()
        await self.db.refresh(record)

        logger.info("Stored generated image %s for user %s", record.id, self.owner_id)
        return record

    async def list(self, limit: int = 100, offset: int = 0) -> list[GeneratedImage]:
        """Records owned by the acting user, newest first."""
        result = await self.db.execute(
            select(GeneratedImage)
            .where(GeneratedImage.user_id == self.owner_id)
            .order_by(GeneratedImage.created_at.desc(), GeneratedImage.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get(self, image_id: str) -> GeneratedImage:
        result = await self.db.execute(
            select(GeneratedImage).where(
                GeneratedImage.id == image_id,
                GeneratedImage.user_id == self.owner_id,
            )
        )
        record = result.scalar_one_or_none()
        if record is None:
            raise RecordNotFound(f"Image with ID {image_id} not found.")
        return record

    async def delete(self, image_id: str) -> None:
        record = await self.get(image_id)
        await self.db.delete(record)
        await self.db.commit()
        logger.info("Deleted generated image %s for user %s", image_id, self.owner_id)
