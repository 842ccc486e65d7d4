"""Item CRUD service."""

import time
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from k8s_practice.items.models import Item
from k8s_practice.items.schemas import ItemResponse

RECENT_LIMIT = 10

MOCK_ITEM_NAMES = ("Sample Item 1", "Sample Item 2")


class ItemService:
    """Service class for item operations."""

    @staticmethod
    async def create(db: AsyncSession, name: str) -> Item:
        """Insert a new item and commit it.

        Args:
            db: The database session.
            name: The item name.

        Returns:
            The persisted item, with its generated id and timestamp.
        """
        item = Item(name=name)
        db.add(item)
        await db.commit()
        await db.refresh(item)
        return item

    @staticmethod
    async def get_recent(db: AsyncSession, limit: int = RECENT_LIMIT) -> list[Item]:
        """Get the most recently created items, newest first.

        Args:
            db: The database session.
            limit: Maximum number of records to return.

        Returns:
            Up to ``limit`` items.
        """
        result = await db.execute(
            select(Item).order_by(Item.created_at.desc(), Item.id.desc()).limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    def mock_items() -> list[ItemResponse]:
        """Static items served when no database is configured."""
        now = datetime.now(UTC)
        return [
            ItemResponse(id=index, name=name, created_at=now)
            for index, name in enumerate(MOCK_ITEM_NAMES, start=1)
        ]

    @staticmethod
    def synthesize(name: str) -> ItemResponse:
        """Build an unsaved item, keyed by the current epoch milliseconds."""
        return ItemResponse(
            id=time.time_ns() // 1_000_000,
            name=name,
            created_at=datetime.now(UTC),
        )
