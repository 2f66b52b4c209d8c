"""
Integration catalog and per-user configuration service.
"""
import logging
import re
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from chatbot_studio.core.exceptions import ConflictException, NotFoundException
from chatbot_studio.models.integration import Integration, IntegrationConfig

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


class IntegrationService:
    """Integration catalog and user configurations."""

    @staticmethod
    async def list_active(db: AsyncSession) -> list[Integration]:
        result = await db.execute(
            select(Integration)
            .where(Integration.active.is_(True))
            .order_by(Integration.name.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession,
        name: str,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
        active: bool = True,
    ) -> Integration:
        """
        Add an integration to the catalog.

        Raises:
            ConflictException: If the name or slug is taken
        """
        slug = slug or slugify(name)
        existing = await db.execute(
            select(Integration).where(
                (Integration.name == name) | (Integration.slug == slug)
            )
        )
        if existing.scalar_one_or_none():
            raise ConflictException(f"Integration '{name}' already exists")

        integration = Integration(
            name=name,
            slug=slug,
            description=description,
            category=category,
            active=active,
        )
        db.add(integration)
        await db.commit()
        await db.refresh(integration)
        return integration

    @staticmethod
    async def list_configured(
        db: AsyncSession,
        user_id: str,
    ) -> list[IntegrationConfig]:
        result = await db.execute(
            select(IntegrationConfig)
            .where(IntegrationConfig.user_id == user_id)
            .options(selectinload(IntegrationConfig.integration))
            .order_by(IntegrationConfig.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def configure(
        db: AsyncSession,
        user_id: str,
        integration_id: str,
        config: dict[str, Any],
    ) -> IntegrationConfig:
        """
        Create or replace the user's configuration of an integration.

        Raises:
            NotFoundException: If the integration is missing or inactive
        """
        integration = await db.get(Integration, integration_id)
        if integration is None or not integration.active:
            raise NotFoundException("Integration")

        result = await db.execute(
            select(IntegrationConfig).where(
                IntegrationConfig.user_id == user_id,
                IntegrationConfig.integration_id == integration_id,
            )
        )
        integration_config = result.scalar_one_or_none()

        if integration_config:
            integration_config.config = config
        else:
            integration_config = IntegrationConfig(
                user_id=user_id,
                integration_id=integration_id,
                config=config,
            )
            db.add(integration_config)

        await db.commit()
        await db.refresh(integration_config)

        logger.info(f"User {user_id} configured integration {integration.slug}")
        return integration_config

    @staticmethod
    async def remove(
        db: AsyncSession,
        config_id: str,
        user_id: str,
    ) -> bool:
        """Remove one of the user's integration configurations."""
        result = await db.execute(
            select(IntegrationConfig).where(
                IntegrationConfig.id == config_id,
                IntegrationConfig.user_id == user_id,
            )
        )
        integration_config = result.scalar_one_or_none()
        if not integration_config:
            return False

        await db.delete(integration_config)
        await db.commit()
        return True
