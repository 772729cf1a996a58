"""Admin maintenance of the monster trait catalog."""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from summoning.database.models import MonsterSource, TraitDefinition

logger = structlog.get_logger(__name__)


class TraitCatalogError(Exception):
    """Raised when a trait definition cannot be saved."""

    pass


async def list_trait_definitions(
    session: AsyncSession, enabled_only: bool = False
) -> list[TraitDefinition]:
    """List trait definitions ordered by name."""
    stmt = select(TraitDefinition).order_by(TraitDefinition.name)
    if enabled_only:
        stmt = stmt.where(TraitDefinition.is_enabled.is_(True))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_trait_definition_by_name(session: AsyncSession, name: str) -> TraitDefinition | None:
    result = await session.execute(select(TraitDefinition).where(TraitDefinition.name == name))
    return result.scalar_one_or_none()


async def save_trait_definition(
    session: AsyncSession,
    name: str,
    effect_text: str | None = None,
    is_enabled: bool = True,
    definition_id: uuid.UUID | None = None,
) -> TraitDefinition:
    """
    Create a trait definition, or update one when ``definition_id`` is given.

    Args:
        session: Database session
        name: Trait name, trimmed; must be unique
        effect_text: Rules text, blank values are stored as NULL
        is_enabled: Whether monsters may use the trait
        definition_id: Existing definition to update

    Returns:
        The saved TraitDefinition

    Raises:
        TraitCatalogError: If the name is blank or taken, or the id is unknown
    """
    name = name.strip()
    if not name:
        raise TraitCatalogError("Name is required")
    effect_text = (effect_text or "").strip() or None

    definition = None
    if definition_id is not None:
        definition = await session.get(TraitDefinition, definition_id)
        if definition is None:
            raise TraitCatalogError(f"Trait definition {definition_id} not found")

    # A savepoint keeps the caller's earlier work when the name is taken
    try:
        async with session.begin_nested():
            if definition is None:
                definition = TraitDefinition(
                    name=name,
                    effect_text=effect_text,
                    is_enabled=is_enabled,
                    source=MonsterSource.CORE,
                    is_read_only=True,
                )
                session.add(definition)
            else:
                definition.name = name
                definition.effect_text = effect_text
                definition.is_enabled = is_enabled
            await session.flush()
    except IntegrityError:
        raise TraitCatalogError("Name already exists")

    logger.info(
        "trait_definition_saved",
        trait_id=str(definition.id),
        name=name,
        enabled=is_enabled,
    )
    return definition


async def get_or_create_trait_definition(
    session: AsyncSession, name: str, effect_text: str | None = None
) -> TraitDefinition:
    """Fetch a definition by name, creating it (enabled) when missing."""
    existing = await get_trait_definition_by_name(session, name.strip())
    if existing is not None:
        return existing
    return await save_trait_definition(session, name, effect_text=effect_text)
