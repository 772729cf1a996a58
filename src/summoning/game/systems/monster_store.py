"""Storage of monsters: create, read, update, copy and delete.

CORE monsters are visible from every campaign and never editable there.
CAMPAIGN monsters are scoped to the campaign that owns them.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from summoning.database.models import (
    Monster,
    MonsterAttack,
    MonsterPower,
    MonsterPowerIntention,
    MonsterSource,
    MonsterTag,
    MonsterTier,
    MonsterTrait,
    TraitDefinition,
)
from summoning.game.monster.validation import (
    MonsterInput,
    MonsterValidationError,
    TraitLinkInput,
)

logger = structlog.get_logger(__name__)

COPY_SUFFIX = " (Copy)"


class MonsterNotFoundError(Exception):
    """Raised when a monster does not exist or is not visible to the campaign."""

    pass


class MonsterReadOnlyError(Exception):
    """Raised when modifying a CORE or read-only monster."""

    pass


@dataclass(frozen=True)
class MonsterSummary:
    """List entry for the monster picker."""

    id: uuid.UUID
    name: str
    level: int
    tier: MonsterTier
    legendary: bool
    source: MonsterSource
    is_read_only: bool
    campaign_id: str | None
    updated_at: datetime


def _visible_to(campaign_id: str | None):
    if campaign_id is None:
        return Monster.source == MonsterSource.CORE
    return or_(
        Monster.source == MonsterSource.CORE,
        (Monster.source == MonsterSource.CAMPAIGN) & (Monster.campaign_id == campaign_id),
    )


async def _resolve_trait(session: AsyncSession, link: TraitLinkInput) -> TraitDefinition:
    definition = None
    if link.trait_definition_id:
        try:
            definition_id = uuid.UUID(link.trait_definition_id)
        except ValueError:
            raise MonsterValidationError(f"Invalid trait id '{link.trait_definition_id}'")
        definition = await session.get(TraitDefinition, definition_id)
    elif link.name:
        result = await session.execute(
            select(TraitDefinition).where(TraitDefinition.name == link.name)
        )
        definition = result.scalar_one_or_none()

    label = link.trait_definition_id or link.name
    if definition is None:
        raise MonsterValidationError(f"Unknown trait '{label}'")
    if not definition.is_enabled:
        raise MonsterValidationError(f"Trait '{definition.name}' is disabled")
    return definition


async def _build_children(session: AsyncSession, monster: Monster, data: MonsterInput) -> None:
    monster.tags = [MonsterTag(tag=tag) for tag in data.tags]

    # An id and a name can point at the same definition; keep the first link only
    traits = []
    linked_ids: set[uuid.UUID] = set()
    for link in data.traits:
        definition = await _resolve_trait(session, link)
        if definition.id in linked_ids:
            continue
        linked_ids.add(definition.id)
        traits.append(MonsterTrait(definition=definition, sort_order=len(traits)))
    monster.traits = traits

    monster.attacks = [
        MonsterAttack(
            sort_order=attack.sort_order,
            attack_name=attack.attack_name,
            attack_config=dict(attack.attack_config),
        )
        for attack in data.attacks
    ]

    monster.powers = [
        MonsterPower(
            sort_order=power.sort_order,
            name=power.name,
            description=power.description,
            dice_count=power.dice_count,
            potency=power.potency,
            duration_type=power.duration_type,
            duration_turns=power.duration_turns,
            defence_requirement=power.defence_requirement,
            cooldown_turns=power.cooldown_turns,
            cooldown_reduction=power.cooldown_reduction,
            response_required=power.response_required,
            intentions=[
                MonsterPowerIntention(
                    sort_order=intention.sort_order,
                    type=intention.type,
                    details=dict(intention.details),
                )
                for intention in power.intentions
            ],
        )
        for power in data.powers
    ]


async def _insert(
    session: AsyncSession,
    data: MonsterInput,
    source: MonsterSource,
    campaign_id: str | None,
) -> Monster:
    monster = Monster(
        **data.column_values(),
        source=source,
        is_read_only=source == MonsterSource.CORE,
        campaign_id=campaign_id,
    )
    await _build_children(session, monster, data)
    session.add(monster)
    await session.flush()
    return monster


async def create_monster(session: AsyncSession, data: MonsterInput, campaign_id: str) -> Monster:
    """
    Create an editable monster owned by a campaign.

    Raises:
        MonsterValidationError: If a trait is unknown or disabled
    """
    monster = await _insert(session, data, MonsterSource.CAMPAIGN, campaign_id)
    logger.info(
        "monster_created",
        monster_id=str(monster.id),
        name=monster.name,
        campaign_id=campaign_id,
    )
    return monster


async def create_core_monster(session: AsyncSession, data: MonsterInput) -> Monster:
    """Create a shared, read-only CORE monster."""
    monster = await _insert(session, data, MonsterSource.CORE, None)
    logger.info("core_monster_created", monster_id=str(monster.id), name=monster.name)
    return monster


async def get_monster(
    session: AsyncSession, monster_id: uuid.UUID, campaign_id: str | None = None
) -> Monster:
    """
    Fetch a monster visible to the campaign (CORE or owned by it).

    Raises:
        MonsterNotFoundError: If no visible monster has this id
    """
    result = await session.execute(
        select(Monster).where(Monster.id == monster_id, _visible_to(campaign_id))
    )
    monster = result.scalar_one_or_none()
    if monster is None:
        raise MonsterNotFoundError(f"Monster {monster_id} not found")
    return monster


async def list_monsters(
    session: AsyncSession, campaign_id: str | None = None
) -> list[MonsterSummary]:
    """List CORE monsters plus the campaign's own, CORE first, then by name."""
    result = await session.execute(
        select(
            Monster.id,
            Monster.name,
            Monster.level,
            Monster.tier,
            Monster.legendary,
            Monster.source,
            Monster.is_read_only,
            Monster.campaign_id,
            Monster.updated_at,
        ).where(_visible_to(campaign_id))
    )
    summaries = [MonsterSummary(*row) for row in result.all()]
    # CAMPAIGN sorts before CORE alphabetically, so order in Python
    summaries.sort(key=lambda summary: (summary.source != MonsterSource.CORE, summary.name))
    return summaries


async def _get_editable(session: AsyncSession, monster_id: uuid.UUID, campaign_id: str) -> Monster:
    monster = await get_monster(session, monster_id, campaign_id)
    if not monster.is_editable:
        raise MonsterReadOnlyError(f"Monster '{monster.name}' is read-only")
    return monster


async def update_monster(
    session: AsyncSession,
    monster_id: uuid.UUID,
    data: MonsterInput,
    campaign_id: str,
) -> Monster:
    """
    Replace a campaign monster's fields and child rows.

    Raises:
        MonsterNotFoundError: If the monster is not visible to the campaign
        MonsterReadOnlyError: If the monster is CORE or read-only
        MonsterValidationError: If a trait is unknown or disabled
    """
    monster = await _get_editable(session, monster_id, campaign_id)

    for column, value in data.column_values().items():
        setattr(monster, column, value)

    # Flush orphan deletes first so unique (monster, slot) rows can be re-inserted
    monster.tags = []
    monster.traits = []
    monster.attacks = []
    monster.powers = []
    await session.flush()

    await _build_children(session, monster, data)
    await session.flush()

    logger.info("monster_updated", monster_id=str(monster.id), campaign_id=campaign_id)
    return monster


async def copy_monster(session: AsyncSession, monster_id: uuid.UUID, campaign_id: str) -> Monster:
    """
    Copy a visible monster into the campaign as an editable monster.

    The copy is named "<name> (Copy)" and keeps every child row.
    """
    source = await get_monster(session, monster_id, campaign_id)

    copy = Monster(
        **{
            column.key: getattr(source, column.key)
            for column in Monster.__table__.columns
            if column.key
            not in ("id", "created_at", "updated_at", "source", "is_read_only", "campaign_id")
        }
    )
    copy.name = f"{source.name}{COPY_SUFFIX}"
    copy.source = MonsterSource.CAMPAIGN
    copy.is_read_only = False
    copy.campaign_id = campaign_id

    copy.tags = [MonsterTag(tag=tag.tag) for tag in source.tags]
    copy.traits = [
        MonsterTrait(definition=trait.definition, sort_order=trait.sort_order)
        for trait in source.traits
    ]
    copy.attacks = [
        MonsterAttack(
            sort_order=attack.sort_order,
            attack_name=attack.attack_name,
            attack_config=dict(attack.attack_config),
        )
        for attack in source.attacks
    ]
    copy.powers = [
        MonsterPower(
            sort_order=power.sort_order,
            name=power.name,
            description=power.description,
            dice_count=power.dice_count,
            potency=power.potency,
            duration_type=power.duration_type,
            duration_turns=power.duration_turns,
            defence_requirement=power.defence_requirement,
            cooldown_turns=power.cooldown_turns,
            cooldown_reduction=power.cooldown_reduction,
            response_required=power.response_required,
            intentions=[
                MonsterPowerIntention(
                    sort_order=intention.sort_order,
                    type=intention.type,
                    details=dict(intention.details),
                )
                for intention in power.intentions
            ],
        )
        for power in source.powers
    ]

    session.add(copy)
    await session.flush()

    logger.info(
        "monster_copied",
        source_id=str(source.id),
        monster_id=str(copy.id),
        campaign_id=campaign_id,
    )
    return copy


async def delete_monster(session: AsyncSession, monster_id: uuid.UUID, campaign_id: str) -> None:
    """
    Delete a campaign monster and its child rows.

    Raises:
        MonsterNotFoundError: If the monster is not visible to the campaign
        MonsterReadOnlyError: If the monster is CORE or read-only
    """
    monster = await _get_editable(session, monster_id, campaign_id)
    await session.delete(monster)
    await session.flush()
    logger.info("monster_deleted", monster_id=str(monster_id), campaign_id=campaign_id)
