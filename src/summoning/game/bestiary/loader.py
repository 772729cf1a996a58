"""
Bestiary loader module for Summoning Circle.

Handles loading monsters and forge items from YAML files and importing them
into the database.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from summoning.game.monster.equipment import (
    EquipmentError,
    EquipmentItem,
    slotted_item_ids,
    validate_loadout,
)
from summoning.game.monster.validation import (
    MonsterInput,
    MonsterValidationError,
    normalize_monster_input,
)
from summoning.game.systems.monster_store import create_core_monster, create_monster
from summoning.game.systems.trait_catalog import get_or_create_trait_definition

logger = structlog.get_logger(__name__)


class BestiaryLoadError(Exception):
    """Raised when there's an error loading bestiary data."""

    pass


@dataclass
class Bestiary:
    """Monsters and the items they can equip."""

    monsters: list[MonsterInput] = field(default_factory=list)
    items: dict[str, EquipmentItem] = field(default_factory=dict)

    def find(self, name: str) -> MonsterInput | None:
        """Find a monster by case-insensitive name."""
        wanted = name.strip().lower()
        for monster in self.monsters:
            if monster.name.lower() == wanted:
                return monster
        return None


def load_yaml_file(file_path: Path) -> dict[str, Any]:
    """
    Load a YAML file containing a bestiary.

    Args:
        file_path: Path to the YAML file

    Returns:
        The parsed document, with a ``monsters`` list

    Raises:
        BestiaryLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BestiaryLoadError(f"YAML parsing error in {file_path}: {e}")
    except FileNotFoundError:
        raise BestiaryLoadError(f"File not found: {file_path}")
    except OSError as e:
        raise BestiaryLoadError(f"Error loading {file_path}: {e}")

    if not data:
        raise BestiaryLoadError(f"Empty YAML file: {file_path}")

    if not isinstance(data, dict) or "monsters" not in data:
        raise BestiaryLoadError(f"Missing 'monsters' key in {file_path}")

    if not isinstance(data["monsters"], list):
        raise BestiaryLoadError(f"'monsters' must be a list in {file_path}")

    if not isinstance(data.get("items") or [], list):
        raise BestiaryLoadError(f"'items' must be a list in {file_path}")

    return data


def _parse_items(raw_items: list[Any], file_path: Path) -> dict[str, EquipmentItem]:
    items: dict[str, EquipmentItem] = {}
    for index, raw in enumerate(raw_items):
        try:
            item = EquipmentItem.model_validate(raw)
        except ValidationError as e:
            raise BestiaryLoadError(f"Invalid item #{index + 1} in {file_path}: {e}")
        if item.id in items:
            raise BestiaryLoadError(f"Duplicate item id '{item.id}' in {file_path}")
        items[item.id] = item
    return items


def load_bestiary(file_path: Path) -> Bestiary:
    """
    Load and validate one bestiary file.

    Every monster is normalized and its equipment loadout checked against the
    items declared in the same file.

    Raises:
        BestiaryLoadError: If the file or any entry in it is invalid
    """
    data = load_yaml_file(file_path)
    items = _parse_items(data.get("items") or [], file_path)

    monsters = []
    for index, raw in enumerate(data["monsters"]):
        label = raw.get("name", f"#{index + 1}") if isinstance(raw, dict) else f"#{index + 1}"
        try:
            monster = normalize_monster_input(raw)
            validate_loadout(slotted_item_ids(monster), items)
        except (MonsterValidationError, EquipmentError) as e:
            raise BestiaryLoadError(f"Monster '{label}' in {file_path}: {e}")
        monsters.append(monster)

    logger.info(
        "bestiary_loaded",
        file=str(file_path),
        monsters=len(monsters),
        items=len(items),
    )
    return Bestiary(monsters=monsters, items=items)


def load_all_bestiaries(directory: Path) -> Bestiary:
    """
    Load every ``*.yaml`` bestiary in a directory, in file name order.

    Raises:
        BestiaryLoadError: If the directory is missing or item ids clash across files
    """
    if not directory.is_dir():
        raise BestiaryLoadError(f"Bestiary directory not found: {directory}")

    merged = Bestiary()
    for file_path in sorted(directory.glob("*.yaml")):
        bestiary = load_bestiary(file_path)
        clashes = merged.items.keys() & bestiary.items.keys()
        if clashes:
            raise BestiaryLoadError(
                f"Item ids defined twice ({', '.join(sorted(clashes))}) in {file_path}"
            )
        merged.monsters.extend(bestiary.monsters)
        merged.items.update(bestiary.items)

    return merged


async def import_bestiary(
    session: AsyncSession, bestiary: Bestiary, campaign_id: str | None = None
) -> int:
    """
    Store a bestiary's monsters.

    Traits referenced by name are created in the catalog when missing. Without
    a campaign id the monsters become shared CORE monsters.

    Returns:
        Number of monsters created
    """
    for monster in bestiary.monsters:
        for link in monster.traits:
            if link.name and not link.trait_definition_id:
                await get_or_create_trait_definition(session, link.name, link.effect_text)

    for monster in bestiary.monsters:
        if campaign_id is None:
            await create_core_monster(session, monster)
        else:
            await create_monster(session, monster, campaign_id)

    logger.info(
        "bestiary_imported",
        monsters=len(bestiary.monsters),
        campaign_id=campaign_id,
    )
    return len(bestiary.monsters)
