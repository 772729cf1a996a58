"""Command line entry point for Summoning Circle."""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from summoning.config import get_settings
from summoning.database.engine import close_db, get_session, init_db
from summoning.game.bestiary.loader import (
    Bestiary,
    import_bestiary,
    load_all_bestiaries,
    load_bestiary,
)
from summoning.game.monster.sheet import build_monster_sheet, render_monster_sheet
from summoning.game.systems.monster_store import list_monsters
from summoning.log import configure_logging

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="summoning", description="Summoning Circle monster tools"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create database tables")

    import_parser = subparsers.add_parser("import", help="Import a bestiary into the database")
    import_parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        help="Bestiary YAML file or directory (default: configured bestiary directory)",
    )
    import_parser.add_argument("--campaign", help="Import into this campaign instead of CORE")

    list_parser = subparsers.add_parser("list", help="List stored monsters")
    list_parser.add_argument("--campaign", help="Include this campaign's monsters")

    sheet_parser = subparsers.add_parser("sheet", help="Print monster sheets from a bestiary")
    sheet_parser.add_argument("path", type=Path, help="Bestiary YAML file")
    sheet_parser.add_argument("--name", help="Only print the monster with this name")

    return parser


def _load(path: Path) -> Bestiary:
    if path.is_dir():
        return load_all_bestiaries(path)
    return load_bestiary(path)


def print_sheets(path: Path, name: str | None = None) -> int:
    """Print sheets for a bestiary file; returns a process exit code."""
    bestiary = load_bestiary(path)

    monsters = bestiary.monsters
    if name:
        found = bestiary.find(name)
        if found is None:
            print(f"No monster named '{name}' in {path}", file=sys.stderr)
            return 1
        monsters = [found]

    for index, monster in enumerate(monsters):
        if index:
            print()
        sheet = build_monster_sheet(monster, bestiary.items)
        print("\n".join(render_monster_sheet(sheet)))
    return 0


async def run_import(path: Path, campaign_id: str | None) -> int:
    bestiary = _load(path)
    await init_db()
    try:
        async with get_session() as session:
            count = await import_bestiary(session, bestiary, campaign_id)
    finally:
        await close_db()
    print(f"Imported {count} monsters from {path}")
    return 0


async def run_list(campaign_id: str | None) -> int:
    await init_db()
    try:
        async with get_session() as session:
            summaries = await list_monsters(session, campaign_id)
    finally:
        await close_db()

    for summary in summaries:
        flag = " [legendary]" if summary.legendary else ""
        print(
            f"{summary.source.value:<8} {summary.name:<30} "
            f"L{summary.level:<3} {summary.tier.value}{flag}"
        )
    return 0


async def run_init_db() -> int:
    await init_db()
    await close_db()
    print("Database initialized")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and dispatch to a sub-command."""
    settings = get_settings()
    configure_logging(settings)

    args = build_parser().parse_args(argv)

    try:
        if args.command == "sheet":
            return print_sheets(args.path, args.name)
        if args.command == "import":
            return asyncio.run(run_import(args.path or settings.bestiary_dir, args.campaign))
        if args.command == "list":
            return asyncio.run(run_list(args.campaign))
        return asyncio.run(run_init_db())
    except Exception as e:
        logger.error(
            "command_failed",
            command=args.command,
            error=str(e),
            exc_info=True,
        )
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
