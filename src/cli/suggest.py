#!/usr/bin/env python3
"""CLI for loading videos into the store and inspecting suggestions.

Usage:
    # Load owners and videos from a JSON file
    python -m cli.suggest --import fixtures.json

    # Show suggestions for a video
    python -m cli.suggest --seed 5a3c8e0e-2f7b-4d7c-9a51-2b8c0f1e4d11 --page 1 --limit 10

    # Show store statistics
    python -m cli.suggest --stats
"""

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
src_path = Path(__file__).parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from rich.console import Console
from rich.table import Table

from models.video import OwnerSummary, SuggestionPage, VideoRecord
from services.suggestion_service import SuggestionConfig, SuggestionError, SuggestionService
from services.video_store import SQLiteVideoStore
from utils.config import load_config
from utils.logging import setup_logging


console = Console()


def _parse_datetime(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def load_fixture(path: Path) -> tuple[list[OwnerSummary], list[VideoRecord]]:
    """Parse a JSON document of the form {"owners": [...], "videos": [...]}."""
    data = json.loads(path.read_text(encoding="utf-8"))

    owners = [
        OwnerSummary(
            owner_id=item["id"],
            username=item["username"],
            display_name=item.get("display_name", ""),
            avatar_url=item.get("avatar_url"),
        )
        for item in data.get("owners", [])
    ]
    videos = [
        VideoRecord(
            video_id=item["id"],
            owner_id=item["owner_id"],
            title=item["title"],
            description=item.get("description", ""),
            tags=list(item.get("tags") or []),
            is_published=bool(item.get("is_published", True)),
            views=int(item.get("views", 0)),
            thumbnail_url=item.get("thumbnail_url"),
            video_url=item.get("video_url"),
            duration=float(item.get("duration", 0)),
            created_at=_parse_datetime(item.get("created_at")),
            updated_at=_parse_datetime(item["updated_at"]) if item.get("updated_at") else None,
        )
        for item in data.get("videos", [])
    ]
    return owners, videos


async def import_fixture(store: SQLiteVideoStore, path: Path) -> None:
    """Load a fixture file into the store."""
    owners, videos = load_fixture(path)
    for owner in owners:
        await store.upsert_owner(owner)
    for video in videos:
        await store.upsert_video(video)
    console.print(f"[green]✓ Imported {len(owners)} owners and {len(videos)} videos[/green]")


def render_page(seed_id: str, result: SuggestionPage) -> Table:
    """Build a table for one suggestion page."""
    mode = "filler only" if result.fallback else f"{result.matched} matched"
    table = Table(title=f"Suggestions for {seed_id} (page {result.page}, {mode}, {result.total} total)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Owner")
    table.add_column("Tags")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Created", justify="right")

    offset = (result.page - 1) * result.limit
    for index, item in enumerate(result.items, start=offset + 1):
        video = item.candidate.video
        table.add_row(
            str(index),
            video.title,
            item.owner.username if item.owner else "-",
            ", ".join(video.tags),
            str(item.candidate.match_count) if item.candidate.is_match else "filler",
            video.created_at.strftime("%Y-%m-%d"),
        )
    return table


async def show_suggestions(store: SQLiteVideoStore, seed_id: str, page: int, limit: int) -> None:
    """Print a suggestion page."""
    service = SuggestionService(store, SuggestionConfig.from_config())
    result = await service.get_suggestions(seed_id, page=page, limit=limit)
    console.print(render_page(seed_id, result))


async def show_stats(store: SQLiteVideoStore) -> None:
    """Display store statistics."""
    stats = await store.get_stats()

    table = Table(title="Video Store Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Owners", str(stats["owners"]))
    table.add_row("Videos", str(stats["videos"]))
    table.add_row("Published", str(stats["published"]))
    table.add_row("Distinct Tags", str(stats["tags"]))

    console.print(table)


async def run(args: argparse.Namespace, db_path: str) -> int:
    store = SQLiteVideoStore(db_path)
    await store.connect()
    try:
        if args.import_file:
            await import_fixture(store, Path(args.import_file))
        if args.seed:
            await show_suggestions(store, args.seed, args.page, args.limit)
        if args.stats:
            await show_stats(store)
    except SuggestionError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    finally:
        await store.close()
    return 0


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Load videos and inspect tag-based suggestions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m cli.suggest --import fixtures.json
    python -m cli.suggest --seed <VIDEO_ID> --limit 5
    python -m cli.suggest --stats
        """,
    )

    parser.add_argument(
        "--import",
        dest="import_file",
        type=str,
        help="JSON file with owners and videos to load",
    )
    parser.add_argument(
        "--seed",
        type=str,
        help="Video ID to show suggestions for",
    )
    parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page number (default: 1)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Page size (default: 10)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show store statistics",
    )
    parser.add_argument(
        "--db",
        type=str,
        help="Database path (default: VIDEO_DB_PATH)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    if not (args.import_file or args.seed or args.stats):
        parser.print_help()
        sys.exit(1)

    setup_logging("DEBUG" if args.verbose else "WARNING")

    config = load_config()
    sys.exit(asyncio.run(run(args, args.db or config["video_db_path"])))


if __name__ == "__main__":
    main()
