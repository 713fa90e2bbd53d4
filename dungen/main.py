"""dungen - generate a tile map from the command line."""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from dungen import __version__
from dungen.config import GenerationConfig
from dungen.core.map import MapData
from dungen.core.tags import Tag
from dungen.errors import DungenError, GenerationFailedError
from dungen.generation import ENTRANCE, FLOOR, TREASURE, WALL, WfcSolver, get_ruleset
from dungen.logging_config import get_logger, setup_logging
from dungen.services import TagRelationService

logger = get_logger(__name__)


# Symbol and color per primary tag
TAG_RENDER: dict[Tag, tuple[str, str]] = {
    FLOOR: (".", "bright_black"),
    WALL: ("#", "white"),
    ENTRANCE: ("E", "green"),
    TREASURE: ("$", "yellow"),
}


def get_tag_render(tag: Tag) -> tuple[str, str]:
    """Get (symbol, color) for a tag."""
    return TAG_RENDER.get(tag, ("?", "red"))


def render_map(map_data: MapData) -> Text:
    """Build a rich Text block with one glyph per cell."""
    text = Text()
    for y, row in enumerate(map_data.rows()):
        for tile in row:
            symbol, color = get_tag_render(tile.primary_tag)
            text.append(symbol, style=color)
        if y < map_data.height - 1:
            text.append("\n")
    return text


def run(config: GenerationConfig, console: Console) -> int:
    """Generate one map and print it.

    Returns:
        Exit code
    """
    ruleset = get_ruleset(config.ruleset)
    tag_service = TagRelationService()
    ruleset.register_tags(tag_service)

    catalog = ruleset.tile_catalog()
    for issue in catalog.validate():
        logger.warning(f"Tile catalog '{catalog.name}': {issue}")

    solver = WfcSolver.from_config(tag_service, config)
    try:
        map_data = solver.generate(
            config.width,
            config.height,
            catalog,
            ruleset.seeds(config.width, config.height),
        )
    except GenerationFailedError as e:
        console.print(f"[red]Generation failed:[/red] {e} ({e.attempts} attempt(s))")
        return 1

    console.print(render_map(map_data))
    counts = ", ".join(
        f"{tag.name}={count}"
        for tag, count in sorted(map_data.tag_counts().items(), key=lambda item: item[0].name)
    )
    console.print(f"{map_data.width}x{map_data.height} | {counts}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for dungen."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="dungen - tag-driven Wave Function Collapse map generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dungen                          # 10x15 map with the simple ruleset
  dungen --ruleset dungeon -W 30 -H 20
  dungen --seed 42                # Reproducible output
        """,
    )
    parser.add_argument("-W", "--width", type=int, help="Map width (default: 10)")
    parser.add_argument("-H", "--height", type=int, help="Map height (default: 15)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible maps")
    parser.add_argument(
        "--ruleset",
        choices=["simple", "dungeon"],
        help="Ruleset to generate with (default: simple)",
    )
    parser.add_argument("--max-iterations", type=int, help="Step ceiling per attempt")
    parser.add_argument("--attempts", type=int, dest="max_attempts", help="Fresh grids to try")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Log directory (default: logs/)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args(argv)

    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(args.log_dir, console_level=console_level)

    console = Console()
    console.print(f"dungen v{__version__}", style="bold")

    try:
        config = GenerationConfig.from_env(
            width=args.width,
            height=args.height,
            seed=args.seed,
            ruleset=args.ruleset,
            max_iterations=args.max_iterations,
            max_attempts=args.max_attempts,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(e))}")
        return 2

    try:
        return run(config, console)
    except DungenError as e:
        logger.error(f"{type(e).__name__}: {e}")
        console.print(f"[red]{type(e).__name__}:[/red] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
