"""Shared test fixtures for dungen."""

import logging
import os
import random
from pathlib import Path

import pytest

from dungen.core import Tag, TileCatalog, TileDefinition, make_tile
from dungen.services import TagRelationService


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: large-map generation runs, only with --run-slow")


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Also run tests marked slow",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return

    marker = pytest.mark.skip(reason="needs --run-slow")
    for item in items:
        if item.get_closest_marker("slow") is not None:
            item.add_marker(marker)


# =============================================================================
# Tags
# =============================================================================

@pytest.fixture
def wall() -> Tag:
    return Tag("Wall")


@pytest.fixture
def floor() -> Tag:
    return Tag("Floor")


@pytest.fixture
def tag_service() -> TagRelationService:
    """An empty relation registry."""
    return TagRelationService()


@pytest.fixture
def wall_floor_service(wall: Tag, floor: Tag) -> TagRelationService:
    """A registry where walls and floors must never touch."""
    service = TagRelationService()
    service.add_antagonism(wall, floor)
    return service


# =============================================================================
# Tiles
# =============================================================================

@pytest.fixture
def floor_tile(floor: Tag) -> TileDefinition:
    return make_tile("Floor", floor, weight=3.0)


@pytest.fixture
def wall_tile(wall: Tag) -> TileDefinition:
    return make_tile("Wall", wall, weight=1.0)


@pytest.fixture
def wall_floor_tiles(floor_tile: TileDefinition, wall_tile: TileDefinition) -> list[TileDefinition]:
    return [floor_tile, wall_tile]


@pytest.fixture
def wall_floor_catalog(wall_floor_tiles: list[TileDefinition]) -> TileCatalog:
    return TileCatalog("Simple", wall_floor_tiles)


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source."""
    return random.Random(12345)


@pytest.fixture
def temp_log_dir(tmp_path: Path) -> Path:
    """Log directory inside the test's tmp_path (not created yet)."""
    return tmp_path / "logs"


@pytest.fixture
def reset_logging():
    """Close dungen log handlers after a test that configured logging."""
    yield
    root_logger = logging.getLogger("dungen")
    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove DUNGEN_* variables so tests see the defaults."""
    for key in list(os.environ):
        if key.startswith("DUNGEN_"):
            monkeypatch.delenv(key)
    return monkeypatch
