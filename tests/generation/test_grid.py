"""Tests for dungen.generation.wfc.grid module."""

import random

import pytest

from dungen.core import UNDEFINED_TAG, Tag, make_tile
from dungen.errors import BoundsError
from dungen.generation.wfc import (
    DEFAULT_MAX_ITERATIONS,
    Grid,
    GridState,
    SeedConstraint,
    TagAdjacencyConstraint,
)


def make_grid(width, height, tiles, tag_service, seeds=(), rng=None) -> Grid:
    """Grid with the standard seed-then-adjacency constraint stack."""
    grid = Grid(width, height, tiles, rng=rng)
    if seeds:
        grid.add_constraint(SeedConstraint(seeds))
    grid.add_constraint(TagAdjacencyConstraint(tag_service))
    return grid


class TestGridStructure:
    """Tests for grid construction and neighbor lookup."""

    def test_every_cell_starts_with_full_catalog(self, wall_floor_tiles):
        grid = Grid(4, 3, wall_floor_tiles)
        cells = list(grid.all_cells())
        assert len(cells) == 12
        assert all(cell.candidates == tuple(wall_floor_tiles) for cell in cells)
        assert grid.state == GridState.IDLE

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (-1, 1)])
    def test_empty_grid_rejected(self, wall_floor_tiles, width, height):
        with pytest.raises(ValueError):
            Grid(width, height, wall_floor_tiles)

    def test_cells_indexed_by_row(self, wall_floor_tiles):
        grid = Grid(4, 3, wall_floor_tiles)
        assert grid.cells[2][3].position == (3, 2)
        assert grid.get_cell(3, 2) is grid.cells[2][3]

    def test_get_cell_out_of_bounds(self, wall_floor_tiles):
        grid = Grid(2, 2, wall_floor_tiles)
        assert grid.get_cell(-1, 0) is None
        assert grid.get_cell(2, 0) is None
        assert grid.get_cell(0, 2) is None

    def test_neighbors_order(self, wall_floor_tiles):
        """West, east, north, south."""
        grid = Grid(3, 3, wall_floor_tiles)
        assert [n.position for n in grid.neighbors(1, 1)] == [(0, 1), (2, 1), (1, 0), (1, 2)]

    def test_neighbors_skip_edges(self, wall_floor_tiles):
        grid = Grid(3, 3, wall_floor_tiles)
        assert [n.position for n in grid.neighbors(0, 0)] == [(1, 0), (0, 1)]
        assert [n.position for n in grid.neighbors(2, 2)] == [(1, 2), (2, 1)]

    def test_neighbors_on_single_cell(self, wall_floor_tiles):
        assert list(Grid(1, 1, wall_floor_tiles).neighbors(0, 0)) == []

    def test_neighbors8(self, wall_floor_tiles):
        grid = Grid(3, 3, wall_floor_tiles)
        assert len(list(grid.neighbors8(1, 1))) == 8
        assert sorted(n.position for n in grid.neighbors8(0, 0)) == [(0, 1), (1, 0), (1, 1)]

    def test_constraints_run_in_registration_order(self, wall_floor_tiles, wall_floor_service, wall_tile):
        seed = SeedConstraint([(0, 0, wall_tile)])
        adjacency = TagAdjacencyConstraint(wall_floor_service)
        grid = Grid(2, 2, wall_floor_tiles)
        grid.add_constraint(seed)
        grid.add_constraint(adjacency)
        assert grid.constraints == (seed, adjacency)

    def test_repr(self, wall_floor_tiles):
        assert repr(Grid(2, 3, wall_floor_tiles)) == "Grid(2x3): 0/6 collapsed"


class TestGridGeneration:
    """Tests for the collapse loop."""

    def test_wall_floor_map_is_homogeneous(self, wall_floor_tiles, wall_floor_service, rng):
        """Mutually exclusive tiles flood the grid from the first collapse."""
        grid = make_grid(10, 15, wall_floor_tiles, wall_floor_service, rng=rng)

        assert grid.generate()

        tiles = {cell.collapsed_tile for cell in grid.all_cells()}
        assert len(tiles) == 1
        assert grid.iterations == 1
        assert grid.state == GridState.COMPLETE
        assert grid.validate()

    def test_unrelated_tiles_mix(self, wall_floor_tiles, tag_service, rng):
        grid = make_grid(10, 10, wall_floor_tiles, tag_service, rng=rng)

        assert grid.generate()

        assert len({cell.collapsed_tile for cell in grid.all_cells()}) == 2
        assert grid.iterations == 100

    def test_weighted_selection(self, wall_floor_tiles, wall_floor_service, floor_tile):
        """Floor (weight 3) beats wall (weight 1) about three times in four."""
        runs = 1000
        floors = 0
        for i in range(runs):
            grid = make_grid(1, 1, wall_floor_tiles, wall_floor_service, rng=random.Random(i))
            assert grid.generate()
            if grid.get_cell(0, 0).collapsed_tile == floor_tile:
                floors += 1

        assert 0.70 <= floors / runs <= 0.80

    def test_zero_weights_pick_first_candidate(self, tag_service):
        first = make_tile("A", "a", weight=0)
        second = make_tile("B", "b", weight=0)
        grid = make_grid(1, 1, [first, second], tag_service, rng=random.Random(5))

        assert grid.generate()
        assert grid.get_cell(0, 0).collapsed_tile == first

    def test_same_rng_seed_reproduces_grid(self, wall_floor_tiles, tag_service):
        def run(seed):
            grid = make_grid(8, 8, wall_floor_tiles, tag_service, rng=random.Random(seed))
            grid.generate()
            return [cell.collapsed_tile for cell in grid.all_cells()]

        assert run(99) == run(99)

    def test_seeds_survive(self, wall_floor_tiles, wall_floor_service, wall_tile, rng):
        grid = make_grid(5, 5, wall_floor_tiles, wall_floor_service, seeds=[(4, 4, wall_tile)], rng=rng)

        assert grid.generate()

        assert all(cell.collapsed_tile == wall_tile for cell in grid.all_cells())
        # Seed propagation alone settles the grid
        assert grid.iterations == 0

    def test_snapshot_stack_stays_shallow(self, tag_service, rng):
        """Successful steps discard their snapshot."""
        tiles = [make_tile("Floor", "floor", weight=4), make_tile("Wall", "wall"), make_tile("Rubble", "rubble")]
        grid = make_grid(30, 30, tiles, tag_service, rng=rng)
        grid.initialize()

        while grid.step():
            assert grid.snapshot_depth == 0

        assert grid.is_complete
        assert grid.snapshot_depth == 0

    def test_backtracking_leaves_no_snapshot(self, tag_service):
        lava_tag = Tag("lava")
        tag_service.add_antagonism(lava_tag, lava_tag)
        grid = make_grid(2, 2, [make_tile("Lava", lava_tag)], tag_service, rng=random.Random(3))

        grid.generate(max_iterations=10)

        assert grid.backtrack_count == 10
        assert grid.snapshot_depth == 0

    def test_self_antagonistic_tile_never_completes(self, tag_service):
        """Every step backtracks until the iteration ceiling."""
        lava_tag = Tag("lava")
        tag_service.add_antagonism(lava_tag, lava_tag)
        grid = make_grid(1, 1, [make_tile("Lava", lava_tag)], tag_service, rng=random.Random(1))

        assert not grid.generate(max_iterations=25)

        assert grid.iterations == 25
        assert grid.backtrack_count == 25
        assert grid.state == GridState.CONTRADICTION
        assert not grid.get_cell(0, 0).collapsed

    def test_backtrack_restores_previous_state(self, tag_service, rng):
        lava_tag = Tag("lava")
        tag_service.add_antagonism(lava_tag, lava_tag)
        lava = make_tile("Lava", lava_tag)
        stone = make_tile("Stone", "stone", weight=0)
        grid = make_grid(2, 1, [lava, stone], tag_service, rng=rng)
        grid.initialize()

        # Lava is the only weighted choice, so the step picks it and rolls back
        assert grid.step()
        assert grid.backtrack_count == 1
        assert all(cell.entropy == 2 and not cell.collapsed for cell in grid.all_cells())

    def test_step_on_complete_grid_returns_false(self, wall_floor_tiles, wall_floor_service, rng):
        grid = make_grid(2, 2, wall_floor_tiles, wall_floor_service, rng=rng)
        assert grid.generate()
        assert not grid.step()

    def test_step_on_contradictory_grid_returns_false(self, wall_floor_tiles, wall_floor_service):
        grid = make_grid(2, 1, wall_floor_tiles, wall_floor_service)
        grid.get_cell(1, 0).remove_candidates(wall_floor_tiles)
        assert grid.is_contradiction
        assert not grid.step()

    def test_initialize_failure_marks_contradiction(self, wall_floor_tiles, wall_floor_service, wall_tile):
        grid = make_grid(2, 2, wall_floor_tiles, wall_floor_service, seeds=[(5, 5, wall_tile)])

        with pytest.raises(BoundsError):
            grid.generate()
        assert grid.state == GridState.CONTRADICTION

    def test_initialize_moves_to_stepping(self, wall_floor_tiles, wall_floor_service):
        grid = make_grid(2, 2, wall_floor_tiles, wall_floor_service)
        grid.initialize()
        assert grid.state == GridState.STEPPING

    def test_default_iteration_ceiling(self):
        assert DEFAULT_MAX_ITERATIONS == 10000


class TestGridConversion:
    """Tests for Grid.to_map_data."""

    def test_uncollapsed_cells_are_undefined(self, wall_floor_tiles):
        map_data = Grid(2, 1, wall_floor_tiles).to_map_data()
        assert [tile.primary_tag for tile in map_data.all_tiles()] == [UNDEFINED_TAG, UNDEFINED_TAG]

    def test_collapsed_cells_carry_tile_tags(self, floor_tile):
        entrance = make_tile("Entrance", "entrance", "floor")
        grid = Grid(2, 1, [floor_tile, entrance])
        grid.get_cell(0, 0).collapse(entrance)
        grid.get_cell(1, 0).collapse(floor_tile)

        map_data = grid.to_map_data()

        assert (map_data.width, map_data.height) == (2, 1)
        assert map_data[0, 0].primary_tag == Tag("entrance")
        assert map_data[0, 0].has_tag(Tag("floor"))
        assert map_data[1, 0].primary_tag == Tag("floor")
