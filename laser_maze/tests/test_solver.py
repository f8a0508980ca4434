import pytest

from laser_maze.game import GridPos
from laser_maze.levels import DEFAULT_LEVEL_ROOT, LevelCatalog, LevelDefinition
from laser_maze.solver import SolutionValidator, movable_mirrors, solve


CATALOG = LevelCatalog.load(DEFAULT_LEVEL_ROOT)


@pytest.mark.parametrize("level_id", range(len(CATALOG)))
def test_every_level_solvable_in_par(level_id: int):
    level = CATALOG[level_id]

    solution = solve(level)

    assert solution is not None
    assert len(solution) == level.par
    complete, moves = SolutionValidator(level).replay(solution)
    assert complete
    assert moves == level.par


def test_no_level_starts_complete():
    for level in CATALOG:
        assert solve(level, max_toggles=0) is None


def test_known_solutions():
    assert solve(CATALOG[0]) == [GridPos(1, 2)]
    assert solve(CATALOG[3]) == [GridPos(1, 2), GridPos(3, 2)]


def test_fixed_mirrors_are_not_candidates():
    level = LevelDefinition.from_rows("fixed", [">.Z.", "..N/"])

    assert movable_mirrors(level) == [GridPos(1, 3)]


def test_unsolvable_level_returns_none():
    level = LevelDefinition.from_rows("blocked", [">#./", "..T."])

    assert solve(level) is None


def test_validator_accepts_tuples_and_rejects_partial_solutions():
    validator = SolutionValidator(CATALOG[3])

    assert validator.validate([(1, 2), (3, 2)])
    assert not validator.validate([(1, 2)])
    assert validator.replay([(1, 2), (1, 2), (0, 0)]) == (False, 2)
