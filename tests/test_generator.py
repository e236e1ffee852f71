"""Tests for onestroke.core.generator – seeded procedural levels."""

from __future__ import annotations

import pytest

from onestroke.core.generator import generate_pattern
from onestroke.core.patterns import find_hamiltonian_path, validate_pattern


class TestGeneratePattern:
    @pytest.mark.parametrize("level", [6, 7, 12, 40])
    def test_walk_is_a_solution(self, level: int):
        pattern, path = generate_pattern(level, size=8, seed=3)
        assert path[0] == pattern.start
        assert validate_pattern(pattern, path=path) == path

    def test_deterministic(self):
        a = generate_pattern(9, size=8, seed="abc")
        b = generate_pattern(9, size=8, seed="abc")
        assert a == b

    def test_seed_and_level_change_the_pattern(self):
        base, _ = generate_pattern(6, size=8, seed=0)
        others = [generate_pattern(6, size=8, seed=s)[0] for s in range(1, 6)]
        others += [generate_pattern(n, size=8, seed=0)[0] for n in range(7, 12)]
        assert any(o.targets != base.targets for o in others)

    def test_cells_stay_on_grid(self):
        pattern, _ = generate_pattern(20, size=16, seed=1)
        assert pattern.size == 16
        assert all(pattern.in_bounds(c) for c in pattern.targets)

    def test_fill_bounds(self):
        pattern, _ = generate_pattern(8, size=8, seed=0, min_fill=0.5, max_fill=0.5)
        assert 2 <= len(pattern.targets) <= 32

    def test_title(self):
        pattern, _ = generate_pattern(13, size=8)
        assert pattern.title == "Level 13"

    @pytest.mark.parametrize("seed", range(4))
    def test_small_grid_searchable(self, seed: int):
        pattern, _ = generate_pattern(6, size=5, seed=seed)
        assert find_hamiltonian_path(pattern) is not None

    def test_rejects_tiny_grid(self):
        with pytest.raises(ValueError, match="at least 2"):
            generate_pattern(6, size=1)

    @pytest.mark.parametrize("lo,hi", [(0.0, 0.5), (0.6, 0.4), (0.5, 1.5)])
    def test_rejects_bad_fill(self, lo: float, hi: float):
        with pytest.raises(ValueError, match="fill range"):
            generate_pattern(6, min_fill=lo, max_fill=hi)
