"""Integration tests driving whole sessions through the headless autoplay."""

from __future__ import annotations

import random

import pytest

from boardsiege.simulation.autoplay import choose_first, choose_highest_damage, run_autoplay
from boardsiege.simulation.session import GameSession, Phase
from boardsiege.simulation.weapons import WEAPON_CATALOG, WeaponDefinition, expected_dps


pytestmark = pytest.mark.integration


def _session(make_settings, seed: int) -> GameSession:
    return GameSession(settings=make_settings(), rng=random.Random(seed))


class TestChoosers:
    """Reward choosers used by the headless driver."""

    def test_choose_first(self):
        assert choose_first(WEAPON_CATALOG) == 0

    def test_choose_highest_damage(self):
        # Flying Blade averages 1.5 per hit: 1.5 / 0.4 = 3.75/s beats Ballista 2.5 / 0.7 ~ 3.57/s
        assert WEAPON_CATALOG[choose_highest_damage(WEAPON_CATALOG)].name == "Flying Blade"

    def test_expected_dps_uses_mean_roll(self):
        assert expected_dps(WeaponDefinition("Pin", damage=0.5, interval=1.0, weapon_range=1.0)) == 1.0
        assert expected_dps(WeaponDefinition("Axe", damage=4.9, interval=0.5, weapon_range=1.0)) == 5.0


class TestAutoplay:
    """Whole sessions driven to an end state."""

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_runs_to_a_consistent_end_state(self, make_settings, seed):
        session = _session(make_settings, seed)
        report = run_autoplay(session, dt=0.1, max_ticks=5_000)
        assert report.final_phase == session.phase.value
        assert report.rolls >= 3
        assert report.base_health == session.base_health
        if session.phase is Phase.GAME_OVER:
            assert session.base_health == 0
        assert 0 <= session.position_index < len(session.board)

    def test_stops_after_requested_waves(self, make_settings, line_board):
        # Compact row: every cell sits inside every catalog weapon's range
        session = GameSession(
            board=line_board(["Weapon"] * 8),
            settings=make_settings(base_health=1_000),
            rng=random.Random(7),
        )
        report = run_autoplay(session, max_ticks=50_000, max_waves=1,
                              chooser=choose_highest_damage)
        assert report.waves_cleared == 1
        assert session.phase in (Phase.EXPLORE, Phase.CHOOSING_REWARD)

    def test_deterministic_for_seed(self, make_settings):
        a = run_autoplay(_session(make_settings, 11), max_ticks=3_000)
        b = run_autoplay(_session(make_settings, 11), max_ticks=3_000)
        assert a == b
