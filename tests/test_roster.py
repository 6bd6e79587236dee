"""Team composition rules: add-time rejections and submission validation.

Every rejected mutation must leave the roster exactly as it was; every
submission check must report all broken rules at once.
"""

from __future__ import annotations

import random

import pytest

from fantasy_cricket.roster import (
    CandidateRoster,
    CreditExceeded,
    PlayerNotSelected,
    RoleLimitExceeded,
    RosterError,
    RosterFull,
    RosterLocked,
    SideImbalance,
    SubmissionInvalid,
    build_roster,
    lock,
    set_captain,
    set_vice_captain,
    teams_match,
    toggle_select,
    validate_for_submission,
)
from fantasy_cricket.schemas.player import PlayerRole
from fantasy_cricket.schemas.roster_rules import (
    DEFAULT_RULES,
    RoleLimits,
    RosterRule,
    RosterRules,
    parse_rules,
)


def _build(pool, ids, sides=None, rules=None):
    roster = CandidateRoster(match_id="m1", sides=sides, rules=rules)
    for pid in ids:
        roster.toggle(pool[pid])
    return roster


def _snapshot(roster):
    return (
        roster.player_ids, roster.total_credits, dict(roster.role_counts),
        dict(roster.side_counts), roster.captain_id, roster.vice_captain_id,
    )


# ===========================================================================
# 1. Toggle: add and remove
# ===========================================================================

class TestToggle:

    def test_add_then_remove(self, player_pool):
        roster = CandidateRoster()
        assert roster.toggle(player_pool["i_bat1"]) is True
        assert "i_bat1" in roster
        assert roster.toggle(player_pool["i_bat1"]) is False
        assert "i_bat1" not in roster
        assert roster.total_credits == 0

    def test_derived_totals(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        assert roster.total_credits == pytest.approx(95.0)
        assert roster.remaining_credits == pytest.approx(5.0)
        assert roster.role_counts == {
            PlayerRole.WICKETKEEPER: 1,
            PlayerRole.BATSMAN: 4,
            PlayerRole.BOWLER: 4,
            PlayerRole.ALLROUNDER: 2,
        }
        assert roster.side_counts == {"India": 6, "Australia": 5}

    def test_total_credits_equals_sum_after_every_mutation(self, player_pool, sides):
        rng = random.Random(7)
        roster = CandidateRoster(sides=sides)
        players = list(player_pool.values())
        for _ in range(300):
            try:
                roster.toggle(rng.choice(players))
            except RosterError:
                pass
            assert roster.total_credits == pytest.approx(sum(p.credits for p in roster.players))
            assert len(roster) <= DEFAULT_RULES.max_players

    def test_functional_toggle_select(self, player_pool):
        roster = CandidateRoster()
        assert toggle_select(roster, player_pool["i_wk1"]) is True
        assert roster.player_ids == ["i_wk1"]

    def test_toggle_select_rules_apply_to_one_toggle(self, player_pool):
        roster = CandidateRoster()
        roster.toggle(player_pool["i_bat1"])
        before = _snapshot(roster)
        tight = RosterRules(max_credits=15.0)

        with pytest.raises(CreditExceeded):
            toggle_select(roster, player_pool["i_bat2"], tight)

        assert roster.rules is DEFAULT_RULES
        assert _snapshot(roster) == before
        assert toggle_select(roster, player_pool["i_bat2"]) is True


# ===========================================================================
# 2. Add-time rejections
# ===========================================================================

class TestRejections:

    def test_twelfth_player_roster_full(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        before = _snapshot(roster)
        with pytest.raises(RosterFull):
            roster.toggle(player_pool["i_bat3"])
        assert _snapshot(roster) == before

    def test_credit_exceeded(self, player_pool, valid_xi, sides):
        # 10 players at 86 credits; a 15-credit player would make 101
        ids = [pid for pid in valid_xi if pid != "i_wk1"]
        roster = _build(player_pool, ids, sides=sides)
        assert roster.total_credits == pytest.approx(86.0)
        before = _snapshot(roster)
        with pytest.raises(CreditExceeded) as exc_info:
            roster.toggle(player_pool["a_bowl3"])
        assert exc_info.value.code == "credit_exceeded"
        assert _snapshot(roster) == before

    def test_exact_budget_allowed(self, player_pool):
        rules = RosterRules(max_credits=19.0)
        roster = CandidateRoster(rules=rules)
        roster.toggle(player_pool["i_bat1"])
        roster.toggle(player_pool["i_bat2"])
        assert roster.total_credits == pytest.approx(19.0)

    def test_eighth_player_from_one_side(self, player_pool, sides):
        india = ["i_wk1", "i_bat1", "i_bat2", "i_bowl1", "i_bowl2", "i_ar1", "i_bat3"]
        roster = _build(player_pool, india + ["a_bat1"], sides=sides)
        assert roster.side_counts["India"] == 7
        before = _snapshot(roster)
        with pytest.raises(SideImbalance):
            roster.toggle(player_pool["i_bowl3"])
        assert _snapshot(roster) == before

    def test_player_from_neither_side(self, player_pool, sides):
        roster = CandidateRoster(sides=sides)
        with pytest.raises(SideImbalance):
            roster.toggle(player_pool["e_bat1"])
        assert len(roster) == 0

    def test_role_maximum(self, player_pool, sides):
        roster = _build(player_pool, ["i_wk1"], sides=sides)
        with pytest.raises(RoleLimitExceeded) as exc_info:
            roster.toggle(player_pool["a_wk1"])
        assert exc_info.value.to_dict()["role"] == "wicketkeeper"
        assert roster.player_ids == ["i_wk1"]

    def test_role_minimum_not_checked_at_add_time(self, player_pool):
        roster = _build(player_pool, ["i_bat1"])
        assert roster.role_counts[PlayerRole.BOWLER] == 0

    def test_full_checked_before_credits(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        with pytest.raises(RosterFull):
            roster.toggle(player_pool["a_bowl3"])

    def test_removal_never_rejected(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        assert roster.toggle(player_pool["i_bat1"]) is False
        assert len(roster) == 10

    def test_side_matching_is_loose(self, player_pool):
        roster = CandidateRoster(sides=("India Women", "Australia Women"))
        roster.toggle(player_pool["i_bat1"])
        assert roster.side_counts["India Women"] == 1


# ===========================================================================
# 3. Captaincy
# ===========================================================================

class TestCaptaincy:

    def test_captain_must_be_selected(self, player_pool):
        roster = _build(player_pool, ["i_bat1"])
        with pytest.raises(PlayerNotSelected):
            roster.set_captain("i_bat2")
        assert roster.captain_id is None

    def test_captain_and_vice_disjoint(self, player_pool):
        roster = _build(player_pool, ["i_bat1", "i_bat2"])
        set_captain(roster, "i_bat1")
        set_vice_captain(roster, "i_bat1")
        assert roster.vice_captain_id == "i_bat1"
        assert roster.captain_id is None

        set_captain(roster, "i_bat1")
        assert roster.captain_id == "i_bat1"
        assert roster.vice_captain_id is None

    def test_removing_captain_clears_only_captain(self, player_pool):
        roster = _build(player_pool, ["i_bat1", "i_bat2"])
        roster.set_captain("i_bat1")
        roster.set_vice_captain("i_bat2")
        roster.toggle(player_pool["i_bat1"])
        assert roster.captain_id is None
        assert roster.vice_captain_id == "i_bat2"

    def test_removing_vice_captain_clears_vice(self, player_pool):
        roster = _build(player_pool, ["i_bat1", "i_bat2"])
        roster.set_captain("i_bat1")
        roster.set_vice_captain("i_bat2")
        roster.toggle(player_pool["i_bat2"])
        assert roster.vice_captain_id is None
        assert roster.captain_id == "i_bat1"


# ===========================================================================
# 4. Submission validation
# ===========================================================================

class TestValidateForSubmission:

    def test_valid_roster_has_no_violations(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        roster.set_captain("i_bat1")
        roster.set_vice_captain("i_bowl1")
        assert validate_for_submission(roster, DEFAULT_RULES) == []

    def test_two_wicketkeepers_only_role_violation(self, player_pool, sides):
        loose = RosterRules(role_limits=RoleLimits(limits={
            PlayerRole.WICKETKEEPER: (1, 2),
            PlayerRole.BATSMAN: (3, 5),
            PlayerRole.BOWLER: (3, 5),
            PlayerRole.ALLROUNDER: (1, 3),
        }))
        ids = [
            "i_wk1", "a_wk1", "i_bat1", "i_bat2", "a_bat1", "a_bat2",
            "i_bowl1", "i_bowl2", "a_bowl1", "i_ar1", "a_ar1",
        ]
        roster = _build(player_pool, ids, sides=sides, rules=loose)
        roster.set_captain("i_bat1")
        roster.set_vice_captain("a_bat1")

        violations = validate_for_submission(roster, DEFAULT_RULES)
        assert len(violations) == 1
        assert violations[0].rule == RosterRule.ROLE_COUNT
        assert violations[0].role == PlayerRole.WICKETKEEPER

    def test_reports_every_problem(self, player_pool):
        roster = _build(player_pool, ["i_bat1", "i_bat2"])
        rules = {v.rule for v in validate_for_submission(roster)}
        assert RosterRule.ROSTER_SIZE in rules
        assert RosterRule.ROLE_COUNT in rules
        assert RosterRule.CAPTAIN_MISSING in rules
        assert RosterRule.VICE_CAPTAIN_MISSING in rules

    def test_side_cap_under_stricter_rules(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        roster.set_captain("i_bat1")
        roster.set_vice_captain("i_bowl1")
        strict = RosterRules(max_per_side=5)
        violations = validate_for_submission(roster, strict)
        assert [(v.rule, v.side) for v in violations] == [(RosterRule.SIDE_CAP, "India")]


# ===========================================================================
# 5. Lock
# ===========================================================================

class TestLock:

    def test_lock_valid_roster(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        roster.set_captain("i_bat1")
        roster.set_vice_captain("i_bowl1")
        lock(roster, "  Mumbai Mavericks ")
        assert roster.locked
        assert roster.name == "Mumbai Mavericks"
        with pytest.raises(RosterLocked):
            roster.toggle(player_pool["i_bat1"])

    def test_lock_requires_name(self, player_pool, valid_xi, sides):
        roster = _build(player_pool, valid_xi, sides=sides)
        roster.set_captain("i_bat1")
        roster.set_vice_captain("i_bowl1")
        with pytest.raises(SubmissionInvalid) as exc_info:
            roster.lock("   ")
        assert [v.rule for v in exc_info.value.violations] == [RosterRule.TEAM_NAME]
        assert not roster.locked

    def test_lock_invalid_roster(self, player_pool):
        roster = _build(player_pool, ["i_bat1"])
        with pytest.raises(SubmissionInvalid) as exc_info:
            roster.lock("Team")
        data = exc_info.value.to_dict()
        assert data["code"] == "submission_invalid"
        assert len(data["violations"]) >= 3


# ===========================================================================
# 6. Replaying a client selection
# ===========================================================================

class TestBuildRoster:

    def test_collects_rejections(self, player_pool, valid_xi, sides):
        ids = valid_xi + ["i_bat3", "ghost"]
        roster, rejected = build_roster(
            player_pool, ids, captain_id="i_bat1", vice_captain_id="nobody", sides=sides,
        )
        assert len(roster) == 11
        assert roster.captain_id == "i_bat1"
        codes = [(pid, err.code) for pid, err in rejected]
        assert codes == [
            ("i_bat3", "roster_full"),
            ("ghost", "unknown_player"),
            ("nobody", "player_not_selected"),
        ]

    def test_duplicate_ids_ignored(self, player_pool):
        roster, rejected = build_roster(player_pool, ["i_bat1", "i_bat1"])
        assert roster.player_ids == ["i_bat1"]
        assert rejected == []


# ===========================================================================
# 7. Rule configuration
# ===========================================================================

class TestRules:

    def test_default_limits(self):
        limits = DEFAULT_RULES.role_limits
        assert limits.minimum(PlayerRole.WICKETKEEPER) == 1
        assert limits.maximum(PlayerRole.WICKETKEEPER) == 1
        assert limits.maximum(PlayerRole.BATSMAN) == 5
        assert DEFAULT_RULES.max_players == 11
        assert DEFAULT_RULES.max_credits == 100.0

    def test_inverted_bounds_rejected(self):
        rules, errors = parse_rules({"role_limits": {
            "wicketkeeper": [2, 1], "batsman": [3, 5], "bowler": [3, 5], "allrounder": [1, 3],
        }})
        assert rules is None
        assert any("wicketkeeper" in e for e in errors)

    def test_unreachable_roster_size_rejected(self):
        rules, errors = parse_rules({"max_players": 20})
        assert rules is None
        assert errors

    def test_empty_payload_gives_defaults(self):
        rules, errors = parse_rules(None)
        assert rules is DEFAULT_RULES
        assert errors == []


class TestTeamsMatch:

    def test_suffixes_stripped(self):
        assert teams_match("India Women", "India")
        assert teams_match("Sri Lanka Cricket", "sri lanka")

    def test_different_teams(self):
        assert not teams_match("India", "Australia")
        assert not teams_match("", "India")
