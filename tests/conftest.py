"""Shared test fixtures for the fantasy cricket service."""

import pytest
import requests

from fantasy_cricket.assistant.cricket_api import UpstreamDataError
from fantasy_cricket.schemas.cricket import CatalogPlayer, Match, Scorecard, SquadTeam
from fantasy_cricket.schemas.player import Player


# ---------------------------------------------------------------------------
# Player pool
# ---------------------------------------------------------------------------

SIDES = ("India", "Australia")

# (id, name, team, role, credits)
_POOL = [
    ("i_wk1", "Rishabh Pant", "India", "wicketkeeper", 9.0),
    ("i_bat1", "Virat Kohli", "India", "batsman", 10.0),
    ("i_bat2", "Rohit Sharma", "India", "batsman", 9.0),
    ("i_bowl1", "Jasprit Bumrah", "India", "bowler", 9.0),
    ("i_bowl2", "Mohammed Siraj", "India", "bowler", 8.0),
    ("i_ar1", "Hardik Pandya", "India", "allrounder", 9.0),
    ("a_bat1", "Steve Smith", "Australia", "batsman", 8.5),
    ("a_bat2", "Travis Head", "Australia", "batsman", 8.0),
    ("a_bowl1", "Pat Cummins", "Australia", "bowler", 8.5),
    ("a_bowl2", "Josh Hazlewood", "Australia", "bowler", 8.0),
    ("a_ar1", "Glenn Maxwell", "Australia", "allrounder", 8.0),
    # Extras
    ("a_wk1", "Josh Inglis", "Australia", "wicketkeeper", 8.0),
    ("i_bat3", "Shubman Gill", "India", "batsman", 8.0),
    ("i_bowl3", "Kuldeep Yadav", "India", "bowler", 7.5),
    ("a_bowl3", "Mitchell Starc", "Australia", "bowler", 15.0),
    ("e_bat1", "Joe Root", "England", "batsman", 9.0),
]

# 11 players, 95.0 credits, {wk:1, bat:4, bowl:4, ar:2}, 6 India / 5 Australia
VALID_XI = [
    "i_wk1", "i_bat1", "i_bat2", "i_bowl1", "i_bowl2", "i_ar1",
    "a_bat1", "a_bat2", "a_bowl1", "a_bowl2", "a_ar1",
]


@pytest.fixture
def player_pool():
    """All test players keyed by id."""
    return {
        pid: Player(player_id=pid, name=name, team=team, role=role, credits=credits)
        for pid, name, team, role, credits in _POOL
    }


@pytest.fixture
def valid_xi():
    return list(VALID_XI)


@pytest.fixture
def sides():
    return SIDES


# ---------------------------------------------------------------------------
# Upstream payloads (cricapi.com v1 shapes)
# ---------------------------------------------------------------------------

@pytest.fixture
def live_match_data():
    return {
        "id": "m1",
        "name": "India vs Australia, 1st ODI",
        "matchType": "odi",
        "status": "India need 45 runs in 38 balls",
        "venue": "Wankhede Stadium, Mumbai",
        "date": "2026-10-19",
        "dateTimeGMT": "2026-10-19T08:30:00",
        "teams": ["India", "Australia"],
        "score": [
            {"r": 245, "w": 6, "o": 50, "inning": "Australia Inning 1"},
            {"r": 201, "w": 4, "o": 43.4, "inning": "India Inning 1"},
        ],
        "matchStarted": True,
        "matchEnded": False,
        "someUnknownKey": "ignored",
    }


@pytest.fixture
def upcoming_match_data():
    return {
        "id": "m2",
        "name": "England vs Pakistan, 2nd T20I",
        "status": "Match not started",
        "venue": "Lord's, London",
        "dateTimeGMT": "2026-10-20T14:00:00",
        "teams": ["England", "Pakistan"],
        "teamInfo": [
            {"name": "England", "shortname": "ENG", "img": "https://example.test/eng.png"},
            {"name": "Pakistan", "shortname": "PAK", "img": "https://example.test/pak.png"},
        ],
        "matchStarted": False,
        "matchEnded": False,
    }


@pytest.fixture
def scorecard_data():
    return {
        "id": "m1",
        "name": "India vs Australia, 1st ODI",
        "status": "India need 45 runs in 38 balls",
        "score": [{"r": 245, "w": 6, "o": 50, "inning": "Australia Inning 1"}],
        "scorecard": [
            {
                "inning": "Australia Inning 1",
                "batting": [
                    {"batsman": {"id": "p1", "name": "Steve Smith"},
                     "dismissal-text": "c Pant b Bumrah", "r": 88, "b": 97,
                     "4s": 8, "6s": 2, "sr": 90.72},
                    {"batsman": {"id": "p2", "name": "Travis Head"},
                     "dismissal-text": "b Siraj", "r": 41, "b": 30,
                     "4s": 6, "6s": 1, "sr": 136.67},
                ],
                "bowling": [
                    {"bowler": {"id": "p9", "name": "Jasprit Bumrah"},
                     "o": 10, "m": 1, "r": 38, "w": 3, "eco": 3.8},
                    {"bowler": {"id": "p10", "name": "Mohammed Siraj"},
                     "o": 10, "m": 0, "r": 55, "w": 2, "eco": 5.5},
                ],
            },
        ],
    }


@pytest.fixture
def squad_data():
    return [
        {"teamName": "India", "shortname": "IND", "players": [
            {"id": "s1", "name": "Rohit Sharma", "role": "Batsman", "battingStyle": "Right Handed Bat"},
            {"id": "s2", "name": "Jasprit Bumrah", "role": "Bowler", "bowlingStyle": "Right-arm fast"},
        ]},
        {"teamName": "Australia", "shortname": "AUS", "players": [
            {"id": "s3", "name": "Pat Cummins", "role": "Bowler"},
        ]},
    ]


@pytest.fixture
def catalog_data():
    return [
        {"id": "c1", "name": "Rohit Sharma", "country": "India"},
        {"id": "c2", "name": "Rohit Paudel", "country": "Nepal"},
        {"id": "c3", "name": "Virat Kohli", "country": "India"},
        {"id": "c4", "name": "Pat Cummins", "country": "Australia"},
    ]


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeCricketClient:
    """In-memory stand-in for :class:`CricketApiClient`.

    Methods named in ``fail`` raise ``UpstreamDataError``; methods named in
    ``down`` raise ``requests.ConnectionError``; methods named in ``crash``
    raise ``crash_error`` (default ``RuntimeError``).
    """

    def __init__(self, matches=(), squad=(), scorecard=None, players=(), live_scores=(),
                 fail=(), down=(), crash=(), crash_error=None):
        self._matches = list(matches)
        self._squad = list(squad)
        self._scorecard = scorecard
        self._players = list(players)
        self._live_scores = list(live_scores)
        self.fail = set(fail)
        self.down = set(down)
        self.crash = set(crash)
        self.crash_error = crash_error
        self.calls: list[tuple] = []

    def _check(self, name, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise UpstreamDataError(f"{name}: status 'failure'")
        if name in self.down:
            raise requests.ConnectionError(f"{name}: connection refused")
        if name in self.crash:
            raise self.crash_error or RuntimeError(f"{name}: unexpected")

    def called(self, name) -> bool:
        return any(c[0] == name for c in self.calls)

    def get_current_matches(self):
        self._check("get_current_matches")
        return [Match.model_validate(m).ensure_team_info() for m in self._matches]

    def get_matches(self, per_page=5):
        self._check("get_matches", per_page)
        return [Match.model_validate(m) for m in self._matches[:per_page]]

    def get_match_squad(self, match_id):
        self._check("get_match_squad", match_id)
        return [SquadTeam.model_validate(t) for t in self._squad]

    def get_match_scorecard(self, match_id):
        self._check("get_match_scorecard", match_id)
        if self._scorecard is None:
            raise UpstreamDataError("match_scorecard: missing data")
        return Scorecard.model_validate(self._scorecard)

    def search_players(self, search=None):
        self._check("search_players", search)
        return [CatalogPlayer.model_validate(p) for p in self._players]

    def get_live_scores(self):
        self._check("get_live_scores")
        return list(self._live_scores)


class FakeChatClient:
    """Returns a canned reply, or raises ``error`` if given."""

    def __init__(self, reply="Here is what I found.", error=None):
        self.reply = reply
        self.error = error
        self.prompts: list[tuple[str, str]] = []

    def complete(self, system_prompt, user_prompt):
        self.prompts.append((system_prompt, user_prompt))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_client(live_match_data, upcoming_match_data, squad_data, scorecard_data, catalog_data):
    """Cricket client with a full, healthy data set."""
    return FakeCricketClient(
        matches=[live_match_data, upcoming_match_data],
        squad=squad_data,
        scorecard=scorecard_data,
        players=catalog_data,
        live_scores=[{"id": "m1", "t1": "India", "t2": "Australia", "t1s": "201/4 (43.4)"}],
    )


@pytest.fixture
def failing_client():
    """Cricket client where every call fails."""
    names = {
        "get_current_matches", "get_matches", "get_match_squad",
        "get_match_scorecard", "search_players", "get_live_scores",
    }
    return FakeCricketClient(fail=names)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db(tmp_path):
    """Return a path to a temporary SQLite database."""
    return tmp_path / "test_fantasy.db"


@pytest.fixture
def seeded_db(tmp_db, player_pool):
    """Temporary database with the test player pool loaded."""
    from fantasy_cricket.db.repositories import PlayerRepository

    PlayerRepository(tmp_db).upsert_players(list(player_pool.values()))
    return tmp_db
