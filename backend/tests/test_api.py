import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from carrom_league.database import Base, get_db
from carrom_league.main import app

OWNER = {"X-User-Id": "owner-1"}
FAN = {"X-User-Id": "fan-1"}


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    session_factory = sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    Base.metadata.create_all(bind=engine)
    return session_factory


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_league(client, team_names=("Alpha", "Bravo", "Charlie", "Delta")):
    created = client.post("/tournaments/", json={"name": "Friday Carrom"}, headers=OWNER)
    assert created.status_code == 201
    tournament_id = created.json()["id"]

    for name in team_names:
        response = client.post(
            f"/tournaments/{tournament_id}/teams/",
            json={"name": name, "player_names": [f"{name} 1", f"{name} 2"]},
            headers=OWNER,
        )
        assert response.status_code == 201

    teams = client.get(f"/tournaments/{tournament_id}/teams/", headers=OWNER).json()
    return tournament_id, {team["name"]: team for team in teams}


def create_fixture(client, tournament_id, team1_id, team2_id, date="2024-10-26T19:00:00Z"):
    response = client.post(
        f"/tournaments/{tournament_id}/matches/",
        json={"team1_id": team1_id, "team2_id": team2_id, "date": date},
        headers=OWNER,
    )
    assert response.status_code == 201
    return response.json()["matches"][-1]


def test_healthcheck(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_requests_need_a_user(client):
    response = client.get("/tournaments/")

    assert response.status_code == 401


def test_create_and_list_tournaments(client):
    tournament_id, teams = create_league(client)

    listed = client.get("/tournaments/", headers=OWNER)
    assert listed.status_code == 200
    assert listed.json() == [
        {
            "id": tournament_id,
            "name": "Friday Carrom",
            "stage": "league",
            "owner_id": "owner-1",
            "role": "owner",
            "team_count": 4,
            "match_count": 0,
        }
    ]
    assert client.get("/tournaments/", headers=FAN).json() == []
    assert [team["name"] for team in teams.values()] == ["Alpha", "Bravo", "Charlie", "Delta"]


def test_unknown_tournament(client):
    response = client.get("/tournaments/missing", headers=OWNER)

    assert response.status_code == 404


def test_duplicate_team_name_conflicts(client):
    tournament_id, _ = create_league(client)

    response = client.post(f"/tournaments/{tournament_id}/teams/", json={"name": "alpha"}, headers=OWNER)

    assert response.status_code == 409


def test_live_match_flow_and_leaderboards(client):
    tournament_id, teams = create_league(client)
    alpha, bravo = teams["Alpha"], teams["Bravo"]
    match = create_fixture(client, tournament_id, alpha["id"], bravo["id"])
    base = f"/tournaments/{tournament_id}/matches/{match['id']}"

    started = client.post(f"{base}/start", headers=OWNER)
    assert started.status_code == 200
    assert client.post(f"{base}/start", headers=OWNER).status_code == 409

    striker = alpha["players"][0]["id"]
    for _ in range(2):
        assert client.post(f"{base}/live-score", json={"player_id": striker, "delta": 1}, headers=OWNER).status_code == 200
    queen = client.post(
        f"{base}/live-score",
        json={"player_id": bravo["players"][1]["id"], "is_queen": True},
        headers=OWNER,
    )
    assert queen.status_code == 200
    second_queen = client.post(f"{base}/live-score", json={"player_id": striker, "is_queen": True}, headers=OWNER)
    assert second_queen.status_code == 409
    bad_delta = client.post(f"{base}/live-score", json={"player_id": striker, "delta": 3}, headers=OWNER)
    assert bad_delta.status_code == 400

    board = client.get(f"{base}/live", headers=OWNER).json()
    assert board["team1"]["total"] == 2
    assert board["team2"]["total"] == 3

    result = client.post(
        f"{base}/result",
        json={"winner_id": alpha["id"], "winner_score": 14, "loser_score": 9},
        headers=OWNER,
    )
    assert result.status_code == 200
    replay = client.post(f"{base}/result", json={"winner_id": alpha["id"], "winner_score": 14}, headers=OWNER)
    assert replay.status_code == 409

    table = client.get(f"/tournaments/{tournament_id}/viewer/points-table", headers=OWNER).json()
    assert table[0]["team"] == "Alpha"
    assert table[0]["points"] == 2
    assert table[0]["net_score_margin"] == 5
    assert table[0]["recent_form"] == ["W"]
    assert table[-1]["team"] == "Bravo"

    strikers = client.get(f"/tournaments/{tournament_id}/viewer/super-striker", headers=OWNER).json()
    assert strikers["super_striker"]["player"] == "Bravo 2"
    assert strikers["super_striker"]["score"] == 3


def test_viewer_access_and_promotion(client):
    tournament_id, _ = create_league(client)
    invite_code = client.get(f"/tournaments/{tournament_id}", headers=OWNER).json()["invite_code"]

    joined = client.post("/tournaments/join", json={"invite_code": invite_code}, headers=FAN)
    assert joined.status_code == 200
    assert client.post("/tournaments/join", json={"invite_code": invite_code}, headers=FAN).status_code == 409
    assert client.post("/tournaments/join", json={"invite_code": "NOPE"}, headers=FAN).status_code == 404

    assert client.get(f"/tournaments/{tournament_id}/viewer/points-table", headers=FAN).status_code == 200
    blocked = client.post(f"/tournaments/{tournament_id}/groups/", json={"name": "Group A"}, headers=FAN)
    assert blocked.status_code == 403

    promoted = client.patch(f"/tournaments/{tournament_id}/collaborators/fan-1", json={"role": "editor"}, headers=OWNER)
    assert promoted.status_code == 200

    allowed = client.post(f"/tournaments/{tournament_id}/groups/", json={"name": "Group A"}, headers=FAN)
    assert allowed.status_code == 201
    assert allowed.json()["groups"][0]["name"] == "Group A"

    assert client.delete(f"/tournaments/{tournament_id}", headers=FAN).status_code == 403
    assert client.delete(f"/tournaments/{tournament_id}", headers=OWNER).status_code == 204


def test_playoffs_need_four_teams(client):
    tournament_id, _ = create_league(client, ("Alpha", "Bravo", "Charlie"))

    response = client.post(f"/tournaments/{tournament_id}/playoffs/", headers=OWNER)

    assert response.status_code == 400


def test_playoff_bracket_through_intents(client):
    tournament_id, teams = create_league(client)

    generated = client.post(f"/tournaments/{tournament_id}/playoffs/", json={"start_time": "18:30:00"}, headers=OWNER)
    assert generated.status_code == 200
    assert generated.json()["stage"] == "playoffs"

    bracket = client.get(f"/tournaments/{tournament_id}/playoffs/", headers=OWNER).json()
    assert bracket["qualifier1"]["team1_id"] == teams["Alpha"]["id"]
    assert bracket["qualifier2"]["team1_id"] == "TBD"
    assert "T18:30:00" in bracket["final"]["date"]

    qualifier1 = bracket["qualifier1"]["id"]
    finished = client.post(
        f"/tournaments/{tournament_id}/intents",
        json={
            "kind": "update_match_result",
            "match_id": qualifier1,
            "winner_id": teams["Bravo"]["id"],
            "winner_score": 10,
        },
        headers=OWNER,
    )
    assert finished.status_code == 200

    bracket = client.get(f"/tournaments/{tournament_id}/playoffs/", headers=OWNER).json()
    assert bracket["final"]["team1_id"] == teams["Bravo"]["id"]
    assert bracket["qualifier2"]["team1_id"] == teams["Alpha"]["id"]

    playoff_matches = client.get(
        f"/tournaments/{tournament_id}/matches/", params={"stage": "playoff"}, headers=OWNER
    ).json()
    assert [item["playoff_type"] for item in playoff_matches] == ["qualifier1", "eliminator", "qualifier2", "final"]


def test_roster_and_team_management(client):
    tournament_id, teams = create_league(client)
    alpha = teams["Alpha"]
    base = f"/tournaments/{tournament_id}/teams/{alpha['id']}"
    create_fixture(client, tournament_id, alpha["id"], teams["Bravo"]["id"])

    added = client.post(f"{base}/players/", json={"name": "Alpha 3"}, headers=OWNER)
    assert added.status_code == 201
    roster = next(team for team in added.json()["teams"] if team["id"] == alpha["id"])["players"]
    assert [player["name"] for player in roster] == ["Alpha 1", "Alpha 2", "Alpha 3"]

    removed = client.delete(f"{base}/players/{roster[-1]['id']}", headers=OWNER)
    assert removed.status_code == 200
    assert client.delete(f"{base}/players/{roster[-1]['id']}", headers=OWNER).status_code == 404

    renamed = client.patch(base, json={"name": "Alpha Strikers", "color": "#111111"}, headers=OWNER)
    assert renamed.status_code == 200
    assert client.patch(base, json={"name": "bravo"}, headers=OWNER).status_code == 409

    deleted = client.delete(base, headers=OWNER)
    assert deleted.status_code == 200
    assert [team["name"] for team in deleted.json()["teams"]] == ["Bravo", "Charlie", "Delta"]
    assert deleted.json()["matches"] == []


def test_collaborator_listing_and_removal(client):
    tournament_id, _ = create_league(client)
    invite_code = client.get(f"/tournaments/{tournament_id}", headers=OWNER).json()["invite_code"]
    client.post("/tournaments/join", json={"invite_code": invite_code}, headers=FAN)

    members = client.get(f"/tournaments/{tournament_id}/collaborators/", headers=OWNER).json()
    assert members == [{"user_id": "fan-1", "role": "viewer"}]

    assert client.delete(f"/tournaments/{tournament_id}/collaborators/owner-1", headers=OWNER).status_code == 400
    removed = client.delete(f"/tournaments/{tournament_id}/collaborators/fan-1", headers=OWNER)
    assert removed.status_code == 200
    assert client.get(f"/tournaments/{tournament_id}", headers=FAN).status_code == 403


def test_mixed_date_formats_list_and_schedule_playoffs(client):
    tournament_id, teams = create_league(client)
    late = create_fixture(client, tournament_id, teams["Alpha"]["id"], teams["Bravo"]["id"], date="2024-10-27T19:00:00Z")
    early = create_fixture(client, tournament_id, teams["Charlie"]["id"], teams["Delta"]["id"], date="2024-10-26T19:00:00")
    for match, winner in ((late, "Alpha"), (early, "Charlie")):
        finished = client.post(
            f"/tournaments/{tournament_id}/matches/{match['id']}/result",
            json={"winner_id": teams[winner]["id"], "winner_score": 10},
            headers=OWNER,
        )
        assert finished.status_code == 200

    listed = client.get(f"/tournaments/{tournament_id}/matches/", headers=OWNER)
    assert listed.status_code == 200
    assert [item["id"] for item in listed.json()] == [early["id"], late["id"]]

    generated = client.post(f"/tournaments/{tournament_id}/playoffs/", headers=OWNER)
    assert generated.status_code == 200
    bracket = client.get(f"/tournaments/{tournament_id}/playoffs/", headers=OWNER).json()
    assert bracket["qualifier1"]["date"].startswith("2024-10-28T19:00:00")


def test_rename_player(client):
    tournament_id, teams = create_league(client)
    alpha = teams["Alpha"]
    player_id = alpha["players"][0]["id"]
    url = f"/tournaments/{tournament_id}/teams/{alpha['id']}/players/{player_id}"

    renamed = client.patch(url, json={"name": "Alpha Ace"}, headers=OWNER)
    assert renamed.status_code == 200
    roster = next(team for team in renamed.json()["teams"] if team["id"] == alpha["id"])["players"]
    assert roster[0] == {**alpha["players"][0], "name": "Alpha Ace"}

    missing = client.patch(
        f"/tournaments/{tournament_id}/teams/{alpha['id']}/players/missing", json={"name": "X"}, headers=OWNER
    )
    assert missing.status_code == 404
    assert client.patch(url, json={"name": "Alpha Ace"}, headers=FAN).status_code == 403
