from seed import DEMO_OWNER_ID, ROUND_ROBIN_FIXTURES, build_demo_tournament

from carrom_league import standings

from factories import NOW, team


def test_fresh_demo_league():
    tournament = build_demo_tournament(NOW)

    assert tournament.owner_id == DEMO_OWNER_ID
    assert [group.name for group in tournament.groups] == ["Group A", "Group B"]
    assert len(tournament.teams) == 4
    assert len(tournament.matches) == len(ROUND_ROBIN_FIXTURES)
    assert all(match.status == "upcoming" for match in tournament.matches)
    assert tournament.matches[0].date.hour == 19


def test_demo_progress_plays_two_matches_and_leaves_one_live():
    tournament = build_demo_tournament(NOW, demo_progress=True)

    assert [match.status for match in tournament.matches[:3]] == ["completed", "completed", "inprogress"]
    assert team(tournament, "Pocket Protectors").points == 2
    assert team(tournament, "Coin Collectors").points == 2

    board = standings.build_striker_board(tournament)
    assert board.super_striker.player == "Alice"
    assert board.super_striker.score == 12
