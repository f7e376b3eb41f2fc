"""Tests for domain/teams.py — team channel names and role lookup."""

from polybot.domain.teams import find_team_role, is_team_channel, team_number


class TestTeamChannel:
    def test_matches(self):
        assert is_team_channel("team-1")
        assert is_team_channel("Team-12")

    def test_rejects(self):
        assert not is_team_channel("team-123")
        assert not is_team_channel("general")
        assert not is_team_channel("team-")
        assert not is_team_channel("my-team-1")

    def test_number(self):
        assert team_number("team-7") == 7
        assert team_number("general") == 999

    def test_sort_by_number(self):
        names = ["team-10", "team-2", "team-1"]
        assert sorted(names, key=team_number) == ["team-1", "team-2", "team-10"]


class TestFindTeamRole:
    def test_variants(self):
        for role_name in ("team3", "Team 3", "TEAM-3"):
            assert find_team_role("team-3", [(1, "organizers"), (9, role_name)]) == 9

    def test_no_match(self):
        assert find_team_role("team-3", [(1, "team 30"), (2, "team4")]) is None
