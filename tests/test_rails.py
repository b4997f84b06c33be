"""
Tests for home rail assembly, the favorites view and global search.
"""
import pytest

from ampere.models.profile import Profile
from ampere.services.rails import RailFilters, RailService


@pytest.fixture
def rails(make_card):
    return {
        "forYou": [
            make_card("fy-bear", title="The Bear", platform_id="hulu", genre="Basic Streaming"),
            make_card("fy-ufc", title="UFC Countdown", platform_id="espnplus", league="UFC", badge="UPCOMING"),
            make_card("fy-fast", title="FAST: Movie Marathon", platform_id="plutotv", genre="Free Streaming"),
        ],
        "liveNow": [
            make_card("ln-nfl", title="NFL: Chiefs vs Bills", platform_id="espn", league="NFL", badge="LIVE"),
            make_card("ln-nba", title="NBA: Lakers vs Celtics", platform_id="youtubetv", league="NBA", badge="LIVE"),
        ],
        "continueWatching": [
            make_card("cw-st", title="Stranger Things", platform_id="netflix", genre="Basic Streaming"),
        ],
        "trending": [
            make_card("tr-top", title="Top 10 Today", platform_id="netflix", genre="Basic Streaming"),
            make_card("tr-bear", title="The Bear", platform_id="hulu", genre="Basic Streaming"),
        ],
    }


@pytest.fixture
def service():
    return RailService()


def ids(cards):
    return [c.id for c in cards]


class TestRailFilters:
    def test_defaults_match_everything(self, make_card):
        card = make_card("x", platform_id="hulu", genre="Kids", league="NFL")

        assert RailFilters().apply([card], by_league=True) == [card]

    def test_genre_filter_lets_genreless_cards_through(self, make_card):
        cards = [make_card("kids", genre="Kids"), make_card("docs", genre="Documentaries"), make_card("none")]

        assert ids(RailFilters(genre="Kids").apply(cards)) == ["kids", "none"]

    def test_league_filter_is_normalized(self, make_card):
        cards = [make_card("a", league="N.F.L."), make_card("b", league="NBA"), make_card("c")]

        assert ids(RailFilters(league="nfl").apply(cards, by_league=True)) == ["a"]

    def test_parses_camel_case(self):
        assert RailFilters.model_validate({"genre": "Kids", "platform": "pbs"}).platform == "pbs"


class TestBuildHome:
    def test_for_you_is_ranked_and_other_rails_keep_source_order(self, service, rails):
        profile = Profile(favorite_platform_ids=["plutotv"], favorite_leagues=[], favorite_teams=[])

        home = service.build_home(rails, profile, [])

        assert ids(home["forYou"]) == ["fy-fast", "fy-ufc", "fy-bear"]
        assert ids(home["liveNow"]) == ["ln-nfl", "ln-nba"]
        assert ids(home["trending"]) == ["tr-top", "tr-bear"]

    def test_league_filter_applies_to_live_now_only(self, service, rails, empty_profile):
        home = service.build_home(rails, empty_profile, [], RailFilters(league="NBA"))

        assert ids(home["liveNow"]) == ["ln-nba"]
        assert len(home["forYou"]) == 3

    def test_platform_filter(self, service, rails, empty_profile):
        home = service.build_home(rails, empty_profile, [], RailFilters(platform="netflix"))

        assert ids(home["continueWatching"]) == ["cw-st"]
        assert ids(home["trending"]) == ["tr-top"]
        assert home["forYou"] == []


class TestFavoritesView:
    def test_restricts_rails_to_favorite_platforms(self, service, rails):
        profile = Profile(favorite_platform_ids=["netflix", "espn"])

        view = service.favorites_view(rails, profile, [])

        assert view["forYou"] == []
        assert ids(view["liveNow"]) == ["ln-nfl"]
        assert ids(view["continueWatching"]) == ["cw-st"]
        assert ids(view["trending"]) == ["tr-top"]

    def test_missing_rails_are_empty(self, service, defaults):
        assert service.favorites_view({}, defaults, []) == {
            "forYou": [],
            "liveNow": [],
            "continueWatching": [],
            "trending": [],
        }


class TestSearch:
    def test_empty_query_lists_unique_cards(self, service, rails):
        results = service.search(rails, "")

        assert ids(results) == ["fy-bear", "fy-ufc", "fy-fast", "ln-nfl", "ln-nba", "cw-st", "tr-top"]

    def test_query_matches_league_and_title(self, service, rails):
        assert ids(service.search(rails, "  ufc ")) == ["fy-ufc"]
        assert ids(service.search(rails, "lakers")) == ["ln-nba"]

    def test_query_respects_filters(self, service, rails):
        assert ids(service.search(rails, "the", RailFilters(platform="hulu"))) == ["fy-bear"]

    def test_result_limits(self, service, make_card):
        many = {"trending": [make_card(str(i), title=f"Show {i}") for i in range(100)]}

        assert len(service.search(many, "")) == 36
        assert len(service.search(many, "show")) == 60
