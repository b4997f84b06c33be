from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ampere.core.constants import (
    RAIL_CONTINUE_WATCHING,
    RAIL_FOR_YOU,
    RAIL_LIVE_NOW,
    RAIL_TRENDING,
    SEARCH_BROWSE_LIMIT,
    SEARCH_RESULTS_LIMIT,
)
from ampere.models.card import Card
from ampere.models.engagement import ViewingEvent
from ampere.models.profile import Profile
from ampere.services.dedup import dedupe
from ampere.services.ranking import RankingEngine
from ampere.utils.text import normalize_key

Rails = Mapping[str, Sequence[Card]]


class RailFilters(BaseModel):
    """Active genre / platform / league chips on the home screen."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    genre: str = Field(default="All", description='"All" disables the genre filter')
    platform: str = Field(default="all", description='"all" disables the platform filter')
    league: str = Field(default="ALL", description='"ALL" disables the league filter')

    def matches_genre(self, card: Card) -> bool:
        # Cards without a genre are shown under every genre chip
        if self.genre == "All" or not card.genre:
            return True
        return card.genre == self.genre

    def matches_platform(self, card: Card) -> bool:
        return self.platform == "all" or card.platform_id == self.platform

    def matches_league(self, card: Card) -> bool:
        return self.league == "ALL" or normalize_key(card.league) == normalize_key(self.league)

    def apply(self, cards: Sequence[Card], by_league: bool = False) -> list[Card]:
        return [
            c
            for c in cards
            if self.matches_genre(c) and self.matches_platform(c) and (not by_league or self.matches_league(c))
        ]


class RailService:
    """
    Assembles the rails the rendering layer shows.

    Only the For You rail is personalized; the other rails keep the order the
    content source gave them and are just filtered.
    """

    def __init__(self, engine: RankingEngine | None = None) -> None:
        self.engine = engine or RankingEngine()

    def build_home(
        self,
        rails: Rails,
        profile: Profile,
        viewing: Sequence[ViewingEvent],
        filters: RailFilters | None = None,
    ) -> dict[str, list[Card]]:
        filters = filters or RailFilters()
        home: dict[str, list[Card]] = {}
        for name, cards in rails.items():
            if name == RAIL_FOR_YOU:
                home[name] = filters.apply(self.engine.rank(cards, profile, viewing))
            elif name == RAIL_LIVE_NOW:
                home[name] = filters.apply(cards, by_league=True)
            else:
                home[name] = filters.apply(cards)
        return home

    def favorites_view(
        self, rails: Rails, profile: Profile, viewing: Sequence[ViewingEvent]
    ) -> dict[str, list[Card]]:
        """Each standard rail restricted to the user's favorite platforms."""
        favorites = set(profile.favorite_platform_ids)
        view: dict[str, list[Card]] = {}
        for name in (RAIL_FOR_YOU, RAIL_LIVE_NOW, RAIL_CONTINUE_WATCHING, RAIL_TRENDING):
            cards = list(rails.get(name, []))
            if name == RAIL_FOR_YOU:
                cards = self.engine.rank(cards, profile, viewing)
            view[name] = [c for c in cards if c.platform_id and c.platform_id in favorites]
        return view

    def search(self, rails: Rails, query: str = "", filters: RailFilters | None = None) -> list[Card]:
        """
        Search across every rail with duplicates collapsed.

        An empty query browses the first results; otherwise the query is matched
        case-insensitively against title, subtitle, platform label, league and genre.
        """
        filters = filters or RailFilters()
        pool = [card for cards in rails.values() for card in cards]
        base = filters.apply(dedupe(pool))

        q = (query or "").strip().lower()
        if not q:
            return base[:SEARCH_BROWSE_LIMIT]

        def haystack(card: Card) -> str:
            parts = [card.title, card.subtitle, card.platform_label, card.league, card.genre]
            return " ".join(p or "" for p in parts).lower()

        return [c for c in base if q in haystack(c)][:SEARCH_RESULTS_LIMIT]
