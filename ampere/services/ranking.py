from collections import Counter
from collections.abc import Sequence

from ampere.core.constants import BADGE_LIVE, BADGE_UPCOMING, IDENTITY_KEY_SEPARATOR
from ampere.models.card import Card
from ampere.models.engagement import ViewingEvent
from ampere.models.profile import Profile
from ampere.models.ranking import RankingWeights
from ampere.utils.text import normalize_key

DEFAULT_WEIGHTS = RankingWeights()


def recency_key(title: str | None, platform_id: str | None, league: str | None) -> str:
    """Identity used to match a card against viewing history."""
    return IDENTITY_KEY_SEPARATOR.join([normalize_key(title), platform_id or "", normalize_key(league)])


def build_recency_table(viewing: Sequence[ViewingEvent], window: int) -> Counter:
    """Count views per identity key over the most recent `window` events."""
    recent = list(viewing)[-window:] if window > 0 else []
    return Counter(recency_key(v.title, v.platform_id, v.league) for v in recent)


class RankingEngine:
    """
    Orders candidate cards toward the user's declared and inferred interests.

    Scoring is additive:
        favorite platform, favorite league, first matching favorite team,
        LIVE / UPCOMING badge, minus a capped penalty for recent repeat views,
        plus a small positional term so equal scores keep a reproducible order.

    The engine is pure: the same inputs (including card positions) always give
    the same order, and every input card appears exactly once in the output.
    """

    def __init__(self, weights: RankingWeights | None = None) -> None:
        self.weights = weights or DEFAULT_WEIGHTS

    def score_card(
        self,
        card: Card,
        index: int,
        favorite_platforms: set[str],
        favorite_leagues: set[str],
        favorite_teams: list[str],
        recency: Counter,
    ) -> float:
        w = self.weights
        score = 0.0

        if card.platform_id and card.platform_id in favorite_platforms:
            score += w.favorite_platform
        if card.league and normalize_key(card.league) in favorite_leagues:
            score += w.favorite_league

        title_key = normalize_key(card.title)
        subtitle_key = normalize_key(card.subtitle)
        for team in favorite_teams:
            if team in title_key or team in subtitle_key:
                score += w.favorite_team
                break

        if card.badge == BADGE_LIVE:
            score += w.live_badge
        elif card.badge == BADGE_UPCOMING:
            score += w.upcoming_badge

        seen = recency.get(recency_key(card.title, card.platform_id, card.league), 0)
        score -= min(w.max_repeat_penalty, seen * w.repeat_penalty)

        score += (index % w.tiebreak_modulus) * w.tiebreak_step
        return score

    def rank(self, cards: Sequence[Card], profile: Profile, viewing: Sequence[ViewingEvent]) -> list[Card]:
        favorite_platforms = set(profile.favorite_platform_ids)
        favorite_leagues = {normalize_key(league) for league in profile.favorite_leagues}
        # Ordered so the "first match wins" team bonus is reproducible; empty names never match.
        favorite_teams = [key for key in dict.fromkeys(normalize_key(t) for t in profile.favorite_teams) if key]
        recency = build_recency_table(viewing, self.weights.recency_window)

        scored = [
            (
                card,
                self.score_card(card, index, favorite_platforms, favorite_leagues, favorite_teams, recency),
            )
            for index, card in enumerate(cards)
        ]
        # sorted() is stable, including with reverse=True
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [card for card, _ in scored]


def rank(
    cards: Sequence[Card],
    profile: Profile,
    viewing: Sequence[ViewingEvent],
    weights: RankingWeights | None = None,
) -> list[Card]:
    """Rank `cards` for `profile` given recent `viewing` history."""
    return RankingEngine(weights).rank(cards, profile, viewing)
