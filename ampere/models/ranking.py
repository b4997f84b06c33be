from pydantic import BaseModel, Field

from ampere.core.config import Settings


class RankingWeights(BaseModel):
    """
    Tunable constants of the ranking score.

    Recent exposure reduces a card's score but the penalty is capped so it can
    never cancel a strong favorite match.
    """

    favorite_platform: float = 10.0
    favorite_league: float = 8.0
    favorite_team: float = 7.0
    live_badge: float = 4.0
    upcoming_badge: float = 2.0

    recency_window: int = Field(default=120, ge=0, description="Most recent viewing events considered")
    repeat_penalty: float = Field(default=2.0, ge=0, description="Penalty per repeated view")
    max_repeat_penalty: float = Field(default=6.0, ge=0)

    tiebreak_modulus: int = Field(default=7, ge=1)
    tiebreak_step: float = 0.01

    @classmethod
    def from_settings(cls, settings: Settings) -> "RankingWeights":
        return cls(
            recency_window=settings.RANKING_RECENCY_WINDOW,
            repeat_penalty=settings.RANKING_REPEAT_PENALTY,
            max_repeat_penalty=settings.RANKING_MAX_REPEAT_PENALTY,
            tiebreak_modulus=settings.RANKING_TIEBREAK_MODULUS,
            tiebreak_step=settings.RANKING_TIEBREAK_STEP,
        )
