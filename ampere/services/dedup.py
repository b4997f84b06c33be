from collections.abc import Iterable

from ampere.core.constants import IDENTITY_KEY_SEPARATOR
from ampere.models.card import Card
from ampere.utils.text import normalize_key


def card_identity_key(card: Card) -> str:
    """
    Canonical identity of a card across rails.

    Title, platform (the platform id when known, otherwise the normalized
    label), league and genre.
    """
    platform = card.platform_id if card.platform_id is not None else normalize_key(card.platform_label)
    return IDENTITY_KEY_SEPARATOR.join(
        [
            normalize_key(card.title),
            platform,
            normalize_key(card.league),
            normalize_key(card.genre),
        ]
    )


def dedupe(cards: Iterable[Card]) -> list[Card]:
    """Keep the first card seen for each identity key, in order of first appearance."""
    seen: set[str] = set()
    unique: list[Card] = []
    for card in cards:
        key = card_identity_key(card)
        if key in seen:
            continue
        seen.add(key)
        unique.append(card)
    return unique
