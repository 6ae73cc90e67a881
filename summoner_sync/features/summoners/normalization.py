"""Summoner name normalization."""


def normalize_name(name: str) -> str:
    """Canonical lookup key for a display name.

    Removes every space, lowercases and trims surrounding whitespace, so
    ``"Fa Ker"``, ``"faker"`` and ``" FAKER "`` share one key. Idempotent.
    The store applies the same transform in SQL (see
    ``SQLAlchemySummonerRepository.find_by_normalized_name``).
    """
    return name.replace(" ", "").lower().strip()
