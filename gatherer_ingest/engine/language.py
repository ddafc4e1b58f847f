"""Work out a card's printed language from its language-variant page."""

from __future__ import annotations

import structlog

from ..cards import Language

logger = structlog.get_logger("gatherer_ingest.language")


def resolve_language(page: bytes | str, *, card_name: str = "", identifier: int | None = None) -> Language:
    """Resolve by elimination.

    The variant page lists the *other* printings of the card, so every
    language whose label appears is ruled out. A single survivor is the
    answer; otherwise English wins if it survived, else the unknown sentinel.
    """

    text = page.decode("utf-8", errors="replace") if isinstance(page, bytes) else page
    candidates = [language for language in Language.supported() if language.label not in text]

    if len(candidates) == 1:
        return candidates[0]

    remaining = [language.label for language in candidates]
    if Language.ENGLISH in candidates:
        logger.error(
            "language_ambiguous",
            identifier=identifier,
            card=card_name,
            candidates=remaining,
            resolved=Language.ENGLISH.label,
        )
        return Language.ENGLISH
    logger.error(
        "language_ambiguous",
        identifier=identifier,
        card=card_name,
        candidates=remaining,
        resolved=Language.UNKNOWN_NON_ENGLISH.label,
    )
    return Language.UNKNOWN_NON_ENGLISH


__all__ = ["resolve_language"]
