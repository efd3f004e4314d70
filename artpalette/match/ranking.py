"""Rank reference artworks against an uploaded palette."""

from __future__ import annotations

import logging
import random
from typing import List, MutableSequence, Protocol, Sequence, TypeVar

from ..io.models import ColorRecord, MatchResult, ReferenceCorpusEntry
from .similarity import DEFAULT_BOOST, palette_similarity

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_THRESHOLD: float = 0.05
GUARANTEED: int = 2
DIVERSITY_POOL: int = 10
DIVERSITY_PICKS: int = 4
RESULT_LIMIT: int = 6
PADDING_SIMILARITY: float = 0.1


class RandomSource(Protocol):
    """Subset of :class:`random.Random` used for diversity picks."""

    def sample(self, population: Sequence[T], k: int) -> List[T]: ...

    def shuffle(self, x: MutableSequence[T]) -> None: ...


def score_corpus(
    uploaded: Sequence[ColorRecord],
    corpus: Sequence[ReferenceCorpusEntry],
    *,
    boost: float = DEFAULT_BOOST,
) -> list[MatchResult]:
    """Return every corpus entry scored against *uploaded*, best first."""
    if not uploaded:
        return []
    scored = [
        MatchResult(entry=entry, similarity=palette_similarity(uploaded, entry.palette, boost=boost))
        for entry in corpus
        if entry.palette
    ]
    scored.sort(key=lambda item: item.similarity, reverse=True)
    return scored


def rank_matches(
    uploaded: Sequence[ColorRecord],
    corpus: Sequence[ReferenceCorpusEntry],
    threshold: float = DEFAULT_THRESHOLD,
    *,
    rng: RandomSource | None = None,
    boost: float = DEFAULT_BOOST,
    guaranteed: int = GUARANTEED,
    pool: int = DIVERSITY_POOL,
    diverse: int = DIVERSITY_PICKS,
    limit: int = RESULT_LIMIT,
    padding_similarity: float = PADDING_SIMILARITY,
) -> list[MatchResult]:
    """Return up to *limit* matches mixing the best scores with random picks.

    The *guaranteed* best entries above *threshold* always come first, then
    up to *diverse* entries sampled from the following *pool* ranks. When
    fewer than *limit* results remain, random unused corpus entries are
    appended with ``padding_similarity`` and ``padded=True``.
    """
    if not uploaded:
        return []
    rng = rng if rng is not None else random.Random()

    scored = score_corpus(uploaded, corpus, boost=boost)
    accepted = [item for item in scored if item.similarity > threshold]
    logger.debug(
        "Scored %d artworks, %d above threshold %.3f", len(scored), len(accepted), threshold
    )

    selected = list(accepted[:guaranteed])
    candidates = accepted[guaranteed : guaranteed + pool]
    if candidates and diverse > 0:
        picks = rng.sample(candidates, min(diverse, len(candidates)))
        picks.sort(key=lambda item: item.similarity, reverse=True)
        selected.extend(picks)
    selected = selected[:limit]

    used = {id(item.entry) for item in selected}
    unused = [entry for entry in corpus if entry.palette and id(entry) not in used]
    rng.shuffle(unused)
    for entry in unused[: max(0, limit - len(selected))]:
        selected.append(MatchResult(entry=entry, similarity=padding_similarity, padded=True))

    logger.debug(
        "Selected %d matches (%d padded)",
        len(selected),
        sum(1 for item in selected if item.padded),
    )
    return selected
