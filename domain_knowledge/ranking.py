"""
Candidate ranking policies.

Both policies gate candidates on sample count and Wilson confidence,
then pick the best survivor:

- SelectorRankingPolicy: discovered selectors always beat heuristic ones
- CategoryRankingPolicy: highest confidence wins

Ties are broken by more samples, then by the most recent observation.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .config import config
from .observation_store import Observation


def _sort_key(record: Observation) -> Tuple[float, int, datetime]:
    return (record.confidence, record.total_samples, record.last_seen_at or datetime.min)


class RankingPolicy:
    """Threshold gating plus best-first ordering."""

    def __init__(self, min_samples: int, min_confidence: float):
        if min_samples < 2:
            raise ValueError(f"min_samples must be at least 2, got {min_samples}")
        if not 0.0 <= min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be within [0, 1], got {min_confidence}")
        self.min_samples = min_samples
        self.min_confidence = min_confidence

    def passes(self, record: Observation) -> bool:
        return (
            record.total_samples >= self.min_samples
            and record.confidence >= self.min_confidence
        )

    def eligible(self, records: Iterable[Observation]) -> List[Observation]:
        """Surviving candidates, best first."""
        survivors = [r for r in records if self.passes(r)]
        return sorted(survivors, key=_sort_key, reverse=True)

    def rank(self, records: Iterable[Observation]) -> Optional[Observation]:
        survivors = self.eligible(records)
        return survivors[0] if survivors else None

    def rank_all(
        self,
        records: Iterable[Observation],
        discriminators: Iterable[str],
    ) -> Dict[str, Optional[Observation]]:
        """Best candidate per discriminator (None where nothing qualifies)."""
        grouped: Dict[str, List[Observation]] = {}
        for record in records:
            grouped.setdefault(record.discriminator, []).append(record)

        return {d: self.rank(grouped.get(d, [])) for d in discriminators}


class SelectorRankingPolicy(RankingPolicy):
    """
    Ranking for CSS selectors.

    Discovered selectors come from a user correction followed by a DOM
    search, so any discovered selector that clears its own gate wins over
    every heuristic one, even a heuristic one with higher confidence.
    """

    def __init__(
        self,
        min_samples: Optional[int] = None,
        min_confidence: Optional[float] = None,
        discovered_min_confidence: Optional[float] = None,
    ):
        super().__init__(
            config.selector_min_samples if min_samples is None else min_samples,
            config.selector_min_confidence if min_confidence is None else min_confidence,
        )
        if discovered_min_confidence is None:
            discovered_min_confidence = config.discovered_min_confidence
        if not 0.0 <= discovered_min_confidence <= 1.0:
            raise ValueError(
                f"discovered_min_confidence must be within [0, 1], got {discovered_min_confidence}"
            )
        self.discovered_min_confidence = discovered_min_confidence

    def passes(self, record: Observation) -> bool:
        threshold = self.discovered_min_confidence if record.is_discovered else self.min_confidence
        return record.total_samples >= self.min_samples and record.confidence >= threshold

    def eligible(self, records: Iterable[Observation]) -> List[Observation]:
        survivors = super().eligible(records)
        discovered = [r for r in survivors if r.is_discovered]
        heuristic = [r for r in survivors if not r.is_discovered]
        return discovered + heuristic


class CategoryRankingPolicy(RankingPolicy):
    """Ranking for domain categories: confidence only."""

    def __init__(self, min_samples: Optional[int] = None, min_confidence: Optional[float] = None):
        super().__init__(
            config.category_min_samples if min_samples is None else min_samples,
            config.category_min_confidence if min_confidence is None else min_confidence,
        )
