"""
Domain Knowledge - learned selectors and categories per shopping domain

Read side:
1. Best selector per trackable field for a domain
2. Top category and ranked alternatives for a domain
3. Diagnostics for the admin dashboard

Write side: thin, validated pass-throughs to the observation store.

Usage:
    from domain_knowledge import DomainKnowledge, Outcome

    knowledge = DomainKnowledge()
    knowledge.record_selector_outcome("www.shop.pl", "name", "h1.title", Outcome.SUCCESS)
    knowledge.best_selectors("shop.pl")   # {"name": "h1.title"} once reliable
"""

from typing import Any, Dict, List, Optional
import logging

from .normalizer import normalize_domain
from .observation_store import Observation, ObservationStore, SQLiteObservationStore
from .ranking import CategoryRankingPolicy, SelectorRankingPolicy
from .vocabulary import (
    CATEGORY_SLOT,
    TRACKABLE_FIELDS,
    VALID_CATEGORIES,
    Outcome,
)

logger = logging.getLogger(__name__)


def _category_entry(record: Observation) -> Dict[str, Any]:
    return {
        "category": record.candidate,
        "confidence": round(record.confidence, 4),
        "samples": record.total_samples,
    }


class DomainKnowledge:
    """
    Query facade over the observation store.

    Features:
    - Records selector and category outcomes with input validation
    - Answers "best selectors" and "top category" queries
    - Builds per-domain stats for transparency and debugging
    """

    def __init__(
        self,
        store: Optional[ObservationStore] = None,
        selector_policy: Optional[SelectorRankingPolicy] = None,
        category_policy: Optional[CategoryRankingPolicy] = None,
    ):
        self.store = store if store is not None else SQLiteObservationStore()
        self.selector_policy = selector_policy or SelectorRankingPolicy()
        self.category_policy = category_policy or CategoryRankingPolicy()

    # Ingestion

    def record_selector_outcome(
        self,
        domain: str,
        field: str,
        selector: str,
        outcome: Outcome,
    ) -> Optional[Observation]:
        """Record whether a heuristic selector extracted the right value."""
        if field not in TRACKABLE_FIELDS:
            logger.debug(f"Ignoring selector for untracked field {field!r}")
            return None
        return self.store.record(domain, field, selector, outcome)

    def record_discovered_selector(
        self,
        domain: str,
        field: str,
        selector: str,
        score: Optional[int] = None,
    ) -> Optional[Observation]:
        """Record a selector found by DOM discovery after a user correction."""
        if field not in TRACKABLE_FIELDS:
            logger.debug(f"Ignoring discovered selector for untracked field {field!r}")
            return None
        return self.store.record_discovered(domain, field, selector, score)

    def record_category_outcome(
        self,
        domain: str,
        category: str,
        outcome: Outcome,
    ) -> Optional[Observation]:
        """Record that a user accepted (success) or overrode (failure) a category."""
        if category not in VALID_CATEGORIES:
            logger.debug(f"Ignoring unknown category {category!r}")
            return None
        return self.store.record(domain, CATEGORY_SLOT, category, outcome)

    # Selector queries

    def best_selectors(self, domain: str) -> Dict[str, str]:
        """
        Best selector per trackable field.

        Fields without a reliable selector are left out of the result.
        """
        records = self.store.query(domain)
        winners = self.selector_policy.rank_all(
            (r for r in records if r.discriminator in TRACKABLE_FIELDS),
            TRACKABLE_FIELDS,
        )
        return {field: best.candidate for field, best in winners.items() if best is not None}

    def selector_report(self, domain: str) -> Dict[str, Any]:
        """Best selectors plus diagnostic stats for one domain."""
        normalized = normalize_domain(domain)
        records = [r for r in self.store.query(normalized) if r.discriminator in TRACKABLE_FIELDS]

        winners = self.selector_policy.rank_all(records, TRACKABLE_FIELDS)
        selectors = {field: best.candidate for field, best in winners.items() if best is not None}

        fields = []
        for field in TRACKABLE_FIELDS:
            field_records = [r for r in records if r.discriminator == field]
            best = max(field_records, key=lambda r: r.confidence, default=None)
            fields.append({
                "field": field,
                "selector_count": len(field_records),
                "best_confidence": round(best.confidence, 2) if best else None,
                "best_selector": best.candidate if best else None,
                "best_discovery_method": best.discovery_method if best else None,
            })

        discovered = sum(1 for r in records if r.is_discovered)

        return {
            "domain": normalized,
            "selectors": selectors,
            "stats": {
                "total_selectors": len(records),
                "discovered_count": discovered,
                "heuristic_count": len(records) - discovered,
                "fields": fields,
            },
        }

    def all_for_domain(self, domain: str) -> List[Dict[str, Any]]:
        """Every selector record for a domain, for debugging."""
        return [
            {
                "field": r.discriminator,
                "selector": r.candidate,
                "success": r.success_count,
                "failure": r.failure_count,
                "confidence": round(r.confidence, 4),
                "discovery_method": r.discovery_method,
                "last_seen": r.last_seen_at.isoformat() if r.last_seen_at else None,
            }
            for r in self.store.query(domain)
            if r.discriminator in TRACKABLE_FIELDS
        ]

    # Category queries

    def all_categories(self, domain: str) -> List[Dict[str, Any]]:
        """Plausible categories, most confident first."""
        records = self.store.query(domain, CATEGORY_SLOT)
        return [_category_entry(r) for r in self.category_policy.eligible(records)]

    def top_category(self, domain: str) -> Optional[Dict[str, Any]]:
        best = self.category_policy.rank(self.store.query(domain, CATEGORY_SLOT))
        return _category_entry(best) if best else None

    def category_report(self, domain: str) -> Dict[str, Any]:
        normalized = normalize_domain(domain)
        records = self.store.query(normalized, CATEGORY_SLOT)
        ranked = [_category_entry(r) for r in self.category_policy.eligible(records)]

        return {
            "domain": normalized,
            "top_category": ranked[0] if ranked else None,
            "categories": ranked,
            "stats": {
                "total_records": len(records),
                "total_samples": sum(r.total_samples for r in records),
            },
        }

    # Analytics

    def domain_overview(self) -> List[Dict[str, Any]]:
        """Per-domain selector learning summary."""
        overview = []

        for domain in self.store.domains():
            records = [r for r in self.store.query(domain) if r.discriminator in TRACKABLE_FIELDS]
            if not records:
                continue

            confidences = [r.confidence for r in records]
            seen = [r.last_seen_at for r in records if r.last_seen_at]

            entry: Dict[str, Any] = {
                "domain": domain,
                "selector_count": len(records),
                "discovered_count": sum(1 for r in records if r.is_discovered),
                "avg_confidence": round(sum(confidences) / len(confidences), 2),
                "last_activity": max(seen).isoformat() if seen else None,
            }
            for field in TRACKABLE_FIELDS:
                field_conf = [r.confidence for r in records if r.discriminator == field]
                entry[f"{field}_confidence"] = round(max(field_conf), 2) if field_conf else None

            overview.append(entry)

        return overview
