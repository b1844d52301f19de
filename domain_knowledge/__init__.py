"""
domain_knowledge package: learns per-domain CSS selectors and product categories

Usage:
    from domain_knowledge import DomainKnowledge, Outcome

    knowledge = DomainKnowledge()
    knowledge.record_selector_outcome("shop.pl", "price", ".price", Outcome.SUCCESS)
    knowledge.record_discovered_selector("shop.pl", "name", "h1.product-name", score=90)
    knowledge.best_selectors("shop.pl")
    knowledge.top_category("shop.pl")
"""
from .config import Config, config
from .confidence import wilson_lower_bound
from .exceptions import DomainKnowledgeError, ObservationStoreError
from .normalizer import normalize_domain, domain_from_url
from .vocabulary import (
    CATEGORY_SLOT,
    TRACKABLE_FIELDS,
    VALID_CATEGORIES,
    DiscoveryMethod,
    Outcome,
)
from .observation_store import (
    Observation,
    ObservationStore,
    SQLiteObservationStore,
    MemoryObservationStore,
)
from .ranking import RankingPolicy, SelectorRankingPolicy, CategoryRankingPolicy
from .knowledge import DomainKnowledge
from .capture_analysis import CaptureAnalyzer, CaptureAnalysis, CaptureSample

__all__ = [
    # Core
    "Config",
    "config",
    "DomainKnowledge",
    # Scoring
    "wilson_lower_bound",
    "normalize_domain",
    "domain_from_url",
    # Vocabulary
    "CATEGORY_SLOT",
    "TRACKABLE_FIELDS",
    "VALID_CATEGORIES",
    "DiscoveryMethod",
    "Outcome",
    # Storage
    "Observation",
    "ObservationStore",
    "SQLiteObservationStore",
    "MemoryObservationStore",
    # Ranking
    "RankingPolicy",
    "SelectorRankingPolicy",
    "CategoryRankingPolicy",
    # Capture learning
    "CaptureAnalyzer",
    "CaptureAnalysis",
    "CaptureSample",
    # Errors
    "DomainKnowledgeError",
    "ObservationStoreError",
]
