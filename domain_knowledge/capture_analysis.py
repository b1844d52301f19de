"""
Capture Analysis - learn from products captured by the browser extension

Each capture carries:
- the selectors the extension used per field (context.selectors)
- selectors discovered from a user correction (context.discovered_selectors)
- what the extension scraped (raw_payload) and what the user saved (final_payload)
- the category the extension suggested (context.suggested_category)

A selector succeeded when the scraped value matches the saved one.

Usage:
    from domain_knowledge.capture_analysis import CaptureAnalyzer, CaptureSample

    sample = CaptureSample.from_dict(request_json)
    result = CaptureAnalyzer(knowledge).analyze(sample)
"""

import re
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional
import logging

from .knowledge import DomainKnowledge
from .normalizer import domain_from_url, normalize_domain
from .vocabulary import TRACKABLE_FIELDS, Outcome, canonical_field

logger = logging.getLogger(__name__)

# Prices are compared in currency units; the saved payload keeps cents
PRICE_TOLERANCE = 0.02

# trackable field -> (context.selectors key, raw_payload key, final_payload key)
FIELD_SOURCES = {
    "name": ("name", "name", "name"),
    "price": ("price", "unit_price", "unit_price_cents"),
    "thumbnail_url": ("thumbnail", "thumbnail_url", "thumbnail_url"),
}


@dataclass
class CaptureSample:
    """One product captured by the extension."""

    url: str = ""
    domain: str = ""
    raw_payload: Dict[str, Any] = field(default_factory=dict)
    final_payload: Dict[str, Any] = field(default_factory=dict)
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # Malformed JSON shapes count as absent
        for name in ("raw_payload", "final_payload", "context"):
            if not isinstance(getattr(self, name), dict):
                setattr(self, name, {})
        self.url = self.url if isinstance(self.url, str) else ""
        if not isinstance(self.domain, str):
            self.domain = ""
        self.domain = normalize_domain(self.domain) if self.domain else domain_from_url(self.url)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaptureSample":
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class CaptureAnalysis:
    """Counts of what a capture taught the engine."""

    domain: str
    discovered: int = 0
    successes: int = 0
    failures: int = 0
    category_recorded: bool = False
    category_overridden: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _normalize_text(value: Any) -> str:
    return re.sub(r"\s+", " ", str(value).strip().lower())


def _normalize_url(value: Any) -> str:
    return str(value).strip().lower().split("?", 1)[0]


def values_match(raw: Any, final: Any, field_name: str) -> bool:
    """
    Compare a scraped value with the value the user saved.

    Blank on either side is a mismatch.
    """
    if _blank(raw) or _blank(final):
        return False

    if field_name == "name":
        return _normalize_text(raw) == _normalize_text(final)
    if field_name == "price":
        try:
            return abs(float(raw) - float(final)) < PRICE_TOLERANCE
        except (TypeError, ValueError):
            return False
    if field_name == "thumbnail_url":
        return _normalize_url(raw) == _normalize_url(final)
    return str(raw) == str(final)


class CaptureAnalyzer:
    """Turns capture samples into selector and category observations."""

    def __init__(self, knowledge: DomainKnowledge):
        self.knowledge = knowledge

    def analyze(self, sample: CaptureSample) -> CaptureAnalysis:
        result = CaptureAnalysis(domain=sample.domain)
        if not sample.domain:
            logger.debug("Skipping capture without domain")
            return result

        context = sample.context

        # Discovered selectors first: they come from user corrections
        result.discovered = self._process_discovered(sample.domain, _as_dict(context.get("discovered_selectors")))

        selectors = _as_dict(context.get("selectors"))
        for field_name in TRACKABLE_FIELDS:
            outcome = self._analyze_field(sample, field_name, selectors)
            if outcome is Outcome.SUCCESS:
                result.successes += 1
            elif outcome is Outcome.FAILURE:
                result.failures += 1

        self._analyze_category(sample, result)

        return result

    def _process_discovered(self, domain: str, discovered_selectors: Dict[str, Any]) -> int:
        count = 0

        for field_key, discovery in discovered_selectors.items():
            if not isinstance(discovery, dict):
                continue
            candidates = discovery.get("candidates")
            if not isinstance(candidates, list) or not candidates:
                continue

            field_name = canonical_field(field_key)
            if field_name is None:
                continue

            best = candidates[0] if isinstance(candidates[0], dict) else {}
            selector = best.get("selector")
            score = best.get("score") or 0
            if _blank(selector):
                continue

            logger.info(f"[Learning] DISCOVERED: {domain} / {field_name} / {selector} (score: {score})")
            if self.knowledge.record_discovered_selector(domain, field_name, selector, score) is not None:
                count += 1

        return count

    def _analyze_category(self, sample: CaptureSample, result: CaptureAnalysis):
        category = sample.final_payload.get("category")
        if not isinstance(category, str) or _blank(category):
            return

        suggested = sample.context.get("suggested_category") or sample.raw_payload.get("category")

        # The user replaced the suggested category: the suggestion was wrong
        if isinstance(suggested, str) and not _blank(suggested) and suggested != category:
            logger.info(f"[Learning] CATEGORY OVERRIDE: {sample.domain} / {suggested} -> {category}")
            overridden = self.knowledge.record_category_outcome(sample.domain, suggested, Outcome.FAILURE)
            result.category_overridden = overridden is not None

        recorded = self.knowledge.record_category_outcome(sample.domain, category, Outcome.SUCCESS)
        result.category_recorded = recorded is not None

    def _analyze_field(
        self,
        sample: CaptureSample,
        field_name: str,
        selectors: Dict[str, Any],
    ) -> Optional[Outcome]:
        selector_key, raw_key, final_key = FIELD_SOURCES[field_name]
        selector = selectors.get(selector_key)

        # No selector recorded = nothing to learn
        if _blank(selector):
            return None

        raw_value = sample.raw_payload.get(raw_key)
        final_value = sample.final_payload.get(final_key)

        if field_name == "price" and not _blank(final_value):
            try:
                final_value = float(final_value) / 100.0
            except (TypeError, ValueError):
                final_value = None

        outcome = Outcome.from_bool(values_match(raw_value, final_value, field_name))
        recorded = self.knowledge.record_selector_outcome(sample.domain, field_name, selector, outcome)
        if recorded is None:
            return None

        if outcome is Outcome.SUCCESS:
            logger.info(f"[Learning] SUCCESS: {sample.domain} / {field_name} / {selector}")
        else:
            logger.info(
                f"[Learning] FAILURE: {sample.domain} / {field_name} / {selector} "
                f"(raw: {raw_value!r}, final: {final_value!r})"
            )
        return outcome
