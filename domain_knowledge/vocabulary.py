"""
Learning vocabulary: which fields and categories the engine knows about.
"""

from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    """Result of applying a candidate to a captured product."""
    SUCCESS = "success"
    FAILURE = "failure"

    @classmethod
    def from_bool(cls, success: bool) -> "Outcome":
        return cls.SUCCESS if success else cls.FAILURE


class DiscoveryMethod(str, Enum):
    """How a selector was first proposed."""
    HEURISTIC = "heuristic"
    DISCOVERED = "discovered"


# Product fields the extension reports selectors for
TRACKABLE_FIELDS = ("name", "price", "thumbnail_url")

# Discriminator slot used for category learning
CATEGORY_SLOT = "category"

VALID_CATEGORIES = (
    "meble",
    "tkaniny",
    "dekoracje",
    "armatura_i_ceramika",
    "oswietlenie",
    "okladziny_scienne",
    "agd",
)

# Extension payload keys -> trackable field names
FIELD_ALIASES = {
    "name": "name",
    "price": "price",
    "thumbnail": "thumbnail_url",
    "thumbnail_url": "thumbnail_url",
}


def canonical_field(key: Optional[str]) -> Optional[str]:
    """Map an extension field key to a trackable field, or None."""
    if not key:
        return None
    return FIELD_ALIASES.get(str(key).strip())


def is_valid_observation(discriminator: str, candidate: str) -> bool:
    """Check that a (discriminator, candidate) pair can be learned."""
    if not candidate or not str(candidate).strip():
        return False
    if discriminator == CATEGORY_SLOT:
        return candidate in VALID_CATEGORIES
    return discriminator in TRACKABLE_FIELDS
