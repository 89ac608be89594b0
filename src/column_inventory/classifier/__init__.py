"""Sensitive column pattern classifier."""

from column_inventory.classifier.classifier import (
    PatternClassifier,
    classify,
    find_candidates,
)
from column_inventory.classifier.matching import (
    LikePatternMatcher,
    MatchingMode,
    RuleMatcher,
    SharedTokenMatcher,
    create_matcher,
    like,
)
from column_inventory.classifier.snapshot import RuleSnapshot

__all__ = [
    "LikePatternMatcher",
    "MatchingMode",
    "PatternClassifier",
    "RuleMatcher",
    "RuleSnapshot",
    "SharedTokenMatcher",
    "classify",
    "create_matcher",
    "find_candidates",
    "like",
]
