"""Sensitive column classification.

Decides, for a single column observation, whether it is sensitive and
which single best-matching rule applies. Classification is pure: it reads
the snapshot, never mutates it, and performs no I/O.
"""

from column_inventory.classifier.snapshot import RuleSnapshot
from column_inventory.errors import InvalidArgumentError
from column_inventory.rulesets.types import SensitivePatternRule
from column_inventory.types import Classification


def _validate_input(column_name: str, declared_type: str) -> None:
    if not isinstance(column_name, str) or not column_name.strip():
        raise InvalidArgumentError("column_name must be a non-empty string")
    if not isinstance(declared_type, str) or not declared_type.strip():
        raise InvalidArgumentError("declared_type must be a non-empty string")


def _priority(position: int, rule: SensitivePatternRule) -> tuple[int, int, int]:
    # Most severe first, then longest pattern text, then input order
    return (rule.risk_level.rank, -len(rule.pattern_text), position)


def find_candidates(
    column_name: str, declared_type: str, snapshot: RuleSnapshot
) -> tuple[SensitivePatternRule, ...]:
    """Find every rule that qualifies for a column, best match first.

    Args:
        column_name: The column's name (compared case-insensitively)
        declared_type: The column's declared data type
        snapshot: Active rules with vocabulary and matching mode

    Returns:
        Qualifying rules ordered by risk rank, then pattern text length
        (longer first), then snapshot order.

    Raises:
        InvalidArgumentError: If column_name or declared_type is empty

    """
    _validate_input(column_name, declared_type)
    matcher = snapshot.matcher

    qualifying = [
        (position, rule)
        for position, rule in enumerate(snapshot.rules)
        if matcher.matches_name(column_name, rule)
        and matcher.matches_type(declared_type, rule)
    ]
    qualifying.sort(key=lambda item: _priority(*item))
    return tuple(rule for _, rule in qualifying)


def classify(
    column_name: str, declared_type: str, snapshot: RuleSnapshot
) -> Classification | None:
    """Classify a column by name and declared type.

    Args:
        column_name: The column's name (compared case-insensitively)
        declared_type: The column's declared data type
        snapshot: Active rules with vocabulary and matching mode

    Returns:
        The classification of the single winning rule, or None when no rule
        qualifies (the column is not sensitive).

    Raises:
        InvalidArgumentError: If column_name or declared_type is empty

    """
    candidates = find_candidates(column_name, declared_type, snapshot)
    if not candidates:
        return None
    return candidates[0].to_classification()


class PatternClassifier:
    """Classifier bound to one rule snapshot.

    Holds no mutable state, so one instance can be shared by workers
    scanning different servers concurrently.
    """

    def __init__(self, snapshot: RuleSnapshot) -> None:
        """Initialise the classifier with its rule snapshot.

        Args:
            snapshot: Active rules with vocabulary and matching mode

        """
        self._snapshot = snapshot

    @property
    def snapshot(self) -> RuleSnapshot:
        """The rule snapshot this classifier evaluates."""
        return self._snapshot

    def classify(self, column_name: str, declared_type: str) -> Classification | None:
        """Classify a column against the bound snapshot."""
        return classify(column_name, declared_type, self._snapshot)

    def explain(
        self, column_name: str, declared_type: str
    ) -> tuple[SensitivePatternRule, ...]:
        """Return every qualifying rule, winner first."""
        return find_candidates(column_name, declared_type, self._snapshot)
