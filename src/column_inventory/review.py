"""Review workflow for column findings.

A finding starts Unreviewed. A human reviewer may mark it ConfirmedSensitive
or FalsePositive and may later switch it between those two states. Nothing
moves a finding back to Unreviewed, and re-scans never touch review fields.
"""

import logging

from column_inventory.errors import FindingNotFoundError, ReviewError
from column_inventory.store.base import InventoryStore
from column_inventory.types import ColumnFinding, ColumnKey, ReviewDecision, ReviewState

logger = logging.getLogger(__name__)

# Allowed target states for each current state
REVIEW_TRANSITIONS: dict[ReviewState, frozenset[ReviewState]] = {
    ReviewState.UNREVIEWED: frozenset(
        {ReviewState.CONFIRMED_SENSITIVE, ReviewState.FALSE_POSITIVE}
    ),
    ReviewState.CONFIRMED_SENSITIVE: frozenset(
        {ReviewState.CONFIRMED_SENSITIVE, ReviewState.FALSE_POSITIVE}
    ),
    ReviewState.FALSE_POSITIVE: frozenset(
        {ReviewState.CONFIRMED_SENSITIVE, ReviewState.FALSE_POSITIVE}
    ),
}


def validate_transition(current: ReviewState, target: ReviewState) -> None:
    """Check that a finding may move from one review state to another.

    Raises:
        ReviewError: If the transition is not allowed

    """
    if target not in REVIEW_TRANSITIONS[current]:
        raise ReviewError(
            f"Cannot move a finding from {current.value} to {target.value}"
        )


def review_finding(
    store: InventoryStore, key: ColumnKey, decision: ReviewDecision
) -> ColumnFinding:
    """Apply a human review decision to a stored finding.

    Args:
        store: The inventory store holding the finding
        key: Identity key of the reviewed column
        decision: The review decision to record

    Returns:
        The updated finding

    Raises:
        FindingNotFoundError: If no finding exists for the key
        ReviewError: If the decision's state is not a valid transition

    """
    finding = store.get_finding(key)
    if finding is None:
        raise FindingNotFoundError(
            f"No finding for column '{key.qualified_column}' "
            f"in {key.server}/{key.instance}/{key.database}"
        )

    validate_transition(finding.review_state, decision.state)
    updated = store.apply_review(key, decision)
    logger.info(
        "Finding %s on %s/%s marked %s by %s",
        key.qualified_column,
        key.server,
        key.database,
        decision.state.label,
        decision.reviewer,
    )
    return updated
