"""CLI command implementation for classifying a single column."""

from __future__ import annotations

import logging

from column_inventory.classifier import (
    MatchingMode,
    PatternClassifier,
    RuleSnapshot,
)
from column_inventory.cli.errors import cli_error_handler
from column_inventory.cli.formatting import OutputFormatter
from column_inventory.cli.infrastructure import build_classifier_config
from column_inventory.logging import setup_logging

logger = logging.getLogger(__name__)


def classify_command(  # noqa: PLR0913 - mirrors the CLI options
    column_name: str,
    declared_type: str,
    ruleset: str | None = None,
    mode: MatchingMode | None = None,
    explain: bool = False,
    log_level: str = "WARNING",
) -> None:
    """CLI command implementation for classifying one column.

    Args:
        column_name: Column name to classify
        declared_type: Declared data type of the column
        ruleset: Ruleset URI (falls back to the environment)
        mode: Matching mode (falls back to the environment)
        explain: Also list every qualifying pattern
        log_level: Logging level

    """
    setup_logging(level=log_level)

    with cli_error_handler("classify", "Failed to classify column"):
        config = build_classifier_config(ruleset, mode)
        classifier = PatternClassifier(
            RuleSnapshot.load(config.ruleset, config.matching_mode)
        )

        classification = classifier.classify(column_name, declared_type)
        candidates = classifier.explain(column_name, declared_type) if explain else ()
        logger.info(
            "Classified %s (%s) with %s: %s",
            column_name,
            declared_type,
            config.matching_mode,
            classification.pattern_name if classification else "not sensitive",
        )
        OutputFormatter().format_classification(
            column_name, declared_type, classification, candidates
        )
