"""Ruleset base classes."""

import abc
import logging
from functools import cached_property
from importlib import resources
from importlib.resources.abc import Traversable
from typing import Any, ClassVar

import yaml
from pydantic import ValidationError

from column_inventory.errors import RulesetError
from column_inventory.rulesets.types import Rule, RulesetData

logger = logging.getLogger(__name__)


class AbstractRuleset[RuleType: Rule](abc.ABC):
    """A named, versioned, immutable sequence of rules.

    Concrete classes set the ``ruleset_name`` and ``ruleset_version`` class
    variables, which are the registry key.
    """

    ruleset_name: ClassVar[str]
    ruleset_version: ClassVar[str]

    @property
    def name(self) -> str:
        return self.ruleset_name

    @property
    def version(self) -> str:
        return self.ruleset_version

    @abc.abstractmethod
    def get_rules(self) -> tuple[RuleType, ...]:
        """Return the rules in declaration order."""


class YAMLRuleset[RuleType: Rule](AbstractRuleset[RuleType]):
    """A ruleset read from a YAML document packaged next to its class.

    The document lives at ``data/{ruleset_version}/{ruleset_name}.yaml``
    inside the package that defines the subclass, and is validated with the
    subclass's ``_data_class``. It is read once per instance, on first use.
    """

    _data_class: ClassVar[type[RulesetData[Any]]]

    @classmethod
    def data_resource(cls) -> Traversable:
        """Location of the YAML document for this ruleset."""
        package = cls.__module__.rpartition(".")[0]
        return (
            resources.files(package)
            / "data"
            / cls.ruleset_version
            / f"{cls.ruleset_name}.yaml"
        )

    @cached_property
    def _data(self) -> RulesetData[RuleType]:
        resource = self.data_resource()
        try:
            raw = yaml.safe_load(resource.read_text(encoding="utf-8"))
            data = self._data_class.model_validate(raw)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise RulesetError(
                f"Cannot load ruleset {self.name}/{self.version} from {resource}: {e}"
            ) from e
        logger.debug("Loaded %d rules from %s/%s", len(data.rules), self.name, self.version)
        return data

    def _load_data(self) -> RulesetData[RuleType]:
        """Full validated document, for rulesets that ship more than rules."""
        return self._data

    @cached_property
    def _rules(self) -> tuple[RuleType, ...]:
        return tuple(self._data.rules)

    def get_rules(self) -> tuple[RuleType, ...]:
        """Return the rules in the order the document lists them."""
        return self._rules
