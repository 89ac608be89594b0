"""Ruleset URIs of the form ``{provider}/{name}/{version}``.

``local`` is the only provider; it serves rulesets shipped inside this
package, e.g. ``local/sensitive_data_patterns/1.0.0``.
"""

import re
from typing import NamedTuple, override

from column_inventory.errors import RulesetURIParseError

LOCAL_PROVIDER = "local"

_VERSION = re.compile(r"\d+(\.\d+)*")
_EXAMPLE = f"{LOCAL_PROVIDER}/sensitive_data_patterns/1.0.0"


class RulesetURI(NamedTuple):
    """A parsed ruleset URI."""

    provider: str
    name: str
    version: str

    @classmethod
    def parse(cls, uri: str) -> "RulesetURI":
        """Split a URI into provider, name and version.

        Raises:
            RulesetURIParseError: If the URI does not have exactly three
                non-empty segments or the version is not dotted numbers

        """
        segments = uri.strip().split("/")
        if len(segments) != len(cls._fields):
            raise RulesetURIParseError(
                f"Invalid ruleset URI '{uri}'. "
                f"Expected format: provider/name/version (e.g., '{_EXAMPLE}')"
            )
        if not all(segments):
            raise RulesetURIParseError(
                f"Invalid ruleset URI '{uri}': provider, name and version "
                "cannot be empty"
            )

        parsed = cls(*segments)
        if not _VERSION.fullmatch(parsed.version):
            raise RulesetURIParseError(
                f"Invalid ruleset URI '{uri}': version '{parsed.version}' "
                "must be dotted numbers such as 1.0.0"
            )
        return parsed

    @override
    def __str__(self) -> str:
        return "/".join(self)
