"""Rule registry with auto-discovery of ValidationRule subclasses."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from pathlib import Path

from ghost_engine.rules.base import ValidationRule


class RuleRegistry:
    """Discovers and manages all ValidationRule implementations.

    Auto-discovers rules by scanning the rules/ package tree for any
    concrete subclasses of ValidationRule. New rules are added simply by
    placing a .py file in the appropriate subdirectory.
    """

    def __init__(self) -> None:
        self._rules: dict[str, ValidationRule] = {}

    def discover_rules(self) -> None:
        """Scan the rules package tree and register all ValidationRule subclasses."""
        import ghost_engine.rules as rules_pkg

        rules_path = Path(rules_pkg.__file__).parent  # type: ignore[arg-type]
        self._scan_package(rules_pkg.__name__, str(rules_path))

    def _scan_package(self, package_name: str, package_path: str) -> None:
        """Recursively import all modules under a package and register rules."""
        for _, module_name, _ in pkgutil.walk_packages([package_path], prefix=package_name + "."):
            try:
                module = importlib.import_module(module_name)
            except ImportError:
                continue

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, ValidationRule)
                    and not inspect.isabstract(attr)
                    and attr.__module__ == module.__name__
                ):
                    self.register(attr())

    def register(self, rule: ValidationRule) -> None:
        """Register a rule instance by its rule_id."""
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> ValidationRule | None:
        """Retrieve a rule by its rule_id."""
        return self._rules.get(rule_id)

    def get_all_rules(self) -> list[ValidationRule]:
        """Return all registered rules sorted by scope, then rule_id."""
        return sorted(self._rules.values(), key=lambda r: (r.scope, r.rule_id))

    @property
    def rule_ids(self) -> list[str]:
        """List all registered rule IDs."""
        return list(self._rules.keys())
