from __future__ import annotations

from leave_engine.calculators.rules import RuleRegistry, build_default_registry

_rule_registry: RuleRegistry | None = None


def get_rule_registry() -> RuleRegistry:
    """FastAPI dependency for the rules in force."""
    global _rule_registry
    if _rule_registry is None:
        _rule_registry = build_default_registry()
    return _rule_registry


def set_rule_registry(registry: RuleRegistry | None) -> None:
    """Override the registry; None restores the built-in rules on next access."""
    global _rule_registry
    _rule_registry = registry
