"""Configuration system for DazzleTransform.

This module defines how users specify a transformation run: whether the
type presence check runs, which shape describes the root value, which
adapters are used, and optional hooks and limits.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .adapter import AdapterRegistry


@dataclass
class TransformConfig:
    """Complete configuration for one rewrite or collect call.

    The TransformPlan validates this configuration before any rule runs.
    """

    # Fail fast with TypeMismatchError if a rule can never apply
    check_types: bool = True

    # Shape of the root value; inferred from the value when None
    type_hint: Optional[Any] = None

    # Adapters for structural access; builtin defaults when None
    registry: Optional[AdapterRegistry] = None

    # Called as on_rule_applied(rule, before, after) whenever a rule fires
    on_rule_applied: Optional[Callable[[Any, Any, Any], None]] = None

    # Upper bound on visited nodes (None = unlimited)
    max_nodes: Optional[int] = None

    @classmethod
    def unchecked(cls, **kwargs) -> 'TransformConfig':
        """Create config that skips the type presence check.

        Returns:
            TransformConfig with check_types=False
        """
        return cls(check_types=False, **kwargs)

    @classmethod
    def for_shape(cls, type_hint: Any, **kwargs) -> 'TransformConfig':
        """Create checked config with an explicit root shape.

        Args:
            type_hint: Class or ``typing`` expression describing the root

        Returns:
            TransformConfig with type_hint set
        """
        return cls(type_hint=type_hint, **kwargs)

    def resolve_registry(self) -> AdapterRegistry:
        """Return the configured registry, or a fresh default one."""
        if self.registry is not None:
            return self.registry
        from ..adapters import default_registry
        return default_registry()

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.max_nodes is not None:
            if isinstance(self.max_nodes, bool) or not isinstance(self.max_nodes, int):
                errors.append("max_nodes must be an integer")
            elif self.max_nodes <= 0:
                errors.append("max_nodes must be positive")

        if self.registry is not None and not isinstance(self.registry, AdapterRegistry):
            errors.append("registry must be an AdapterRegistry")

        if self.on_rule_applied is not None and not callable(self.on_rule_applied):
            errors.append("on_rule_applied must be callable")

        return errors
