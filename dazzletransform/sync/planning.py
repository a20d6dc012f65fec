"""Execution planning for DazzleTransform.

The TransformPlan validates a TransformConfig, assembles the rewriter for
a rule chain, and gates every execution with the type presence check so
that a rule which could never apply is reported before anything runs.
"""

import logging
from typing import Any, Dict, FrozenSet

from .._common.config import TransformConfig
from .._common.errors import TransformConfigError
from .._common.hints import describe_hint
from .._common.presence import check_presence, missing_types
from .._common.rules import chain_of
from .core.traverser import BottomUpRewriter

logger = logging.getLogger(__name__)


class TransformPlan:
    """Validated execution plan for a rewrite.

    Bridges user intent (rules + TransformConfig) and execution: validates
    the configuration, resolves the adapter registry, and runs the
    presence check before handing the value to the rewriter.
    """

    def __init__(self, config: TransformConfig, rules: Any):
        """Create and validate a plan.

        Args:
            config: Transformation configuration
            rules: Anything ``chain_of`` accepts

        Raises:
            TransformConfigError: If the configuration is invalid
            TypeError: If the rules cannot form a pure chain
        """
        self.config = config

        config_errors = config.validate()
        if config_errors:
            raise TransformConfigError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.chain = chain_of(rules)
        self.registry = config.resolve_registry()
        self.rewriter = self._select_rewriter()

        logger.debug("Planned %d rules (check_types=%s)",
                     len(self.chain), config.check_types)

    def _select_rewriter(self) -> BottomUpRewriter:
        return BottomUpRewriter(
            self.chain,
            self.registry,
            on_rule_applied=self.config.on_rule_applied,
            max_nodes=self.config.max_nodes,
        )

    def missing_types(self, value: Any) -> FrozenSet[type]:
        """Rule targets that can never occur inside ``value``."""
        return missing_types(self.chain, value, self.config.type_hint, self.registry)

    def check(self, value: Any) -> None:
        """Run the presence check if the config asks for it.

        Raises:
            TypeMismatchError: If a rule can never apply to ``value``
        """
        if self.config.check_types:
            check_presence(self.chain, value, self.config.type_hint, self.registry)

    def execute(self, value: Any) -> Any:
        """Check, then rewrite ``value``.

        Args:
            value: Value to rewrite (not mutated)

        Returns:
            The rewritten value
        """
        self.check(value)
        return self.rewriter.rewrite(value)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of the plan.

        Useful for debugging and logging.
        """
        return {
            'rules': [rule.label for rule in self.chain],
            'needed_types': sorted(describe_hint(t) for t in self.chain.needed_types()),
            'check_types': self.config.check_types,
            'type_hint': (describe_hint(self.config.type_hint)
                          if self.config.type_hint is not None else None),
            'max_nodes': self.config.max_nodes,
            'adapters': [a.__class__.__name__ for a in self.registry],
            'rewriter': self.rewriter.__class__.__name__,
            'nodes_visited': self.rewriter.nodes_visited,
            'rules_applied': self.rewriter.rules_applied,
        }
