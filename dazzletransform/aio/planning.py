"""Async execution planning.

Mirrors the synchronous TransformPlan; the presence check itself never
awaits anything, so a TypeMismatchError is raised before the first effect
starts.
"""

import logging
from typing import Any, Dict

from .._common.config import TransformConfig
from .._common.errors import TransformConfigError
from .._common.hints import describe_hint
from .._common.presence import check_presence
from .._common.rules import chain_of
from .core.traverser import AsyncBottomUpRewriter

logger = logging.getLogger(__name__)


class AsyncTransformPlan:
    """Validated execution plan for an effectful rewrite."""

    def __init__(self, config: TransformConfig, rules: Any):
        """Create and validate a plan.

        Args:
            config: Transformation configuration
            rules: Anything ``chain_of`` accepts; may mix pure and effect rules

        Raises:
            TransformConfigError: If the configuration is invalid
        """
        self.config = config

        config_errors = config.validate()
        if config_errors:
            raise TransformConfigError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.chain = chain_of(rules)
        self.registry = config.resolve_registry()
        self.rewriter = AsyncBottomUpRewriter(
            self.chain,
            self.registry,
            on_rule_applied=config.on_rule_applied,
            max_nodes=config.max_nodes,
        )

        logger.debug("Planned %d rules, %d effectful (check_types=%s)",
                     len(self.chain),
                     sum(1 for rule in self.chain if rule.effectful),
                     config.check_types)

    def check(self, value: Any) -> None:
        """Run the presence check if the config asks for it.

        Raises:
            TypeMismatchError: If a rule can never apply to ``value``
        """
        if self.config.check_types:
            check_presence(self.chain, value, self.config.type_hint, self.registry)

    async def execute(self, value: Any) -> Any:
        """Check, then rewrite ``value`` awaiting effects in order."""
        self.check(value)
        return await self.rewriter.rewrite(value)

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of the plan."""
        return {
            'rules': [rule.label for rule in self.chain],
            'effect_rules': [rule.label for rule in self.chain if rule.effectful],
            'needed_types': sorted(describe_hint(t) for t in self.chain.needed_types()),
            'check_types': self.config.check_types,
            'max_nodes': self.config.max_nodes,
            'rewriter': self.rewriter.__class__.__name__,
            'nodes_visited': self.rewriter.nodes_visited,
            'rules_applied': self.rewriter.rules_applied,
        }
