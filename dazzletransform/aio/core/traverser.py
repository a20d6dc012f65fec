"""Async bottom-up rewriting.

Same walk as the synchronous rewriter, but effect rules are awaited.
Awaits are strictly sequential: a child's effects complete before its
next sibling starts, all children complete before the parent's rules
run, and rules on one node run in chain order. Nothing is gathered
concurrently, so the effect order is fully deterministic.
"""

import logging
from typing import Any, List, Optional, Tuple

from ..._common.adapter import AdapterRegistry, StructureAdapter
from ..._common.errors import NodeLimitExceededError
from ..._common.rules import Rule, RuleChain, RuleObserver

logger = logging.getLogger(__name__)


class AsyncBottomUpRewriter:
    """Rewrites every node of a value with a chain of pure and effect rules.

    Pure rules are applied inline; EffectRules are awaited.
    """

    def __init__(self,
                 chain: RuleChain,
                 registry: AdapterRegistry,
                 on_rule_applied: Optional[RuleObserver] = None,
                 max_nodes: Optional[int] = None):
        """Initialize rewriter.

        Args:
            chain: Rules to apply
            registry: Adapters for structural access
            on_rule_applied: Called as (rule, before, after) per application
            max_nodes: Maximum nodes to visit (None = unlimited)
        """
        self.chain = chain
        self.registry = registry
        self.on_rule_applied = on_rule_applied
        self.max_nodes = max_nodes

        self.nodes_visited = 0
        self.rules_applied = 0

    async def rewrite(self, value: Any) -> Any:
        """Rewrite ``value`` bottom-up, awaiting effects in traversal order."""
        self.nodes_visited = 0
        self.rules_applied = 0
        result = await self._rewrite(value)
        logger.debug("Visited %d nodes, applied %d rules",
                     self.nodes_visited, self.rules_applied)
        return result

    async def _rewrite(self, value: Any) -> Any:
        # Same explicit post-order stack as the sync rewriter; entries are
        # (node, adapter, child count), adapter None until expanded
        results: List[Any] = []
        stack: List[Tuple[Any, Optional[StructureAdapter], int]] = [(value, None, 0)]

        while stack:
            node, adapter, count = stack.pop()
            if adapter is not None:
                children = results[len(results) - count:]
                del results[len(results) - count:]
                rebuilt = adapter.rebuild(node, children)
                results.append(await self.chain.apply_async(rebuilt, self._observe))
                continue

            self.nodes_visited += 1
            if self.max_nodes is not None and self.nodes_visited > self.max_nodes:
                raise NodeLimitExceededError(self.max_nodes)

            adapter = self.registry.adapter_for(node)
            if adapter is None:
                results.append(await self.chain.apply_async(node, self._observe))
                continue

            children = list(adapter.children(node))
            stack.append((node, adapter, len(children)))
            stack.extend((child, None, 0) for child in reversed(children))

        return results.pop()

    def _observe(self, rule: Rule, before: Any, after: Any) -> None:
        self.rules_applied += 1
        if self.on_rule_applied is not None:
            self.on_rule_applied(rule, before, after)
