"""Bottom-up rewriting for DazzleTransform.

The rewriter walks any value through the AdapterRegistry, depth-first and
left to right. Children are fully rewritten before their parent is
rebuilt, and the parent's rules only ever see rewritten children.
"""

import logging
from typing import Any, List, Optional, Tuple

from ..._common.adapter import AdapterRegistry, StructureAdapter
from ..._common.errors import NodeLimitExceededError
from ..._common.rules import Rule, RuleChain, RuleObserver

logger = logging.getLogger(__name__)


class BottomUpRewriter:
    """Rewrites every node of a value with a pure RuleChain.

    For each node:
    1. Leaves (no adapter) go straight to step 3.
    2. Children are rewritten first, in order, and the node is
       rebuilt from them.
    3. Every rule whose target is the node's runtime class is applied in
       chain order, each on the previous result.

    The input value is never mutated.
    """

    def __init__(self,
                 chain: RuleChain,
                 registry: AdapterRegistry,
                 on_rule_applied: Optional[RuleObserver] = None,
                 max_nodes: Optional[int] = None):
        """Initialize rewriter.

        Args:
            chain: Rules to apply; must not contain EffectRules
            registry: Adapters for structural access
            on_rule_applied: Called as (rule, before, after) per application
            max_nodes: Maximum nodes to visit (None = unlimited)

        Raises:
            TypeError: If the chain contains EffectRules
        """
        if chain.is_effectful:
            raise TypeError(
                "Chain contains effect rules; use dazzletransform.aio.rewrite_effectful"
            )
        self.chain = chain
        self.registry = registry
        self.on_rule_applied = on_rule_applied
        self.max_nodes = max_nodes

        # Stats for the most recent rewrite
        self.nodes_visited = 0
        self.rules_applied = 0

    def rewrite(self, value: Any) -> Any:
        """Rewrite ``value`` bottom-up and return the new value."""
        self.nodes_visited = 0
        self.rules_applied = 0
        result = self._rewrite(value)
        logger.debug("Visited %d nodes, applied %d rules",
                     self.nodes_visited, self.rules_applied)
        return result

    def _rewrite(self, value: Any) -> Any:
        # Explicit post-order stack: deep values must not exhaust the
        # interpreter stack. Entries are (node, adapter, child count);
        # adapter is None until the node has been expanded.
        results: List[Any] = []
        stack: List[Tuple[Any, Optional[StructureAdapter], int]] = [(value, None, 0)]

        while stack:
            node, adapter, count = stack.pop()
            if adapter is not None:
                children = results[len(results) - count:]
                del results[len(results) - count:]
                rebuilt = adapter.rebuild(node, children)
                results.append(self.chain.apply(rebuilt, self._observe))
                continue

            self._visit()
            adapter = self.registry.adapter_for(node)
            if adapter is None:
                results.append(self.chain.apply(node, self._observe))
                continue

            children = list(adapter.children(node))
            stack.append((node, adapter, len(children)))
            stack.extend((child, None, 0) for child in reversed(children))

        return results.pop()

    def _visit(self) -> None:
        self.nodes_visited += 1
        if self.max_nodes is not None and self.nodes_visited > self.max_nodes:
            raise NodeLimitExceededError(self.max_nodes)

    def _observe(self, rule: Rule, before: Any, after: Any) -> None:
        self.rules_applied += 1
        if self.on_rule_applied is not None:
            self.on_rule_applied(rule, before, after)
