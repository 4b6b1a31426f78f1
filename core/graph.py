"""Dependency graph construction."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import ModuleNotFound, VersionIncompatible
from .identity import exact_key, logical_key, parse_identity, same_exact
from .models import (
    DependencyNode,
    MissingReference,
    ModuleIdentity,
    ResolutionStatus,
    ResolvedModule,
)
from .provider import ModuleProvider

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """A built dependency graph together with its indexes.

    Attributes:
        root: Node of the inspected root module
        by_name: Every node, grouped by logical key in discovery order
        missing: Every reference that could not be located, in discovery order
        aliases: Exact keys that were resolved to a node declared under
            another identity, such as the root's requested identifier
    """

    root: DependencyNode
    by_name: dict[str, list[DependencyNode]] = field(default_factory=dict)
    missing: list[MissingReference] = field(default_factory=list)
    aliases: set[str] = field(default_factory=set)

    def register(self, node: DependencyNode) -> None:
        self.by_name.setdefault(logical_key(node.identity), []).append(node)

    def add_alias(self, identity: ModuleIdentity) -> None:
        self.aliases.add(exact_key(identity))

    def is_examined(self, identity: ModuleIdentity) -> bool:
        """Check whether this exact identity was already resolved."""
        if exact_key(identity) in self.aliases:
            return True
        return any(
            same_exact(node.identity, identity)
            for node in self.by_name.get(logical_key(identity), [])
        )

    def nodes(self) -> Iterator[DependencyNode]:
        """Iterate all nodes in depth-first order from the root."""
        return self.root.iter_subtree()

    def __len__(self) -> int:
        return sum(len(nodes) for nodes in self.by_name.values())


class GraphBuilder:
    """Discovers the reference graph of a root module."""

    def __init__(self, provider: ModuleProvider):
        """Initialize the builder.

        Args:
            provider: Source of module identities and references
        """
        self.provider = provider

    def build(self, root_identifier: str | ModuleIdentity) -> DependencyGraph:
        """Build the graph reachable from a root module.

        Args:
            root_identifier: Identifier string or identity of the root module

        Returns:
            The complete graph with its name and missing-reference indexes

        Raises:
            InvalidIdentifier: If the identifier cannot be parsed
            ResolutionError: If the root module itself cannot be resolved
        """
        if isinstance(root_identifier, str):
            root_identity = parse_identity(root_identifier)
        else:
            root_identity = root_identifier

        resolved = self.provider.resolve(root_identity)
        root = DependencyNode(
            resolved.identity,
            status=ResolutionStatus.RESOLVED,
            installed_version=resolved.installed_version,
        )
        graph = DependencyGraph(root=root)
        graph.register(root)
        if not same_exact(root_identity, resolved.identity):
            graph.add_alias(root_identity)

        self._traverse(graph, root, resolved.references)

        logger.info(
            "Built graph for %s: %d nodes, %d names, %d missing references",
            root.identity,
            len(graph),
            len(graph.by_name),
            len(graph.missing),
        )
        return graph

    def _traverse(
        self, graph: DependencyGraph, root: DependencyNode, references: list[ModuleIdentity]
    ) -> None:
        """Walk references depth-first with an explicit stack.

        Each stack entry holds a node and the iterator over its remaining
        references, so siblings are only visited once the previous sibling's
        subtree is complete.
        """
        stack = [(root, iter(references))]

        while stack:
            node, pending = stack[-1]
            reference = next(pending, None)
            if reference is None:
                stack.pop()
                continue

            if graph.is_examined(reference):
                logger.debug("Skipping %s referenced by %s: already examined", reference, node.identity)
                continue

            child = DependencyNode(reference, parent=node)
            node.children.append(child)
            graph.register(child)

            resolved = self._resolve(graph, child)
            if resolved is not None:
                stack.append((child, iter(resolved.references)))

    def _resolve(self, graph: DependencyGraph, child: DependencyNode) -> ResolvedModule | None:
        """Resolve a freshly created node, recording local failures.

        Returns:
            The resolved module, or None when the node is not traversed further
        """
        try:
            resolved = self.provider.resolve(child.identity)
        except VersionIncompatible as e:
            child.status = ResolutionStatus.INCOMPATIBLE
            child.installed_version = e.installed_version
            logger.debug("Version incompatible: %s", e)
            return None
        except ModuleNotFound as e:
            child.status = ResolutionStatus.MISSING
            graph.missing.append(MissingReference(child.parent, child.identity))
            logger.debug("Missing: %s referenced by %s", e.identity, child.parent.identity)
            return None

        child.status = ResolutionStatus.RESOLVED
        child.installed_version = resolved.installed_version
        return resolved
