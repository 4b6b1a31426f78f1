"""Version conflict and missing reference reporting."""

from collections.abc import Iterator
from typing import NamedTuple

from .graph import DependencyGraph
from .models import (
    ConflictReport,
    DependencyNode,
    MismatchEntry,
    MissingEntry,
    MissingReference,
    ModuleIdentity,
    Occurrence,
)


class Mismatch(NamedTuple):
    """A logical name reached at more than one version."""

    name: str
    nodes: list[DependencyNode]


def distinct_versions(nodes: list[DependencyNode]) -> list[str]:
    """Distinct declared versions of the given nodes, in first-seen order."""
    versions: list[str] = []
    for node in nodes:
        if node.identity.version not in versions:
            versions.append(node.identity.version)
    return versions


class ConflictReporter:
    """Reads a built graph's indexes to find mismatches and missing references."""

    def __init__(self, graph: DependencyGraph):
        self.graph = graph

    def find_mismatches(self) -> Iterator[Mismatch]:
        """Yield every name whose occurrences do not all share one version.

        Names are yielded in the order they were first discovered.
        """
        for nodes in self.graph.by_name.values():
            if not nodes:
                continue
            if len(distinct_versions(nodes)) == 1:
                continue
            yield Mismatch(nodes[0].identity.name, nodes)

    def list_missing(self) -> list[MissingReference]:
        return self.graph.missing

    def path_from_root(self, node: DependencyNode) -> list[ModuleIdentity]:
        """Identities from the root down to the node, root first."""
        return [step.identity for step in node.path()]

    def build_report(self) -> ConflictReport:
        """Collect mismatches and missing references into a ConflictReport."""
        mismatches = [
            MismatchEntry(
                name=mismatch.name,
                versions=distinct_versions(mismatch.nodes),
                occurrences=[
                    Occurrence(
                        identity=node.identity,
                        status=node.status,
                        installed_version=node.installed_version,
                        path=self.path_from_root(node),
                    )
                    for node in mismatch.nodes
                ],
            )
            for mismatch in self.find_mismatches()
        ]

        missing = [
            MissingEntry(identity=identity, referenced_by=self.path_from_root(referrer))
            for referrer, identity in self.list_missing()
        ]

        return ConflictReport(
            root=self.graph.root.identity,
            node_count=len(self.graph),
            mismatches=mismatches,
            missing=missing,
        )
