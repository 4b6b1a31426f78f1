"""Core data models for DepClash."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

from packaging.utils import canonicalize_name


@dataclass(frozen=True)
class ModuleIdentity:
    """Declared identity of a module: name, version qualifier and extras."""

    name: str
    version: str = ""  # normalized specifier, "" means any version
    extras: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Logical key: the canonical name, version ignored."""
        return canonicalize_name(self.name)

    @property
    def full_name(self) -> str:
        """Exact key: canonical name, extras and version qualifier."""
        extras = f"[{','.join(sorted(self.extras))}]" if self.extras else ""
        return f"{self.key}{extras}{self.version}"

    def __str__(self) -> str:
        return self.full_name


class ResolutionStatus(str, Enum):
    """Outcome of resolving the module behind a node."""

    PENDING = "pending"
    RESOLVED = "resolved"
    INCOMPATIBLE = "incompatible"
    MISSING = "missing"


@dataclass(eq=False)
class DependencyNode:
    """One occurrence of a referenced module in the graph."""

    identity: ModuleIdentity
    parent: "DependencyNode | None" = field(default=None, repr=False)
    children: list["DependencyNode"] = field(default_factory=list, repr=False)
    status: ResolutionStatus = ResolutionStatus.PENDING
    installed_version: str | None = None

    @property
    def depth(self) -> int:
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def path(self) -> list["DependencyNode"]:
        """Nodes from the root down to this node, root first."""
        nodes = [self]
        node = self.parent
        while node is not None:
            nodes.append(node)
            node = node.parent
        nodes.reverse()
        return nodes

    def iter_subtree(self):
        """Yield this node and its descendants in depth-first order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class ResolvedModule:
    """What a provider knows about a successfully resolved module."""

    identity: ModuleIdentity
    installed_version: str
    references: list[ModuleIdentity] = field(default_factory=list)


class MissingReference(NamedTuple):
    """A reference whose target could not be located."""

    referrer: DependencyNode
    identity: ModuleIdentity


@dataclass
class Occurrence:
    """A node of a mismatch, flattened for presentation."""

    identity: ModuleIdentity
    status: ResolutionStatus
    installed_version: str | None
    path: list[ModuleIdentity]

    def to_dict(self) -> dict:
        return {
            "identity": self.identity.full_name,
            "name": self.identity.name,
            "version": self.identity.version,
            "status": self.status.value,
            "installed_version": self.installed_version,
            "path": [identity.full_name for identity in self.path],
        }


@dataclass
class MismatchEntry:
    """All occurrences of one logical name reached at differing versions."""

    name: str
    versions: list[str]
    occurrences: list[Occurrence]

    @property
    def installed_versions(self) -> list[str]:
        """Distinct versions actually found for the occurrences."""
        versions: list[str] = []
        for occurrence in self.occurrences:
            if occurrence.installed_version and occurrence.installed_version not in versions:
                versions.append(occurrence.installed_version)
        return versions

    @property
    def conflicting(self) -> bool:
        """True when some occurrence rejects the installed version.

        Otherwise only the declared specifiers differ and one installed
        version satisfies every occurrence.
        """
        return any(
            occurrence.status == ResolutionStatus.INCOMPATIBLE for occurrence in self.occurrences
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "versions": self.versions,
            "installed_versions": self.installed_versions,
            "conflicting": self.conflicting,
            "occurrences": [occurrence.to_dict() for occurrence in self.occurrences],
        }


@dataclass
class MissingEntry:
    """An unresolved reference together with how its referrer was reached."""

    identity: ModuleIdentity
    referenced_by: list[ModuleIdentity]

    def to_dict(self) -> dict:
        return {
            "identity": self.identity.full_name,
            "name": self.identity.name,
            "referenced_by": [identity.full_name for identity in self.referenced_by],
        }


@dataclass
class ConflictReport:
    """Structured result of inspecting one root module."""

    root: ModuleIdentity
    node_count: int
    mismatches: list[MismatchEntry]
    missing: list[MissingEntry]

    @property
    def has_problems(self) -> bool:
        return bool(self.mismatches or self.missing)

    def to_dict(self) -> dict:
        return {
            "root": self.root.full_name,
            "node_count": self.node_count,
            "has_problems": self.has_problems,
            "mismatches": [entry.to_dict() for entry in self.mismatches],
            "missing": [entry.to_dict() for entry in self.missing],
        }
