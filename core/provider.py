"""Module metadata providers."""

import logging
from importlib import metadata
from typing import Protocol

from packaging.requirements import InvalidRequirement, Requirement
from packaging.specifiers import SpecifierSet
from packaging.version import InvalidVersion

from .errors import ModuleNotFound, VersionIncompatible
from .identity import identity_from_requirement
from .models import ModuleIdentity, ResolvedModule

logger = logging.getLogger(__name__)


class ModuleProvider(Protocol):
    """Source of module identities and references.

    Implementations must return the same references for the same exact
    identity every time they are asked.
    """

    def resolve(self, identity: ModuleIdentity) -> ResolvedModule:
        """Resolve an identity to its declared identity and references.

        Raises:
            ModuleNotFound: If no module with that name exists
            VersionIncompatible: If the module exists at a version the
                identity does not accept
        """
        ...


class InstalledDistributionProvider:
    """Provider backed by the distributions installed in an environment."""

    def __init__(self, paths: list[str] | None = None):
        """Initialize the provider.

        Args:
            paths: Directories to search for distributions instead of sys.path
        """
        self.paths = list(paths) if paths else None

    def resolve(self, identity: ModuleIdentity) -> ResolvedModule:
        distribution = self._find_distribution(identity.name)
        if distribution is None:
            raise ModuleNotFound(identity)

        installed_version = distribution.version
        if not self._accepts(identity, installed_version):
            raise VersionIncompatible(identity, installed_version)

        name = distribution.metadata["Name"] or identity.name
        declared = ModuleIdentity(
            name=name,
            version=f"=={installed_version}",
            extras=identity.extras,
        )
        references = self._references(distribution, identity.extras)
        logger.debug("Resolved %s to %s with %d references", identity, declared, len(references))

        return ResolvedModule(
            identity=declared,
            installed_version=installed_version,
            references=references,
        )

    def _find_distribution(self, name: str) -> metadata.Distribution | None:
        """Find the installed distribution for a project name.

        Args:
            name: Project name, in any normalization

        Returns:
            The first matching distribution or None if not installed
        """
        kwargs = {"name": name}
        if self.paths:
            kwargs["path"] = self.paths
        return next(iter(metadata.distributions(**kwargs)), None)

    def _accepts(self, identity: ModuleIdentity, installed_version: str) -> bool:
        """Check whether the installed version satisfies the identity."""
        if not identity.version:
            return True

        try:
            return SpecifierSet(identity.version).contains(installed_version, prereleases=True)
        except InvalidVersion:
            logger.warning(
                "Installed version %r of %s is not a valid version", installed_version, identity.name
            )
            return False

    def _references(
        self, distribution: metadata.Distribution, extras: tuple[str, ...]
    ) -> list[ModuleIdentity]:
        """Collect the requirements that apply in this environment.

        Args:
            distribution: Distribution whose Requires-Dist entries are read
            extras: Extras requested for the distribution

        Returns:
            Referenced identities in declaration order, duplicates removed
        """
        references: list[ModuleIdentity] = []
        seen: set[str] = set()

        for line in distribution.requires or []:
            try:
                requirement = Requirement(line)
            except InvalidRequirement:
                # Skip malformed metadata gracefully
                logger.warning("Skipping malformed requirement %r of %s", line, distribution.metadata["Name"])
                continue

            if not self._applies(requirement, extras):
                continue

            reference = identity_from_requirement(requirement)
            if reference.full_name in seen:
                continue
            seen.add(reference.full_name)
            references.append(reference)

        return references

    def _applies(self, requirement: Requirement, extras: tuple[str, ...]) -> bool:
        """Evaluate a requirement's marker for the requested extras."""
        if requirement.marker is None:
            return True

        return any(
            requirement.marker.evaluate({"extra": extra})
            for extra in (*extras, "")
        )
