"""Failure types raised while resolving modules."""

from .models import ModuleIdentity


class InvalidIdentifier(ValueError):
    """Raised when a module identifier cannot be parsed."""


class ResolutionError(Exception):
    """Base class for failures reported by a module provider."""

    def __init__(self, identity: ModuleIdentity, message: str | None = None):
        self.identity = identity
        super().__init__(message or f"Could not resolve {identity.full_name}")


class ModuleNotFound(ResolutionError):
    """The referenced module is not installed at all."""

    def __init__(self, identity: ModuleIdentity):
        super().__init__(identity, f"Module {identity.name} not found")


class VersionIncompatible(ResolutionError):
    """The module exists, but at a version the reference does not accept."""

    def __init__(self, identity: ModuleIdentity, installed_version: str):
        self.installed_version = installed_version
        super().__init__(
            identity,
            f"{identity.full_name} requested but {identity.name} {installed_version} is installed",
        )
