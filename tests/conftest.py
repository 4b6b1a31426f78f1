"""Pytest configuration and fixtures."""

from collections import Counter

import pytest

from core.errors import ModuleNotFound, VersionIncompatible
from core.identity import parse_identity
from core.models import ModuleIdentity, ResolvedModule


class FakeProvider:
    """Dictionary-backed module provider that counts resolve calls.

    ``modules`` maps identifiers to the identifiers they reference. Any
    identity not in ``modules`` is reported as not found, any identity listed
    in ``incompatible`` as version incompatible. With ``pin_declared`` the
    declared identity is pinned to the installed version, as installed
    distributions are.
    """

    def __init__(
        self,
        modules: dict[str, list[str]],
        incompatible: dict[str, str] | None = None,
        pin_declared: bool = False,
    ):
        self.pin_declared = pin_declared
        self.modules = {
            parse_identity(name).full_name: [parse_identity(ref) for ref in refs]
            for name, refs in modules.items()
        }
        self.incompatible = {
            parse_identity(name).full_name: installed
            for name, installed in (incompatible or {}).items()
        }
        self.calls: Counter[str] = Counter()

    def resolve(self, identity: ModuleIdentity) -> ResolvedModule:
        self.calls[identity.full_name] += 1

        if identity.full_name in self.incompatible:
            raise VersionIncompatible(identity, self.incompatible[identity.full_name])
        if identity.full_name not in self.modules:
            raise ModuleNotFound(identity)

        installed_version = identity.version.lstrip("=") or "1.0"
        declared = identity
        if self.pin_declared:
            declared = ModuleIdentity(identity.name, f"=={installed_version}", identity.extras)

        return ResolvedModule(
            identity=declared,
            installed_version=installed_version,
            references=list(self.modules[identity.full_name]),
        )


@pytest.fixture
def fake_provider():
    """Factory for dictionary-backed providers."""
    return FakeProvider


@pytest.fixture
def conflict_provider():
    """Root a reaches b at 1.0 directly and at 2.0 through c."""
    return FakeProvider({
        "a": ["b==1.0", "c"],
        "b==1.0": [],
        "b==2.0": [],
        "c": ["b==2.0"],
    })


@pytest.fixture
def missing_provider():
    """Root a references d, which is not installed."""
    return FakeProvider({"a": ["d"]})


@pytest.fixture
def shared_provider():
    """Root a reaches b at 1.0 both directly and through c."""
    return FakeProvider({
        "a": ["b==1.0", "c"],
        "b==1.0": [],
        "c": ["b==1.0"],
    })
