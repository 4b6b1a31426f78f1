"""Module identity parsing and comparison.

Two notions of equality are used throughout DepClash:

* logical equality compares names only and groups every version variant of
  a dependency under one key;
* exact equality compares the full identity (name, extras and version
  qualifier) and decides whether a reference has already been examined.
"""

from packaging.requirements import InvalidRequirement, Requirement

from .errors import InvalidIdentifier
from .models import ModuleIdentity


def identity_from_requirement(requirement: Requirement) -> ModuleIdentity:
    """Build an identity from a parsed requirement, dropping its marker."""
    return ModuleIdentity(
        name=requirement.name,
        version=str(requirement.specifier),
        extras=tuple(sorted(requirement.extras)),
    )


def parse_identity(text: str) -> ModuleIdentity:
    """Parse an identifier such as ``requests[socks]>=2.0``.

    Args:
        text: Requirement-style identifier

    Returns:
        Parsed ModuleIdentity

    Raises:
        InvalidIdentifier: If the text is not a valid requirement
    """
    stripped = text.strip()
    if not stripped:
        raise InvalidIdentifier("Empty module identifier")

    try:
        requirement = Requirement(stripped)
    except InvalidRequirement as e:
        raise InvalidIdentifier(f"Invalid module identifier {text!r}: {e}") from e

    return identity_from_requirement(requirement)


def logical_key(identity: ModuleIdentity) -> str:
    return identity.key


def exact_key(identity: ModuleIdentity) -> str:
    return identity.full_name


def same_logical(a: ModuleIdentity, b: ModuleIdentity) -> bool:
    """Check whether two identities name the same logical module."""
    return logical_key(a) == logical_key(b)


def same_exact(a: ModuleIdentity, b: ModuleIdentity) -> bool:
    """Check whether two identities are the same module at the same version."""
    return exact_key(a) == exact_key(b)
