"""Tests for module identity parsing and comparison."""

import pytest

from core.errors import InvalidIdentifier
from core.identity import exact_key, logical_key, parse_identity, same_exact, same_logical


class TestParseIdentity:
    """Test parsing of requirement-style identifiers."""

    def test_parse_bare_name(self):
        """Should accept a name without a version."""
        identity = parse_identity("requests")
        assert identity.name == "requests"
        assert identity.version == ""
        assert identity.extras == ()
        assert identity.full_name == "requests"

    def test_parse_pinned_with_extras(self):
        """Should keep extras sorted and normalize the name in the full name."""
        identity = parse_identity("Requests[socks,security]==2.31.0")
        assert identity.name == "Requests"
        assert identity.extras == ("security", "socks")
        assert identity.full_name == "requests[security,socks]==2.31.0"

    def test_marker_is_dropped(self):
        """Should not carry environment markers into the identity."""
        identity = parse_identity('tomli>=1.1; python_version < "3.11"')
        assert identity.full_name == "tomli>=1.1"

    def test_specifier_order_is_normalized(self):
        """Should produce one full name regardless of specifier order."""
        assert parse_identity("b<3,>=2").full_name == parse_identity("b>=2,<3").full_name

    @pytest.mark.parametrize("text", ["", "   ", "not a valid ==="])
    def test_invalid_identifiers(self, text):
        """Should raise InvalidIdentifier for unparseable input."""
        with pytest.raises(InvalidIdentifier):
            parse_identity(text)


class TestIdentityComparison:
    """Test logical versus exact equality."""

    def test_logical_equality_ignores_version(self):
        """Should treat different versions of a name as the same module."""
        a = parse_identity("Foo_Bar==1.0")
        b = parse_identity("foo-bar==2.0")
        assert same_logical(a, b)
        assert logical_key(a) == logical_key(b) == "foo-bar"
        assert not same_exact(a, b)

    def test_exact_equality_requires_version_and_extras(self):
        """Should only match identical name, version and extras."""
        assert same_exact(parse_identity("foo==1.0"), parse_identity("FOO==1.0"))
        assert not same_exact(parse_identity("foo==1.0"), parse_identity("foo[x]==1.0"))
        assert exact_key(parse_identity("foo[x]==1.0")) == "foo[x]==1.0"
