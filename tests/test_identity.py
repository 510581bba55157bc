"""Tests for the URI <-> node join table."""

import pytest

from mapping.identity import IdentityIndex


class TestIdentityIndex:
    """Tests for IdentityIndex."""

    def test_bind_and_lookup(self):
        index = IdentityIndex()
        index.bind("http://example.org/a", 0)
        index.bind("http://example.org/b", 1)

        assert len(index) == 2
        assert "http://example.org/a" in index
        assert index.node_for("http://example.org/b") == 1
        assert index.uri_for(0) == "http://example.org/a"

    def test_unbound_lookup_returns_none(self):
        index = IdentityIndex()
        assert index.node_for("http://example.org/missing") is None
        assert index.uri_for(7) is None

    def test_double_bind_raises(self):
        """A URI maps to exactly one node."""
        index = IdentityIndex()
        index.bind("http://example.org/a", 0)
        with pytest.raises(RuntimeError):
            index.bind("http://example.org/a", 1)
        assert index.node_for("http://example.org/a") == 0

    def test_iteration_in_bind_order(self):
        index = IdentityIndex()
        index.bind("http://example.org/z", 0)
        index.bind("http://example.org/a", 1)
        assert list(index) == [("http://example.org/z", 0), ("http://example.org/a", 1)]
