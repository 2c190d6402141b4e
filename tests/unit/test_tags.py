"""Unit tests for tag validation and filters."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from neutron_deploy.tagging import remote_tags, replace_tags, tags_filter, validate_tags


def test_validate_sorts_and_deduplicates():
    assert validate_tags(["b", "a", "b"]) == ["a", "b"]


@pytest.mark.parametrize("tag", ["", "a,b", "a/b", "x" * 256])
def test_validate_rejects(tag):
    with pytest.raises(ValueError):
        validate_tags([tag])


def test_filter_joins_with_comma():
    assert tags_filter(["a", "b"]) == "a,b"
    assert tags_filter([]) is None


def test_remote_tags_sorted():
    assert remote_tags(SimpleNamespace(tags=["z", "a"])) == ["a", "z"]
    assert remote_tags(SimpleNamespace(tags=None)) == []


def test_replace_tags_sets_complete_tag_set():
    network = MagicMock()
    obj = SimpleNamespace(id="pool-1", tags=[])
    network.set_tags.return_value = SimpleNamespace(id="pool-1", tags=["b", "a"])

    assert replace_tags(network, obj, ["b", "a", "a"]) == ["a", "b"]
    network.set_tags.assert_called_once_with(obj, ["a", "b"])
