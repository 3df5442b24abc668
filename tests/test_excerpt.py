"""Tests for line-range excerpting."""

import pytest

from repograph.config_manager import ScanSettings
from repograph.errors import NodeNotFoundError
from repograph.excerpt import read_excerpt, snapshot_excerpt
from repograph.walker import scan_repository

SOURCE = (
    "import os\n"
    "\n"
    "class Store:\n"
    "    def get(self, key):\n"
    "        return os.environ.get(key)\n"
    "\n"
    "    def put(self, key, value):\n"
    "        os.environ[key] = value\n"
    "\n"
    "VERSION = 1\n"
)


@pytest.fixture
def snapshot(write_tree):
    return scan_repository(write_tree({"store.py": SOURCE}))


def _node(snapshot, label):
    return next(n for n in snapshot.nodes if n.label == label)


def test_excerpt_matches_block_lines(snapshot):
    excerpt = read_excerpt(_node(snapshot, "get"))
    assert excerpt.first_line == 3
    assert excerpt.lines == ["    def get(self, key):", "        return os.environ.get(key)", ""]
    assert excerpt.last_line == 5


def test_excerpt_longer_than_snippet(write_tree):
    body = "".join(f"    step_{i}()\n" for i in range(30))
    snapshot = scan_repository(write_tree({"long.py": "def long():\n" + body}))
    node = _node(snapshot, "long")

    excerpt = read_excerpt(node)
    assert len(node.snippet.split("\n")) == 10
    assert len(excerpt.lines) == 31
    assert excerpt.lines[:10] == node.snippet.split("\n")


def test_context_is_clamped(snapshot):
    excerpt = read_excerpt(_node(snapshot, "Store"), context=50)
    assert excerpt.first_line == 0
    assert excerpt.lines[0] == "import os"
    assert excerpt.lines[-1] == "VERSION = 1"


def test_file_node_yields_whole_file(snapshot):
    excerpt = read_excerpt(_node(snapshot, "store.py"))
    assert excerpt.first_line == 0
    assert len(excerpt.lines) == 10


def test_numbered_output(snapshot):
    text = read_excerpt(_node(snapshot, "put")).numbered()
    assert text.splitlines()[0] == "7      def put(self, key, value):"


def test_snapshot_excerpt_unknown_id(snapshot):
    with pytest.raises(NodeNotFoundError):
        snapshot_excerpt(snapshot, "function:/nowhere:0:x")


def test_snapshot_excerpt_by_id(snapshot):
    node = _node(snapshot, "put")
    assert snapshot_excerpt(snapshot, node.node_id).text == (
        "    def put(self, key, value):\n        os.environ[key] = value\n"
    )


def test_excerpt_uses_settings_encoding(write_tree):
    settings = ScanSettings(encoding="latin-1")
    root = write_tree({"legacy.py": "def café():\n    return 'é'\n".encode("latin-1")})
    snapshot = scan_repository(root, settings)
    node = _node(snapshot, "café")

    assert read_excerpt(node, settings=settings).lines == ["def café():", "    return 'é'"]
    assert snapshot_excerpt(snapshot, node.node_id, settings=settings).text == (
        "def café():\n    return 'é'"
    )
    with pytest.raises(UnicodeDecodeError):
        read_excerpt(node)
