"""Exception types raised by repograph."""

from __future__ import annotations


class RepographError(Exception):
    """Base class for all repograph errors."""


class GraphInvariantError(RepographError):
    """A snapshot would violate a structural invariant.

    Node ids are derived from paths and line numbers, so this only fires
    when id construction itself is broken.
    """


class NodeNotFoundError(RepographError, KeyError):
    """No node with the requested id exists in the snapshot."""

    def __init__(self, node_id: str) -> None:
        super().__init__(node_id)
        self.node_id = node_id

    def __str__(self) -> str:
        return f"Node not found: {self.node_id}"


class ConfigError(RepographError):
    """The TOML configuration file could not be parsed."""
