"""Exceptions raised by the filesystem node layer.

Plain ``OSError`` subclasses from the operating system are never wrapped;
only the conditions the node layer itself detects get a dedicated type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roadkit.nodes.kinds import NodeKind


class RoadError(Exception):
    """Base exception for filesystem node errors."""


class TypeMismatchError(RoadError):
    """Raised when a node class is constructed over an entry of another kind.

    Attributes:
        path: Absolute path that was inspected.
        expected: Kind represented by the constructing class.
        actual: Kind found on disk.
    """

    def __init__(self, path: str, expected: NodeKind, actual: NodeKind) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Type mismatch at '{path}': expected {expected.value}, found {actual.value}"
        )


class UnknownKindError(RoadError):
    """Raised when mode bits match none of the known entry kinds.

    Attributes:
        mode: The raw mode value that could not be classified.
        source: The path or mode that was passed in.
    """

    def __init__(self, mode: int, source: object) -> None:
        self.mode = mode
        self.source = source
        super().__init__(f"Unknown mode type {mode:#o} for path/mode: '{source}'")


class ImmutableError(RoadError):
    """Raised when a mutating call hits a node flagged as immutable."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path at '{path}' is marked as immutable and shouldn't be modified")


class UnsupportedOperationError(RoadError):
    """Raised by device, pipe and socket nodes on every mutating call.

    Attributes:
        operation: Name of the rejected operation (delete, move, copy, rename).
        kind_name: Concrete class name of the node.
        path: Absolute path of the node.
    """

    def __init__(self, operation: str, kind_name: str, path: str) -> None:
        self.operation = operation
        self.kind_name = kind_name
        self.path = path
        super().__init__(f"Cannot {operation} type {kind_name} at '{path}'")
