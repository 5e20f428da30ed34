"""Exception hierarchy for the classifier."""

from __future__ import annotations


class BayesClassifierError(Exception):
    """Base class for all errors raised by this package."""


class InvalidOptionsError(BayesClassifierError, TypeError):
    """Raised when classifier options are not a usable configuration."""


class MalformedSnapshotError(BayesClassifierError, ValueError):
    """Raised when a serialized snapshot cannot be turned back into a model."""


class IncompleteSnapshotError(MalformedSnapshotError):
    """Raised when a snapshot lacks required fields (or holds ``null`` for them).

    Attributes:
        missing: Names of the absent fields, in snapshot order.
    """

    def __init__(self, missing: tuple[str, ...]) -> None:
        self.missing = missing
        super().__init__(
            "Snapshot is missing expected field(s): "
            + ", ".join(f"`{name}`" for name in missing)
        )


__all__ = [
    "BayesClassifierError",
    "IncompleteSnapshotError",
    "InvalidOptionsError",
    "MalformedSnapshotError",
]
