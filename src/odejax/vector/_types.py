"""Mutability tags for :class:`~odejax.vector.NumericVector`."""

from __future__ import annotations

from enum import Enum


class VectorType(Enum):
    """Aliasing mode of a :class:`~odejax.vector.NumericVector`.

    ``MUTABLE`` vectors own their buffer: element assignment is allowed and
    transforming operations write their result back into the receiver.
    ``IMMUTABLE`` vectors never change after construction; every
    transforming operation allocates a new vector instead.
    """

    IMMUTABLE = "immutable"
    MUTABLE = "mutable"
