"""Customer domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import EntityNotFound


class CustomerNotFound(EntityNotFound):
    """The requested customer does not exist."""
