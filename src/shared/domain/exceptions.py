"""Error taxonomy shared by every bounded context.

Services raise subclasses of these; the API layer maps each base class to
one HTTP status.  ``context()`` carries the structured detail a caller needs
to tell causes apart (offending field, current vs. required state).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError


class DomainError(Exception):
    """Base class for business-rule failures reported to the caller."""

    code = "domain_error"

    def context(self) -> Dict[str, Any]:
        return {}


class InvalidInput(DomainError):
    """Malformed or missing input."""

    code = "invalid_input"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def context(self) -> Dict[str, Any]:
        return {"field": self.field} if self.field else {}

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> InvalidInput:
        """Build from a Pydantic error, naming the first failing field."""
        errors = exc.errors()
        if not errors:
            return cls(str(exc))
        first = errors[0]
        loc = [str(part) for part in first.get("loc", ()) if part != "__root__"]
        message = first.get("msg", "Invalid value.")
        # Pydantic prefixes custom ValueError messages.
        message = message.removeprefix("Value error, ")
        return cls(message, field=".".join(loc) or None)


class EntityNotFound(DomainError):
    """The referenced entity does not exist."""

    code = "not_found"


class ActionNotAllowed(DomainError):
    """The acting identity may not perform this operation on this entity."""

    code = "not_allowed"


class InvalidState(DomainError):
    """A guard on the entity's current state rejected the operation."""

    code = "invalid_state"

    def __init__(
        self,
        message: str,
        current: Optional[str] = None,
        required: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(message)
        self.current = current
        self.required = sorted(required) if required is not None else None

    def context(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.current is not None:
            data["current"] = self.current
        if self.required is not None:
            data["required"] = self.required
        return data


class PolicyViolation(DomainError):
    """A configured business policy forbids the operation."""

    code = "policy_violation"


class ConcurrencyConflict(DomainError):
    """A concurrent writer changed the entity first."""

    code = "conflict"
