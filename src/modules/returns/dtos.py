"""Return workflow DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from modules.orders.constants import ADMIN_RETURN_STATUSES, MIN_RETURN_REASON_LENGTH
from modules.returns.constants import MAX_RETURN_DAYS, MIN_RETURN_DAYS


class RequestReturnDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    reason: str

    @field_validator("reason")
    @classmethod
    def reason_min_length(cls, v: str) -> str:
        if len(v) < MIN_RETURN_REASON_LENGTH:
            raise ValueError(
                f"Please provide a reason of at least "
                f"{MIN_RETURN_REASON_LENGTH} characters."
            )
        return v


class UpdateReturnStatusDTO(BaseModel):
    """Admin decision on a return: Approved, Rejected or Completed."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    return_status: str

    @field_validator("return_status")
    @classmethod
    def return_status_must_be_admin_settable(cls, v: str) -> str:
        if v not in ADMIN_RETURN_STATUSES:
            allowed = ", ".join(sorted(ADMIN_RETURN_STATUSES))
            raise ValueError(f"Invalid return status '{v}'. Allowed: {allowed}.")
        return v


class UpdateReturnPolicyDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    return_days: int

    @field_validator("return_days")
    @classmethod
    def return_days_in_range(cls, v: int) -> int:
        if not MIN_RETURN_DAYS <= v <= MAX_RETURN_DAYS:
            raise ValueError(
                f"Return days must be between {MIN_RETURN_DAYS} and {MAX_RETURN_DAYS}."
            )
        return v
