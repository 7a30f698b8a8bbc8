"""Scan options captured when a session is created."""

from datetime import timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reaper.core.predicates import validate_pattern


class ReaperOptions(BaseModel):
    """Immutable options for a single scan.

    Attributes:
        expiry: Entries accessed more recently than this are retained.
        irregular: Whether FIFOs, sockets, devices and symlinks are eligible.
        protect: Glob patterns. Matching files are excluded and matching
            directories have their whole subtree skipped.
        force: Ignore write permission and report candidates by age alone.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    expiry: Annotated[timedelta, Field(description="Access-time expiry window")]
    irregular: Annotated[
        bool,
        Field(description="Consider non-regular, non-directory entries"),
    ] = False
    protect: Annotated[
        tuple[str, ...],
        Field(description="Protection glob patterns"),
    ] = ()
    force: Annotated[bool, Field(description="Ignore candidate permissions")] = False

    @field_validator("expiry")
    @classmethod
    def validate_expiry(cls, v: timedelta) -> timedelta:
        """Reject zero and negative expiry windows."""
        if v <= timedelta(0):
            msg = f"Expiry must be a duration > 0, got {v}"
            raise ValueError(msg)
        return v

    @field_validator("protect")
    @classmethod
    def validate_protect(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate every protection pattern up front."""
        for glob in v:
            validate_pattern(glob)
        return v
