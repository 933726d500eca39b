"""DTOs for the authenticated caller."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """Caller identity from the bearer token.

    role is kept as the raw claim string: an unrecognized role is still a
    caller, it is simply granted nothing by the capability policy.
    """

    id: str
    role: str | None
