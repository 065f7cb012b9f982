# =============================================================================
# core/models/routing.py - Route Table Schemas
# =============================================================================
# These models describe the client route table and guard outcomes:
# - RouteMeta: Static per-route auth flags
# - Route: A path with its meta and whether it is an entry (login/register) page
# - GuardDecision / GuardResult: Outcome of one navigation check
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class RouteMeta(BaseModel):
    """
    Per-route flags attached when the route table is built.

    `requires_auth` is tri-state: None means the route did not declare it,
    False means it explicitly opts out of every auth rule.
    """

    requires_auth: bool | None = Field(
        default=None,
        description="True to require a session, False to opt out of all checks"
    )

    requires_admin: bool = Field(
        default=False,
        description="Require the cached role to be admin"
    )

    model_config = {"frozen": True}


class Route(BaseModel):
    """A single client route."""

    path: str = Field(..., description="Route path, e.g. /homepage")
    name: str = Field(..., description="Route name")
    meta: RouteMeta = Field(default_factory=RouteMeta)
    entry: bool = Field(
        default=False,
        description="Login/register page; signed-in users are sent home"
    )

    model_config = {"frozen": True}


class GuardDecision(str, Enum):
    """
    States of the per-navigation guard.

    Flow: checking -> allow | deny-to-login | deny-to-home
    """
    CHECKING = "checking"
    ALLOW = "allow"
    DENY_TO_LOGIN = "deny-to-login"
    DENY_TO_HOME = "deny-to-home"


class GuardResult(BaseModel):
    """Outcome of evaluating one navigation attempt."""

    decision: GuardDecision
    redirect_to: str | None = Field(
        default=None,
        description="Path to navigate to instead, None when allowed"
    )

    @property
    def allowed(self) -> bool:
        return self.decision == GuardDecision.ALLOW
