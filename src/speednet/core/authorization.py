"""Workspace scope checks against the caller's pre-validated workspace ids."""

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from speednet.core.cache import scope_fingerprint
from speednet.core.errors import AuthorizationError


def normalise_workspace_ids(ids: Iterable[Any] | None) -> list[int]:
    """Positive integer ids, de-duplicated and sorted. Junk entries are dropped."""
    result: set[int] = set()
    for raw in ids or []:
        try:
            value = int(str(raw).strip())
        except (TypeError, ValueError):
            continue
        if value > 0:
            result.add(value)
    return sorted(result)


class AuthContext(BaseModel):
    """
    Caller identity as produced by the upstream auth middleware.

    An empty authorized_workspace_ids list means the caller is unrestricted.
    """

    model_config = ConfigDict(frozen=True)

    authorized_workspace_ids: list[int] = Field(default_factory=list)
    actor_id: int | None = None

    @field_validator("authorized_workspace_ids", mode="before")
    @classmethod
    def normalise_ids(cls, v: Any) -> list[int]:
        return normalise_workspace_ids(v)

    @property
    def is_unrestricted(self) -> bool:
        return not self.authorized_workspace_ids

    @property
    def fingerprint(self) -> str:
        return scope_fingerprint(self.authorized_workspace_ids)

    def can_access(self, company_id: int | None) -> bool:
        if self.is_unrestricted:
            return True
        return company_id is not None and company_id in self.authorized_workspace_ids


def assert_workspace_permission(company_id: int | None, ctx: AuthContext) -> None:
    """
    Raise AuthorizationError unless the caller may act on this workspace.

    Raises:
        AuthorizationError: Scoped caller and no workspace on the target
        AuthorizationError: Workspace outside the caller's scope
    """
    if ctx.is_unrestricted:
        return
    if company_id is None:
        raise AuthorizationError("Workspace selection required for networking access.")
    if company_id not in ctx.authorized_workspace_ids:
        raise AuthorizationError(
            "You do not have permission to manage this networking workspace.",
            details={"company_id": company_id},
        )
