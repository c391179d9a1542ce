"""Role assignment at registration."""

from __future__ import annotations

from collections.abc import Iterable

from smartcharge.db.models import Role
from smartcharge.errors import InvalidInputError


def email_domain(email: str) -> str:
    """Return the lowercased domain part of an email, or "" if there is none."""
    _, sep, domain = email.strip().rpartition("@")
    return domain.lower() if sep else ""


def infer_role(email: str, explicit_role: str | None = None, *, operator_domains: Iterable[str]) -> Role:
    """Pick the role for a new account.

    An explicit role always wins. Otherwise addresses on one of the operator
    domains become OPERATOR and everyone else is a DRIVER.
    """
    if explicit_role:
        try:
            return Role(explicit_role.strip().upper())
        except ValueError:
            msg = f"Unknown role: {explicit_role}"
            raise InvalidInputError(msg) from None

    allowed = {d.strip().lower() for d in operator_domains}
    if email_domain(email) in allowed:
        return Role.OPERATOR
    return Role.DRIVER
