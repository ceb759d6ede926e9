# impairment/services/tenant.py

from __future__ import annotations

from impairment.services.exceptions import NotAuthenticated, TenantNotFound


def resolve_company(user):
    """Return the active company the caller acts for."""
    if user is None or not getattr(user, "is_authenticated", False):
        raise NotAuthenticated()

    company = getattr(user, "company", None)
    if company is None or not company.is_active:
        raise TenantNotFound()

    return company
