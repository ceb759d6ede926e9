# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
# Mirrors users.User.ROLE_CHOICES.
ROLE_ADMIN = "admin"
ROLE_ACCOUNTANT = "accountant"
ROLE_MANAGER = "manager"
ROLE_CLERK = "clerk"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_ACCOUNTANT,
    ROLE_MANAGER,
    ROLE_CLERK,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_IMPAIRMENT_VIEW = "impairment.view"      # previews, settings, locks, history
CAP_IMPAIRMENT_POST = "impairment.post"      # post to the ledger
CAP_IMPAIRMENT_MANAGE = "impairment.manage"  # change ECL rates, lock/unlock periods

ALL_CAPABILITIES = {
    CAP_IMPAIRMENT_VIEW,
    CAP_IMPAIRMENT_POST,
    CAP_IMPAIRMENT_MANAGE,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_ACCOUNTANT: {
        CAP_IMPAIRMENT_VIEW,
        CAP_IMPAIRMENT_POST,
        CAP_IMPAIRMENT_MANAGE,
    },
    ROLE_MANAGER: {
        CAP_IMPAIRMENT_VIEW,
        CAP_IMPAIRMENT_POST,
    },
    ROLE_CLERK: {
        CAP_IMPAIRMENT_VIEW,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def capabilities_for(user) -> set[str]:
    if not user or not user.is_authenticated:
        return set()
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    return capability in capabilities_for(user)


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_IMPAIRMENT_VIEW
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default to avoid accidental open endpoints
            return False

        return user_has_capability(user, required)
