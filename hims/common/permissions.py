# hims/common/permissions.py

from __future__ import annotations

import logging
from typing import Mapping, Set

from rest_framework.permissions import BasePermission, SAFE_METHODS

from hims.common.constants import Role

logger = logging.getLogger(__name__)

ROLE_ADMIN = Role.ADMIN.value
ROLE_RECEPTIONIST = Role.RECEPTIONIST.value
ROLE_DOCTOR = Role.DOCTOR.value
ROLE_TECHNICIAN = Role.TECHNICIAN.value

ALL_STAFF = frozenset({ROLE_ADMIN, ROLE_RECEPTIONIST, ROLE_DOCTOR, ROLE_TECHNICIAN})
ADMIN_ONLY = frozenset({ROLE_ADMIN})
FRONT_DESK = frozenset({ROLE_ADMIN, ROLE_RECEPTIONIST})
CLINICAL = frozenset({ROLE_ADMIN, ROLE_DOCTOR})
LAB_STAFF = frozenset({ROLE_ADMIN, ROLE_TECHNICIAN})
NON_LAB = frozenset({ROLE_ADMIN, ROLE_RECEPTIONIST, ROLE_DOCTOR})

FORBIDDEN_MESSAGE = "Forbidden: insufficient role"


def _read(roles=ALL_STAFF, **extra) -> dict[str, frozenset]:
    base = {"list": roles, "retrieve": roles}
    base.update(extra)
    return base


def _crud(*, read=ALL_STAFF, write=ADMIN_ONLY, destroy=ADMIN_ONLY, **extra) -> dict[str, frozenset]:
    base = {
        "list": read,
        "retrieve": read,
        "create": write,
        "update": write,
        "partial_update": write,
        "destroy": destroy,
    }
    base.update(extra)
    return base


# resource -> action -> roles allowed. Admin is allowed everywhere.
POLICY_TABLE: Mapping[str, Mapping[str, frozenset]] = {
    "enums": _read(),
    "users": _crud(read=ADMIN_ONLY),
    "audit": _read(ADMIN_ONLY),
    "patients": _crud(
        write=FRONT_DESK | {ROLE_DOCTOR},
        dropdown_list=ALL_STAFF,
        details=ALL_STAFF,
    ),
    "doctors": _crud(
        dropdown_list=ALL_STAFF,
        specializations=ALL_STAFF,
        departments=ALL_STAFF,
    ),
    "visits": _crud(write=FRONT_DESK | {ROLE_DOCTOR}),
    "appointments": _crud(write=FRONT_DESK | {ROLE_DOCTOR}, destroy=FRONT_DESK),
    "service_types": _crud(dropdown_list=ALL_STAFF),
    "services": _crud(dropdown_list=ALL_STAFF),
    "lab_tests": _crud(write=LAB_STAFF, linking=ALL_STAFF, update_linking=LAB_STAFF),
    "lab_parameters": _crud(write=LAB_STAFF, reference_ranges=ALL_STAFF),
    "floors": _crud(write=FRONT_DESK, dropdown_list=ALL_STAFF),
    "wards": _crud(write=FRONT_DESK, dropdown_list=ALL_STAFF),
    "beds": _crud(write=FRONT_DESK, dropdown_list=ALL_STAFF),
    "opd_bills": _crud(read=NON_LAB, write=FRONT_DESK, destroy=FRONT_DESK, pdf=NON_LAB),
    "ipd_admissions": _crud(read=NON_LAB, write=NON_LAB, pdf=NON_LAB),
    "collections": _read(ADMIN_ONLY, doctors_collection=ADMIN_ONLY, all_types=ADMIN_ONLY),
    "lab_orders": _read(parameters=ALL_STAFF),
    "lab_order_tests": _read(
        collect=LAB_STAFF,
        update_status=LAB_STAFF,
        results=ALL_STAFF,
        save_results=LAB_STAFF,
        save_authorize=LAB_STAFF | {ROLE_DOCTOR},
        print_report=ALL_STAFF,
        radiology_report=ALL_STAFF,
        save_radiology=LAB_STAFF | {ROLE_DOCTOR},
        print_radiology=ALL_STAFF,
    ),
    "radiology_templates": _crud(
        write=LAB_STAFF,
        link_service=LAB_STAFF,
        unlink_service=LAB_STAFF,
        services_with_templates=ALL_STAFF,
    ),
    "prescriptions": _crud(write=CLINICAL, print_prescription=ALL_STAFF),
    "examinations": _crud(write=CLINICAL | {ROLE_RECEPTIONIST}),
}


def _user_roles(user) -> Set[str]:
    """
    Resolve roles from the user's `role` column. Superusers count as Admin.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(ROLE_ADMIN)

    role = getattr(user, "role", None)
    if role:
        roles.add(str(role))

    return roles


class RolePolicyPermission(BasePermission):
    """
    Single authorization check for every API view.

    - Requires an authenticated user.
    - Looks up view.policy_resource in POLICY_TABLE.
    - Admin bypass.
    - If the action is unknown and the request is SAFE, fall back to
      list/retrieve; unknown unsafe actions are denied.
    """
    message = FORBIDDEN_MESSAGE
    table: Mapping[str, Mapping[str, frozenset]] = POLICY_TABLE

    def _infer_action(self, request, view) -> str | None:
        action = getattr(view, "action", None)
        if action:
            return action

        # fallback inference for APIView (no router action)
        kwargs = getattr(view, "kwargs", {}) or {}
        is_detail = "pk" in kwargs or "id" in kwargs

        method = request.method.upper()
        if method in ("GET", "HEAD", "OPTIONS"):
            return "retrieve" if is_detail else "list"
        if method == "POST":
            return "create"
        if method == "PUT":
            return "update"
        if method == "PATCH":
            return "partial_update"
        if method == "DELETE":
            return "destroy"
        return None

    def allowed_roles(self, request, view) -> frozenset | None:
        resource = getattr(view, "policy_resource", None)
        rules = self.table.get(resource) if resource else None
        if rules is None:
            return None

        action = self._infer_action(request, view)
        allowed = rules.get(action) if action else None

        if allowed is None and request.method in SAFE_METHODS:
            kwargs = getattr(view, "kwargs", {}) or {}
            is_detail = "pk" in kwargs or "id" in kwargs
            allowed = rules.get("retrieve" if is_detail else "list")

        return allowed

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False

        roles = _user_roles(user)
        if ROLE_ADMIN in roles:
            return True

        allowed = self.allowed_roles(request, view)
        if allowed is not None and roles & allowed:
            return True

        logger.warning(
            "Role check denied %s %s for user=%s roles=%s",
            request.method,
            request.path,
            getattr(user, "pk", None),
            sorted(roles),
        )
        return False

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)
