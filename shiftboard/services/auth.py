"""Caller identity passed explicitly into every service call."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

ADMIN = "admin"
EMPLOYEE = "employee"
ROLES = (ADMIN, EMPLOYEE)

USER_HEADER = "X-Shiftboard-User"
ROLE_HEADER = "X-Shiftboard-Role"
EMPLOYEE_HEADER = "X-Shiftboard-Employee"


class PermissionDenied(PermissionError):
    """Raised when the caller's role does not allow an operation."""


@dataclass(frozen=True)
class AuthContext:
    user_id: Optional[str]
    role: str = EMPLOYEE
    employee_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    def can_read_employee(self, employee_id: str) -> bool:
        return self.is_admin or (self.employee_id is not None and self.employee_id == employee_id)


ANONYMOUS = AuthContext(user_id=None)


def require_admin(auth: AuthContext, action: str = "perform this action") -> None:
    if not auth.is_admin:
        raise PermissionDenied(f"Only administrators can {action}")


def require_employee_access(auth: AuthContext, employee_id: str) -> None:
    if not auth.can_read_employee(employee_id):
        raise PermissionDenied(f"No access to employee {employee_id}")


def from_headers(headers: Mapping[str, str]) -> AuthContext:
    """Build the context from request headers set by the authenticating proxy."""

    role = (headers.get(ROLE_HEADER) or EMPLOYEE).lower()
    if role not in ROLES:
        role = EMPLOYEE
    user_id = headers.get(USER_HEADER) or None
    if user_id is None:
        return ANONYMOUS
    return AuthContext(user_id=user_id, role=role, employee_id=headers.get(EMPLOYEE_HEADER) or None)
