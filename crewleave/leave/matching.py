"""Employee resolution and request ownership.

The record store keys holiday requests by the employee's display name or
short user code, never by document id, so ownership is decided by comparing
those strings case- and whitespace-insensitively.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from crewleave.leave.records import (
    EMPLOYEE_CODE_FIELDS,
    EMPLOYEE_EMAIL_FIELDS,
    EMPLOYEE_NAME_FIELDS,
    REQUEST_EMPLOYEE_CODE_FIELDS,
    REQUEST_EMPLOYEE_NAME_FIELDS,
    pick,
    safe_str,
)


def _first_where(employees: Iterable[Any], fields: tuple[str, ...], wanted: str) -> Optional[Mapping[str, Any]]:
    for employee in employees:
        if isinstance(employee, Mapping) and safe_str(pick(employee, fields)) == wanted:
            return employee
    return None


def find_employee_record(
    employees: Optional[Iterable[Any]],
    user_code: Optional[str] = None,
    email: Optional[str] = None,
    name: Optional[str] = None,
) -> Optional[Mapping[str, Any]]:
    """Locate the signed-in user's employee record.

    A user code is the strongest key (falling back to email when the code is
    unknown); otherwise email, otherwise display name.
    """
    employees = list(employees or ())
    code_key, email_key, name_key = safe_str(user_code), safe_str(email), safe_str(name)

    if code_key:
        found = _first_where(employees, EMPLOYEE_CODE_FIELDS, code_key)
        if found is None and email_key:
            found = _first_where(employees, EMPLOYEE_EMAIL_FIELDS, email_key)
        return found
    if email_key:
        return _first_where(employees, EMPLOYEE_EMAIL_FIELDS, email_key)
    if name_key:
        return _first_where(employees, EMPLOYEE_NAME_FIELDS, name_key)
    return None


def filter_requests_for_employee(
    requests: Optional[Iterable[Any]],
    employee: Optional[Mapping[str, Any]] = None,
    user_code: Optional[str] = None,
    name: Optional[str] = None,
) -> list[Mapping[str, Any]]:
    """Requests belonging to ``employee`` (or to the raw code/name when unmatched)."""
    if isinstance(employee, Mapping):
        name_key = safe_str(pick(employee, EMPLOYEE_NAME_FIELDS))
        code_key = safe_str(pick(employee, EMPLOYEE_CODE_FIELDS))
    else:
        name_key, code_key = safe_str(name), safe_str(user_code)

    if not name_key and not code_key:
        return []

    mine = []
    for request in requests or ():
        if not isinstance(request, Mapping):
            continue
        by_name = bool(name_key) and any(
            safe_str(request.get(field)) == name_key for field in REQUEST_EMPLOYEE_NAME_FIELDS
        )
        by_code = bool(code_key) and any(
            safe_str(request.get(field)) == code_key for field in REQUEST_EMPLOYEE_CODE_FIELDS
        )
        if by_name or by_code:
            mine.append(request)
    return mine
