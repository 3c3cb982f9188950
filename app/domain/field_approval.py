"""Field approval state machine for booking documents.

Each top-level ("base") field of ``booking_data`` carries an approval status:

- untouched: never edited through this workflow
- pending: the customer changed it; waiting for the venue team
- approved: set or accepted by an admin
- rejected: an admin declined the customer's change (value cleared)

The status is written as ``<base>_approval_status`` together with the two
legacy booleans ``<base>_pending_approval`` / ``<base>_approved`` that older
readers of the document still use.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from app.core.exceptions import AuthorizationError, ValidationError
from app.utils.nested_document import base_field, get_path, set_path


class ApprovalStatus(str, Enum):
    """Approval status of a base field."""

    UNTOUCHED = "untouched"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ActorRole(str, Enum):
    """Who is changing the booking."""

    ADMIN = "admin"
    CUSTOMER = "customer"


class _Missing:
    """Marks a request that carried no ``value`` key at all (null is a value)."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class Approve:
    """Admin accepts the value currently stored (or the one supplied)."""

    value: Any = MISSING


@dataclass(frozen=True)
class Reject:
    """Admin declines the pending change."""

    value: Any = MISSING


@dataclass(frozen=True)
class Edit:
    """Plain write of a new value."""

    value: Any = MISSING


FieldAction = Union[Approve, Reject, Edit]


@dataclass(frozen=True)
class Actor:
    """Resolved party behind a request."""

    role: ActorRole
    email: str | None

    @property
    def is_admin(self) -> bool:
        return self.role is ActorRole.ADMIN


@dataclass(frozen=True)
class FieldApproval:
    """Approval record of one base field."""

    status: ApprovalStatus = ApprovalStatus.UNTOUCHED

    @property
    def pending_approval(self) -> bool:
        return self.status is ApprovalStatus.PENDING

    @property
    def approved(self) -> bool:
        return self.status is ApprovalStatus.APPROVED


@dataclass(frozen=True)
class FieldTransition:
    """Outcome of applying one action to a booking document."""

    field: str
    base_field: str
    actor: Actor
    action: FieldAction
    document: dict[str, Any]
    value: Any
    approval: FieldApproval
    previous: FieldApproval = FieldApproval()


def is_true_flag(flag: Any) -> bool:
    """Interpret a request flag: only native True or the string "true" count."""
    return flag is True or flag == "true"


def has_value(value: Any) -> bool:
    """Whether a stored value counts as present.

    None, the empty string, False and 0 are treated as empty; containers,
    even empty ones, count as present.
    """
    if value is MISSING or value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)) and value == 0:
        return False
    return True


def parse_field_action(
    approve: Any = None,
    reject: Any = None,
    value: Any = MISSING,
) -> FieldAction:
    """Turn the loosely typed request flags into one action.

    Approve takes precedence over reject. Without either flag a value must be
    present.

    Raises:
        ValidationError: If no flag is set and no value was sent
    """
    if is_true_flag(approve):
        return Approve(value=value)
    if is_true_flag(reject):
        return Reject(value=value)
    if value is MISSING:
        raise ValidationError("Value is required")
    return Edit(value=value)


def resolve_actor(
    contact_email: str | None,
    session_email: str | None = None,
    session_role: str | None = None,
) -> Actor:
    """Decide who is acting on a booking.

    Admins are recognised by role. Anyone else with a signed-in email must be
    the booking's contact. Without a session the request came through the
    booking link and acts as the customer.

    Raises:
        AuthorizationError: If a signed-in non-admin is not the booking contact
    """
    is_admin = (session_role or "guest") == "admin"

    if session_email:
        if not is_admin and session_email != contact_email:
            raise AuthorizationError("Forbidden")
        email = session_email
    else:
        email = contact_email

    return Actor(role=ActorRole.ADMIN if is_admin else ActorRole.CUSTOMER, email=email)


APPROVAL_KEY_SUFFIXES = ("_pending_approval", "_approved", "_approval_status")


def is_approval_key(name: str) -> bool:
    """Whether a top-level key is one of the approval markers."""
    return name.endswith(APPROVAL_KEY_SUFFIXES)


def approval_keys(base: str) -> tuple[str, str, str]:
    """Document keys holding the approval record of ``base``."""
    return (
        f"{base}_pending_approval",
        f"{base}_approved",
        f"{base}_approval_status",
    )


def read_approval(document: dict[str, Any], base: str) -> FieldApproval:
    """Read the approval record of a base field.

    Documents written before the status marker existed only have the two
    booleans; for those, rejected and untouched look the same.
    """
    pending_key, approved_key, status_key = approval_keys(base)
    stored = document.get(status_key)
    if stored is not None:
        try:
            return FieldApproval(ApprovalStatus(stored))
        except ValueError:
            pass

    if document.get(pending_key) is True:
        return FieldApproval(ApprovalStatus.PENDING)
    if document.get(approved_key) is True:
        return FieldApproval(ApprovalStatus.APPROVED)
    return FieldApproval(ApprovalStatus.UNTOUCHED)


def write_approval(document: dict[str, Any], base: str, approval: FieldApproval) -> None:
    """Store an approval record on the document (mutates in place)."""
    pending_key, approved_key, status_key = approval_keys(base)
    document[pending_key] = approval.pending_approval
    document[approved_key] = approval.approved
    document[status_key] = approval.status.value


def apply_field_action(
    document: dict[str, Any] | None,
    field: str,
    actor: Actor,
    action: FieldAction,
) -> FieldTransition:
    """Apply ``action`` by ``actor`` to ``field`` of a booking document.

    Works on a deep copy; the input document is left untouched.

    Args:
        document: Current ``booking_data``
        field: Dot path of the edited field
        actor: Resolved actor
        action: Parsed action

    Returns:
        FieldTransition carrying the new document and the resulting status

    Raises:
        ValidationError: If the field is empty, targets an approval marker, or a
            required value is missing
    """
    if not field:
        raise ValidationError("Field is required")

    updated: dict[str, Any] = copy.deepcopy(document) if document else {}
    base = base_field(field)
    if is_approval_key(base):
        raise ValidationError("Approval markers cannot be edited directly")
    previous = read_approval(updated, base)

    if actor.is_admin and isinstance(action, Approve):
        # Approving keeps the customer's pending value; an explicit value is
        # only used when nothing is stored yet.
        current = get_path(updated, field)
        if has_value(current):
            value = current
        elif has_value(action.value):
            value = action.value
        else:
            value = ""
        if has_value(value):
            set_path(updated, field, value)
        status = ApprovalStatus.APPROVED
    elif actor.is_admin and isinstance(action, Reject):
        value = ""
        set_path(updated, field, value)
        status = ApprovalStatus.REJECTED
    else:
        # Customers cannot approve or reject; any flag they send degrades to
        # a plain edit.
        value = action.value
        if value is MISSING:
            raise ValidationError("Value is required for updates")
        set_path(updated, field, value)
        status = ApprovalStatus.APPROVED if actor.is_admin else ApprovalStatus.PENDING
        action = Edit(value=value)

    approval = FieldApproval(status)
    write_approval(updated, base, approval)

    return FieldTransition(
        field=field,
        base_field=base,
        actor=actor,
        action=action,
        document=updated,
        value=value,
        approval=approval,
        previous=previous,
    )
