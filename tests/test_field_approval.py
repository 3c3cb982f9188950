import pytest

from app.core.exceptions import AuthorizationError, ValidationError
from app.domain.field_approval import (
    MISSING,
    Actor,
    ActorRole,
    Approve,
    ApprovalStatus,
    Edit,
    Reject,
    apply_field_action,
    has_value,
    parse_field_action,
    read_approval,
    resolve_actor,
)

ADMIN = Actor(role=ActorRole.ADMIN, email="team@whitelotus.is")
CUSTOMER = Actor(role=ActorRole.CUSTOMER, email="jon@example.is")


def flags(document, base):
    return (
        document.get(f"{base}_pending_approval"),
        document.get(f"{base}_approved"),
        document.get(f"{base}_approval_status"),
    )


# ==================== parse_field_action ====================


@pytest.mark.parametrize("flag", [True, "true"])
def test_approve_flag_accepts_bool_and_string(flag):
    assert parse_field_action(approve=flag) == Approve()


@pytest.mark.parametrize("flag", [False, "false", "yes", 1, None])
def test_other_flag_values_are_not_actions(flag):
    assert parse_field_action(approve=flag, reject=flag, value="x") == Edit("x")


def test_approve_wins_over_reject():
    assert isinstance(parse_field_action(approve=True, reject=True), Approve)


def test_edit_without_value_is_invalid():
    with pytest.raises(ValidationError) as exc:
        parse_field_action()
    assert exc.value.detail == "Value is required"


def test_explicit_null_is_a_value():
    assert parse_field_action(value=None) == Edit(None)


# ==================== resolve_actor ====================


def test_admin_session_acts_as_admin():
    actor = resolve_actor("jon@example.is", "team@whitelotus.is", "admin")
    assert actor.is_admin
    assert actor.email == "team@whitelotus.is"


def test_contact_session_acts_as_customer():
    actor = resolve_actor("jon@example.is", "jon@example.is", "guest")
    assert actor.role is ActorRole.CUSTOMER


def test_other_session_is_forbidden():
    with pytest.raises(AuthorizationError):
        resolve_actor("jon@example.is", "anna@example.is", "host")


def test_link_access_acts_as_contact():
    actor = resolve_actor("jon@example.is")
    assert actor == Actor(role=ActorRole.CUSTOMER, email="jon@example.is")


# ==================== apply_field_action ====================


@pytest.mark.parametrize("field", ["foodMenu", "foodMenu.day1", "foodMenu.day1.starter"])
def test_customer_edit_marks_base_pending_at_any_depth(field):
    transition = apply_field_action({}, field, CUSTOMER, Edit("Lamb"))

    assert flags(transition.document, "foodMenu") == (True, False, "pending")
    assert transition.approval.status is ApprovalStatus.PENDING
    assert transition.base_field == "foodMenu"


@pytest.mark.parametrize("previous", [42, {"day1": "Lamb"}, ["a", "b"], "nuts"])
def test_admin_reject_clears_any_value_type(previous):
    document = {"foodMenu": previous, "foodMenu_pending_approval": True}
    transition = apply_field_action(document, "foodMenu", ADMIN, Reject())

    assert transition.document["foodMenu"] == ""
    assert flags(transition.document, "foodMenu") == (False, False, "rejected")


def test_admin_approve_keeps_pending_value():
    document = {"foodAllergies": "nuts", "foodAllergies_pending_approval": True}
    transition = apply_field_action(document, "foodAllergies", ADMIN, Approve(value="gluten"))

    assert transition.document["foodAllergies"] == "nuts"
    assert flags(transition.document, "foodAllergies") == (False, True, "approved")


def test_admin_approve_without_any_value_only_flips_flags():
    transition = apply_field_action({}, "foodAllergies", ADMIN, Approve())

    assert "foodAllergies" not in transition.document
    assert flags(transition.document, "foodAllergies") == (False, True, "approved")


def test_admin_approve_falls_back_to_supplied_value():
    transition = apply_field_action({}, "foodAllergies", ADMIN, Approve(value="nuts"))
    assert transition.document["foodAllergies"] == "nuts"


def test_admin_edit_is_approved_immediately():
    transition = apply_field_action({}, "guestCount", ADMIN, Edit(80))

    assert transition.document["guestCount"] == 80
    assert flags(transition.document, "guestCount") == (False, True, "approved")


def test_customer_flags_degrade_to_edit():
    transition = apply_field_action({}, "foodMenu", CUSTOMER, Approve(value="Lamb"))
    assert isinstance(transition.action, Edit)
    assert flags(transition.document, "foodMenu") == (True, False, "pending")

    with pytest.raises(ValidationError) as exc:
        apply_field_action({}, "foodMenu", CUSTOMER, Reject())
    assert exc.value.detail == "Value is required for updates"


def test_sibling_leaves_share_base_flags():
    document = {}
    document = apply_field_action(document, "foodMenu.day1", CUSTOMER, Edit("Lamb")).document
    document = apply_field_action(document, "foodMenu.day1", ADMIN, Approve()).document
    assert flags(document, "foodMenu") == (False, True, "approved")

    document = apply_field_action(document, "foodMenu.day2", CUSTOMER, Edit("Fiskur")).document

    assert document["foodMenu"] == {"day1": "Lamb", "day2": "Fiskur"}
    assert flags(document, "foodMenu") == (True, False, "pending")


def test_input_document_is_not_mutated():
    document = {"foodMenu": {"day1": "Lamb"}}
    apply_field_action(document, "foodMenu.day2", CUSTOMER, Edit("Fiskur"))
    assert document == {"foodMenu": {"day1": "Lamb"}}


def test_field_is_required():
    with pytest.raises(ValidationError) as exc:
        apply_field_action({}, "", ADMIN, Edit("x"))
    assert exc.value.detail == "Field is required"


def test_edit_without_value_is_rejected_by_state_machine():
    with pytest.raises(ValidationError):
        apply_field_action({}, "foodMenu", ADMIN, Edit(MISSING))


# ==================== read_approval ====================


def test_rejected_is_distinguishable_from_untouched():
    rejected = apply_field_action({"notes": "x"}, "notes", ADMIN, Reject()).document

    assert read_approval(rejected, "notes").status is ApprovalStatus.REJECTED
    assert read_approval({}, "notes").status is ApprovalStatus.UNTOUCHED


def test_read_approval_from_legacy_booleans():
    assert read_approval({"food_pending_approval": True}, "food").pending_approval
    assert read_approval({"food_approved": True}, "food").approved
    assert (
        read_approval({"food_pending_approval": False, "food_approved": False}, "food").status
        is ApprovalStatus.UNTOUCHED
    )


@pytest.mark.parametrize(
    "value,expected",
    [(None, False), ("", False), (False, False), (0, False), ("0", True), ([], True), ({}, True), (5, True)],
)
def test_has_value(value, expected):
    assert has_value(value) is expected


def test_transition_records_previous_status():
    pending = apply_field_action({}, "notes", CUSTOMER, Edit("x"))
    approved = apply_field_action(pending.document, "notes", ADMIN, Approve())

    assert pending.previous.status is ApprovalStatus.UNTOUCHED
    assert approved.previous.status is ApprovalStatus.PENDING
    assert approved.approval.status is ApprovalStatus.APPROVED


@pytest.mark.parametrize(
    "field",
    [
        "foodAllergies_approval_status",
        "foodAllergies_pending_approval",
        "foodAllergies_approved",
        "foodMenu_approved.day1",
    ],
)
@pytest.mark.parametrize("actor", [CUSTOMER, ADMIN])
def test_approval_markers_cannot_be_edited(field, actor):
    document = {"foodAllergies": "nuts", "foodAllergies_pending_approval": True}

    with pytest.raises(ValidationError) as exc:
        apply_field_action(document, field, actor, Edit("approved"))
    assert exc.value.detail == "Approval markers cannot be edited directly"


def test_field_without_marker_suffix_is_editable():
    transition = apply_field_action({}, "approvedBy", CUSTOMER, Edit("Anna"))
    assert transition.document["approvedBy"] == "Anna"
