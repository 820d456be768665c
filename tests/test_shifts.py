import pytest

from conftest import days_ago
from models.shift import Shift
from services import accounts
from services import shifts as shift_service


@pytest.fixture()
def user_shifts(db, user, shift_type, shift_start):
    accounts.toggle(db, user, "primary")
    secondary = shift_service.create_shift(db, shift_type, days_ago(shift_start, 5), secondary=user)
    primary = shift_service.create_shift(db, shift_type, days_ago(shift_start, 4), primary=user)
    neither = shift_service.create_shift(db, shift_type, days_ago(shift_start, 3))
    return secondary, primary, neither


def test_user_has_shifts_attribute(user):
    assert hasattr(user, "shifts")


def test_shifts_contain_secondary_and_primary_but_not_others(db, user, user_shifts):
    secondary, primary, neither = user_shifts

    shifts = shift_service.shifts_for_user(db, user)
    assert secondary in shifts
    assert primary in shifts
    assert neither not in shifts


def test_shifts_property_matches_query(db, user, user_shifts):
    secondary, primary, _ = user_shifts
    assert user.shifts == [secondary, primary]


def test_shift_held_in_both_slots_is_listed_once(db, user, shift_type, shift_start):
    both = shift_service.create_shift(db, shift_type, shift_start, primary=user, secondary=user)
    assert shift_service.shifts_for_user(db, user) == [both]


def test_assign_and_release(db, user, shift_type, shift_start):
    shift = shift_service.create_shift(db, shift_type, shift_start)
    assert shift_service.shifts_for_user(db, user) == []

    shift_service.assign(db, shift, "secondary", user)
    assert shift.secondary_id == user.id
    assert shift_service.shifts_for_user(db, user) == [shift]

    shift_service.assign(db, shift, "secondary", None)
    assert shift.secondary_id is None
    assert shift_service.shifts_for_user(db, user) == []


def test_assign_unknown_slot(db, user, shift_type, shift_start):
    shift = shift_service.create_shift(db, shift_type, shift_start)
    with pytest.raises(ValueError):
        shift_service.assign(db, shift, "tertiary", user)


def test_list_shifts_in_range(db, user_shifts, shift_start):
    secondary, primary, neither = user_shifts
    assert shift_service.list_shifts(db) == [secondary, primary, neither]
    assert shift_service.list_shifts(db, date_from=days_ago(shift_start, 4).replace(tzinfo=None)) == [primary, neither]


def test_deleting_user_releases_shift_slots(db, user, user_shifts):
    secondary, primary, _ = user_shifts
    accounts.delete_user(db, user)

    db.expire_all()
    assert db.query(Shift).count() == 3
    assert db.get(Shift, secondary.id).secondary_id is None
    assert db.get(Shift, primary.id).primary_id is None
