"""Cat Lifecycle — adoption, soft delete, restore and listing rules.

Invariants:
    - Adoption checks run in order: cat exists → stray → user exists
    - A refused operation writes nothing
    - Soft delete stamps deleted_at and clears the owner together
"""

import logging

import pytest

from cattery.core.errors import ErrorKind, PersistenceCode, PersistenceError
from cattery.core.outcome import Failure, Success


# ---- adopt_cat ----

async def test_adopt_stray_cat_sets_owner(cat_engine, make_user, make_cat, fetch_cat):
    user = await make_user(name="Ann")
    cat = await make_cat(name="Ginger")

    outcome = await cat_engine.adopt_cat(cat.id, user.id)

    assert isinstance(outcome, Success)
    assert outcome.value.owner_id == user.id
    assert outcome.value.owner.name == "Ann"
    assert (await fetch_cat(cat.id)).owner_id == user.id


async def test_adopt_missing_cat_is_not_found(cat_engine, make_user):
    user = await make_user()
    outcome = await cat_engine.adopt_cat(999, user.id)
    assert isinstance(outcome, Failure)
    assert outcome.kind is ErrorKind.NOT_FOUND
    assert outcome.message == "Cat with ID 999 does not exist"


async def test_adopt_owned_cat_is_conflict_naming_owner(
    cat_engine, make_user, make_cat, fetch_cat,
):
    ann = await make_user(name="Ann")
    bob = await make_user(name="Bob")
    cat = await make_cat(name="Ginger", owner_id=ann.id)

    outcome = await cat_engine.adopt_cat(cat.id, bob.id)

    assert outcome.kind is ErrorKind.CONFLICT
    assert outcome.message == "Cat Ginger has already been adopted, current owner: Ann"
    assert (await fetch_cat(cat.id)).owner_id == ann.id


async def test_cat_check_runs_before_user_check(cat_engine, make_user, make_cat):
    ann = await make_user(name="Ann")
    cat = await make_cat(owner_id=ann.id)

    outcome = await cat_engine.adopt_cat(cat.id, 999)

    assert outcome.kind is ErrorKind.CONFLICT


async def test_adopt_by_missing_user_is_not_found(cat_engine, make_cat, fetch_cat):
    cat = await make_cat()

    outcome = await cat_engine.adopt_cat(cat.id, 999)

    assert outcome.kind is ErrorKind.NOT_FOUND
    assert outcome.message == "User with ID 999 does not exist"
    assert (await fetch_cat(cat.id)).owner_id is None


async def test_adopt_soft_deleted_cat_is_not_found(cat_engine, make_user, make_cat):
    user = await make_user()
    cat = await make_cat(deleted=True)

    outcome = await cat_engine.adopt_cat(cat.id, user.id)

    assert outcome.kind is ErrorKind.NOT_FOUND


async def test_second_adoption_of_same_cat_conflicts(cat_engine, make_user, make_cat):
    ann = await make_user(name="Ann")
    bob = await make_user(name="Bob")
    cat = await make_cat()

    first = await cat_engine.adopt_cat(cat.id, ann.id)
    second = await cat_engine.adopt_cat(cat.id, bob.id)

    assert first.ok
    assert second.kind is ErrorKind.CONFLICT


# ---- delete_cat / restore_cat ----

async def test_delete_cat_stamps_deleted_at_and_clears_owner(
    cat_engine, make_user, make_cat, fetch_cat,
):
    user = await make_user()
    cat = await make_cat(name="Ginger", owner_id=user.id)

    outcome = await cat_engine.delete_cat(cat.id, reason="moved away")

    assert outcome.value.message == "Cat Ginger was deleted successfully"
    assert outcome.value.cat.is_deleted
    assert outcome.value.cat.is_stray
    stored = await fetch_cat(cat.id)
    assert stored.deleted_at is not None
    assert stored.owner_id is None


async def test_delete_cat_twice_conflicts(cat_engine, make_cat):
    cat = await make_cat(name="Ginger")
    await cat_engine.delete_cat(cat.id)

    outcome = await cat_engine.delete_cat(cat.id)

    assert outcome.kind is ErrorKind.CONFLICT
    assert outcome.message == "Cat Ginger has already been deleted"


async def test_delete_missing_cat_is_not_found(cat_engine):
    outcome = await cat_engine.delete_cat(42)
    assert outcome.kind is ErrorKind.NOT_FOUND


async def test_restore_cat_brings_it_back_as_stray(cat_engine, make_cat, fetch_cat):
    cat = await make_cat(name="Ginger", deleted=True)

    outcome = await cat_engine.restore_cat(cat.id)

    assert outcome.value.message == "Cat Ginger was restored successfully"
    assert (await fetch_cat(cat.id)).deleted_at is None
    available = (await cat_engine.get_available_cats()).unwrap()
    assert [c.id for c in available] == [cat.id]


async def test_restore_active_cat_conflicts(cat_engine, make_cat):
    cat = await make_cat(name="Ginger")
    outcome = await cat_engine.restore_cat(cat.id)
    assert outcome.kind is ErrorKind.CONFLICT
    assert outcome.message == "Cat Ginger is not deleted"


# ---- queries ----

async def test_get_detail_includes_owner(cat_engine, make_user, make_cat):
    user = await make_user(name="Ann", email="ann@example.com")
    cat = await make_cat(owner_id=user.id)

    record = (await cat_engine.get_detail(cat.id)).unwrap()

    assert record.owner.email == "ann@example.com"


async def test_get_detail_hides_soft_deleted_cat(cat_engine, make_cat):
    cat = await make_cat(deleted=True)
    outcome = await cat_engine.get_detail(cat.id)
    assert outcome.kind is ErrorKind.NOT_FOUND


async def test_available_cats_are_active_strays_in_id_order(
    cat_engine, make_user, make_cat,
):
    user = await make_user()
    first = await make_cat(name="A")
    await make_cat(name="B", owner_id=user.id)
    await make_cat(name="C", deleted=True)
    last = await make_cat(name="D")

    available = (await cat_engine.get_available_cats()).unwrap()

    assert [c.id for c in available] == [first.id, last.id]


async def test_deleted_cats_listed_most_recent_first(cat_engine, make_cat):
    older = await make_cat(name="A")
    newer = await make_cat(name="B")
    await cat_engine.delete_cat(older.id)
    await cat_engine.delete_cat(newer.id)

    deleted = (await cat_engine.get_deleted_cats()).unwrap()

    assert [c.id for c in deleted] == [newer.id, older.id]


async def test_cats_by_owner_excludes_soft_deleted(cat_engine, make_user, make_cat):
    user = await make_user()
    kept = await make_cat(name="A", owner_id=user.id)
    await make_cat(name="B", owner_id=user.id, deleted=True)

    cats = (await cat_engine.get_cats_by_owner(user.id)).unwrap()

    assert [c.id for c in cats] == [kept.id]


async def test_cats_by_missing_owner_is_not_found(cat_engine):
    outcome = await cat_engine.get_cats_by_owner(5)
    assert outcome.kind is ErrorKind.NOT_FOUND


async def test_count_active_cats_skips_soft_deleted(cat_engine, make_cat):
    await make_cat(name="A")
    await make_cat(name="B")
    await make_cat(name="C", deleted=True)
    assert (await cat_engine.count_active_cats()).unwrap() == 2


# ---- insert_cat ----

async def test_insert_stray_cat(cat_engine):
    record = (await cat_engine.insert_cat("Tom", 3)).unwrap()
    assert record.id is not None
    assert record.is_stray
    assert not record.is_deleted


async def test_insert_cat_with_missing_owner_is_not_found(cat_engine):
    outcome = await cat_engine.insert_cat("Tom", 3, owner_id=77)
    assert outcome.kind is ErrorKind.NOT_FOUND
    assert outcome.message == "Owner 77 does not exist"
    assert (await cat_engine.count_active_cats()).unwrap() == 0


# ---- whole scenario ----

async def test_ginger_lifecycle(cat_engine, make_user, make_cat):
    """Adopt, fail to re-adopt, soft delete, and vanish from listings."""
    ann = await make_user(name="Ann")
    bob = await make_user(name="Bob")
    ginger = await make_cat(name="Ginger")

    assert (await cat_engine.adopt_cat(ginger.id, ann.id)).ok
    assert (await cat_engine.adopt_cat(ginger.id, ann.id)).kind is ErrorKind.CONFLICT
    assert (await cat_engine.adopt_cat(ginger.id, bob.id)).kind is ErrorKind.CONFLICT
    assert (await cat_engine.delete_cat(ginger.id)).ok

    assert (await cat_engine.get_available_cats()).unwrap() == []
    assert (await cat_engine.get_cats_by_owner(ann.id)).unwrap() == []
    deleted = (await cat_engine.get_deleted_cats()).unwrap()
    assert [c.name for c in deleted] == ["Ginger"]
    assert (await cat_engine.get_detail(ginger.id)).kind is ErrorKind.NOT_FOUND


async def test_unclassified_persistence_error_is_logged_and_reraised(cat_engine, caplog):
    with caplog.at_level(logging.ERROR, logger="cattery.services.transactional"):
        with pytest.raises(PersistenceError) as info:
            await cat_engine.insert_cat(None, 2)

    assert info.value.persistence_code is PersistenceCode.INTEGRITY_VIOLATION
    logged = [r for r in caplog.records if r.name == "cattery.services.transactional"]
    assert len(logged) == 1
    assert logged[0].levelno == logging.ERROR
    assert logged[0].operation == "insert_cat"
    assert logged[0].error_code == "integrity_violation"


async def test_timestamps_are_utc_aware_after_reload(cat_engine, make_cat):
    cat = await make_cat(name="Ginger")
    await cat_engine.delete_cat(cat.id)

    record = (await cat_engine.get_deleted_cats()).unwrap()[0]

    assert record.deleted_at.tzinfo is not None
    assert record.created_at.utcoffset().total_seconds() == 0
