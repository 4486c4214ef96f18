import uuid

import pytest

from taghra_shared.models import PointsAction
from taghra_api.errors import InvalidArgumentError, NotFoundError
from taghra_api.services.points_ledger import PointsLedger, points_for

from factories import make_user


def test_points_table():
    assert points_for(PointsAction.ADD_PLACE) == 10
    assert points_for(PointsAction.REVIEW_WITH_PHOTO) == 5
    assert points_for(PointsAction.REVIEW) == 3
    assert points_for("referral") == 20


async def test_unknown_user_has_no_points(db):
    assert await PointsLedger(db).current_points(uuid.uuid4()) == 0


async def test_award_adds_points_and_history(seed, db):
    user = make_user(points=45)
    await seed(user)
    ledger = PointsLedger(db)

    total = await ledger.award(user.id, 5, PointsAction.REVIEW_WITH_PHOTO, description="Review: Café")
    assert total == 50
    assert await ledger.current_points(user.id) == 50

    entries = await ledger.history(user.id)
    assert [(e.points, e.action, e.description) for e in entries] == [
        (5, "review_with_photo", "Review: Café")
    ]


@pytest.mark.parametrize("amount", [0, -3, 2.5, True])
async def test_award_rejects_non_positive_amounts(seed, db, amount):
    user = make_user()
    await seed(user)
    with pytest.raises(InvalidArgumentError):
        await PointsLedger(db).award(user.id, amount, PointsAction.REVIEW)


async def test_award_to_unknown_user(db):
    with pytest.raises(NotFoundError):
        await PointsLedger(db).award(uuid.uuid4(), 3, PointsAction.REVIEW)


async def test_leaderboard_competition_ranking(seed, db):
    await seed(
        make_user(points=120, full_name="Amina"),
        make_user(points=80, full_name="Youssef"),
        make_user(points=80, full_name="Salma"),
        make_user(points=10, full_name="Karim"),
        make_user(points=0, full_name="Newcomer"),
        make_user(points=500, full_name="Blocked", is_active=False),
    )
    board = await PointsLedger(db).leaderboard(10)

    assert [e["rank"] for e in board] == [1, 2, 2, 4]
    assert board[0]["name"] == "Amina"
    assert board[-1]["name"] == "Karim"
    assert {e["name"] for e in board[1:3]} == {"Youssef", "Salma"}


async def test_leaderboard_cached_until_next_award(seed, db, fake_cache):
    leader, runner_up = make_user(points=30, full_name="Leader"), make_user(points=20, full_name="Runner")
    await seed(leader, runner_up)
    ledger = PointsLedger(db, cache=fake_cache)

    first = await ledger.leaderboard(5)
    assert "leaderboard:5" in fake_cache.store
    assert await ledger.leaderboard(5) is first

    await ledger.award(runner_up.id, 20, PointsAction.REFERRAL)
    assert fake_cache.store == {}

    board = await ledger.leaderboard(5)
    assert [e["name"] for e in board] == ["Runner", "Leader"]
