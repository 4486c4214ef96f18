from taghra_shared.models import UserRole

from factories import CASABLANCA, make_place, make_user, minutes_after_base


def as_user(user):
    return {"X-User-Id": str(user.id)}


async def submit(client, user, name):
    response = await client.post(
        "/api/places",
        headers=as_user(user),
        json={
            "name": name, "category": "food", "address": "Maarif",
            "latitude": CASABLANCA[0], "longitude": CASABLANCA[1],
        },
    )
    assert response.status_code == 201
    return response.json()["data"]["id"]


async def test_submission_lifecycle(client, seed):
    ambassador = make_user(role=UserRole.SUB)
    admin = make_user(role=UserRole.ADMIN)
    await seed(ambassador, admin)

    kept = await submit(client, ambassador, "Snack Zaki")
    refused = await submit(client, ambassador, "Snack Zaki bis")
    waiting = await submit(client, ambassador, "Chez Said")

    await client.post(f"/api/places/{kept}/verify", headers=as_user(admin))
    await client.post(
        f"/api/places/{refused}/reject", headers=as_user(admin), json={"reason": "Duplicate"}
    )

    response = await client.get("/api/subs/my-submissions", headers=as_user(ambassador))
    assert response.status_code == 200
    by_id = {s["id"]: s for s in response.json()["data"]}
    assert set(by_id) == {kept, refused, waiting}
    assert by_id[kept]["status"] == "approved"
    assert by_id[refused]["status"] == "rejected"
    assert by_id[refused]["rejectionReason"] == "Duplicate"
    assert by_id[waiting]["status"] == "pending"
    assert by_id[waiting]["reviewedAt"] is None

    response = await client.get(
        "/api/subs/my-submissions", params={"status": "rejected"}, headers=as_user(ambassador)
    )
    assert [s["id"] for s in response.json()["data"]] == [refused]

    response = await client.get("/api/subs/earnings", headers=as_user(ambassador))
    assert response.json()["data"] == {
        "approvedCount": 1,
        "pendingCount": 1,
        "rejectedCount": 1,
        "totalPointsEarned": 10,
    }


async def test_submissions_are_private_and_newest_first(client, seed):
    owner, other = make_user(), make_user()
    await seed(owner, other)
    await seed(
        make_place(name="First", is_verified=False, submitted_by=owner.id, created_at=minutes_after_base(1)),
        make_place(name="Second", is_verified=False, submitted_by=owner.id, created_at=minutes_after_base(2)),
        make_place(name="Not mine", is_verified=False, submitted_by=other.id),
    )

    response = await client.get("/api/subs/my-submissions", headers=as_user(owner))
    assert [s["name"] for s in response.json()["data"]] == ["Second", "First"]


async def test_earnings_without_submissions(client, seed):
    user = make_user()
    await seed(user)

    response = await client.get("/api/subs/earnings", headers=as_user(user))
    assert response.json() == {
        "success": True,
        "data": {"approvedCount": 0, "pendingCount": 0, "rejectedCount": 0, "totalPointsEarned": 0},
        "message": None,
    }


async def test_submission_endpoints_require_identity(client):
    for path in ("/api/subs/my-submissions", "/api/subs/earnings"):
        response = await client.get(path)
        assert response.status_code == 401


async def test_unknown_status_filter_is_rejected(client, seed):
    user = make_user()
    await seed(user)
    response = await client.get(
        "/api/subs/my-submissions", params={"status": "archived"}, headers=as_user(user)
    )
    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "status"
