import asyncio

import pytest

from taghra_api.errors import DependencyError, DependencyTimeoutError, FieldValidationError
from taghra_api.services.geo import haversine_meters
from taghra_api.services.nearby import NearbyPlacesService, SearchQuery, effective_radius
from taghra_api.services.places_repository import PlaceRepository, place_coordinate
from taghra_api.services.radius_policy import allowed_radius

from factories import CASABLANCA, make_place, minutes_after_base


class FakeRepository(PlaceRepository):
    """In-memory places; `exact=False` also returns rows past the radius"""

    def __init__(self, places=(), exact=True, delay=0.0, error=None):
        self.places = list(places)
        self.exact = exact
        self.delay = delay
        self.error = error
        self.calls = []

    async def find_near(self, origin, radius_meters, filters):
        self.calls.append((origin, radius_meters, filters))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        found = []
        for p in self.places:
            if filters.category is not None and p.category != filters.category.value:
                continue
            if filters.is_open is not None and p.is_open != filters.is_open:
                continue
            if self.exact and haversine_meters(origin, place_coordinate(p)) > radius_meters:
                continue
            found.append(p)
        # Reverse to make sure ordering comes from the service
        return list(reversed(found))

    async def get(self, place_id, include_unverified=False):
        return next((p for p in self.places if p.id == place_id), None)

    async def search(self, text, category=None):
        return []

    async def add(self, place):
        self.places.append(place)
        return place

    async def save(self, place):
        return place

    async def submissions(self, user_id, status=None):
        return [p for p in self.places if p.submitted_by == user_id]

    async def submission_counts(self, user_id):
        return {}


def query(**kwargs):
    fields = dict(latitude=CASABLANCA[0], longitude=CASABLANCA[1])
    fields.update(kwargs)
    return SearchQuery(**fields)


async def test_anonymous_radius_clamped_to_first_tier():
    repo = FakeRepository([
        make_place(300, name="Near food"),
        make_place(100, name="Nearest food"),
        make_place(200, name="Clinic", category="health"),
        make_place(800, name="Far food"),
    ])
    page = await NearbyPlacesService(repo).query_nearby(query(radius=1000, category="food"), 0)

    assert page.effective_radius == 500
    assert repo.calls[0][1] == 500
    assert [r.place.name for r in page.items] == ["Nearest food", "Near food"]
    assert all(r.distance <= 500 for r in page.items)
    assert page.total == 2


async def test_unlimited_tier_keeps_requested_radius():
    repo = FakeRepository([make_place(15_000, name="Outskirts")])
    page = await NearbyPlacesService(repo).query_nearby(query(radius=20_000), 1000)

    assert page.effective_radius == 20_000
    assert [r.place.name for r in page.items] == ["Outskirts"]


async def test_smaller_request_than_unlocked_is_kept():
    repo = FakeRepository()
    page = await NearbyPlacesService(repo).query_nearby(query(radius=200), 600)
    assert page.effective_radius == 200


async def test_invalid_latitude_never_reaches_repository():
    repo = FakeRepository([make_place(10)])
    with pytest.raises(FieldValidationError) as excinfo:
        await NearbyPlacesService(repo).query_nearby(query(latitude=95), 0)
    assert excinfo.value.field == "lat"
    assert repo.calls == []


async def test_equal_distance_prefers_higher_rating():
    repo = FakeRepository([
        make_place(200, name="Good", rating=4.5),
        make_place(200, name="Better", rating=4.8),
    ])
    page = await NearbyPlacesService(repo).query_nearby(query(), 0)
    assert [r.place.name for r in page.items] == ["Better", "Good"]


async def test_equal_distance_and_rating_fall_back_to_creation_order():
    repo = FakeRepository([
        make_place(200, name="Second", rating=4.0, created_at=minutes_after_base(5)),
        make_place(200, name="First", rating=4.0, created_at=minutes_after_base(1)),
        make_place(200, name="Third", rating=4.0, created_at=minutes_after_base(9)),
    ])
    page = await NearbyPlacesService(repo).query_nearby(query(), 0)
    assert [r.place.name for r in page.items] == ["First", "Second", "Third"]


async def test_empty_result_is_an_empty_page():
    page = await NearbyPlacesService(FakeRepository()).query_nearby(query(), 0)
    assert page.items == []
    assert (page.total, page.limit, page.offset) == (0, 20, 0)


async def test_negative_points_is_a_validation_error():
    repo = FakeRepository()
    with pytest.raises(FieldValidationError) as excinfo:
        await NearbyPlacesService(repo).query_nearby(query(), -5)
    assert excinfo.value.field == "points"
    assert repo.calls == []


async def test_pagination_keeps_full_total():
    places = [make_place(i * 10, name=f"P{i:02d}") for i in range(1, 31)]
    service = NearbyPlacesService(FakeRepository(places))

    first = await service.query_nearby(query(limit=10, offset=0), 0)
    second = await service.query_nearby(query(limit=10, offset=10), 0)
    past_end = await service.query_nearby(query(limit=10, offset=100), 0)

    assert first.total == second.total == past_end.total == 30
    assert [r.place.name for r in first.items] == [f"P{i:02d}" for i in range(1, 11)]
    assert [r.place.name for r in second.items] == [f"P{i:02d}" for i in range(11, 21)]
    assert past_end.items == []


async def test_repeated_queries_order_identically():
    places = [make_place(100 * (i % 3), rating=float(i % 2), name=f"P{i}") for i in range(12)]
    service = NearbyPlacesService(FakeRepository(places))

    runs = [await service.query_nearby(query(), 0) for _ in range(3)]
    orders = [[r.place.id for r in run.items] for run in runs]
    assert orders[0] == orders[1] == orders[2]


async def test_results_past_radius_are_dropped():
    repo = FakeRepository([make_place(100), make_place(499), make_place(501), make_place(3000)], exact=False)
    page = await NearbyPlacesService(repo).query_nearby(query(), 0)

    assert page.total == 2
    assert all(r.distance <= page.effective_radius for r in page.items)


async def test_open_filter_is_tri_state():
    repo = FakeRepository([make_place(100, name="Open"), make_place(120, name="Closed", is_open=False)])
    service = NearbyPlacesService(repo)

    only_open = await service.query_nearby(query(is_open=True), 0)
    only_closed = await service.query_nearby(query(is_open=False), 0)
    either = await service.query_nearby(query(), 0)

    assert [r.place.name for r in only_open.items] == ["Open"]
    assert [r.place.name for r in only_closed.items] == ["Closed"]
    assert [r.place.name for r in either.items] == ["Open", "Closed"]


async def test_slow_repository_times_out():
    service = NearbyPlacesService(FakeRepository(delay=1.0), timeout=0.01)
    with pytest.raises(DependencyTimeoutError):
        await service.query_nearby(query(), 0)


async def test_repository_failure_propagates():
    service = NearbyPlacesService(FakeRepository(error=DependencyError()))
    with pytest.raises(DependencyError):
        await service.query_nearby(query(), 0)


@pytest.mark.parametrize("field,kwargs", [
    ("lat", {"latitude": -90.5}),
    ("lat", {"latitude": float("nan")}),
    ("lng", {"longitude": 180.01}),
    ("radius", {"radius": 99}),
    ("radius", {"radius": 50_001}),
    ("category", {"category": "shops"}),
    ("limit", {"limit": 0}),
    ("limit", {"limit": 101}),
    ("offset", {"offset": -1}),
])
def test_validation_names_the_field(field, kwargs):
    with pytest.raises(FieldValidationError) as excinfo:
        query(**kwargs).validate()
    assert excinfo.value.field == field
    assert excinfo.value.details == [{"field": field, "message": excinfo.value.message}]


@pytest.mark.parametrize("kwargs", [
    {"latitude": 90, "longitude": -180},
    {"radius": 100},
    {"radius": 50_000},
    {"limit": 100, "offset": 0},
    {"category": "vet", "is_open": False},
])
def test_boundary_values_are_valid(kwargs):
    query(**kwargs).validate()


@pytest.mark.parametrize("points", [0, 49, 50, 151, 700, 1000, 5000])
@pytest.mark.parametrize("requested", [100, 750, 1500, 4000, 50_000])
def test_clamp_never_exceeds_unlock(requested, points):
    radius = effective_radius(requested, points)
    assert radius <= allowed_radius(points)
    assert radius <= requested
