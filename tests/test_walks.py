import pytest

from walk_buddy.errors import NotFoundError, ProviderError, ValidationError
from walk_buddy.routing.providers import SeedRouteProvider
from walk_buddy.routing.service import RouteCache
from walk_buddy.walks.models import WalkRequest
from walk_buddy.walks.services import (
    complete_walk_request,
    create_walk_request,
    get_pending_walk_requests,
    join_walk_request,
    update_buddy_position,
    walk_to_dict,
)

pytestmark = pytest.mark.django_db


class FailingProvider:
    is_external = True

    def fetch(self, start, end):
        raise ProviderError("OSRM request timed out after 10 seconds")


class TestCreateWalkRequest:

    def test_uses_stored_route(self, campus, user):
        walk = create_walk_request(user.id, "Central Library", "Science Hall")

        assert walk.status == "pending"
        assert walk.route == campus["route"]
        assert walk.eta == "4 minutes"
        assert walk.buddy_position == [32.729913, -97.112907]

    def test_rejects_identical_locations(self, campus, user):
        with pytest.raises(ValidationError) as exc:
            create_walk_request(user.id, "Central Library", "Central Library")
        assert str(exc.value) == "Start and destination locations must be different."

    def test_rejects_unknown_location(self, campus, user):
        with pytest.raises(ValidationError, match="Unable to find start or destination location."):
            create_walk_request(user.id, "Central Library", "Moon Base")

    @pytest.mark.parametrize(
        "args",
        [(None, "Central Library", "Science Hall"), (1, "", "Science Hall"), (1, "Central Library", None)],
    )
    def test_required_fields(self, campus, args):
        with pytest.raises(ValidationError, match="userId, startLocation, and destination are required."):
            create_walk_request(*args)

    def test_unknown_user(self, campus):
        with pytest.raises(ValidationError, match="userId"):
            create_walk_request(4242, "Central Library", "Science Hall")

    def test_without_route_falls_back_to_default_eta(self, campus, user):
        walk = create_walk_request(
            user.id, "Science Hall", "Nedderman Hall", route_cache=RouteCache(SeedRouteProvider())
        )

        assert walk.route is None
        assert walk.eta == "7 minutes"

    def test_provider_failure_still_creates_walk(self, campus, user):
        cache = RouteCache(FailingProvider(), cache_mode="on_demand")

        walk = create_walk_request(user.id, "Science Hall", "Nedderman Hall", route_cache=cache)

        assert walk.pk is not None
        assert walk.route is None

    def test_dict_shape(self, campus, user):
        data = walk_to_dict(create_walk_request(user.id, "Central Library", "Science Hall"))

        assert data["startLocation"] == "Central Library"
        assert data["destination"] == "Science Hall"
        assert data["route"]["endCoords"] == [32.73047, -97.112021]
        assert len(data["route"]["pathCoordinates"]) == 3
        assert data["route"]["buddyCurrentCoords"] == [32.729913, -97.112907]


class TestWalkLifecycle:

    @pytest.fixture
    def walk(self, campus, user):
        return create_walk_request(user.id, "Central Library", "Science Hall")

    def test_pending_list(self, walk):
        assert list(get_pending_walk_requests()) == [walk]

    def test_join_activates_walk(self, walk, buddy):
        joined = join_walk_request(walk.id, buddy.id)

        assert joined.status == "active"
        assert joined.buddy == buddy
        assert list(get_pending_walk_requests()) == []

    def test_second_join_is_refused(self, walk, buddy, user):
        join_walk_request(walk.id, buddy.id)

        with pytest.raises(ValidationError, match="This walk is no longer available."):
            join_walk_request(walk.id, user.id)

        assert WalkRequest.objects.get(pk=walk.pk).buddy == buddy

    def test_join_unknown_walk(self, walk, buddy):
        with pytest.raises(NotFoundError):
            join_walk_request(9999, buddy.id)

    def test_update_position(self, walk):
        updated = update_buddy_position(walk.id, "32.7301", -97.1125)

        assert updated.buddy_position == [32.7301, -97.1125]

    @pytest.mark.parametrize("lat,lng", [("north", 0), (91, 0), (0, -181)])
    def test_bad_position(self, walk, lat, lng):
        with pytest.raises(ValidationError):
            update_buddy_position(walk.id, lat, lng)

    def test_complete(self, walk):
        assert complete_walk_request(walk.id).status == "completed"
