from unittest.mock import patch

import pytest
import requests
from django.db import IntegrityError, transaction

from walk_buddy.errors import ProviderError, ValidationError
from walk_buddy.routing.models import Route, RouteCoordinate, RouteStep
from walk_buddy.routing.polyline import LatLng
from walk_buddy.routing.providers import FetchedRoute, OSRMRouteProvider, SeedRouteProvider
from walk_buddy.routing.queries import hydrate_route, replace_route_coordinates, replace_route_steps, upsert_route
from walk_buddy.routing.service import LookupStatus, RouteCache

from .helpers import FakeResponse, osrm_payload

pytestmark = pytest.mark.django_db


class CountingProvider:
    is_external = True

    def __init__(self, result=None, error=None):
        self.calls = []
        self.result = result
        self.error = error

    def fetch(self, start, end):
        self.calls.append((start.name, end.name))
        if self.error:
            raise self.error
        return self.result


def fetched_route():
    return FetchedRoute(
        coordinates=[LatLng(32.7297, -97.1106), LatLng(32.7333, -97.1133)],
        steps=["Depart straight onto Test Walkway.", "Arrive."],
        eta_seconds=420,
        distance_meters=980,
    )


class TestLookup:

    def test_found(self, campus):
        result = RouteCache(SeedRouteProvider()).lookup("Central Library", "Science Hall")

        assert result.status is LookupStatus.FOUND
        assert result.route == campus["route"]

    def test_missing(self, campus):
        result = RouteCache(SeedRouteProvider()).lookup("Science Hall", "Central Library")

        assert not result.found
        assert result.start.name == "Science Hall"

    def test_identical_names(self, campus):
        with pytest.raises(ValidationError, match="must be different"):
            RouteCache(SeedRouteProvider()).lookup("Central Library", "Central Library")

    def test_unknown_location(self, campus):
        with pytest.raises(ValidationError, match="Unable to find start or destination location."):
            RouteCache(SeedRouteProvider()).lookup("Central Library", "Moon Base")

    def test_blank_names(self, campus):
        with pytest.raises(ValidationError):
            RouteCache(SeedRouteProvider()).lookup("  ", "Science Hall")


class TestResolve:

    def test_stored_route_is_hydrated_in_order(self, campus):
        route = RouteCache(SeedRouteProvider()).resolve("Central Library", "Science Hall")

        assert route.eta == "4 minutes"
        assert route.start_coordinates == [32.729913, -97.112907]
        assert route.path_coordinates[0] == [32.729913, -97.112907]
        assert route.path_coordinates[-1] == [32.73047, -97.112021]
        assert route.steps[0].startswith("Walk east")
        assert route.as_dict()["destination"] == "Science Hall"

    def test_missing_route_without_external_provider(self, campus):
        assert RouteCache(SeedRouteProvider(), cache_mode="on_demand").resolve("Science Hall", "Nedderman Hall") is None

    def test_precompute_mode_never_fetches(self, campus):
        provider = CountingProvider(fetched_route())

        assert RouteCache(provider, cache_mode="precompute").resolve("Science Hall", "Nedderman Hall") is None
        assert provider.calls == []

    def test_on_demand_fetches_once_then_serves_from_storage(self, campus):
        provider = CountingProvider(fetched_route())
        cache = RouteCache(provider, cache_mode="on_demand")

        first = cache.resolve("Science Hall", "Nedderman Hall")
        second = cache.resolve("Science Hall", "Nedderman Hall")

        assert provider.calls == [("Science Hall", "Nedderman Hall")]
        assert first == second
        assert first.eta == "7 minutes"
        assert first.eta_seconds == 420
        assert first.distance_meters == 980
        assert first.summary == (
            "OSRM walking route from Science Hall to Nedderman Hall. Distance: 980 m. ETA: 7 minutes."
        )
        assert first.path_coordinates == [[32.7297, -97.1106], [32.7333, -97.1133]]
        assert Route.objects.filter(start_location__name="Science Hall", end_location__name="Nedderman Hall").count() == 1

    def test_one_osrm_request_across_two_resolves(self, campus):
        points = [LatLng(32.7297, -97.1106), LatLng(32.7333, -97.1133)]
        payload = osrm_payload(points, duration=420, distance=980)
        cache = RouteCache(OSRMRouteProvider("http://osrm.test"), cache_mode="on_demand")

        with patch.object(requests.Session, "get", return_value=FakeResponse(payload)) as get:
            first = cache.resolve("Maverick Activities Center", "Nedderman Hall")
            second = cache.resolve("Maverick Activities Center", "Nedderman Hall")

        assert get.call_count == 1
        assert len(first.path_coordinates) == 2
        assert second.steps == ["Depart straight onto Library Mall.", "Arrive."]

    def test_provider_failure_is_propagated_and_nothing_is_stored(self, campus):
        cache = RouteCache(CountingProvider(error=ProviderError("OSRM request failed")), cache_mode="on_demand")

        with pytest.raises(ProviderError):
            cache.resolve("Science Hall", "Nedderman Hall")

        assert not Route.objects.filter(start_location__name="Science Hall").exists()


class TestPersistence:

    def test_upsert_updates_existing_route_in_place(self, campus):
        route = upsert_route(campus["Central Library"], campus["Science Hall"], eta="5 minutes", summary="Updated")

        assert route.pk == campus["route"].pk
        route.refresh_from_db()
        assert route.eta == "5 minutes"
        assert Route.objects.count() == 1

    def test_upsert_falls_back_to_update_when_insert_races(self, campus):
        start, end = campus["Science Hall"], campus["Nedderman Hall"]
        winner = Route.objects.create(start_location=start, end_location=end, eta="1 minute")

        # the lookup misses, as it would for a writer that lost the race
        with patch("walk_buddy.routing.queries.find_route_by_location_ids", return_value=None):
            route = upsert_route(start, end, eta="3 minutes", eta_seconds=180)

        assert route.pk == winner.pk
        winner.refresh_from_db()
        assert winner.eta == "3 minutes"
        assert winner.eta_seconds == 180

    def test_unique_pair_is_enforced(self, campus):
        with pytest.raises(IntegrityError), transaction.atomic():
            Route.objects.create(start_location=campus["Central Library"], end_location=campus["Science Hall"])

    def test_replacing_with_fewer_rows_trims_the_tail(self, campus):
        route = campus["route"]

        replace_route_coordinates(route, [{"lat": 1.0, "lng": 2.0}, LatLng(3.0, 4.0)])
        replace_route_steps(route, ["Only step."])

        assert list(RouteCoordinate.objects.filter(route=route).values_list("point_index", flat=True)) == [0, 1]
        assert list(RouteStep.objects.filter(route=route).values_list("step_number", "instruction")) == [
            (1, "Only step.")
        ]
        assert hydrate_route(route).path_coordinates == [[1.0, 2.0], [3.0, 4.0]]

    def test_persist_twice_converges_to_one_record(self, campus):
        cache = RouteCache(SeedRouteProvider())
        start, end = campus["Maverick Activities Center"], campus["Nedderman Hall"]

        first = cache.persist(start, end, fetched_route())
        longer = fetched_route()
        longer.coordinates.append(LatLng(32.74, -97.12))
        second = cache.persist(start, end, longer)

        assert first.pk == second.pk
        assert RouteCoordinate.objects.filter(route=second).count() == 3
        assert RouteStep.objects.filter(route=second).count() == 2
