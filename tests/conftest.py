import pytest

from walk_buddy.moderation.content_filter import ContentFilter
from walk_buddy.moderation.engine import EngineRegistry, default_registry
from walk_buddy.routing.models import Location
from walk_buddy.routing.queries import replace_route_coordinates, replace_route_steps, upsert_route

from .helpers import FakeProfanityEngine

CAMPUS = {
    "Central Library": (32.729913, -97.112907),
    "Science Hall": (32.73047, -97.112021),
    "Maverick Activities Center": (32.731954, -97.116912),
    "Nedderman Hall": (32.732161, -97.113876),
}


@pytest.fixture
def engine():
    return FakeProfanityEngine()


@pytest.fixture
def content_filter(engine):
    return ContentFilter(EngineRegistry(engine, extra_terms=["maskedterm"]))


@pytest.fixture(autouse=True)
def fake_default_engine():
    # keeps the real word list out of service and API tests
    default_registry.configure(FakeProfanityEngine(), extra_terms=["maskedterm"])
    yield default_registry
    default_registry.reset()


@pytest.fixture
def campus(db):
    locations = {
        name: Location.objects.create(name=name, latitude=lat, longitude=lng) for name, (lat, lng) in CAMPUS.items()
    }

    route = upsert_route(
        locations["Central Library"],
        locations["Science Hall"],
        eta="4 minutes",
        summary="Curated walk from Central Library to Science Hall. Estimated travel time: 4 minutes.",
    )
    replace_route_coordinates(route, [[32.729913, -97.112907], [32.73019, -97.11246], [32.73047, -97.112021]])
    replace_route_steps(
        route,
        [
            "Walk east across the library mall toward the Planetarium.",
            "Science Hall is the brick building just ahead on your left.",
        ],
    )

    locations["route"] = route
    return locations


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="jdoe@uta.edu", password="password123")


@pytest.fixture
def buddy(django_user_model):
    return django_user_model.objects.create_user(username="slowell@uta.edu", password="password123")
