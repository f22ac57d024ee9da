from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from django.conf import settings
from django.db import transaction

from loguru import logger

from walk_buddy.errors import ValidationError

from .models import Location, Route
from .providers import FetchedRoute, build_route_summary, format_eta, get_route_provider
from .queries import (
    RouteDetails,
    find_route_by_names,
    get_location_by_name,
    hydrate_route,
    replace_route_coordinates,
    replace_route_steps,
    upsert_route,
)


class LookupStatus(str, Enum):
    FOUND = "found"
    MISSING = "missing"


@dataclass
class RouteLookup:
    status: LookupStatus
    start: Location
    end: Location
    route: Optional[Route] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


class RouteCache:
    """
    Resolve-or-fetch for ordered location pairs.

    Stored routes are served as they are. In on_demand mode with an external
    provider, a missing pair is fetched once and persisted; later calls for
    the same pair are answered from storage.
    """

    def __init__(self, provider=None, cache_mode: Optional[str] = None):
        self.provider = provider if provider is not None else get_route_provider()
        self.cache_mode = cache_mode or settings.ROUTING_CACHE_MODE

    @property
    def fetches_on_demand(self) -> bool:
        return self.cache_mode == "on_demand" and getattr(self.provider, "is_external", False)

    def lookup(self, start_name: str, end_name: str) -> RouteLookup:
        start_name = (start_name or "").strip()
        end_name = (end_name or "").strip()

        if not start_name or not end_name:
            raise ValidationError("start and destination are required.")

        if start_name == end_name:
            raise ValidationError("Start and destination locations must be different.")

        start = get_location_by_name(start_name)
        end = get_location_by_name(end_name)
        if start is None or end is None:
            raise ValidationError("Unable to find start or destination location.")

        route = find_route_by_names(start_name, end_name)
        if route is None:
            return RouteLookup(LookupStatus.MISSING, start, end)
        return RouteLookup(LookupStatus.FOUND, start, end, route)

    def resolve(self, start_name: str, end_name: str) -> Optional[RouteDetails]:
        result = self.lookup(start_name, end_name)

        if result.found:
            return hydrate_route(result.route)

        if not self.fetches_on_demand:
            return None

        logger.info(f"Route cache miss: {result.start.name} -> {result.end.name}, fetching from provider")
        fetched = self.provider.fetch(result.start, result.end)
        if fetched is None:
            return None

        route = self.persist(result.start, result.end, fetched)
        return hydrate_route(route)

    def persist(self, start: Location, end: Location, fetched: FetchedRoute) -> Route:
        with transaction.atomic():
            route = upsert_route(
                start,
                end,
                eta=format_eta(fetched.eta_seconds),
                eta_seconds=fetched.eta_seconds,
                distance_meters=fetched.distance_meters,
                summary=build_route_summary(start.name, end.name, fetched.distance_meters, fetched.eta_seconds),
            )
            replace_route_coordinates(route, fetched.coordinates)
            replace_route_steps(route, fetched.steps)

        logger.info(
            f"Stored route #{route.id} {start.name} -> {end.name} "
            f"({len(fetched.coordinates)} points, {len(fetched.steps)} steps)"
        )
        return route
