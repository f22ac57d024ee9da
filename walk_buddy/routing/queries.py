from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterable, Optional

from django.db import IntegrityError, transaction

from walk_buddy.routing.models import Location, Route, RouteCoordinate, RouteStep
from walk_buddy.routing.polyline import to_lat_lng


@dataclass
class RouteDetails:
    id: int
    start_location: str
    destination: str
    start_coordinates: list[float]
    destination_coordinates: list[float]
    path_coordinates: list[list[float]] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)
    eta: Optional[str] = None
    eta_seconds: Optional[int] = None
    distance_meters: Optional[int] = None
    summary: Optional[str] = None

    def as_dict(self) -> dict:
        return asdict(self)


def get_location_by_name(name) -> Optional[Location]:
    if not name:
        return None
    return Location.objects.filter(name=name).first()


def get_all_locations():
    return Location.objects.order_by("name")


def find_route_by_names(start_name: str, end_name: str) -> Optional[Route]:
    return (
        Route.objects.select_related("start_location", "end_location")
        .filter(start_location__name=start_name, end_location__name=end_name)
        .first()
    )


def find_route_by_location_ids(start_location_id: int, end_location_id: int) -> Optional[Route]:
    return Route.objects.filter(start_location_id=start_location_id, end_location_id=end_location_id).first()


def upsert_route(
    start_location: Location,
    end_location: Location,
    *,
    eta: Optional[str] = None,
    eta_seconds: Optional[int] = None,
    distance_meters: Optional[int] = None,
    summary: Optional[str] = None,
) -> Route:
    """
    Insert the route header for an ordered pair, or update it in place.

    The unique (start, end) constraint decides: an insert that loses a race
    against another writer is retried as an update of the winner's row.
    """
    fields = {"eta": eta, "eta_seconds": eta_seconds, "distance_meters": distance_meters, "summary": summary}

    existing = find_route_by_location_ids(start_location.id, end_location.id)
    if existing is None:
        try:
            with transaction.atomic():
                return Route.objects.create(start_location=start_location, end_location=end_location, **fields)
        except IntegrityError:
            existing = Route.objects.get(start_location=start_location, end_location=end_location)

    for name, value in fields.items():
        setattr(existing, name, value)
    existing.save(update_fields=[*fields, "updated_at"])
    return existing


def replace_route_coordinates(route: Route, points: Iterable) -> int:
    points = [to_lat_lng(p) for p in points]

    for index, point in enumerate(points):
        RouteCoordinate.objects.update_or_create(
            route=route,
            point_index=index,
            defaults={"latitude": point.lat, "longitude": point.lng},
        )

    RouteCoordinate.objects.filter(route=route, point_index__gte=len(points)).delete()
    return len(points)


def replace_route_steps(route: Route, instructions: Iterable[str]) -> int:
    instructions = list(instructions)

    for number, instruction in enumerate(instructions, start=1):
        RouteStep.objects.update_or_create(
            route=route,
            step_number=number,
            defaults={"instruction": instruction},
        )

    RouteStep.objects.filter(route=route, step_number__gt=len(instructions)).delete()
    return len(instructions)


def hydrate_route(route: Optional[Route]) -> Optional[RouteDetails]:
    if route is None:
        return None

    start, end = route.start_location, route.end_location
    coordinates = route.coordinates.order_by("point_index").values_list("latitude", "longitude")
    steps = route.steps.order_by("step_number").values_list("instruction", flat=True)

    return RouteDetails(
        id=route.id,
        start_location=start.name,
        destination=end.name,
        start_coordinates=[start.latitude, start.longitude],
        destination_coordinates=[end.latitude, end.longitude],
        path_coordinates=[[lat, lng] for lat, lng in coordinates],
        steps=list(steps),
        eta=route.eta,
        eta_seconds=route.eta_seconds,
        distance_meters=route.distance_meters,
        summary=route.summary,
    )


def get_all_routes() -> list[RouteDetails]:
    qs = Route.objects.select_related("start_location", "end_location").order_by(
        "start_location__name", "end_location__name"
    )
    return [hydrate_route(route) for route in qs]
