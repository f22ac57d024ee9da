from __future__ import annotations

from typing import Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from loguru import logger

from walk_buddy.errors import NotFoundError, ProviderError, ValidationError
from walk_buddy.routing.queries import get_location_by_name, hydrate_route
from walk_buddy.routing.service import RouteCache
from walk_buddy.validation import get_optional_string, parse_positive_integer

from .models import WalkRequest


def _get_user(user_id, field_name: str):
    user_id = parse_positive_integer(user_id, field_name)
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except User.DoesNotExist:
        raise ValidationError(f"{field_name} does not match a known user.")


def _get_walk(walk_id) -> WalkRequest:
    walk_id = parse_positive_integer(walk_id, "walkId")
    try:
        return WalkRequest.objects.select_related("start_location", "end_location", "route").get(pk=walk_id)
    except WalkRequest.DoesNotExist:
        raise NotFoundError(f"Walk request #{walk_id} was not found.")


def walk_to_dict(walk: WalkRequest) -> dict:
    start, end = walk.start_location, walk.end_location
    route = hydrate_route(walk.route) if walk.route_id else None

    return {
        "id": walk.id,
        "userId": walk.user_id,
        "startLocation": start.name,
        "destination": end.name,
        "requestTime": walk.request_time,
        "status": walk.status,
        "buddyId": walk.buddy_id,
        "eta": walk.eta or (route.eta if route else None),
        "route": {
            "startCoords": [start.latitude, start.longitude],
            "endCoords": [end.latitude, end.longitude],
            "buddyCurrentCoords": walk.buddy_position,
            "pathCoordinates": route.path_coordinates if route else None,
            "steps": route.steps if route else None,
            "summary": route.summary if route else None,
        },
    }


def create_walk_request(
    user_id,
    start_location_name,
    destination_location_name,
    route_cache: Optional[RouteCache] = None,
) -> WalkRequest:
    start_name = get_optional_string(start_location_name)
    end_name = get_optional_string(destination_location_name)

    if not user_id or not start_name or not end_name:
        raise ValidationError("userId, startLocation, and destination are required.")

    if start_name == end_name:
        raise ValidationError("Start and destination locations must be different.")

    start = get_location_by_name(start_name)
    end = get_location_by_name(end_name)
    if start is None or end is None:
        raise ValidationError("Unable to find start or destination location.")

    user = _get_user(user_id, "userId")

    route_cache = route_cache or RouteCache()
    try:
        route = route_cache.resolve(start_name, end_name)
    except ProviderError as e:
        logger.warning(f"Creating walk {start_name} -> {end_name} without a route: {e}")
        route = None

    return WalkRequest.objects.create(
        user=user,
        route_id=route.id if route else None,
        start_location=start,
        end_location=end,
        status="pending",
        buddy_latitude=start.latitude,
        buddy_longitude=start.longitude,
        eta=(route.eta if route and route.eta else settings.DEFAULT_WALK_ETA),
    )


def get_pending_walk_requests():
    return WalkRequest.objects.select_related("start_location", "end_location", "route").filter(status="pending")


def get_walk_request(walk_id) -> WalkRequest:
    return _get_walk(walk_id)


def join_walk_request(walk_id, buddy_id) -> WalkRequest:
    buddy = _get_user(buddy_id, "buddyId")

    with transaction.atomic():
        walk = _get_walk(walk_id)
        # conditional update so two buddies cannot both join
        joined = WalkRequest.objects.filter(pk=walk.pk, status="pending").update(status="active", buddy=buddy)
        if not joined:
            raise ValidationError("This walk is no longer available.")

    return _get_walk(walk.pk)


def update_buddy_position(walk_id, latitude, longitude) -> WalkRequest:
    walk = _get_walk(walk_id)
    try:
        latitude, longitude = float(latitude), float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("latitude and longitude must be numbers.")

    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        raise ValidationError("latitude and longitude are out of range.")

    walk.buddy_latitude = latitude
    walk.buddy_longitude = longitude
    walk.save(update_fields=["buddy_latitude", "buddy_longitude"])
    return walk


def complete_walk_request(walk_id) -> WalkRequest:
    walk = _get_walk(walk_id)
    walk.status = "completed"
    walk.save(update_fields=["status"])
    return walk
