from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Optional

from django.conf import settings

import requests
from loguru import logger

from walk_buddy.errors import ProviderError

from .polyline import LatLng, decode


@dataclass
class FetchedRoute:
    coordinates: list[LatLng] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)
    eta_seconds: Optional[int] = None
    distance_meters: Optional[int] = None


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def round_or_none(value) -> Optional[int]:
    if not _is_number(value) or not math.isfinite(value):
        return None
    return int(round(value))


def _text(value) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def format_step_instruction(step) -> str:
    if not step:
        return "Continue"
    if not isinstance(step, dict):
        return "Continue straight."

    maneuver = step.get("maneuver")
    if not isinstance(maneuver, dict):
        maneuver = {}

    instruction = _text(maneuver.get("instruction"))
    if instruction:
        return instruction

    fragments = []
    maneuver_type = _text(maneuver.get("type"))
    if maneuver_type:
        fragments.append(maneuver_type[:1].upper() + maneuver_type[1:])

    modifier = _text(maneuver.get("modifier"))
    if modifier:
        fragments.append(modifier.lower())

    name = _text(step.get("name"))
    if name:
        fragments.append(f"onto {name}")

    sentence = " ".join(fragments).strip()
    if not sentence:
        return "Continue straight."

    return sentence if sentence.endswith(".") else f"{sentence}."


def format_eta(eta_seconds) -> Optional[str]:
    if not _is_number(eta_seconds) or not math.isfinite(eta_seconds):
        return None
    minutes = max(1, round(eta_seconds / 60))
    return f"{minutes} minute{'' if minutes == 1 else 's'}"


def build_route_summary(start_name: str, end_name: str, distance_meters=None, eta_seconds=None) -> str:
    parts = [f"OSRM walking route from {start_name} to {end_name}."]

    if _is_number(distance_meters) and math.isfinite(distance_meters):
        if distance_meters >= 1000:
            parts.append(f"Distance: {distance_meters / 1000:.2f} km.")
        else:
            parts.append(f"Distance: {round(distance_meters)} m.")

    eta = format_eta(eta_seconds)
    if eta:
        parts.append(f"ETA: {eta}.")

    return " ".join(parts)


def _coordinates_of(point, label: str) -> tuple[float, float]:
    lat = getattr(point, "lat", getattr(point, "latitude", None))
    lng = getattr(point, "lng", getattr(point, "longitude", None))
    if isinstance(point, dict):
        lat, lng = point.get("lat"), point.get("lng")

    if point is None or not _is_number(lat) or not _is_number(lng):
        raise ProviderError(f"A numeric {label} latitude and longitude are required.")

    return float(lat), float(lng)


class SeedRouteProvider:
    """Serves only curated routes already in the database."""

    is_external = False

    def fetch(self, start, end) -> Optional[FetchedRoute]:
        return None


class OSRMRouteProvider:
    is_external = True
    profile = "foot"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.OSRM_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.OSRM_TIMEOUT_SECONDS

    def fetch(self, start, end) -> FetchedRoute:
        start_lat, start_lng = _coordinates_of(start, "start")
        end_lat, end_lng = _coordinates_of(end, "end")

        url = f"{self.base_url}/route/v1/{self.profile}/{start_lng},{start_lat};{end_lng},{end_lat}"
        params = {
            "geometries": "polyline6",
            "overview": "full",
            "steps": "true",
        }

        try:
            with requests.Session() as session:
                resp = session.get(url, params=params, timeout=self.timeout)
                if resp.status_code >= 400:
                    raise ProviderError(f"OSRM request failed with status {resp.status_code}")
                data = resp.json()
        except requests.Timeout as e:
            logger.warning(f"OSRM request timed out after {self.timeout}s: {url}")
            raise ProviderError(f"OSRM request timed out after {self.timeout} seconds") from e
        except requests.RequestException as e:
            logger.error(f"OSRM request failed: {e}")
            raise ProviderError(f"OSRM request failed: {e}") from e
        except ValueError as e:
            raise ProviderError("OSRM response was not valid JSON.") from e

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            raise ProviderError("OSRM response did not include any routes.")

        route = routes[0] if isinstance(routes, list) else None
        if not isinstance(route, dict):
            raise ProviderError("OSRM response did not include any routes.")

        coordinates = decode(route.get("geometry"))
        if not coordinates:
            raise ProviderError("OSRM route geometry was empty.")

        legs = [leg for leg in route.get("legs") or [] if isinstance(leg, dict)]
        steps = [format_step_instruction(step) for leg in legs for step in leg.get("steps") or []]

        return FetchedRoute(
            coordinates=coordinates,
            steps=steps,
            eta_seconds=round_or_none(route.get("duration")),
            distance_meters=round_or_none(route.get("distance")),
        )


def get_route_provider():
    if settings.ROUTING_PROVIDER == "osrm":
        return OSRMRouteProvider()
    return SeedRouteProvider()
