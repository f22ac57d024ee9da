# routing/management/commands/precompute_routes.py
import re

from django.conf import settings
from django.core.management.base import BaseCommand

from walk_buddy.errors import ProviderError
from walk_buddy.routing.providers import OSRMRouteProvider
from walk_buddy.routing.queries import find_route_by_location_ids, get_all_locations
from walk_buddy.routing.service import RouteCache

_NON_LETTERS = re.compile(r"[^a-z]")


def build_initials(name: str) -> str:
    return "".join(part[0] for part in (name or "").split()).lower()


def matches_filter(location, value) -> bool:
    """Match a location by exact name, substring, or initials ("SH" for Science Hall)."""
    needle = (value or "").strip().lower()
    if not needle:
        return True

    name = location.name.lower()
    if needle in name:
        return True

    initials = build_initials(location.name)
    return bool(initials) and initials == _NON_LETTERS.sub("", needle)


class Command(BaseCommand):
    help = "Fetch and store walking routes from OSRM for every location pair that has none"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("--from", dest="from_name", type=str, help="Only start locations matching this")
        parser.add_argument("--to", dest="to_name", type=str, help="Only destinations matching this")
        parser.add_argument("--limit", type=int, help="Maximum number of routes to fetch")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List missing routes without calling OSRM",
        )

    def handle(self, *args, **options):
        from_name = options["from_name"]
        to_name = options["to_name"]
        limit = options["limit"]
        dry_run = options["dry_run"]

        locations = list(get_all_locations())
        starts = [loc for loc in locations if matches_filter(loc, from_name)]
        destinations = [loc for loc in locations if matches_filter(loc, to_name)]

        cache = RouteCache(provider=OSRMRouteProvider(settings.OSRM_BASE_URL, settings.OSRM_TIMEOUT_SECONDS))

        remaining = limit if limit is not None else float("inf")
        computed = failed = 0

        for start in starts:
            for destination in destinations:
                if start.pk == destination.pk or find_route_by_location_ids(start.pk, destination.pk):
                    continue

                if remaining <= 0:
                    break

                self.stdout.write(f"Missing route: {start.name} -> {destination.name}")

                if dry_run:
                    remaining -= 1
                    continue

                try:
                    fetched = cache.provider.fetch(start, destination)
                    cache.persist(start, destination, fetched)
                except ProviderError as e:
                    self.stdout.write(
                        self.style.ERROR(f"Failed to compute route for {start.name} -> {destination.name}: {e}")
                    )
                    failed += 1
                    continue

                computed += 1
                remaining -= 1

        if dry_run:
            self.stdout.write(self.style.WARNING("Dry run complete. No routes were persisted."))
            return

        self.stdout.write(self.style.SUCCESS(f"Precompute complete. {computed} routes added."))
        if failed:
            self.stdout.write(self.style.ERROR(f"Failed: {failed}"))
