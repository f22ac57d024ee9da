# routing/management/commands/seed_campus.py
import json

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from walk_buddy.moderation.models import Message
from walk_buddy.routing.models import Location, Route
from walk_buddy.routing.queries import replace_route_coordinates, replace_route_steps, upsert_route
from walk_buddy.walks.models import WalkRequest


class Command(BaseCommand):
    help = "Load campus locations, curated routes, approved messages and demo walks"  # noqa: A003

    def add_arguments(self, parser):
        parser.add_argument("path", type=str, nargs="?", help="Seed JSON file (default: SEED_DATA_PATH)")
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete walks, messages, routes and locations before loading",
        )

    def handle(self, *args, **opts):
        path = opts["path"] or settings.SEED_DATA_PATH

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise CommandError(f"Seed file not found: {path}")
        except json.JSONDecodeError as e:
            raise CommandError(f"Seed file is not valid JSON: {e}")

        if opts["clear"]:
            WalkRequest.objects.all().delete()
            Message.objects.all().delete()
            Route.objects.all().delete()
            Location.objects.all().delete()
            self.stdout.write(self.style.WARNING("Cleared existing walks, messages, routes and locations."))

        with transaction.atomic():
            locations = self.load_locations(data.get("locations") or [])
            self.load_routes(data.get("routes") or [], locations)
            users = self.load_users(data.get("users") or [])
            self.load_walks(data.get("walks") or [], locations, users)

    def load_locations(self, rows):
        created = updated = skipped = 0
        locations = {}

        for row in rows:
            name = (row.get("name") or "").strip()
            latitude, longitude = row.get("latitude"), row.get("longitude")

            if not name or latitude is None or longitude is None:
                skipped += 1
                continue

            obj, is_created = Location.objects.update_or_create(
                name=name,
                defaults={"latitude": float(latitude), "longitude": float(longitude)},
            )
            locations[name] = obj

            created += int(is_created)
            updated += int(not is_created)

        self.stdout.write(
            self.style.SUCCESS(f"Locations: created={created}, updated={updated}, skipped={skipped}")
        )
        return locations

    def load_routes(self, rows, locations):
        stored = skipped = messages_created = 0

        for row in rows:
            start = locations.get(row.get("start"))
            end = locations.get(row.get("destination"))

            if start is None or end is None or start.pk == end.pk:
                self.stdout.write(
                    self.style.WARNING(f"Skipping route {row.get('start')} -> {row.get('destination')}")
                )
                skipped += 1
                continue

            route = upsert_route(start, end, eta=row.get("eta"), summary=row.get("summary"))
            replace_route_coordinates(route, row.get("pathCoordinates") or [])
            replace_route_steps(route, row.get("steps") or [])
            stored += 1

            for text in row.get("messages") or []:
                _, is_created = Message.objects.get_or_create(
                    message=text,
                    start_location=start,
                    end_location=end,
                    defaults={
                        "route": route,
                        "status": Message.STATUS_APPROVED,
                        "profanity_category": "CLEAN",
                        "reviewed_by": "seed",
                    },
                )
                messages_created += int(is_created)

        self.stdout.write(
            self.style.SUCCESS(f"Routes: stored={stored}, skipped={skipped}, new messages={messages_created}")
        )

    def load_users(self, rows):
        User = get_user_model()
        users = {}
        created = 0

        for row in rows:
            email = (row.get("email") or "").strip().lower()
            if not email:
                continue

            first_name, _, last_name = (row.get("name") or "").partition(" ")
            user, is_created = User.objects.get_or_create(
                username=email,
                defaults={"email": email, "first_name": first_name, "last_name": last_name},
            )
            if is_created:
                if row.get("password"):
                    user.set_password(row["password"])
                else:
                    user.set_unusable_password()
                user.save(update_fields=["password"])

            users[email] = user
            created += int(is_created)

        self.stdout.write(self.style.SUCCESS(f"Users: created={created}, total={len(users)}"))
        return users

    def load_walks(self, rows, locations, users):
        created = 0

        for row in rows:
            user = users.get((row.get("user") or "").strip().lower())
            start = locations.get(row.get("start"))
            end = locations.get(row.get("destination"))

            if user is None or start is None or end is None:
                self.stdout.write(self.style.WARNING(f"Skipping demo walk {row}"))
                continue

            route = Route.objects.filter(start_location=start, end_location=end).first()
            _, is_created = WalkRequest.objects.get_or_create(
                user=user,
                start_location=start,
                end_location=end,
                status="pending",
                defaults={
                    "route": route,
                    "eta": (route.eta if route and route.eta else settings.DEFAULT_WALK_ETA),
                    "buddy_latitude": start.latitude,
                    "buddy_longitude": start.longitude,
                },
            )
            created += int(is_created)

        self.stdout.write(self.style.SUCCESS(f"Walks: created={created}"))
