# moderation/management/commands/moderate.py
from django.core.management.base import BaseCommand, CommandError

from walk_buddy.errors import NotFoundError, ValidationError
from walk_buddy.moderation.messages import get_moderation_messages, update_message_status


class Command(BaseCommand):
    help = "Review the message moderation queue"  # noqa: A003

    def add_arguments(self, parser):
        subparsers = parser.add_subparsers(dest="action", required=True)

        list_parser = subparsers.add_parser("list", help="List messages, pending only by default")
        list_parser.add_argument(
            "--status",
            default="pending",
            help="pending | approved | rejected | all (default: pending)",
        )
        list_parser.add_argument("--start", help="Filter by start location name")
        list_parser.add_argument("--destination", help="Filter by destination location name")

        for action in ("approve", "reject"):
            review_parser = subparsers.add_parser(action, help=f"{action.capitalize()} a message by id")
            review_parser.add_argument("message_id", help="Message id")
            review_parser.add_argument("--reviewed-by", dest="reviewed_by", help="Reviewer recorded with the decision")
            review_parser.add_argument("--notes", help="Review notes stored with the message")

    def handle(self, *args, **options):
        action = options["action"]

        try:
            if action == "list":
                self.list_messages(options)
            else:
                status = "approved" if action == "approve" else "rejected"
                self.review_message(status, options)
        except (ValidationError, NotFoundError) as e:
            raise CommandError(str(e))

    def list_messages(self, options):
        messages = list(
            get_moderation_messages(
                status=options["status"],
                start_location_name=options.get("start"),
                destination_location_name=options.get("destination"),
            )
        )

        if not messages:
            self.stdout.write(self.style.WARNING("No messages matched your filters."))
            return

        for message in messages:
            start = message.start_location.name if message.start_location else "-"
            destination = message.end_location.name if message.end_location else "-"
            self.stdout.write(
                f"#{message.id} [{message.status}] {message.profanity_category} "
                f"{message.created_at:%Y-%m-%d %H:%M} {start} -> {destination}: {message.message}"
            )

        self.stdout.write(self.style.SUCCESS(f"{len(messages)} message(s)"))

    def review_message(self, status, options):
        message = update_message_status(
            options["message_id"],
            status,
            reviewed_by=options.get("reviewed_by"),
            review_notes=options.get("notes"),
        )

        self.stdout.write(self.style.SUCCESS(f"Message #{message.id} marked as {status}."))
        if message.reviewed_by:
            self.stdout.write(f"Reviewer: {message.reviewed_by}")
        if message.review_notes:
            self.stdout.write(f"Notes: {message.review_notes}")
