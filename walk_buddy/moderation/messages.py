from __future__ import annotations

import re
from typing import Optional

from django.conf import settings
from django.db.models import Count
from django.utils import timezone

from walk_buddy.errors import NotFoundError, ValidationError
from walk_buddy.routing.queries import find_route_by_location_ids, get_location_by_name
from walk_buddy.validation import get_optional_string, parse_positive_integer

from .content_filter import Classification, ContentFilter, get_content_filter
from .models import Message

VALID_STATUSES = {choice for choice, _ in Message.STATUS_CHOICES}

_WHITESPACE = re.compile(r"\s+")


def _validate_status(status: str, allow_all: bool = False) -> str:
    normalized = (status or "").strip().lower()
    if allow_all and normalized == "all":
        return normalized
    if normalized not in VALID_STATUSES:
        allowed = " | ".join(sorted(VALID_STATUSES) + (["all"] if allow_all else []))
        raise ValidationError(f"Invalid status '{status}'. Expected one of: {allowed}.")
    return normalized


def _location_filters(qs, start_location_name=None, destination_location_name=None):
    start = get_optional_string(start_location_name)
    destination = get_optional_string(destination_location_name)
    if start:
        qs = qs.filter(start_location__name=start)
    if destination:
        qs = qs.filter(end_location__name=destination)
    return qs


def save_message(
    message,
    start_location_name: Optional[str] = None,
    destination_location_name: Optional[str] = None,
    status: Optional[str] = None,
    content_filter: Optional[ContentFilter] = None,
    classification: Optional[Classification] = None,
) -> Message:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Message content is required.")

    max_length = settings.MESSAGE_MAX_LENGTH
    if len(_WHITESPACE.sub(" ", message).strip()) > max_length:
        raise ValidationError(f"Message content must be {max_length} characters or fewer.")

    content_filter = content_filter or get_content_filter()
    classification = classification or content_filter.classify(message)
    text = content_filter.sanitize_message_content(message)

    status = _validate_status(status or settings.MESSAGE_DEFAULT_STATUS)

    start = get_location_by_name(get_optional_string(start_location_name))
    end = get_location_by_name(get_optional_string(destination_location_name))
    route = find_route_by_location_ids(start.id, end.id) if start and end else None

    return Message.objects.create(
        message=text,
        status=status,
        profanity_category=classification.category.value,
        start_location=start,
        end_location=end,
        route=route,
        reviewed_at=None if status == Message.STATUS_PENDING else timezone.now(),
    )


def get_messages():
    return Message.objects.select_related("start_location", "end_location").filter(status=Message.STATUS_APPROVED)


def get_moderation_messages(status: str = "pending", start_location_name=None, destination_location_name=None):
    status = _validate_status(status, allow_all=True)

    qs = Message.objects.select_related("start_location", "end_location")
    if status != "all":
        qs = qs.filter(status=status)

    return _location_filters(qs, start_location_name, destination_location_name)


def update_message_status(message_id, status: str, reviewed_by=None, review_notes=None) -> Message:
    message_id = parse_positive_integer(message_id, "messageId")
    status = _validate_status(status)

    try:
        message = Message.objects.get(pk=message_id)
    except Message.DoesNotExist:
        raise NotFoundError(f"Message #{message_id} was not found.")

    message.status = status
    message.reviewed_by = get_optional_string(reviewed_by)
    message.review_notes = get_optional_string(review_notes)
    message.reviewed_at = None if status == Message.STATUS_PENDING else timezone.now()
    message.save(update_fields=["status", "reviewed_by", "review_notes", "reviewed_at"])
    return message


def get_random_message(start_location_name=None, destination_location_name=None) -> Optional[Message]:
    qs = _location_filters(get_messages(), start_location_name, destination_location_name)
    return qs.order_by("?").first()


def count_messages_by_status() -> dict:
    counts = {status: 0 for status in VALID_STATUSES}
    for row in Message.objects.values("status").annotate(count=Count("id")):
        counts[row["status"]] = row["count"]
    return counts
