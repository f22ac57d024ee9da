from __future__ import annotations

from walk_buddy.moderation.messages import count_messages_by_status
from walk_buddy.routing.models import Location, Route
from walk_buddy.walks.models import WalkRequest


def get_stats() -> dict:

    message_counts = count_messages_by_status()

    return {
        "locations": Location.objects.count(),
        "routes": Route.objects.count(),
        "approvedMessages": message_counts.get("approved", 0),
        "pendingMessages": message_counts.get("pending", 0),
        "pendingWalks": WalkRequest.objects.filter(status="pending").count(),
    }
