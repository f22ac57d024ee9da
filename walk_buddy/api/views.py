from django.core.exceptions import PermissionDenied
from django.http import Http404

from loguru import logger
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView

from walk_buddy.errors import NotFoundError, ProviderError, ValidationError
from walk_buddy.moderation.gate import ModerationGate, moderated
from walk_buddy.moderation.messages import get_messages, get_random_message, save_message
from walk_buddy.routing.queries import get_all_locations, get_all_routes
from walk_buddy.routing.service import RouteCache
from walk_buddy.walks import services as walks

from .queries import get_stats
from .serializers import (
    LocationSerializer,
    MessageCreateRequestSerializer,
    MessageSerializer,
    RouteQuerySerializer,
    RouteSerializer,
    StatsSerializer,
    WalkCreateRequestSerializer,
    WalkJoinRequestSerializer,
    WalkPositionRequestSerializer,
)

message_gate = ModerationGate()


def validated_data(serializer_class, data) -> dict:
    serializer = serializer_class(data=data)
    if not serializer.is_valid():
        problems = []
        for field, errors in serializer.errors.items():
            problems.extend(f"{field}: {error}" for error in errors)
        raise ValidationError(" ".join(problems))
    return serializer.validated_data


class WalkBuddyView(APIView):
    """Maps domain errors onto the JSON error envelope used by every endpoint."""

    def handle_exception(self, exc):
        if isinstance(exc, (APIException, Http404, PermissionDenied)):
            return super().handle_exception(exc)
        if isinstance(exc, ValueError):
            return Response({"error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        if isinstance(exc, NotFoundError):
            return Response({"error": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        if isinstance(exc, ProviderError):
            return Response({"error": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
        logger.exception(f"Unhandled error in {self.__class__.__name__}")
        return Response(
            {"error": f"Internal server error: {str(exc)}"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class LocationsView(WalkBuddyView):

    def get(self, request):
        return Response(LocationSerializer(get_all_locations(), many=True).data)


class RoutesView(WalkBuddyView):

    def get(self, request):
        params = validated_data(RouteQuerySerializer, request.query_params)
        start = (params.get("start") or "").strip()
        destination = (params.get("destination") or "").strip()

        if not start and not destination:
            return Response(RouteSerializer(get_all_routes(), many=True).data)

        route = RouteCache().resolve(start, destination)
        if route is None:
            return Response(
                {"error": f"No route stored from {start} to {destination}."},
                status=status.HTTP_404_NOT_FOUND,
            )

        return Response(RouteSerializer(route).data)


class MessagesView(WalkBuddyView):

    def get(self, request):
        return Response(MessageSerializer(get_messages(), many=True).data)

    @moderated(message_gate)
    def post(self, request):
        data = validated_data(MessageCreateRequestSerializer, request.data)

        message = save_message(
            data.get("message"),
            start_location_name=data.get("startLocation"),
            destination_location_name=data.get("destination"),
            classification=getattr(request, "profanity_review", None),
        )

        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class RandomMessageView(WalkBuddyView):

    def get(self, request):
        params = validated_data(RouteQuerySerializer, request.query_params)
        message = get_random_message(params.get("start"), params.get("destination"))

        if message is None:
            return Response({"error": "No approved messages found."}, status=status.HTTP_404_NOT_FOUND)

        return Response(MessageSerializer(message).data)


class WalksView(WalkBuddyView):

    def get(self, request):
        return Response([walks.walk_to_dict(walk) for walk in walks.get_pending_walk_requests()])

    def post(self, request):
        data = validated_data(WalkCreateRequestSerializer, request.data)

        walk = walks.create_walk_request(
            data.get("userId"),
            data.get("startLocation"),
            data.get("destination"),
        )

        return Response(walks.walk_to_dict(walk), status=status.HTTP_201_CREATED)


class WalkDetailView(WalkBuddyView):

    def get(self, request, walk_id):
        return Response(walks.walk_to_dict(walks.get_walk_request(walk_id)))


class WalkJoinView(WalkBuddyView):

    def post(self, request, walk_id):
        data = validated_data(WalkJoinRequestSerializer, request.data)
        walk = walks.join_walk_request(walk_id, data["buddyId"])
        return Response({"message": "Successfully joined the walk!", "walk": walks.walk_to_dict(walk)})


class WalkPositionView(WalkBuddyView):

    def post(self, request, walk_id):
        data = validated_data(WalkPositionRequestSerializer, request.data)
        walk = walks.update_buddy_position(walk_id, data["latitude"], data["longitude"])
        return Response(walks.walk_to_dict(walk))


class WalkCompleteView(WalkBuddyView):

    def post(self, request, walk_id):
        walk = walks.complete_walk_request(walk_id)
        return Response(walks.walk_to_dict(walk))


class StatsView(WalkBuddyView):

    def get(self, request):
        return Response(StatsSerializer(get_stats()).data)
