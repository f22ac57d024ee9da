from rest_framework import serializers


class RouteQuerySerializer(serializers.Serializer):
    start = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        help_text="Start location name (e.g., 'Central Library')",
    )
    destination = serializers.CharField(
        max_length=255,
        required=False,
        allow_blank=True,
        help_text="Destination location name (e.g., 'Maverick Activities Center')",
    )


class MessageCreateRequestSerializer(serializers.Serializer):
    # Content rules (required, length) are enforced by save_message so the
    # API and the CLI report the same errors.
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    startLocation = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    destination = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class WalkCreateRequestSerializer(serializers.Serializer):
    userId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    startLocation = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    destination = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class WalkJoinRequestSerializer(serializers.Serializer):
    buddyId = serializers.IntegerField(min_value=1, help_text="Id of the user joining as a buddy")


class WalkPositionRequestSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)


class LocationSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()


class MessageSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    message = serializers.CharField()
    status = serializers.CharField()
    profanityCategory = serializers.CharField(source="profanity_category")
    startLocation = serializers.CharField(source="start_location.name", default=None)
    destination = serializers.CharField(source="end_location.name", default=None)
    createdAt = serializers.DateTimeField(source="created_at")


class RouteSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    startLocation = serializers.CharField(source="start_location")
    destination = serializers.CharField()
    startCoords = serializers.ListField(source="start_coordinates", child=serializers.FloatField())
    endCoords = serializers.ListField(source="destination_coordinates", child=serializers.FloatField())
    pathCoordinates = serializers.ListField(
        source="path_coordinates", child=serializers.ListField(child=serializers.FloatField())
    )
    steps = serializers.ListField(child=serializers.CharField())
    eta = serializers.CharField(allow_null=True)
    etaSeconds = serializers.IntegerField(source="eta_seconds", allow_null=True)
    distanceMeters = serializers.IntegerField(source="distance_meters", allow_null=True)
    summary = serializers.CharField(allow_null=True)


class StatsSerializer(serializers.Serializer):
    locations = serializers.IntegerField()
    routes = serializers.IntegerField()
    approvedMessages = serializers.IntegerField()
    pendingMessages = serializers.IntegerField()
    pendingWalks = serializers.IntegerField()
