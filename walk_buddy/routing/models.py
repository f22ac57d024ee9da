from django.db import models


class Location(models.Model):
    name = models.CharField(max_length=255, unique=True)
    latitude = models.FloatField()
    longitude = models.FloatField()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    @property
    def lat(self):
        return self.latitude

    @property
    def lng(self):
        return self.longitude


class Route(models.Model):
    start_location = models.ForeignKey(Location, on_delete=models.CASCADE, related_name="routes_from")
    end_location = models.ForeignKey(Location, on_delete=models.CASCADE, related_name="routes_to")
    eta = models.CharField(max_length=64, null=True, blank=True)
    eta_seconds = models.IntegerField(null=True, blank=True)
    distance_meters = models.IntegerField(null=True, blank=True)
    summary = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["start_location", "end_location"], name="unique_route_per_ordered_pair"),
        ]
        indexes = [
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"{self.start_location} → {self.end_location}"


class RouteCoordinate(models.Model):
    route = models.ForeignKey(Route, on_delete=models.CASCADE, related_name="coordinates")
    point_index = models.PositiveIntegerField()
    latitude = models.FloatField()
    longitude = models.FloatField()

    class Meta:
        ordering = ["point_index"]
        constraints = [
            models.UniqueConstraint(fields=["route", "point_index"], name="unique_route_point_index"),
        ]


class RouteStep(models.Model):
    route = models.ForeignKey(Route, on_delete=models.CASCADE, related_name="steps")
    step_number = models.PositiveIntegerField()
    instruction = models.TextField()

    class Meta:
        ordering = ["step_number"]
        constraints = [
            models.UniqueConstraint(fields=["route", "step_number"], name="unique_route_step_number"),
        ]
