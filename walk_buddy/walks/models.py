from django.conf import settings
from django.db import models

from walk_buddy.routing.models import Location, Route


class WalkRequest(models.Model):
    STATUS_CHOICES = [
        ("pending", "Pending"),
        ("active", "Active"),
        ("completed", "Completed"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="walk_requests")
    route = models.ForeignKey(Route, null=True, blank=True, on_delete=models.SET_NULL, related_name="walks")
    start_location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name="walks_from")
    end_location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name="walks_to")
    request_time = models.DateTimeField(auto_now_add=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="pending", db_index=True)

    buddy = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="buddy_walks"
    )
    buddy_latitude = models.FloatField(null=True, blank=True)
    buddy_longitude = models.FloatField(null=True, blank=True)
    eta = models.CharField(max_length=64, null=True, blank=True)

    class Meta:
        ordering = ["-request_time", "-id"]

    def __str__(self):
        return f"Walk #{self.pk} {self.start_location} → {self.end_location} ({self.status})"

    @property
    def buddy_position(self):
        lat = self.buddy_latitude if self.buddy_latitude is not None else self.start_location.latitude
        lng = self.buddy_longitude if self.buddy_longitude is not None else self.start_location.longitude
        return [lat, lng]
