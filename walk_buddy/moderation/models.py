from django.db import models

from walk_buddy.routing.models import Location, Route


class Message(models.Model):
    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
    ]

    CATEGORY_CHOICES = [
        ("CLEAN", "Clean"),
        ("PROFANITY", "Profanity"),
    ]

    message = models.TextField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    profanity_category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, default="CLEAN")

    start_location = models.ForeignKey(
        Location, null=True, blank=True, on_delete=models.SET_NULL, related_name="messages_from"
    )
    end_location = models.ForeignKey(
        Location, null=True, blank=True, on_delete=models.SET_NULL, related_name="messages_to"
    )
    route = models.ForeignKey(Route, null=True, blank=True, on_delete=models.SET_NULL, related_name="messages")

    reviewed_by = models.CharField(max_length=255, null=True, blank=True)
    review_notes = models.TextField(null=True, blank=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self):
        return f"#{self.pk} [{self.status}] {self.message[:40]}"
