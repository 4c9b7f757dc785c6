from django.db import models


class WebhookEvent(models.Model):
    """A processed processor event; its id is recorded so replays are skipped."""
    provider = models.CharField(max_length=50)
    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100, blank=True)
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-received_at']

    def __str__(self):
        return f"{self.provider} {self.event_type} {self.event_id}"
