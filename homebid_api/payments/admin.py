from django.contrib import admin
from .models import WebhookEvent


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    list_display = ('provider', 'event_id', 'event_type', 'received_at')
    list_filter = ('provider', 'event_type')
    search_fields = ('event_id',)
