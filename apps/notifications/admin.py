from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['user', 'type', 'short_message', 'is_read', 'created_at']
    list_filter = ['type', 'is_read', 'created_at']
    search_fields = ['user__email', 'message']
    raw_id_fields = ['user']

    def short_message(self, obj):
        return obj.message[:60]
    short_message.short_description = 'Message'
