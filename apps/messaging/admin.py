from django.contrib import admin
from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ['match_id', 'sender', 'is_read', 'created_at']
    list_filter = ['is_read']
    search_fields = ['match_id', 'sender__username']
