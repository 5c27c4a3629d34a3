from django.contrib import admin
from .models import ProfileBoost


@admin.register(ProfileBoost)
class ProfileBoostAdmin(admin.ModelAdmin):
    list_display = ['user', 'started_at', 'expires_at', 'is_active']
    raw_id_fields = ['user']
    date_hierarchy = 'started_at'

    @admin.display(boolean=True)
    def is_active(self, obj):
        return obj.is_active
