from django.contrib import admin

from .models import User, Profile, DeviceToken


admin.site.register(User)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'is_premium', 'boost_count', 'total_matches', 'profile_views']
    list_filter = ['is_premium', 'notifications_enabled']
    search_fields = ['user__username', 'user__email']
    readonly_fields = ['total_matches', 'profile_views', 'created_at', 'updated_at']


admin.site.register(DeviceToken)
