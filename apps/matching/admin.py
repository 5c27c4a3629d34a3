from django.contrib import admin
from .models import (
    Swipe, Match, Unmatch, Block, Report, ProfileView, Compliment
)


@admin.register(Swipe)
class SwipeAdmin(admin.ModelAdmin):
    list_display = ['swiper', 'action', 'swiped', 'created_at']
    list_filter = ['action']
    raw_id_fields = ['swiper', 'swiped']


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ['id', 'user1', 'user2', 'created_at']
    raw_id_fields = ['user1', 'user2']


@admin.register(Unmatch)
class UnmatchAdmin(admin.ModelAdmin):
    list_display = ['match_id', 'user1', 'user2', 'unmatched_by', 'rematch_status', 'created_at']
    list_filter = ['rematch_status']
    raw_id_fields = ['user1', 'user2', 'unmatched_by', 'rematch_requested_by']


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ['reporter', 'reported', 'reason', 'created_at']
    search_fields = ['reason', 'details']
    raw_id_fields = ['reporter', 'reported']


@admin.register(Compliment)
class ComplimentAdmin(admin.ModelAdmin):
    list_display = ['sender', 'recipient', 'status', 'created_at']
    list_filter = ['status']
    raw_id_fields = ['sender', 'recipient']


admin.site.register(Block)
admin.site.register(ProfileView)
