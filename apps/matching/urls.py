from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import (
    RelationshipViewSet, LikesViewSet, ViewersViewSet, ChatViewSet, ComplimentViewSet,
)


router = DefaultRouter()
router.register(r'relationships', RelationshipViewSet, basename='relationships')
router.register(r'likes', LikesViewSet, basename='likes')
router.register(r'viewers', ViewersViewSet, basename='viewers')
router.register(r'chats', ChatViewSet, basename='chats')
router.register(r'compliments', ComplimentViewSet, basename='compliments')


urlpatterns = [
    path('', include(router.urls)),
]
