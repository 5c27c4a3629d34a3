from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BoostViewSet


router = DefaultRouter()
router.register(r'boosts', BoostViewSet, basename='boosts')

urlpatterns = [
    path('', include(router.urls)),
]
