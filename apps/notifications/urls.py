from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'notifications'

router = DefaultRouter()
router.register(r'', views.NotificationViewSet, basename='notification')

urlpatterns = [
    # GET  /api/notifications/                 - List own notifications
    # GET  /api/notifications/{id}/            - Notification detail
    # POST /api/notifications/{id}/read/       - Mark as read
    # POST /api/notifications/read-all/        - Mark all as read
    path('', include(router.urls)),
]
