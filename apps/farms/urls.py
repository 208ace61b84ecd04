from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'farms'

router = DefaultRouter()
router.register(r'farms', views.FarmViewSet, basename='farm')
router.register(r'fields', views.FieldViewSet, basename='field')

urlpatterns = [
    # Farm routes
    # GET    /api/farms/                     - List farms (?owner_id)
    # POST   /api/farms/                     - Create farm
    # GET    /api/farms/{id}/                - Get farm
    # PUT    /api/farms/{id}/                - Merge update
    # DELETE /api/farms/{id}/                - Delete farm

    # Field routes
    # GET    /api/fields/                    - Own fields (admin: all, ?owner_id)
    # GET    /api/fields/all/                - Every field
    # GET    /api/fields/available-to-rent/  - Rentable fields of other farmers
    # POST   /api/fields/                    - Create field
    # GET    /api/fields/{id}/               - Get field
    # PUT    /api/fields/{id}/               - Merge update
    # DELETE /api/fields/{id}/               - Delete field

    path('', include(router.urls)),
]
