from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'rentals'

router = DefaultRouter()
router.register(r'', views.RentedFieldViewSet, basename='rental')

urlpatterns = [
    # GET    /api/rented-fields/                         - List rentals
    # GET    /api/rented-fields/my-rentals/              - Own rentals with field details
    # GET    /api/rented-fields/active-by-field/?field_id - Active rentals of a field
    # POST   /api/rented-fields/                         - Rent a field (farmers)
    # GET    /api/rented-fields/{id}/                    - Get rental
    # PUT    /api/rented-fields/{id}/                    - Update rental
    # DELETE /api/rented-fields/{id}/                    - Delete rental

    path('', include(router.urls)),
]
