from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'orders'

router = DefaultRouter()
router.register(r'', views.OrderViewSet, basename='order')

urlpatterns = [
    # GET    /api/orders/                       - Role-scoped orders
    # GET    /api/orders/farmer-orders/         - Orders on a farmer's fields (?farmerId)
    # GET    /api/orders/farmer/{farmer_id}/    - Orders on the given farmer's fields
    # GET    /api/orders/my-orders/             - Current buyer's orders
    # GET    /api/orders/buyer/{buyer_id}/      - Orders of the given buyer
    # POST   /api/orders/                       - Place order (debits coins)
    # GET    /api/orders/{id}/                  - Get order
    # PUT    /api/orders/{id}/                  - Update delivery details / status
    # PUT    /api/orders/{id}/status/           - Change status (settles coins)
    # DELETE /api/orders/{id}/                  - Delete order (admin)

    path('', include(router.urls)),
]
