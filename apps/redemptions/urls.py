from django.urls import path
from . import views

app_name = 'redemptions'

urlpatterns = [
    # Redemption requests
    # GET  /api/redemptions/          - Own requests
    # POST /api/redemptions/          - Lock coins in a new request
    # GET  /api/redemptions/config/   - Limits, rate and fee
    # GET  /api/redemptions/{id}/     - Get request
    path('redemptions/', views.redemptions, name='redemptions'),
    path('redemptions/config/', views.redemption_config, name='config'),
    path('redemptions/<uuid:redemption_id>/', views.redemption_detail, name='redemption-detail'),

    # Payout methods
    # GET    /api/payout-methods/       - Own payout methods
    # POST   /api/payout-methods/       - Add payout method
    # DELETE /api/payout-methods/{id}/  - Delete payout method
    path('payout-methods/', views.payout_methods, name='payout-methods'),
    path('payout-methods/<uuid:payout_method_id>/', views.payout_method_detail, name='payout-method-detail'),

    # Admin review
    # GET  /api/admin/redemptions/       - Filtered list (status, user_id, from, to)
    # POST /api/admin/redemptions/{id}/  - {"action": "approve" | "reject"}
    path('admin/redemptions/', views.admin_redemptions, name='admin-redemptions'),
    path('admin/redemptions/<uuid:redemption_id>/', views.admin_redemption_action, name='admin-redemption-action'),
]
