from django.urls import path
from . import views

app_name = 'coins'

urlpatterns = [
    # Catalogue
    path('coins/packs/', views.list_packs, name='packs'),
    path('coins/currency-rates/', views.list_currency_rates, name='currency-rates'),

    # Wallet
    path('coins/transactions/', views.TransactionListView.as_view(), name='transactions'),
    path('coins/purchase-intent/', views.purchase_intent, name='purchase-intent'),
    path('coins/<uuid:user_id>/', views.balance, name='balance'),
    path('coins/<uuid:user_id>/deduct/', views.deduct, name='deduct'),
    path('coins/<uuid:user_id>/add/', views.add, name='add'),

    # Stripe webhook
    path('webhooks/stripe/', views.stripe_webhook, name='stripe-webhook'),

    # Admin
    path('admin/packages/', views.admin_packages, name='admin-packages'),
    path('admin/packages/<uuid:package_id>/', views.admin_package_detail, name='admin-package-detail'),
    path('admin/currency-rates/', views.admin_currency_rates, name='admin-currency-rates'),
    path('admin/currency-rates/<str:currency>/', views.admin_currency_rate_detail, name='admin-currency-rate-detail'),
]
