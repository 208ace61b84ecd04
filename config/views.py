import logging

from django.conf import settings
from django.db import connection, DatabaseError
from django.http import JsonResponse
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


def _stripe_key_prefix():
    key = settings.STRIPE_SECRET_KEY
    return key[:7] if key else None


@extend_schema(exclude=True)
@api_view(['GET'])
@permission_classes([AllowAny])
def home(request):
    """Plain liveness message."""
    return Response('Hello from the backend!')


@extend_schema(exclude=True)
@api_view(['GET'])
@permission_classes([AllowAny])
def db_test(request):
    """Run a trivial query against the database."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError as e:
        logger.error("Database check failed: %s", e)
        return Response(
            {'error': 'Database connection failed', 'details': str(e)},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return Response({'message': 'Database connection successful', 'time': timezone.now()})


@extend_schema(
    description="Health check with database status and payment provider configuration.",
    tags=['health'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Health check for load balancers and deploy hooks."""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        database = 'connected'
    except DatabaseError as e:
        logger.error("Health check database error: %s", e)
        return Response({
            'status': 'unhealthy',
            'database': 'disconnected',
            'error': str(e),
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'status': 'healthy',
        'database': database,
        'timestamp': timezone.now(),
        'stripe': {
            'configured': bool(settings.STRIPE_SECRET_KEY),
            'webhookConfigured': bool(settings.STRIPE_WEBHOOK_SECRET),
            'keyPrefix': _stripe_key_prefix(),
        },
    })


@extend_schema(
    description="Report whether Stripe keys are configured and in which mode.",
    tags=['health'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def stripe_check(request):
    """Diagnostics for the Stripe configuration."""
    key = settings.STRIPE_SECRET_KEY
    webhook_secret = settings.STRIPE_WEBHOOK_SECRET

    if not key or not webhook_secret:
        return Response({
            'configured': False,
            'hasSecretKey': bool(key),
            'hasWebhookSecret': bool(webhook_secret),
            'error': 'Stripe is not fully configured',
        }, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response({
        'configured': True,
        'hasSecretKey': True,
        'hasWebhookSecret': True,
        'keyPrefix': _stripe_key_prefix(),
        'isTestKey': key.startswith('sk_test_'),
        'isLiveKey': key.startswith('sk_live_'),
    })


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
