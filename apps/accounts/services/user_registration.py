"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    name: str = "",
    user_type: str = "buyer",
    preferred_currency: str = "USD"
) -> User:
    """
    Register a new marketplace user with an empty wallet.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        name: Optional display name
        user_type: farmer or buyer (admins are created through the Django admin)
        preferred_currency: ISO currency used to price orders in coins

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the user type is not allowed
    """
    if user_type == 'admin':
        raise UserRegistrationError("Cannot self-register as admin")

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            name=name,
            user_type=user_type,
            preferred_currency=preferred_currency.upper(),
        )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("Registered %s user %s", user.user_type, user.id)
    return user
