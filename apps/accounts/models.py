from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinValueValidator
from django.db import models
import uuid


class UserType(models.TextChoices):
    FARMER = 'farmer', 'Farmer'
    BUYER = 'buyer', 'Buyer'
    ADMIN = 'admin', 'Admin'


class UserManager(BaseUserManager):
    """Custom user manager for email-based authentication."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('user_type', UserType.ADMIN)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    Marketplace user with an email login and a coin wallet.

    ``coins`` is the spendable balance. ``locked_coins`` holds coins reserved
    by pending redemption requests; they are neither spendable nor paid out
    until an admin decides on the request. Both columns are only mutated by
    the coin and redemption services under a row lock.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, db_index=True)
    name = models.CharField(max_length=150, blank=True)
    user_type = models.CharField(
        max_length=20,
        choices=UserType.choices,
        default=UserType.BUYER
    )

    # Wallet
    coins = models.BigIntegerField(default=0, validators=[MinValueValidator(0)])
    locked_coins = models.BigIntegerField(default=0, validators=[MinValueValidator(0)])
    preferred_currency = models.CharField(max_length=3, default='USD')
    stripe_connect_account_id = models.CharField(max_length=255, blank=True, null=True)

    # Permissions
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        indexes = [
            models.Index(fields=['email'], name='users_email_idx'),
            models.Index(fields=['user_type'], name='users_user_type_idx'),
            models.Index(fields=['created_at'], name='users_created_at_idx'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(coins__gte=0), name='users_coins_non_negative'),
            models.CheckConstraint(condition=models.Q(locked_coins__gte=0), name='users_locked_coins_non_negative'),
        ]

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Return name or email prefix."""
        return self.name or self.email.split('@')[0]

    @property
    def is_platform_admin(self):
        return self.user_type == UserType.ADMIN or self.is_staff

    @property
    def is_farmer(self):
        return self.user_type == UserType.FARMER

    @property
    def is_buyer(self):
        return self.user_type == UserType.BUYER
