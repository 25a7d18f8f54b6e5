"""
Identity model for the marketplace.

The user record is the identity the rest of the system trusts: bookings,
messages, reviews and notifications all point at it. Credentials are
verified elsewhere (JWT bearer tokens); this app only stores who a user is
and which role they act in.

Related files:
    - managers.py: Email-based user creation
    - serializers.py: Public identity shape embedded in chat payloads
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class UserRole(models.TextChoices):
    """
    Marketplace role.

    GUEST: Books stays and messages hosts
    HOST: Owns listings and answers guests
    """

    GUEST = "guest", "Guest"
    HOST = "host", "Host"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom user model using email as the primary identifier.

    Fields:
        email: Login identifier, unique
        name: Display name shown to the other party in chat and bookings
        role: guest or host
        avatar: URL of the profile picture (storage is external)
        is_active: Whether the account may authenticate
        is_staff: Whether the user can access Django admin
        date_joined: When the account was created

    Usage:
        host = User.objects.create_user(
            email="host@example.com",
            password="secret",
            name="Ana",
            role=UserRole.HOST,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    name = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Display name",
    )

    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.GUEST,
        db_index=True,
        help_text="Marketplace role (guest or host)",
    )

    avatar = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Profile picture URL",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "authentication_user"
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(" ")[0] if self.name else self.email.split("@")[0]

    @property
    def is_host(self) -> bool:
        """Check if user acts as a host."""
        return self.role == UserRole.HOST
