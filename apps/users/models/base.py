from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel

from apps.users.managers import CustomUserManager


class UserType(models.TextChoices):
    """Roles a user can negotiate under"""

    BUSINESS_OWNER = "business_owner", "Business Owner"
    BUYER = "buyer", "Buyer"


class CustomUser(AbstractUser, BaseModel):
    """
    Email-login user. `user_type` selects which account profile
    (BusinessOwner or Buyer) the user acts through.
    """

    username = None

    email = models.EmailField(_("email address"), unique=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    user_type = models.CharField(
        max_length=20,
        choices=UserType.choices,
        default=UserType.BUYER,
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = [
        "first_name",
        "last_name",
    ]

    objects = CustomUserManager()

    class Meta:
        db_table = "core_user"
        indexes = [
            models.Index(fields=["email", "is_active"], name="core_user_email_active_idx"),
            models.Index(fields=["user_type"], name="core_user_user_type_idx"),
        ]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.email

    def get_short_name(self):
        return self.first_name or self.email.split("@")[0]

    @property
    def is_business_owner(self) -> bool:
        return self.user_type == UserType.BUSINESS_OWNER

    @property
    def is_buyer(self) -> bool:
        return self.user_type == UserType.BUYER
