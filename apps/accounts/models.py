import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel


class PartyStatus(models.TextChoices):
    ACTIVE = "active", _("Active")
    INACTIVE = "inactive", _("Inactive")
    SUSPENDED = "suspended", _("Suspended")


class BusinessType(models.TextChoices):
    WHOLESALER = "wholesaler", _("Wholesaler")
    RETAILER = "retailer", _("Retailer")
    FARMER = "farmer", _("Farmer")
    EXPORTER = "exporter", _("Exporter")


class BusinessOwner(BaseModel):
    """
    A business that authors offers and manages its own list of buyers.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="business_owner_profile",
    )
    business_name = models.CharField(max_length=255)
    business_type = models.CharField(
        max_length=20, choices=BusinessType.choices, default=BusinessType.WHOLESALER
    )
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=20, blank=True)
    country = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20, choices=PartyStatus.choices, default=PartyStatus.ACTIVE
    )
    is_verified = models.BooleanField(default=False)

    class Meta:
        db_table = "business_owners"
        verbose_name = _("Business Owner")
        verbose_name_plural = _("Business Owners")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="bo_status_idx"),
        ]

    def __str__(self):
        return self.business_name

    @property
    def is_active(self) -> bool:
        return self.status == PartyStatus.ACTIVE

    @property
    def owner_name(self) -> str:
        return self.user.get_full_name()


class Buyer(BaseModel):
    """
    A buyer company registered by one business owner. Every negotiation
    thread pairs an offer with a buyer of the same owner.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        BusinessOwner, on_delete=models.CASCADE, related_name="buyers"
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="buyer_profile",
    )
    buyers_company_name = models.CharField(max_length=255)
    contact_name = models.CharField(max_length=255)
    contact_email = models.EmailField()
    country = models.CharField(max_length=100)
    status = models.CharField(
        max_length=20, choices=PartyStatus.choices, default=PartyStatus.ACTIVE
    )
    is_verified = models.BooleanField(default=False)

    class Meta:
        db_table = "buyers"
        verbose_name = _("Buyer")
        verbose_name_plural = _("Buyers")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner"], name="buyer_owner_idx"),
        ]

    def __str__(self):
        return f"{self.buyers_company_name} ({self.contact_name})"
