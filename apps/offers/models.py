import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel, SoftDeleteBaseModel


class OfferStatus(models.TextChoices):
    OPEN = "open", _("Open")
    CLOSE = "close", _("Close")


class OfferTerms(models.Model):
    """
    Commercial terms shared by an Offer and every Proposal negotiated from it.
    Each field can be overridden independently in a later round.
    """

    TERM_FIELDS = (
        "product_name",
        "species_name",
        "brand",
        "plant_approval_number",
        "origin",
        "processor",
        "packing",
        "quantity",
        "tolerance",
        "payment_terms",
        "size_breakups",
        "total",
        "grand_total",
        "shipment_date",
        "offer_validity_date",
        "remark",
    )

    product_name = models.CharField(max_length=100)
    species_name = models.CharField(max_length=100)
    brand = models.CharField(max_length=50, blank=True)
    plant_approval_number = models.CharField(max_length=50, blank=True)
    origin = models.CharField(max_length=50, blank=True)
    processor = models.CharField(max_length=50, blank=True)
    packing = models.CharField(max_length=255, blank=True)
    quantity = models.CharField(max_length=100, blank=True)
    tolerance = models.CharField(max_length=100, blank=True)
    payment_terms = models.CharField(max_length=255, blank=True)
    # [{"size": "20/30", "breakup": 250, "condition": "frozen", "price": 1.5}]
    size_breakups = models.JSONField(default=list)
    total = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    grand_total = models.DecimalField(
        max_digits=14, decimal_places=2, null=True, blank=True
    )
    shipment_date = models.DateField(null=True, blank=True)
    offer_validity_date = models.DateField(null=True, blank=True)
    remark = models.CharField(max_length=100, blank=True)

    class Meta:
        abstract = True

    def terms_snapshot(self) -> dict:
        return {name: getattr(self, name) for name in self.TERM_FIELDS}


class Offer(OfferTerms, SoftDeleteBaseModel):
    """
    A commercial offer authored by one business owner and negotiated with
    any number of that owner's buyers.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    business_owner = models.ForeignKey(
        "accounts.BusinessOwner", on_delete=models.CASCADE, related_name="offers"
    )
    offer_name = models.CharField(max_length=100)
    status = models.CharField(
        max_length=10, choices=OfferStatus.choices, default=OfferStatus.OPEN
    )

    class Meta:
        db_table = "offers"
        verbose_name = _("Offer")
        verbose_name_plural = _("Offers")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["business_owner", "status"], name="offer_owner_status_idx"),
            models.Index(fields=["offer_name"], name="offer_name_idx"),
        ]

    def __str__(self):
        return f"{self.offer_name} ({self.status})"

    @property
    def is_available(self) -> bool:
        """Open and not soft-deleted: the only state that accepts negotiation."""
        return self.status == OfferStatus.OPEN and not self.is_deleted

    def delete(self, hard_delete=False, *args, **kwargs):
        if not hard_delete:
            self.status = OfferStatus.CLOSE
        return super().delete(hard_delete, *args, **kwargs)

    def soft_delete_update_fields(self):
        return super().soft_delete_update_fields() + ["status"]
