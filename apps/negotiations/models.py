import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.models import BaseModel
from apps.offers.models import OfferTerms


class ImmutableRecordError(Exception):
    """Raised on any attempt to change or remove a ledger row."""

    pass


class ThreadStatus(models.TextChoices):
    OPEN = "open", _("Open")
    ACCEPTED = "accepted", _("Accepted")
    REJECTED = "rejected", _("Rejected")
    COUNTERED = "countered", _("Countered")
    CLOSE = "close", _("Close")


class SenderRole(models.TextChoices):
    BUSINESS_OWNER = "business_owner", _("Business Owner")
    BUYER = "buyer", _("Buyer")


class DecisionOutcome(models.TextChoices):
    ACCEPT = "accept", _("Accept")
    REJECT = "reject", _("Reject")


class Thread(BaseModel):
    """
    The negotiation between one offer and one buyer. Current terms are never
    stored here: they are always the thread's highest-version Proposal.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    offer = models.ForeignKey(
        "offers.Offer", on_delete=models.CASCADE, related_name="threads"
    )
    buyer = models.ForeignKey(
        "accounts.Buyer", on_delete=models.CASCADE, related_name="threads"
    )
    business_owner = models.ForeignKey(
        "accounts.BusinessOwner", on_delete=models.CASCADE, related_name="threads"
    )
    status = models.CharField(
        max_length=20, choices=ThreadStatus.choices, default=ThreadStatus.OPEN
    )

    class Meta:
        db_table = "offer_buyers"
        verbose_name = _("Negotiation Thread")
        verbose_name_plural = _("Negotiation Threads")
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["offer", "buyer"], name="unique_thread_per_offer_buyer"
            ),
        ]
        indexes = [
            models.Index(fields=["business_owner", "status"], name="thread_owner_status_idx"),
            models.Index(fields=["buyer", "status"], name="thread_buyer_status_idx"),
        ]

    def __str__(self):
        return f"Thread {self.offer_id} / {self.buyer_id} ({self.status})"

    @property
    def is_closed(self) -> bool:
        return self.status == ThreadStatus.CLOSE


class Proposal(OfferTerms):
    """One immutable version of the terms exchanged within a thread."""

    thread = models.ForeignKey(
        Thread, on_delete=models.CASCADE, related_name="proposals"
    )
    version_no = models.PositiveIntegerField()
    from_party = models.CharField(max_length=255)
    to_party = models.CharField(max_length=255)
    sender_role = models.CharField(max_length=20, choices=SenderRole.choices)
    offer_name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "offer_versions"
        verbose_name = _("Proposal")
        verbose_name_plural = _("Proposals")
        ordering = ["thread", "version_no"]
        constraints = [
            models.UniqueConstraint(
                fields=["thread", "version_no"], name="unique_version_per_thread"
            ),
            models.CheckConstraint(
                condition=models.Q(version_no__gte=1), name="proposal_version_positive"
            ),
        ]

    def __str__(self):
        return f"v{self.version_no} {self.from_party} -> {self.to_party}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Proposals cannot be modified once created.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Proposals cannot be deleted.")


class Decision(models.Model):
    """
    An accept or reject verdict against the proposal that was current when
    it was made. Insert-only audit row.
    """

    proposal = models.ForeignKey(
        Proposal, on_delete=models.PROTECT, related_name="decisions"
    )
    thread = models.ForeignKey(
        Thread, on_delete=models.CASCADE, related_name="decisions"
    )
    offer = models.ForeignKey(
        "offers.Offer", on_delete=models.CASCADE, related_name="decisions"
    )
    business_owner = models.ForeignKey(
        "accounts.BusinessOwner", on_delete=models.CASCADE, related_name="decisions"
    )
    buyer = models.ForeignKey(
        "accounts.Buyer", on_delete=models.CASCADE, related_name="decisions"
    )
    is_accepted = models.BooleanField(default=False)
    is_rejected = models.BooleanField(default=False)
    accepted_by = models.CharField(max_length=255, blank=True)
    rejected_by = models.CharField(max_length=255, blank=True)
    actor_role = models.CharField(max_length=20, choices=SenderRole.choices)
    actor_id = models.UUIDField()
    owner_name = models.CharField(max_length=255, blank=True)
    owner_company_name = models.CharField(max_length=255, blank=True)
    buyer_name = models.CharField(max_length=255, blank=True)
    buyer_company_name = models.CharField(max_length=255, blank=True)
    offer_name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "offer_results"
        verbose_name = _("Decision")
        verbose_name_plural = _("Decisions")
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(is_accepted=True, is_rejected=False)
                    | models.Q(is_accepted=False, is_rejected=True)
                ),
                name="decision_accept_xor_reject",
            ),
        ]
        indexes = [
            models.Index(fields=["offer", "buyer", "-created_at"], name="decision_pair_recent_idx"),
        ]

    def __str__(self):
        return f"{self.outcome} of v{self.proposal.version_no} by {self.actor_role}"

    @property
    def outcome(self) -> str:
        return DecisionOutcome.ACCEPT if self.is_accepted else DecisionOutcome.REJECT

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Decisions cannot be modified once recorded.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Decisions cannot be deleted.")
