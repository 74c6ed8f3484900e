from rest_framework import serializers

from apps.negotiations.models import Decision, DecisionOutcome, Proposal, Thread, ThreadStatus
from apps.negotiations.selectors import derive_thread_status, latest_proposal
from apps.offers.api.serializers import SizeBreakupSerializer
from apps.offers.models import OfferTerms


class TermOverridesSerializer(serializers.Serializer):
    """Partial terms for one round. Omitted or null fields keep their previous value."""

    product_name = serializers.CharField(max_length=100, required=False, allow_null=True)
    species_name = serializers.CharField(max_length=100, required=False, allow_null=True)
    brand = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    plant_approval_number = serializers.CharField(
        max_length=50, required=False, allow_null=True, allow_blank=True
    )
    origin = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    processor = serializers.CharField(
        max_length=50, required=False, allow_null=True, allow_blank=True
    )
    packing = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    quantity = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    tolerance = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )
    payment_terms = serializers.CharField(
        max_length=255, required=False, allow_null=True, allow_blank=True
    )
    size_breakups = SizeBreakupSerializer(
        many=True, required=False, allow_null=True, allow_empty=False
    )
    total = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    grand_total = serializers.DecimalField(
        max_digits=14, decimal_places=2, required=False, allow_null=True
    )
    shipment_date = serializers.DateField(required=False, allow_null=True)
    offer_validity_date = serializers.DateField(required=False, allow_null=True)
    remark = serializers.CharField(
        max_length=100, required=False, allow_null=True, allow_blank=True
    )


class SendOfferSerializer(serializers.Serializer):
    buyer_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    overrides = TermOverridesSerializer(required=False)


class RespondOfferSerializer(serializers.Serializer):
    buyer_id = serializers.UUIDField()
    action = serializers.ChoiceField(choices=DecisionOutcome.choices)


class ThreadOutcomeSerializer(serializers.Serializer):
    thread_id = serializers.UUIDField()
    buyer_id = serializers.UUIDField()
    version_no = serializers.IntegerField()
    status = serializers.CharField()
    to_party = serializers.CharField()


class SendResultSerializer(serializers.Serializer):
    offer_id = serializers.UUIDField()
    from_party = serializers.CharField()
    to_party = serializers.CharField()
    threads_affected = ThreadOutcomeSerializer(many=True)


class ProposalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Proposal
        fields = [
            "id",
            "version_no",
            "from_party",
            "to_party",
            "sender_role",
            "offer_name",
            *OfferTerms.TERM_FIELDS,
            "created_at",
        ]
        read_only_fields = fields


class DecisionSerializer(serializers.ModelSerializer):
    outcome = serializers.CharField(read_only=True)
    version_no = serializers.IntegerField(source="proposal.version_no", read_only=True)

    class Meta:
        model = Decision
        fields = [
            "id",
            "outcome",
            "proposal",
            "version_no",
            "thread",
            "offer",
            "business_owner",
            "buyer",
            "is_accepted",
            "is_rejected",
            "accepted_by",
            "rejected_by",
            "actor_role",
            "actor_id",
            "owner_name",
            "owner_company_name",
            "buyer_name",
            "buyer_company_name",
            "offer_name",
            "created_at",
        ]
        read_only_fields = fields


class ThreadSerializer(serializers.ModelSerializer):
    offer_name = serializers.CharField(source="offer.offer_name", read_only=True)
    buyer_company_name = serializers.CharField(
        source="buyer.buyers_company_name", read_only=True
    )
    business_name = serializers.CharField(
        source="business_owner.business_name", read_only=True
    )
    negotiation_status = serializers.SerializerMethodField()
    latest_version = serializers.SerializerMethodField()

    class Meta:
        model = Thread
        fields = [
            "id",
            "offer",
            "offer_name",
            "buyer",
            "buyer_company_name",
            "business_owner",
            "business_name",
            "status",
            "negotiation_status",
            "latest_version",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_negotiation_status(self, obj) -> str:
        annotated = getattr(obj, "negotiation_status", None)
        if annotated is not None:
            return annotated
        return derive_thread_status(obj)

    def get_latest_version(self, obj) -> int | None:
        if hasattr(obj, "last_version_no"):
            return obj.last_version_no
        proposal = latest_proposal(obj)
        return proposal.version_no if proposal else None


class NegotiationHistorySerializer(serializers.Serializer):
    thread = ThreadSerializer()
    status = serializers.ChoiceField(choices=ThreadStatus.choices)
    proposals = ProposalSerializer(many=True)
    decisions = DecisionSerializer(many=True)
