from rest_framework import serializers

from apps.core.serializers import TimestampedModelSerializer
from apps.offers.models import Offer, OfferTerms


class SizeBreakupSerializer(serializers.Serializer):
    """One row of an offer's size/price breakdown."""

    size = serializers.CharField(max_length=50)
    breakup = serializers.IntegerField()
    condition = serializers.CharField(max_length=50, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=4, coerce_to_string=False)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        # stored in a JSONField
        value["price"] = float(value["price"])
        return value


class OfferSerializer(TimestampedModelSerializer):
    """Full offer representation, also used for create and partial update."""

    size_breakups = SizeBreakupSerializer(many=True, allow_empty=False)
    is_deleted = serializers.BooleanField(read_only=True)
    business_owner = serializers.UUIDField(source="business_owner_id", read_only=True)
    business_name = serializers.CharField(
        source="business_owner.business_name", read_only=True
    )

    class Meta:
        model = Offer
        fields = [
            "id",
            "business_owner",
            "business_name",
            "offer_name",
            *OfferTerms.TERM_FIELDS,
            "status",
            "is_deleted",
            "deleted_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "status", "deleted_at"]

    def validate(self, attrs):
        total = attrs.get("total")
        grand_total = attrs.get("grand_total")
        if total is not None and total < 0:
            raise serializers.ValidationError({"total": "Total cannot be negative."})
        if grand_total is not None and grand_total < 0:
            raise serializers.ValidationError(
                {"grand_total": "Grand total cannot be negative."}
            )
        # a partial update is checked against the stored dates
        offer_validity_date = attrs.get(
            "offer_validity_date", getattr(self.instance, "offer_validity_date", None)
        )
        shipment_date = attrs.get(
            "shipment_date", getattr(self.instance, "shipment_date", None)
        )
        if (
            offer_validity_date
            and shipment_date
            and shipment_date < offer_validity_date
        ):
            raise serializers.ValidationError(
                {"shipment_date": "Shipment date cannot be before offer validity date."}
            )
        return attrs


class OfferListSerializer(TimestampedModelSerializer):
    """Compact representation for offer listings."""

    is_deleted = serializers.BooleanField(read_only=True)

    class Meta:
        model = Offer
        fields = [
            "id",
            "offer_name",
            "product_name",
            "species_name",
            "grand_total",
            "status",
            "is_deleted",
            "created_at",
            "updated_at",
        ]
