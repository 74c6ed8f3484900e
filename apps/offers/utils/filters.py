import django_filters

from apps.offers.models import Offer, OfferStatus


class OfferFilter(django_filters.FilterSet):
    """Search filters for the owner's offer list"""

    offer_id = django_filters.UUIDFilter(field_name="id")
    offer_name = django_filters.CharFilter(field_name="offer_name", lookup_expr="icontains")
    status = django_filters.ChoiceFilter(choices=OfferStatus.choices)
    is_deleted = django_filters.BooleanFilter(method="filter_is_deleted")

    class Meta:
        model = Offer
        fields = ["offer_id", "offer_name", "status", "is_deleted"]

    def filter_is_deleted(self, queryset, name, value):
        return queryset.filter(deleted_at__isnull=not value)
