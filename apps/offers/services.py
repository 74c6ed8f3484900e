import logging
from typing import Any, Dict

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from apps.negotiations.exceptions import OfferUnavailable
from apps.negotiations.guard import Action, Target, enforce
from apps.negotiations.principal import Principal
from apps.offers.models import Offer, OfferStatus

logger = logging.getLogger("offers_performance")


class OfferService:
    """Owner-side lifecycle of offers: create, edit, close, re-open, delete."""

    @staticmethod
    def _lock_offer(offer_id) -> Offer:
        try:
            return (
                Offer.all_objects.select_for_update()
                .select_related("business_owner")
                .get(pk=offer_id)
            )
        except Offer.DoesNotExist:
            raise NotFound("Offer not found")

    @staticmethod
    def create_offer(principal: Principal, data: Dict[str, Any]) -> Offer:
        start_time = timezone.now()
        enforce(principal, Action.MANAGE_OFFER, Target())

        with transaction.atomic():
            offer = Offer.objects.create(
                business_owner=principal.profile,
                status=OfferStatus.OPEN,
                **data,
            )

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"Offer {offer.id} created in {duration:.2f}ms")
        return offer

    @staticmethod
    def update_offer(principal: Principal, offer_id, data: Dict[str, Any]) -> Offer:
        """Partial update. Closed or deleted offers are frozen."""
        start_time = timezone.now()

        with transaction.atomic():
            offer = OfferService._lock_offer(offer_id)
            enforce(principal, Action.MANAGE_OFFER, Target(offer=offer))

            if not offer.is_available:
                raise OfferUnavailable("Cannot update a closed or deleted offer")

            # status only moves through close/open
            data.pop("status", None)
            for attr, value in data.items():
                setattr(offer, attr, value)
            offer.save(update_fields=list(data.keys()) + ["updated_at"])

        duration = (timezone.now() - start_time).total_seconds() * 1000
        logger.info(f"Offer {offer.id} updated in {duration:.2f}ms")
        return offer

    @staticmethod
    def close_offer(principal: Principal, offer_id) -> Offer:
        with transaction.atomic():
            offer = OfferService._lock_offer(offer_id)
            enforce(principal, Action.MANAGE_OFFER, Target(offer=offer))

            if not offer.is_available:
                raise OfferUnavailable("Cannot close a closed or deleted offer")

            offer.status = OfferStatus.CLOSE
            offer.save(update_fields=["status", "updated_at"])

        logger.info(f"Offer {offer.id} closed")
        return offer

    @staticmethod
    def open_offer(principal: Principal, offer_id) -> Offer:
        with transaction.atomic():
            offer = OfferService._lock_offer(offer_id)
            enforce(principal, Action.MANAGE_OFFER, Target(offer=offer))

            if offer.is_deleted:
                raise OfferUnavailable("Cannot re-open a deleted offer")
            if offer.status == OfferStatus.OPEN:
                raise OfferUnavailable("Offer is already open.")

            offer.status = OfferStatus.OPEN
            offer.save(update_fields=["status", "updated_at"])

        logger.info(f"Offer {offer.id} re-opened")
        return offer

    @staticmethod
    def delete_offer(principal: Principal, offer_id) -> Offer:
        """Soft delete. Also closes the offer; there is no way back."""
        with transaction.atomic():
            offer = OfferService._lock_offer(offer_id)
            enforce(principal, Action.MANAGE_OFFER, Target(offer=offer))

            if offer.is_deleted:
                raise OfferUnavailable("Offer is already deleted")

            offer.delete()

        logger.info(f"Offer {offer.id} soft-deleted")
        return offer
