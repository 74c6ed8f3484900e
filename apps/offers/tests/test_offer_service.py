import uuid
from decimal import Decimal

import pytest
from rest_framework.exceptions import NotFound

from apps.negotiations.exceptions import ForbiddenNotOwner, OfferUnavailable
from apps.negotiations.principal import principal_from_user
from apps.offers.models import Offer, OfferStatus
from apps.offers.services import OfferService


@pytest.mark.django_db
class TestOfferLifecycle:
    def test_create_offer_is_open(self, owner, owner_principal, offer_terms):
        offer = OfferService.create_offer(
            owner_principal, {"offer_name": "Squid Rings", **offer_terms}
        )

        assert offer.status == OfferStatus.OPEN
        assert offer.business_owner == owner
        assert offer.is_available

    def test_buyer_cannot_create(self, buyer_one_principal, offer_terms):
        with pytest.raises(ForbiddenNotOwner):
            OfferService.create_offer(
                buyer_one_principal, {"offer_name": "Nope", **offer_terms}
            )

    def test_update_ignores_status(self, offer, owner_principal):
        updated = OfferService.update_offer(
            owner_principal,
            offer.id,
            {"total": Decimal("4000.00"), "status": OfferStatus.CLOSE},
        )

        offer.refresh_from_db()
        assert updated.total == Decimal("4000.00")
        assert offer.total == Decimal("4000.00")
        assert offer.status == OfferStatus.OPEN

    def test_closed_offer_is_frozen(self, offer, owner_principal):
        OfferService.close_offer(owner_principal, offer.id)

        with pytest.raises(OfferUnavailable):
            OfferService.update_offer(owner_principal, offer.id, {"remark": "late"})
        with pytest.raises(OfferUnavailable):
            OfferService.close_offer(owner_principal, offer.id)

    def test_reopen(self, offer, owner_principal):
        OfferService.close_offer(owner_principal, offer.id)
        reopened = OfferService.open_offer(owner_principal, offer.id)
        assert reopened.status == OfferStatus.OPEN

        with pytest.raises(OfferUnavailable):
            OfferService.open_offer(owner_principal, offer.id)

    def test_soft_delete_closes_and_hides(self, offer, owner_principal):
        OfferService.delete_offer(owner_principal, offer.id)

        assert not Offer.objects.filter(pk=offer.id).exists()
        deleted = Offer.all_objects.get(pk=offer.id)
        assert deleted.is_deleted
        assert deleted.status == OfferStatus.CLOSE

        with pytest.raises(OfferUnavailable):
            OfferService.open_offer(owner_principal, offer.id)
        with pytest.raises(OfferUnavailable):
            OfferService.delete_offer(owner_principal, offer.id)

    def test_other_owner_is_refused(self, offer, other_owner):
        with pytest.raises(ForbiddenNotOwner):
            OfferService.close_offer(principal_from_user(other_owner.user), offer.id)

    def test_unknown_offer(self, owner_principal):
        with pytest.raises(NotFound):
            OfferService.close_offer(owner_principal, uuid.uuid4())
