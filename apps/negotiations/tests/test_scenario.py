from decimal import Decimal

import pytest

from apps.negotiations.exceptions import OfferUnavailable
from apps.negotiations.models import Decision, Thread, ThreadStatus
from apps.negotiations.services import NegotiationService
from apps.offers.services import OfferService


@pytest.mark.django_db
def test_owner_and_two_buyers_full_round(
    offer, owner_principal, buyer_one, buyer_two, buyer_one_principal
):
    # O sends offer #1 to B1 and B2
    result = NegotiationService.send(offer.id, [buyer_one.id, buyer_two.id], owner_principal)
    assert Thread.objects.filter(offer=offer).count() == 2
    assert all(t.version_no == 1 for t in result.threads_affected)
    assert result.from_party == "Blue Ocean Seafoods / business_owner"

    # B1 rejects v1
    rejection = NegotiationService.respond(offer.id, buyer_one.id, buyer_one_principal, "reject")
    assert rejection.proposal.version_no == 1
    assert rejection.rejected_by

    # O counters B1 only with a new price
    counter = NegotiationService.send(
        offer.id,
        [buyer_one.id],
        owner_principal,
        overrides={"grand_total": Decimal("4100.00")},
    )
    assert counter.threads_affected[0].version_no == 2
    assert counter.from_party == "Blue Ocean Seafoods / business_owner"

    # B1 accepts v2
    acceptance = NegotiationService.respond(offer.id, buyer_one.id, buyer_one_principal, "accept")
    assert acceptance.proposal.version_no == 2
    assert acceptance.accepted_by

    history = NegotiationService.negotiation_history(offer.id, buyer_one.id, owner_principal)
    assert [p.version_no for p in history.proposals] == [1, 2]
    assert history.proposals[1].grand_total == Decimal("4100.00")
    assert [d.is_accepted for d in history.decisions] == [False, True]
    assert history.status == ThreadStatus.ACCEPTED

    # B2 never moved past v1
    other = NegotiationService.negotiation_history(offer.id, buyer_two.id, owner_principal)
    assert [p.version_no for p in other.proposals] == [1]
    assert other.status == ThreadStatus.OPEN
    assert Decision.objects.filter(buyer=buyer_two).count() == 0


@pytest.mark.django_db
def test_closing_offer_blocks_every_thread(
    offer, owner_principal, buyer_one, buyer_two, buyer_one_principal, buyer_two_principal
):
    NegotiationService.send(offer.id, [buyer_one.id, buyer_two.id], owner_principal)
    NegotiationService.send(offer.id, [buyer_one.id], buyer_one_principal)

    OfferService.close_offer(owner_principal, offer.id)

    with pytest.raises(OfferUnavailable):
        NegotiationService.send(offer.id, [buyer_two.id], owner_principal)
    with pytest.raises(OfferUnavailable):
        NegotiationService.send(offer.id, [buyer_one.id], buyer_one_principal)
    with pytest.raises(OfferUnavailable):
        NegotiationService.respond(offer.id, buyer_one.id, owner_principal, "accept")
    with pytest.raises(OfferUnavailable):
        NegotiationService.respond(offer.id, buyer_two.id, buyer_two_principal, "reject")

    history = NegotiationService.negotiation_history(offer.id, buyer_one.id, owner_principal)
    assert history.status == ThreadStatus.CLOSE
