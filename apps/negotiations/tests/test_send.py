from decimal import Decimal
from unittest.mock import patch

import pytest
from rest_framework.exceptions import ValidationError

from apps.negotiations.exceptions import (
    ConcurrentNegotiationUpdate,
    OfferUnavailable,
    UnauthorizedBuyer,
    UnauthorizedSelf,
)
from apps.negotiations.models import Proposal, Thread, ThreadStatus
from apps.negotiations.services import NegotiationService
from apps.negotiations.tasks import send_proposal_notification
from apps.offers.models import OfferStatus


@pytest.mark.django_db
class TestSendOffer:
    def test_first_send_creates_threads_with_version_one(
        self, offer, owner_principal, buyer_one, buyer_two
    ):
        result = NegotiationService.send(offer.id, [buyer_one.id, buyer_two.id], owner_principal)

        assert result.offer_id == offer.id
        assert result.from_party == "Blue Ocean Seafoods / business_owner"
        assert len(result.threads_affected) == 2
        assert {t.version_no for t in result.threads_affected} == {1}
        assert {t.status for t in result.threads_affected} == {ThreadStatus.OPEN}
        assert Thread.objects.filter(offer=offer).count() == 2

        proposal = Proposal.objects.get(thread__buyer=buyer_one)
        assert proposal.to_party == "Nordic Imports / buyer"
        assert proposal.sender_role == "business_owner"
        assert proposal.offer_name == offer.offer_name
        assert proposal.product_name == offer.product_name
        assert proposal.size_breakups == offer.size_breakups

    def test_send_twice_reuses_thread(self, offer, owner_principal, buyer_one):
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)

        assert Thread.objects.filter(offer=offer, buyer=buyer_one).count() == 1
        versions = list(
            Proposal.objects.filter(thread__buyer=buyer_one)
            .order_by("version_no")
            .values_list("version_no", flat=True)
        )
        assert versions == [1, 2]

    def test_duplicate_buyer_ids_are_collapsed(self, offer, owner_principal, buyer_one):
        result = NegotiationService.send(
            offer.id, [buyer_one.id, str(buyer_one.id)], owner_principal
        )
        assert len(result.threads_affected) == 1
        assert Proposal.objects.count() == 1

    def test_versions_are_gapless_per_thread(
        self, offer, owner_principal, buyer_one, buyer_two, buyer_one_principal
    ):
        NegotiationService.send(offer.id, [buyer_one.id, buyer_two.id], owner_principal)
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        NegotiationService.send(offer.id, [buyer_one.id], buyer_one_principal)
        NegotiationService.send(offer.id, [buyer_two.id, buyer_one.id], owner_principal)

        for thread in Thread.objects.filter(offer=offer):
            versions = list(
                thread.proposals.order_by("version_no").values_list("version_no", flat=True)
            )
            assert versions == list(range(1, len(versions) + 1))

        assert Thread.objects.get(buyer=buyer_one).proposals.count() == 4
        assert Thread.objects.get(buyer=buyer_two).proposals.count() == 2

    def test_overrides_merge_over_previous_version(self, offer, owner_principal, buyer_one):
        NegotiationService.send(
            offer.id,
            [buyer_one.id],
            owner_principal,
            overrides={"grand_total": Decimal("4200.00"), "remark": "Revised"},
        )
        NegotiationService.send(
            offer.id,
            [buyer_one.id],
            owner_principal,
            overrides={"quantity": "2 FCL", "remark": None},
        )

        v1, v2 = Proposal.objects.filter(thread__buyer=buyer_one).order_by("version_no")
        assert v1.grand_total == Decimal("4200.00")
        assert v1.remark == "Revised"
        # v2 inherits v1's overrides, None keeps the prior value
        assert v2.grand_total == Decimal("4200.00")
        assert v2.remark == "Revised"
        assert v2.quantity == "2 FCL"
        assert v2.product_name == offer.product_name

    def test_unknown_override_fields_are_ignored(self, offer, owner_principal, buyer_one):
        NegotiationService.send(
            offer.id,
            [buyer_one.id],
            owner_principal,
            overrides={"offer_name": "Hijacked", "status": "close"},
        )
        proposal = Proposal.objects.get(thread__buyer=buyer_one)
        assert proposal.offer_name == offer.offer_name

    def test_buyer_counter_sets_countered(
        self, offer, owner_principal, buyer_one, buyer_one_principal
    ):
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        result = NegotiationService.send(
            offer.id,
            [buyer_one.id],
            buyer_one_principal,
            overrides={"grand_total": Decimal("3900.00")},
        )

        outcome = result.threads_affected[0]
        assert outcome.version_no == 2
        assert outcome.status == ThreadStatus.COUNTERED
        assert result.from_party == "Nordic Imports / buyer"
        assert result.to_party == "Blue Ocean Seafoods / business_owner"

        proposal = Proposal.objects.get(thread__buyer=buyer_one, version_no=2)
        assert proposal.sender_role == "buyer"
        assert proposal.grand_total == Decimal("3900.00")

    def test_same_sender_does_not_counter(self, offer, owner_principal, buyer_one):
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        result = NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        assert result.threads_affected[0].status == ThreadStatus.OPEN

    def test_buyer_first_send_seeds_from_offer(self, offer, buyer_one_principal, buyer_one):
        result = NegotiationService.send(offer.id, [buyer_one.id], buyer_one_principal)
        assert result.threads_affected[0].version_no == 1
        assert result.threads_affected[0].status == ThreadStatus.OPEN
        thread = Thread.objects.get(offer=offer, buyer=buyer_one)
        assert thread.business_owner_id == offer.business_owner_id

    def test_buyer_cannot_send_for_sibling(
        self, offer, buyer_one_principal, buyer_one, buyer_two
    ):
        with pytest.raises(UnauthorizedSelf):
            NegotiationService.send(
                offer.id, [buyer_one.id, buyer_two.id], buyer_one_principal
            )
        assert not Thread.objects.exists()

    def test_batch_is_all_or_nothing(self, offer, owner_principal, buyer_one, foreign_buyer):
        with pytest.raises(UnauthorizedBuyer):
            NegotiationService.send(offer.id, [buyer_one.id, foreign_buyer.id], owner_principal)
        assert not Thread.objects.exists()
        assert not Proposal.objects.exists()

    def test_empty_buyer_list_is_invalid(self, offer, owner_principal):
        with pytest.raises(ValidationError):
            NegotiationService.send(offer.id, [], owner_principal)

    def test_closed_offer_is_unavailable(self, offer, owner_principal, buyer_one):
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        offer.status = OfferStatus.CLOSE
        offer.save()

        with pytest.raises(OfferUnavailable):
            NegotiationService.send(offer.id, [buyer_one.id], owner_principal)
        assert Proposal.objects.count() == 1

    def test_deleted_offer_is_unavailable(self, offer, buyer_one_principal, buyer_one):
        offer.delete()
        with pytest.raises(OfferUnavailable):
            NegotiationService.send(offer.id, [buyer_one.id], buyer_one_principal)

    def test_closed_thread_is_skipped(
        self, offer, owner_principal, buyer_one, buyer_two
    ):
        NegotiationService.send(offer.id, [buyer_one.id, buyer_two.id], owner_principal)
        NegotiationService.close_thread(offer.id, buyer_two.id, owner_principal)

        result = NegotiationService.send(
            offer.id, [buyer_one.id, buyer_two.id], owner_principal
        )
        assert [t.buyer_id for t in result.threads_affected] == [buyer_one.id]
        assert Thread.objects.get(buyer=buyer_two).proposals.count() == 1

    def test_send_enqueues_notification_after_commit(
        self,
        offer,
        owner_principal,
        buyer_one,
        django_capture_on_commit_callbacks,
        mailoutbox,
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            NegotiationService.send(offer.id, [buyer_one.id], owner_principal)

        assert len(callbacks) == 1
        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == [buyer_one.contact_email]
        assert "version 1" in mailoutbox[0].subject

    def test_each_proposal_gets_its_own_notification(
        self,
        offer,
        owner_principal,
        buyer_one,
        buyer_two,
        django_capture_on_commit_callbacks,
        mailoutbox,
    ):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            NegotiationService.send(offer.id, [buyer_one.id, buyer_two.id], owner_principal)

        assert len(callbacks) == 2
        assert sorted(m.to[0] for m in mailoutbox) == sorted(
            [buyer_one.contact_email, buyer_two.contact_email]
        )

    def test_notification_for_missing_proposal_is_skipped(self, mailoutbox):
        assert send_proposal_notification.apply(args=[987654]).get() == 0
        assert mailoutbox == []


@pytest.mark.django_db
class TestSendConflicts:
    def test_version_collision_becomes_retryable_conflict(
        self, offer, owner_principal, buyer_one, buyer_two
    ):
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)

        # stale read of the last version on buyer_one's existing thread
        with patch("apps.negotiations.services.latest_proposal", return_value=None):
            with pytest.raises(ConcurrentNegotiationUpdate) as excinfo:
                NegotiationService.send(
                    offer.id, [buyer_two.id, buyer_one.id], owner_principal
                )

        assert excinfo.value.retryable is True
        assert excinfo.value.status_code == 409
        # the whole batch rolled back, buyer_two's thread included
        assert Proposal.objects.count() == 1
        assert not Thread.objects.filter(buyer=buyer_two).exists()

    def test_duplicate_thread_insert_becomes_retryable_conflict(
        self, offer, owner_principal, buyer_one
    ):
        NegotiationService.send(offer.id, [buyer_one.id], owner_principal)

        # a concurrent writer created the thread after our lookup
        with patch.object(
            NegotiationService,
            "_get_or_create_thread",
            side_effect=lambda o, b: (
                Thread.objects.create(offer=o, buyer=b, business_owner_id=o.business_owner_id),
                True,
            ),
        ):
            with pytest.raises(ConcurrentNegotiationUpdate):
                NegotiationService.send(offer.id, [buyer_one.id], owner_principal)

        assert Thread.objects.filter(buyer=buyer_one).count() == 1
        assert Proposal.objects.count() == 1
