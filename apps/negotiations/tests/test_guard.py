import uuid

import pytest

from apps.accounts.models import PartyStatus
from apps.negotiations.exceptions import (
    BuyerNotFound,
    ForbiddenNotOwner,
    ForbiddenSelfOnly,
    InvalidRole,
    OwnerInactive,
    UnauthorizedBuyer,
    UnauthorizedSelf,
)
from apps.negotiations.guard import Action, Target, authorize, enforce
from apps.negotiations.principal import Principal, principal_from_user


def send_target(offer, buyers, ids=None):
    ids = ids if ids is not None else [b.id for b in buyers]
    return Target(offer=offer, buyers=buyers, requested_buyer_ids=frozenset(ids))


@pytest.mark.django_db
class TestSendRules:
    def test_owner_may_send_to_own_buyers(self, owner_principal, offer, buyer_one, buyer_two):
        verdict = authorize(owner_principal, Action.SEND, send_target(offer, [buyer_one, buyer_two]))
        assert verdict.allowed
        assert verdict.reason is None

    def test_owner_cannot_send_to_foreign_buyer(self, owner_principal, offer, buyer_one, foreign_buyer):
        verdict = authorize(
            owner_principal, Action.SEND, send_target(offer, [buyer_one, foreign_buyer])
        )
        assert not verdict.allowed
        assert isinstance(verdict.reason, UnauthorizedBuyer)
        assert "Pacific Retail" in str(verdict.reason.detail)

    def test_owner_unknown_buyer_id_is_unauthorized(self, owner_principal, offer, buyer_one):
        missing = uuid.uuid4()
        verdict = authorize(
            owner_principal,
            Action.SEND,
            send_target(offer, [buyer_one], ids=[buyer_one.id, missing]),
        )
        assert isinstance(verdict.reason, UnauthorizedBuyer)
        assert str(missing) in str(verdict.reason.detail)

    def test_inactive_owner_cannot_send(self, make_owner, make_buyer, make_offer):
        owner = make_owner("Sleepy Fish", status=PartyStatus.INACTIVE)
        buyer = make_buyer(owner)
        offer = make_offer(owner)
        verdict = authorize(
            principal_from_user(owner.user), Action.SEND, send_target(offer, [buyer])
        )
        assert isinstance(verdict.reason, OwnerInactive)

    def test_owner_cannot_send_someone_elses_offer(
        self, other_owner, make_buyer, offer
    ):
        their_buyer = make_buyer(other_owner)
        verdict = authorize(
            principal_from_user(other_owner.user),
            Action.SEND,
            send_target(offer, [their_buyer]),
        )
        assert isinstance(verdict.reason, ForbiddenNotOwner)

    def test_buyer_may_send_for_itself(self, buyer_one_principal, offer, buyer_one):
        verdict = authorize(buyer_one_principal, Action.SEND, send_target(offer, [buyer_one]))
        assert verdict.allowed

    def test_buyer_cannot_include_sibling_buyer(
        self, buyer_one_principal, offer, buyer_one, buyer_two
    ):
        verdict = authorize(
            buyer_one_principal, Action.SEND, send_target(offer, [buyer_one, buyer_two])
        )
        assert isinstance(verdict.reason, UnauthorizedSelf)

    def test_buyer_cannot_send_only_for_sibling(self, buyer_one_principal, offer, buyer_two):
        verdict = authorize(buyer_one_principal, Action.SEND, send_target(offer, [buyer_two]))
        assert isinstance(verdict.reason, UnauthorizedSelf)

    def test_buyer_of_inactive_owner(self, make_owner, make_buyer, make_offer):
        owner = make_owner("Dormant Co", status=PartyStatus.SUSPENDED)
        buyer = make_buyer(owner)
        offer = make_offer(owner)
        verdict = authorize(
            principal_from_user(buyer.user), Action.SEND, send_target(offer, [buyer])
        )
        assert isinstance(verdict.reason, OwnerInactive)

    def test_buyer_cannot_counter_another_owners_offer(self, make_offer, other_owner, buyer_one):
        foreign_offer = make_offer(other_owner, name="Other offer")
        verdict = authorize(
            principal_from_user(buyer_one.user),
            Action.SEND,
            send_target(foreign_offer, [buyer_one]),
        )
        assert isinstance(verdict.reason, UnauthorizedBuyer)


@pytest.mark.django_db
class TestRespondRules:
    def test_buyer_responds_for_itself(self, buyer_one_principal, offer, buyer_one):
        assert authorize(
            buyer_one_principal, Action.RESPOND, Target(offer=offer, buyer=buyer_one)
        ).allowed

    def test_buyer_cannot_respond_for_other_buyer(self, buyer_one_principal, offer, buyer_two):
        verdict = authorize(
            buyer_one_principal, Action.RESPOND, Target(offer=offer, buyer=buyer_two)
        )
        assert isinstance(verdict.reason, ForbiddenSelfOnly)

    def test_owner_not_your_buyer(self, owner_principal, offer, foreign_buyer):
        verdict = authorize(
            owner_principal, Action.RESPOND, Target(offer=offer, buyer=foreign_buyer)
        )
        assert isinstance(verdict.reason, ForbiddenNotOwner)
        assert "not your buyer" in str(verdict.reason.detail)

    def test_owner_not_your_offer(self, owner_principal, make_offer, other_owner, buyer_one):
        foreign_offer = make_offer(other_owner, name="Coral offer")
        verdict = authorize(
            owner_principal, Action.RESPOND, Target(offer=foreign_offer, buyer=buyer_one)
        )
        assert isinstance(verdict.reason, ForbiddenNotOwner)
        assert "not your offer" in str(verdict.reason.detail)

    def test_missing_buyer(self, owner_principal, offer):
        verdict = authorize(owner_principal, Action.RESPOND, Target(offer=offer, buyer=None))
        assert isinstance(verdict.reason, BuyerNotFound)


@pytest.mark.django_db
class TestOtherRules:
    def test_view_rules(self, owner_principal, buyer_one_principal, offer, buyer_one, buyer_two):
        assert authorize(owner_principal, Action.VIEW, Target(offer=offer, buyer=buyer_two)).allowed
        assert authorize(
            buyer_one_principal, Action.VIEW, Target(offer=offer, buyer=buyer_one)
        ).allowed
        denied = authorize(buyer_one_principal, Action.VIEW, Target(offer=offer, buyer=buyer_two))
        assert isinstance(denied.reason, ForbiddenSelfOnly)

    def test_close_thread_is_owner_only(self, owner_principal, buyer_one_principal, offer):
        assert authorize(owner_principal, Action.CLOSE_THREAD, Target(offer=offer)).allowed
        denied = authorize(buyer_one_principal, Action.CLOSE_THREAD, Target(offer=offer))
        assert isinstance(denied.reason, ForbiddenNotOwner)

    def test_manage_offer_requires_ownership(self, other_owner, offer):
        denied = authorize(
            principal_from_user(other_owner.user), Action.MANAGE_OFFER, Target(offer=offer)
        )
        assert isinstance(denied.reason, ForbiddenNotOwner)

    def test_unknown_role_is_rejected(self, offer):
        stranger = Principal(role="admin", id=uuid.uuid4(), profile=None)
        verdict = authorize(stranger, Action.VIEW, Target(offer=offer))
        assert isinstance(verdict.reason, InvalidRole)

    def test_enforce_raises_the_reason(self, buyer_one_principal, offer, buyer_two):
        with pytest.raises(ForbiddenSelfOnly):
            enforce(buyer_one_principal, Action.RESPOND, Target(offer=offer, buyer=buyer_two))


@pytest.mark.django_db
def test_principal_requires_profile(django_user_model):
    user = django_user_model.objects.create_user(
        email="loose@example.com", password="x", user_type="buyer"
    )
    with pytest.raises(InvalidRole):
        principal_from_user(user)


@pytest.mark.django_db
def test_principal_label(owner_principal, buyer_one_principal):
    assert owner_principal.label == "Blue Ocean Seafoods / business_owner"
    assert buyer_one_principal.label == "Nordic Imports / buyer"
