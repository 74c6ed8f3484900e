import datetime
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from apps.accounts.models import BusinessOwner, Buyer, PartyStatus
from apps.negotiations.principal import principal_from_user
from apps.offers.models import Offer, OfferStatus
from apps.users.models import UserType


@pytest.fixture(autouse=True)
def clear_throttle_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_owner(db):
    counter = {"n": 0}

    def _make(business_name="Blue Ocean Seafoods", status=PartyStatus.ACTIVE):
        counter["n"] += 1
        n = counter["n"]
        user = get_user_model().objects.create_user(
            email=f"owner{n}@example.com",
            password="testpassword123",
            first_name="Olu",
            last_name=f"Owner{n}",
            user_type=UserType.BUSINESS_OWNER,
        )
        return BusinessOwner.objects.create(
            user=user,
            business_name=business_name,
            email=f"business{n}@example.com",
            country="India",
            status=status,
        )

    return _make


@pytest.fixture
def make_buyer(db):
    counter = {"n": 0}

    def _make(owner, company="Nordic Imports", with_user=True):
        counter["n"] += 1
        n = counter["n"]
        user = None
        if with_user:
            user = get_user_model().objects.create_user(
                email=f"buyer{n}@example.com",
                password="testpassword123",
                first_name="Bea",
                last_name=f"Buyer{n}",
                user_type=UserType.BUYER,
            )
        return Buyer.objects.create(
            owner=owner,
            user=user,
            buyers_company_name=company,
            contact_name=f"Bea Buyer{n}",
            contact_email=f"contact{n}@example.com",
            country="Norway",
        )

    return _make


@pytest.fixture
def owner(make_owner):
    return make_owner("Blue Ocean Seafoods")


@pytest.fixture
def other_owner(make_owner):
    return make_owner("Coral Reef Traders")


@pytest.fixture
def buyer_one(make_buyer, owner):
    return make_buyer(owner, "Nordic Imports")


@pytest.fixture
def buyer_two(make_buyer, owner):
    return make_buyer(owner, "Baltic Foods")


@pytest.fixture
def foreign_buyer(make_buyer, other_owner):
    return make_buyer(other_owner, "Pacific Retail")


@pytest.fixture
def offer_terms():
    return {
        "product_name": "Vannamei Shrimp",
        "species_name": "Litopenaeus vannamei",
        "brand": "Blue Ocean",
        "plant_approval_number": "APN-1234",
        "origin": "India",
        "processor": "Blue Ocean Processing",
        "packing": "10 x 1kg",
        "quantity": "1 FCL",
        "tolerance": "+/- 5%",
        "payment_terms": "30% advance, 70% against documents",
        "size_breakups": [
            {"size": "20/30", "breakup": 250, "condition": "frozen", "price": 6.5},
            {"size": "30/40", "breakup": 500, "price": 5.75},
        ],
        "total": Decimal("4500.00"),
        "grand_total": Decimal("4500.00"),
        "shipment_date": datetime.date(2026, 12, 1),
        "offer_validity_date": datetime.date(2026, 11, 15),
        "remark": "CFR Oslo",
    }


@pytest.fixture
def make_offer(db, offer_terms):
    def _make(owner, name="Shrimp Offer #1", status=OfferStatus.OPEN, **overrides):
        data = {**offer_terms, **overrides}
        return Offer.objects.create(
            business_owner=owner, offer_name=name, status=status, **data
        )

    return _make


@pytest.fixture
def offer(make_offer, owner):
    return make_offer(owner)


@pytest.fixture
def owner_principal(owner):
    return principal_from_user(owner.user)


@pytest.fixture
def buyer_one_principal(buyer_one):
    return principal_from_user(buyer_one.user)


@pytest.fixture
def buyer_two_principal(buyer_two):
    return principal_from_user(buyer_two.user)
