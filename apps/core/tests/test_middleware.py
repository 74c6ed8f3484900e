import logging

import pytest
from django.urls import reverse

from apps.core.middleware import area_for_path, route_for


class TestRouteTagging:
    def test_area_from_prefix(self):
        assert area_for_path("/api/v1/negotiations/all-negotiations/") == "negotiation"
        assert area_for_path("/api/v1/offers/") == "offers"
        assert area_for_path("/api/schema/") is None

    def test_route_drops_router_basename(self):
        assert route_for("negotiation", "negotiation-send-offer") == "send-offer"
        assert route_for("negotiation", "negotiation-respond-offer") == "respond-offer"
        assert route_for("offers", "offer-detail") == "detail"
        assert route_for("offers", None) == "offers"


@pytest.mark.django_db
class TestPerformanceMonitoringMiddleware:
    def test_negotiation_request_is_timed_and_tagged(self, api_client, owner, caplog):
        api_client.force_authenticate(user=owner.user)

        with caplog.at_level(logging.INFO, logger="negotiation_performance"):
            response = api_client.get(reverse("negotiation-all-negotiations"))

        assert response.status_code == 200
        assert response["X-Response-Time"].endswith("s")
        assert response["X-Route"] == "all-negotiations"
        records = [r for r in caplog.records if r.name == "negotiation_performance"]
        assert any("negotiation all-negotiations: GET" in r.getMessage() for r in records)

    def test_slow_request_is_warned(self, api_client, owner, caplog, settings):
        settings.SLOW_REQUEST_THRESHOLDS = {"offers": -1}
        api_client.force_authenticate(user=owner.user)

        with caplog.at_level(logging.INFO, logger="offers_performance"):
            response = api_client.get(reverse("offer-list"))

        assert response["X-Route"] == "list"
        warnings = [
            r for r in caplog.records
            if r.name == "offers_performance" and r.levelno == logging.WARNING
        ]
        assert warnings and warnings[0].getMessage().startswith("Slow offers list")
