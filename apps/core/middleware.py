import logging
import time

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin


def area_for_path(path: str):
    """Short area name ("offers", "negotiation") for a monitored API path."""
    for prefix, area in settings.PERFORMANCE_API_PREFIXES.items():
        if path.startswith(prefix):
            return area
    return None


def route_for(area: str, url_name) -> str:
    """
    Route tag taken from the router's url name without its basename:
    "negotiation-send-offer" -> "send-offer", "offer-detail" -> "detail".
    """
    if url_name and "-" in url_name:
        return url_name.split("-", 1)[1]
    return url_name or area


class PerformanceMonitoringMiddleware(MiddlewareMixin):
    """
    Times offer and negotiation API calls. Each request is logged on
    "{area}_performance" tagged with its route (send-offer, respond-offer,
    close, ...) and compared against the area's slow-request threshold.
    """

    def process_request(self, request):
        area = area_for_path(request.path)
        if area is not None:
            request._perf_area = area
            request._perf_start = time.perf_counter()

    def process_view(self, request, view_func, view_args, view_kwargs):
        if hasattr(request, "_perf_area") and request.resolver_match is not None:
            request._perf_route = request.resolver_match.url_name
        return None

    def process_response(self, request, response):
        area = getattr(request, "_perf_area", None)
        if area is None:
            return response

        duration = time.perf_counter() - request._perf_start
        route = route_for(area, getattr(request, "_perf_route", None))
        threshold = settings.SLOW_REQUEST_THRESHOLDS.get(
            area, settings.SLOW_REQUEST_THRESHOLD_SEC
        )
        logger = logging.getLogger(f"{area}_performance")
        message = (
            f"{area} {route}: {request.method} {request.path} "
            f"took {duration:.3f}s - Status {response.status_code}"
        )
        if duration > threshold:
            logger.warning(f"Slow {message}")
        else:
            logger.info(message)

        response["X-Response-Time"] = f"{duration:.3f}s"
        response["X-Route"] = route
        return response
