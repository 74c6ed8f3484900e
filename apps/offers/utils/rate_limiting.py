from apps.core.throttle import BaseCacheThrottle


class OfferRateThrottle(BaseCacheThrottle):
    """Rate limiting for reading offers"""

    scope = "offer"


class OfferWriteRateThrottle(BaseCacheThrottle):
    """Rate limiting for creating and changing offers"""

    scope = "offer_write"
