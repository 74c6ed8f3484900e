from apps.core.throttle import BaseCacheThrottle


class NegotiationRateThrottle(BaseCacheThrottle):
    """Rate limiting for reading negotiations"""

    scope = "negotiation"


class NegotiationSendRateThrottle(BaseCacheThrottle):
    """Rate limiting for sending and countering offers"""

    scope = "negotiation_send"


class NegotiationRespondRateThrottle(BaseCacheThrottle):
    """Rate limiting for accepting and rejecting offers"""

    scope = "negotiation_respond"
