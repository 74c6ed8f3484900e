# ----------------------------------------------------------------------------------
# Performance API prefixes for logging
# -----------------------------------------------------------------------------------
PERFORMANCE_API_PREFIXES = {
    # key = prefix to match in request.path
    # value = area name, logged on "{area}_performance"
    "/api/v1/offers": "offers",
    "/api/v1/negotiations": "negotiation",
}

SLOW_REQUEST_THRESHOLD_SEC = 2  # default for areas without their own threshold

# per-area overrides, in seconds
SLOW_REQUEST_THRESHOLDS = {
    "negotiation": 1,
    "offers": 2,
}
