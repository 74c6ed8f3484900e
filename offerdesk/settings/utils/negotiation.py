# Negotiation Feature Settings
NEGOTIATION_SETTINGS = {
    # Party labels written on every proposal, e.g. "Blue Ocean Ltd / business_owner"
    "PARTY_LABEL_FORMAT": "{name} / {role}",
    "UNKNOWN_BUYER_NAME": "Unknown Buyer",
    "UNKNOWN_OWNER_NAME": "Unknown Owner",
    # Upper bound on buyers addressed by a single send-offer call
    "MAX_BUYERS_PER_SEND": 100,
    # Conflicting writes (duplicate thread / version collision) are retried
    # this many times by the HTTP layer before surfacing a 409
    "CONFLICT_RETRIES": 1,
    # Notifications
    "NOTIFY_ON_PROPOSAL": True,
    "NOTIFY_ON_DECISION": True,
    "NOTIFICATION_MAX_RETRIES": 3,
    "NOTIFICATION_RETRY_BACKOFF": 60,  # seconds, doubled on every retry
}
