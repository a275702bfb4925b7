"""structlog processors shared by the structlog and stdlib logging chains."""

import re

# Keys whose values are contact data and are masked wholesale.
SENSITIVE_KEYS = frozenset({"phone", "partner_phone", "delivery_partner_phone"})

# Credentials embedded in free text, e.g. "token=abc" or "password: x".
SENSITIVE_PATTERN = re.compile(
    r"(password|passwd|secret|token|authorization)"
    r"""([=:]\s*["']?)([^\s,}"']+)""",
    re.IGNORECASE,
)

MASK = "***MASKED***"


def mask_sensitive_data(_, __, event_dict):
    """Processor that masks phone numbers, passwords and tokens in log values."""
    for key, value in list(event_dict.items()):
        if key in SENSITIVE_KEYS and value:
            event_dict[key] = MASK
        elif isinstance(value, str):
            event_dict[key] = SENSITIVE_PATTERN.sub(rf"\1\2{MASK}", value)
    return event_dict
