"""Return policy constants."""

from decouple import config

GLOBAL_POLICY_SCOPE = "global"

MIN_RETURN_DAYS = 1
MAX_RETURN_DAYS = 365
DEFAULT_RETURN_DAYS = config("DEFAULT_RETURN_DAYS", default=7, cast=int)
