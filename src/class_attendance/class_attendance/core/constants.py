"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_DEFAULTER_THRESHOLD = 75
MIN_PASSWORD_LENGTH = 6
PERCENTAGE_DECIMALS = 2
