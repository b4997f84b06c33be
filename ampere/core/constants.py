"""
Core constants used across the application. Keep these simple and documented.
"""

from typing import Final

# Storage keys are version-suffixed; an incompatible schema change bumps the suffix
# and the old key is simply abandoned.
PROFILE_KEY: Final[str] = "ampere_profile_v6"
VIEWING_KEY: Final[str] = "ampere_viewing_v4"
ATTRIBUTION_KEY: Final[str] = "ampere_attrib_v1"
SESSION_KEY: Final[str] = "ampere_session_v1"

# Separator used when joining identity key parts
IDENTITY_KEY_SEPARATOR: Final[str] = "|"

# Badges that carry a ranking boost
BADGE_LIVE: Final[str] = "LIVE"
BADGE_UPCOMING: Final[str] = "UPCOMING"

# Rails supplied by the content source
RAIL_FOR_YOU: Final[str] = "forYou"
RAIL_LIVE_NOW: Final[str] = "liveNow"
RAIL_CONTINUE_WATCHING: Final[str] = "continueWatching"
RAIL_TRENDING: Final[str] = "trending"

# Search result limits (empty query vs. filtered query)
SEARCH_BROWSE_LIMIT: Final[int] = 36
SEARCH_RESULTS_LIMIT: Final[int] = 60

# Export document format version
EXPORT_VERSION: Final[int] = 1

# Diagnostic sink prefix for attribution events
ATTRIBUTION_LOG_PREFIX: Final[str] = "[ampere]"
