"""
Constants for Symbol Vault backend.
"""

# Post and user identities are Postgres `integer` columns
MIN_IDENTITY = 1
MAX_IDENTITY = 2147483647

# Search ranking
SEARCH_RANK_THRESHOLD = 0.01
SEARCH_RESULT_LIMIT = 20
SEARCH_TEXT_CONFIG = "english"

# Rows per page for the offset-paged catalog listing
CATALOG_PAGE_SIZE = 20

# Symbol art sound effects, indexed as stored in the .sar file
SOUND_CATALOG = (
    "None",
    "Default",
    "Joy",
    "Anger",
    "Sorrow",
    "Unease",
    "Surprise",
    "Doubt",
    "Help",
    "Whistle",
    "Embarrassed",
    "Nailed It!",
    "Laugh",
)

ASSET_FILE_EXTENSION = ".sar"
PREVIEW_FILE_EXTENSION = ".png"
ASSET_MIMETYPE = "application/octet-stream"
PREVIEW_MIMETYPE = "image/png"
