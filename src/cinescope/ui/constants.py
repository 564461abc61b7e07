# Search constants
SEARCH_DEBOUNCE_MS = 500  # Quiet period before a typed search term is committed

# Infinite scroll constants
SCROLL_THRESHOLD_ROWS = 10  # Load more when the viewport is this many rows from the bottom

# Filter constants
RATING_OPTIONS = [
    ("9+ Excellent", 9),
    ("8+ Very Good", 8),
    ("7+ Good", 7),
    ("6+ Decent", 6),
    ("5+ Average", 5),
]
YEAR_OPTION_COUNT = 30  # Number of release years offered, counting back from the current year

# Trending constants
TRENDING_LIMIT = 5
