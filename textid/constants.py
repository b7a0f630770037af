"""Shared constants for textid.

Rarity bounds, extraction thresholds and fan-out limits used across modules
are defined here. No magic numbers in other modules, import from here.
"""

# ─── Rarity ───────────────────────────────────────────────────────────────────

# Rarity is a specificity score. Lower values are generic shapes (plain
# numbers, short alphanumerics), higher values are unmistakable identifiers.
MIN_RARITY: float = 0.0
MAX_RARITY: float = 1.0

# ─── String extraction ────────────────────────────────────────────────────────

# Printable runs shorter than this are discarded during extraction.
MIN_STRING_LENGTH: int = 4

# Printable ASCII graphic range (whitespace excluded), inclusive.
ASCII_GRAPHIC_FIRST: int = 0x21
ASCII_GRAPHIC_LAST: int = 0x7E

# ─── Multi-candidate matching ─────────────────────────────────────────────────

# Candidate lists shorter than this are matched on the calling thread.
PARALLEL_MIN_CANDIDATES: int = 2

# Upper bound on worker threads when the caller does not set max_workers.
DEFAULT_MAX_WORKERS: int = 8

# ─── Logging ──────────────────────────────────────────────────────────────────

# Timed operations slower than this are logged at WARNING instead of DEBUG.
SLOW_OPERATION_MS: float = 50.0

# Catalog builds compile every pattern four times (text/bytes x anchored/boundaryless).
CATALOG_BUILD_WARN_MS: float = 500.0
