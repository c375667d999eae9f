"""Physical layout constants shared by the resolver and the renderer."""

from __future__ import annotations

MAX_RESOURCES = 10

# Permit stock carries two copies per leaf, stacked along the page height.
PERMIT_DUPLICATE_OFFSET_Y = 355.0
# Voucher stock carries two copies side by side.
VOUCHER_DUPLICATE_OFFSET_X = 387.0

# A4 portrait in points.
PERMIT_PAGE_SIZE = (595.28, 841.89)

DEFAULT_FONT_NAME = "DejaVuSans"
DEFAULT_FONT_SIZE = 8.0

UNLIMITED_LIMIT = "б/о"

DEFAULT_SEASON_DATE_FROM = "2025-09-15"
DEFAULT_SEASON_DATE_TO = "2026-02-28"
