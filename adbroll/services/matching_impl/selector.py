import logging
from typing import List

from django.db import DatabaseError
from django.db.models import F, QuerySet

from adbroll.models import Product, Video
from adbroll.services.exceptions import CatalogUnavailableError, VideoPageUnavailableError

logger = logging.getLogger(__name__)


class VideoMatchSelector:
    """Encapsulates every read the matcher makes against the store."""

    def load_catalog(self) -> List[Product]:
        """
        Loads the full product catalog into memory.

        Ordered by revenue (highest first, nulls last) then id. The scorer keeps
        the first candidate among equal scores, so this ordering is the tie-break.

        Raises:
            CatalogUnavailableError: If the products table cannot be read.
        """
        try:
            products = list(Product.objects.exclude(name="").order_by(F("total_revenue").desc(nulls_last=True), "id"))
        except DatabaseError as e:
            raise CatalogUnavailableError(f"Error fetching products: {e}") from e
        logger.info(f"Loaded {len(products)} products for matching.")
        return products

    def unmatched_videos(self) -> QuerySet[Video]:
        """Videos without a product reference, in a stable pagination order."""
        return Video.objects.filter(product__isnull=True).order_by(F("revenue").desc(nulls_last=True), "id")

    def load_page(self, offset: int, batch_size: int) -> List[Video]:
        """
        Raises:
            VideoPageUnavailableError: If the videos table cannot be read.
        """
        try:
            return list(self.unmatched_videos()[offset : offset + batch_size])
        except DatabaseError as e:
            raise VideoPageUnavailableError(f"Error fetching videos: {e}") from e

    def count_unattempted(self) -> int:
        """Unmatched videos the matcher has never looked at (no attempt timestamp)."""
        try:
            return self.unmatched_videos().filter(match_attempted_at__isnull=True).count()
        except DatabaseError as e:
            raise VideoPageUnavailableError(f"Error counting videos: {e}") from e
