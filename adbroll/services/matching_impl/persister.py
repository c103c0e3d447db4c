import logging

from django.utils import timezone

from adbroll.models import Product, Video

logger = logging.getLogger(__name__)


class MatchPersister:
    """Writes match outcomes back to video rows.

    Each write is a single update-by-id, so concurrent runs resolve as
    last-write-wins. Exceptions from the store propagate to the caller.
    """

    def save_match(self, video: Video, product: Product, score: float, match_type: str) -> bool:
        """Links ``video`` to ``product``. Returns False if the row no longer exists."""
        updated = Video.objects.filter(pk=video.pk).update(
            product=product,
            product_price=product.price,
            product_revenue=product.total_revenue,
            product_sales=product.total_sales,
            match_confidence=score,
            match_type=match_type,
            match_attempted_at=timezone.now(),
        )
        return updated == 1

    def save_no_match(self, video: Video) -> bool:
        """Marks ``video`` as attempted-unmatched so later batches step over it."""
        updated = Video.objects.filter(pk=video.pk).update(
            match_confidence=0,
            match_type=None,
            match_attempted_at=timezone.now(),
        )
        return updated == 1

    def clear_all_matches(self) -> int:
        """Drops every video -> product link and its match metadata."""
        cleared = Video.objects.update(
            product=None,
            product_price=None,
            product_revenue=None,
            product_sales=None,
            match_confidence=None,
            match_type=None,
            match_attempted_at=None,
        )
        logger.info(f"Cleared match data on {cleared} videos.")
        return cleared
