import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.db import DatabaseError
from django.db.models import Q

from adbroll.models import Creator, Product, Video
from adbroll.services.exceptions import CatalogUnavailableError

from .orchestrator import BatchMatchOrchestrator
from .persister import MatchPersister
from .schemas import RebuildSummary

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


class IndexRebuildOrchestrator:
    """
    Clear-and-rematch maintenance run over the whole video table.

    Steps:
    1. Recompute derived product metrics (earning per sale, 30-day GMV).
    2. Clear every video -> product link and its match metadata.
    3. Restore video -> creator links by handle.
    4. Page the batch matcher over all videos until complete.
    5. Report integrity counts.

    Nothing is rolled back: if the run is interrupted, the work done so far stays.
    """

    def __init__(
        self,
        batch_orchestrator: Optional[BatchMatchOrchestrator] = None,
        persister: Optional[MatchPersister] = None,
        batch_size: int = 500,
    ):
        self.batch_orchestrator = batch_orchestrator or BatchMatchOrchestrator()
        self.persister = persister or MatchPersister()
        self.batch_size = batch_size

    def rebuild(self, threshold: Optional[float] = None) -> RebuildSummary:
        if threshold is None:
            threshold = self.batch_orchestrator.config.acceptance_threshold

        logger.info("Starting index rebuild...")
        summary = RebuildSummary(threshold=threshold)

        logger.info("Step 1: Recalculating product metrics...")
        summary.products_updated = self.recompute_product_metrics()

        logger.info("Step 2: Clearing video-product matches...")
        summary.matches_cleared = self.persister.clear_all_matches()

        logger.info("Step 3: Rebuilding creator links...")
        summary.creators_linked = self.relink_creators()

        logger.info("Step 4: Re-running the matcher over all videos...")
        offset = 0
        while True:
            batch = self.batch_orchestrator.match_batch(offset=offset, batch_size=self.batch_size, threshold=threshold)
            summary.batches += 1
            summary.videos_processed += batch.processed
            summary.videos_matched += batch.matched
            summary.videos_unmatched += batch.unmatched
            summary.errors += batch.errors

            if batch.complete or batch.processed + batch.skipped == 0:
                break
            offset = batch.next_offset

        logger.info("Step 5: Validating data integrity...")
        summary.total_videos = Video.objects.count()
        summary.videos_with_product = Video.objects.filter(product__isnull=False).count()
        summary.videos_without_product = Video.objects.filter(product__isnull=True).count()
        summary.videos_with_creator = Video.objects.filter(creator__isnull=False).count()

        logger.info(
            f"Rebuild complete: {summary.videos_matched} videos matched, {summary.products_updated} products updated, "
            f"{summary.creators_linked} creator links restored."
        )
        return summary

    def recompute_product_metrics(self) -> int:
        """
        Sets ``commission_amount = price * commission / 100`` and backfills
        ``gmv_30d``/``total_revenue`` from whichever revenue figure exists.

        Raises:
            CatalogUnavailableError: If the products cannot be read.
        """
        try:
            products = list(Product.objects.all().order_by("id"))
        except DatabaseError as e:
            raise CatalogUnavailableError(f"Products fetch error: {e}") from e

        updated = 0
        for product in products:
            if product.price is not None and product.commission is not None:
                product.commission_amount = (product.price * product.commission / Decimal(100)).quantize(_CENTS, rounding=ROUND_HALF_UP)
            else:
                product.commission_amount = None

            gmv = product.total_revenue or product.revenue_30d or Decimal(0)
            product.gmv_30d = gmv
            product.total_revenue = gmv

            try:
                product.save(update_fields=["commission_amount", "gmv_30d", "total_revenue", "updated_at"])
                updated += 1
            except DatabaseError as e:
                logger.error(f"Error updating metrics for product {product.id}: {e}")

        logger.info(f"Updated {updated} products with derived metrics.")
        return updated

    def relink_creators(self) -> int:
        """Links creator-less videos whose handle or creator name contains a known creator handle."""
        linked = 0
        for creator in Creator.objects.all().order_by("id"):
            handle = (creator.handle or "").strip().lstrip("@")
            if not handle:
                continue
            try:
                linked += Video.objects.filter(creator__isnull=True).filter(Q(creator_handle__icontains=handle) | Q(creator_name__icontains=handle)).update(creator=creator)
            except DatabaseError as e:
                logger.error(f"Error linking videos to creator {creator.id}: {e}")

        logger.info(f"Linked {linked} videos to creators.")
        return linked
