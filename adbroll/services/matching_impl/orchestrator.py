import logging
from typing import Dict, List, Optional, Sequence, Tuple

from django.db import DatabaseError

from adbroll.models import Product, Video
from adbroll.services.exceptions import ConfigurationError, ValidationError

from .ai_matcher import AiProductMatcher
from .config import MatchingConfig
from .persister import MatchPersister
from .schemas import MatchBatchSummary
from .scorer import ProductText, SimilarityScorer, VideoText
from .selector import VideoMatchSelector
from .url_matcher import ProductUrlIndex

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 1000


class BatchMatchOrchestrator:
    """
    Matches one page of unmatched videos against the whole product catalog.

    Callers page through the unmatched set by re-invoking with the returned
    ``next_offset`` until ``complete`` is True. Matched videos leave the set;
    attempted-unmatched videos stay in it and are stepped over. ``complete``
    only turns True once no unmatched video is left unattempted, whatever
    offsets the caller chose.
    """

    def __init__(
        self,
        selector: Optional[VideoMatchSelector] = None,
        scorer: Optional[SimilarityScorer] = None,
        persister: Optional[MatchPersister] = None,
        ai_matcher: Optional[AiProductMatcher] = None,
        config: Optional[MatchingConfig] = None,
    ):
        self.config = config or MatchingConfig.from_settings()
        self.selector = selector or VideoMatchSelector()
        self.scorer = scorer or SimilarityScorer(self.config)
        self.persister = persister or MatchPersister()
        self.ai_matcher = ai_matcher

    def match_batch(
        self,
        offset: int = 0,
        batch_size: int = 100,
        threshold: Optional[float] = None,
        use_ai: bool = False,
    ) -> MatchBatchSummary:
        """
        Processes one batch.

        Args:
            offset: Position in the unmatched set to start from.
            batch_size: Maximum number of videos to load.
            threshold: Minimum fuzzy score to accept; defaults to the configured one.
            use_ai: Run the AI fallback pass over videos the heuristic could not place.

        Returns:
            MatchBatchSummary with counts and the pagination continuation.

        Raises:
            ValidationError: For out-of-range arguments.
            CatalogUnavailableError: If the products cannot be loaded.
            VideoPageUnavailableError: If the videos cannot be loaded.
        """
        if threshold is None:
            threshold = self.config.acceptance_threshold
        self._validate(offset, batch_size, threshold)

        summary = MatchBatchSummary(offset=offset, batch_size=batch_size, threshold=threshold)

        products = self.selector.load_catalog()
        if not products:
            # Marking videos as attempted against an empty catalog would hide them from future runs.
            logger.warning("No products found to match. Skipping batch.")
            summary.next_offset = offset
            summary.complete = True
            return summary

        page = self.selector.load_page(offset, batch_size)
        logger.info(f"Matching {len(page)} videos (offset {offset}) against {len(products)} products, threshold {threshold}.")

        url_index = ProductUrlIndex(products)
        unresolved: List[Video] = []

        for video in page:
            if video.is_attempted_unmatched:
                summary.skipped += 1
                continue

            summary.processed += 1
            product, score, match_type = self.find_best_match(video, products, url_index, threshold)
            if product is None:
                unresolved.append(video)
                continue
            self._write_match(summary, video, product, score, match_type)

        if use_ai and unresolved:
            ai_matches = self._run_ai_pass(unresolved, products)
            still_unresolved = []
            for video in unresolved:
                ai_product = ai_matches.get(video.id)
                if ai_product is None:
                    still_unresolved.append(video)
                else:
                    self._write_match(summary, video, ai_product, self.config.ai_match_confidence, Video.MatchType.AI)
            unresolved = still_unresolved

        for video in unresolved:
            self._write_no_match(summary, video)

        summary.next_offset = offset + len(page) - summary.matched
        summary.remaining = self.selector.count_unattempted()
        summary.complete = summary.remaining == 0
        if not page and not summary.complete:
            # The offset overshot videos that shifted down as earlier ones were matched.
            logger.info(f"Offset {offset} is past the unmatched set but {summary.remaining} videos are unattempted; restart from 0.")
            summary.next_offset = 0

        logger.info(
            f"Batch finished: {summary.processed} processed, {summary.matched} matched "
            f"({summary.direct} direct, {summary.fuzzy} fuzzy, {summary.ai} ai), {summary.unmatched} unmatched, "
            f"{summary.skipped} skipped, {summary.errors} errors, {summary.remaining} remaining."
        )
        return summary

    def match_all(self, batch_size: int = 100, threshold: Optional[float] = None, use_ai: bool = False) -> MatchBatchSummary:
        """Pages through the whole unmatched set from offset 0; returns the summed counts."""
        if threshold is None:
            threshold = self.config.acceptance_threshold
        total = MatchBatchSummary(offset=0, batch_size=batch_size, threshold=threshold)

        offset = 0
        while True:
            batch = self.match_batch(offset=offset, batch_size=batch_size, threshold=threshold, use_ai=use_ai)
            for field in ("processed", "matched", "direct", "fuzzy", "ai", "unmatched", "skipped", "errors"):
                setattr(total, field, getattr(total, field) + getattr(batch, field))
            total.next_offset = batch.next_offset
            total.remaining = batch.remaining
            total.complete = batch.complete

            if batch.complete or batch.processed + batch.skipped == 0:
                break
            offset = batch.next_offset

        return total

    def find_best_match(
        self,
        video: Video,
        products: Sequence[Product],
        url_index: ProductUrlIndex,
        threshold: float,
    ) -> Tuple[Optional[Product], float, Optional[str]]:
        """
        Returns ``(product, score, match_type)`` for the accepted candidate, or
        ``(None, best_score, None)`` when nothing clears ``threshold``.
        """
        direct = url_index.lookup(video)
        if direct is not None:
            return direct, 1.0, Video.MatchType.DIRECT

        video_text = VideoText(title=video.title, product_name=video.product_name, category=video.category)
        best_product: Optional[Product] = None
        best_score = 0.0

        for product in products:
            score = self.scorer.score(video_text, ProductText(name=product.name, category=product.category))
            # Strictly greater: among equal scores the first product in catalog order wins.
            if score > best_score:
                best_product, best_score = product, score
                if best_score >= 1.0:
                    break

        if best_product is not None and best_score >= threshold:
            return best_product, best_score, Video.MatchType.FUZZY
        return None, best_score, None

    def _run_ai_pass(self, videos: List[Video], products: Sequence[Product]) -> Dict[int, Product]:
        if self.ai_matcher is None:
            try:
                self.ai_matcher = AiProductMatcher(config=self.config)
            except ConfigurationError as e:
                logger.warning(f"AI matching unavailable, keeping heuristic results: {e}")
                return {}

        try:
            return self.ai_matcher.match(videos, products)
        except Exception as e:
            logger.error(f"AI matching pass failed, keeping heuristic results: {e}", exc_info=True)
            return {}

    def _write_match(self, summary: MatchBatchSummary, video: Video, product: Product, score: float, match_type: str) -> None:
        try:
            saved = self.persister.save_match(video, product, score, match_type)
        except DatabaseError as e:
            logger.error(f"Error updating video {video.id}: {e}")
            summary.errors += 1
            return

        if not saved:
            logger.error(f"Video {video.id} disappeared before its match could be saved.")
            summary.errors += 1
            return

        summary.matched += 1
        if match_type == Video.MatchType.DIRECT:
            summary.direct += 1
        elif match_type == Video.MatchType.AI:
            summary.ai += 1
        else:
            summary.fuzzy += 1
        logger.debug(f"Matched ({match_type}, {score:.2f}): '{(video.title or '')[:40]}' -> '{product.name[:40]}'")

    def _write_no_match(self, summary: MatchBatchSummary, video: Video) -> None:
        try:
            saved = self.persister.save_no_match(video)
        except DatabaseError as e:
            logger.error(f"Error marking video {video.id} as attempted: {e}")
            summary.errors += 1
            return

        if saved:
            summary.unmatched += 1
        else:
            summary.errors += 1

    @staticmethod
    def _validate(offset: int, batch_size: int, threshold: float) -> None:
        if offset < 0:
            raise ValidationError("offset must be zero or positive", {"offset": offset})
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValidationError(f"batchSize must be between 1 and {MAX_BATCH_SIZE}", {"batch_size": batch_size})
        if not 0 < threshold <= 1:
            raise ValidationError("threshold must be greater than 0 and at most 1", {"threshold": threshold})
