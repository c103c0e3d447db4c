import logging

from django.core.management.base import BaseCommand, CommandError

from adbroll.services.exceptions import ServiceError
from adbroll.services.matching_impl import BatchMatchOrchestrator

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Matches unmatched videos to catalog products, one batch or all batches."

    def add_arguments(self, parser):
        parser.add_argument("--batch-size", type=int, default=100, help="Videos per batch (1-1000).")
        parser.add_argument("--offset", type=int, default=0, help="Position in the unmatched set to start from.")
        parser.add_argument("--threshold", type=float, help="Minimum fuzzy score to accept. Defaults to MATCH_ACCEPTANCE_THRESHOLD.")
        parser.add_argument("--smart", action="store_true", help="Ask the AI gateway about videos the heuristic could not place.")
        parser.add_argument("--all", action="store_true", help="Keep going until every unmatched video has been attempted.")

    def handle(self, *args, **options):
        batch_size = options["batch_size"]
        threshold = options.get("threshold")
        use_ai = options["smart"]

        orchestrator = BatchMatchOrchestrator()
        try:
            if options["all"]:
                self.stdout.write("Matching all unmatched videos...")
                summary = orchestrator.match_all(batch_size=batch_size, threshold=threshold, use_ai=use_ai)
            else:
                self.stdout.write(f"Matching videos from offset {options['offset']}...")
                summary = orchestrator.match_batch(offset=options["offset"], batch_size=batch_size, threshold=threshold, use_ai=use_ai)
        except ServiceError as e:
            raise CommandError(f"Video matching failed: {e}") from e

        self.stdout.write(self.style.SUCCESS("Video matching finished."))
        self.stdout.write(f"  - Processed: {summary.processed}")
        self.stdout.write(f"  - Matched: {summary.matched} ({summary.direct} direct, {summary.fuzzy} fuzzy, {summary.ai} ai)")
        self.stdout.write(f"  - Unmatched: {summary.unmatched}")
        self.stdout.write(f"  - Skipped: {summary.skipped}")
        if summary.errors:
            self.stdout.write(self.style.WARNING(f"  - Errors: {summary.errors}"))
        if summary.complete:
            self.stdout.write("  - No unmatched videos remaining.")
        else:
            self.stdout.write(f"  - Remaining: {summary.remaining} (next offset {summary.next_offset})")
