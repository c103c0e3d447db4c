from django.core.management.base import BaseCommand, CommandError

from adbroll.services.exceptions import ServiceError
from adbroll.services.matching_impl import IndexRebuildOrchestrator


class Command(BaseCommand):
    help = "Recomputes product metrics, clears every video match and re-runs the matcher over all videos."

    def add_arguments(self, parser):
        parser.add_argument("--threshold", type=float, help="Minimum fuzzy score to accept. Defaults to MATCH_ACCEPTANCE_THRESHOLD.")

    def handle(self, *args, **options):
        self.stdout.write("Starting index rebuild...")
        try:
            summary = IndexRebuildOrchestrator().rebuild(threshold=options.get("threshold"))
        except ServiceError as e:
            raise CommandError(f"Index rebuild failed: {e}") from e

        self.stdout.write(self.style.SUCCESS("Index rebuild finished."))
        self.stdout.write(f"  - Products Updated: {summary.products_updated}")
        self.stdout.write(f"  - Matches Cleared: {summary.matches_cleared}")
        self.stdout.write(f"  - Creator Links Restored: {summary.creators_linked}")
        self.stdout.write(f"  - Videos Matched: {summary.videos_matched} of {summary.videos_processed}")
        self.stdout.write(f"  - Videos With Product: {summary.videos_with_product} / {summary.total_videos}")
        if summary.errors:
            self.stdout.write(self.style.WARNING(f"  - Errors: {summary.errors}"))
