from django.core.management.base import BaseCommand

from adbroll.services.match_queue_impl import MatchJobService


class Command(BaseCommand):
    help = "Runs pending match jobs in this process, oldest first."

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, help="Maximum number of jobs to run.")

    def handle(self, *args, **options):
        stats = MatchJobService().process_pending(limit=options.get("limit"))

        if not stats["total"]:
            self.stdout.write(self.style.SUCCESS("No pending match jobs."))
            return

        self.stdout.write(self.style.SUCCESS(f"Processed {stats['total']} match jobs."))
        self.stdout.write(f"  - Completed: {stats['completed']}")
        self.stdout.write(f"  - Re-queued: {stats['requeued']}")
        self.stdout.write(f"  - Failed: {stats['failed']}")
        if stats["skipped"]:
            self.stdout.write(f"  - Skipped (claimed elsewhere): {stats['skipped']}")
