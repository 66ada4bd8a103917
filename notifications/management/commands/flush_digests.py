"""Management command sending every due email digest."""

from django.core.management.base import BaseCommand

from notifications.jobs.digest_jobs import enqueue_flush_due_digests
from notifications.services.digest_scheduler import digest_scheduler


class Command(BaseCommand):
    """Flush due digest windows, inline or through the RQ queue.

    Intended for cron:

        */5 * * * * python manage.py flush_digests
    """

    help = "Send every email digest whose window has ended"

    def add_arguments(self, parser):
        parser.add_argument(
            "--enqueue",
            action="store_true",
            help="Queue the flush for an RQ worker instead of running it inline",
        )
        parser.add_argument(
            "--queue",
            default="default",
            help="RQ queue used with --enqueue (default: default)",
        )

    def handle(self, *args, **options):
        if options["enqueue"]:
            job = enqueue_flush_due_digests(options["queue"])
            self.stdout.write(f"Queued digest flush job {job.id}")
            return

        delivered = digest_scheduler.flush_due()
        self.stdout.write(self.style.SUCCESS(f"Delivered {delivered} digest(s)"))
