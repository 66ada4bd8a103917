"""Background job flushing due email digests.

Scheduled periodically on the ``default`` queue, e.g. with rq-scheduler or
a cron entry calling ``enqueue_flush_due_digests``.
"""

import django_rq
import structlog

from notifications.services.digest_scheduler import digest_scheduler

logger = structlog.get_logger(__name__)


def flush_due_digests_job() -> int:
    """Send every due digest.

    Returns:
        Number of digest windows delivered.
    """
    delivered = digest_scheduler.flush_due()
    logger.info("flush_due_digests_job_completed", delivered=delivered)
    return delivered


def enqueue_flush_due_digests(queue_name: str = "default"):
    """Queue a digest flush for an RQ worker."""
    queue = django_rq.get_queue(queue_name)
    return queue.enqueue(flush_due_digests_job)
