import signal

from django.conf import settings
from django.core.management.base import BaseCommand

from analytics.sink import get_analytics_sink
from events.bus import get_redis_client
from events.routing import build_consumers
from events.worker import EventWorker


class Command(BaseCommand):
    help = "Consume queued domain events and write them to the analytics store."

    def add_arguments(self, parser):
        parser.add_argument("--queue", default=settings.EVENT_QUEUE_NAME)
        parser.add_argument("--poll-timeout", type=int, default=1)
        parser.add_argument("--max-jobs", type=int, default=None)
        parser.add_argument("--lock-ttl", type=int, default=30000, help="Worker lock TTL in milliseconds")

    def handle(self, *args, **options):
        worker = EventWorker(
            get_redis_client(),
            build_consumers(get_analytics_sink()),
            queue_name=options["queue"],
            lock_ttl_ms=options["lock_ttl"],
        )

        def shutdown(signum, frame):
            self.stdout.write(f"Received signal {signum}, stopping worker")
            worker.stop()

        signal.signal(signal.SIGINT, shutdown)
        signal.signal(signal.SIGTERM, shutdown)

        processed = worker.run(poll_timeout=options["poll_timeout"], max_jobs=options["max_jobs"])
        self.stdout.write(self.style.SUCCESS(f"Processed {processed} jobs"))
