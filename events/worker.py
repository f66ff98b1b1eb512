import json
import logging
import time
import uuid

from .bus import DEFAULT_JOB_OPTIONS, QueueKeys, backoff_delay_ms
from .routing import decode_event

logger = logging.getLogger(__name__)

REQUIRED_JOB_FIELDS = frozenset({"id", "name", "consumer", "event", "attemptsMade", "opts"})


class EventWorker:
    """
    Runs queued jobs one at a time against the consumer named in each job.

    A failing job is retried with exponential backoff until it has been
    attempted ``opts.attempts`` times, then kept in the failed list.

    Each worker owns its active list and keeps a lock key alive with a TTL
    of ``lock_ttl_ms``. Jobs are only taken back from workers whose lock has
    expired, so a single job must not outlive the lock.
    """

    def __init__(self, client, consumers, queue_name="events", options=DEFAULT_JOB_OPTIONS, clock=time.time,
                 worker_id=None, lock_ttl_ms=30000):
        self.client = client
        self.consumers = consumers
        self.keys = QueueKeys(queue_name)
        self.options = options
        self.clock = clock
        self.worker_id = worker_id or uuid.uuid4().hex
        self.active = self.keys.active(self.worker_id)
        self.lock = self.keys.lock(self.worker_id)
        self.lock_ttl_ms = lock_ttl_ms
        self._running = False

    def heartbeat(self):
        pipe = self.client.pipeline()
        pipe.set(self.lock, self.worker_id, px=self.lock_ttl_ms)
        pipe.sadd(self.keys.workers, self.worker_id)
        pipe.execute()

    def release(self):
        pipe = self.client.pipeline()
        pipe.delete(self.lock)
        pipe.srem(self.keys.workers, self.worker_id)
        pipe.execute()

    def promote_delayed(self):
        """Move retries whose backoff has elapsed back onto the wait list."""
        due = self.client.zrangebyscore(self.keys.delayed, "-inf", self.clock())
        promoted = 0
        for raw in due:
            # only the worker that removes the entry re-queues it
            if self.client.zrem(self.keys.delayed, raw):
                self.client.lpush(self.keys.wait, raw)
                promoted += 1
        return promoted

    def requeue_stalled(self):
        """Put jobs held by workers whose lock expired back at the front of the line."""
        requeued = 0
        for worker_id in self.client.smembers(self.keys.workers):
            if worker_id == self.worker_id or self.client.exists(self.keys.lock(worker_id)):
                continue
            requeued += self._requeue(self.keys.active(worker_id))
            self.client.srem(self.keys.workers, worker_id)
        if requeued:
            logger.warning("Requeued %d stalled jobs", requeued)
        return requeued

    def _requeue(self, active):
        requeued = 0
        while self.client.lmove(active, self.keys.wait, "LEFT", "RIGHT") is not None:
            requeued += 1
        return requeued

    def process_next(self, timeout=None):
        """
        Run the oldest waiting job. Returns True on success, False when the
        job failed, None when nothing was waiting.
        """
        self.heartbeat()
        self.promote_delayed()
        if timeout:
            raw = self.client.blmove(self.keys.wait, self.active, timeout, "RIGHT", "LEFT")
        else:
            raw = self.client.lmove(self.keys.wait, self.active, "RIGHT", "LEFT")
        if raw is None:
            return None

        try:
            job = json.loads(raw)
        except ValueError as e:
            self.discard(raw, e)
            return False
        if not isinstance(job, dict) or not REQUIRED_JOB_FIELDS <= job.keys():
            self.discard(raw, "missing job fields")
            return False

        try:
            self.dispatch(job)
        except Exception as e:
            self.on_failure(raw, job, e)
            return False
        self.on_success(raw, job)
        return True

    def dispatch(self, job):
        consumer = self.consumers.get(job["consumer"])
        if consumer is None:
            raise LookupError(f"No consumer registered as {job['consumer']}")
        consumer.handle(decode_event(job["event"]))

    def discard(self, raw, reason):
        """Unreadable jobs go straight to the failed list without retries."""
        pipe = self.client.pipeline()
        pipe.lrem(self.active, 1, raw)
        pipe.lpush(self.keys.failed, raw)
        pipe.ltrim(self.keys.failed, 0, self.options.keep_failed - 1)
        pipe.execute()
        logger.error("Discarded unreadable job: %s", reason)

    def on_success(self, raw, job):
        job["finishedOn"] = self.clock()
        pipe = self.client.pipeline()
        pipe.lrem(self.active, 1, raw)
        pipe.lpush(self.keys.completed, json.dumps(job))
        pipe.ltrim(self.keys.completed, 0, self.options.keep_completed - 1)
        pipe.execute()
        logger.debug("Job %s (%s) completed", job["id"], job["name"])

    def on_failure(self, raw, job, error):
        job["attemptsMade"] += 1
        job["failedReason"] = str(error)
        pipe = self.client.pipeline()
        pipe.lrem(self.active, 1, raw)

        if job["attemptsMade"] < job["opts"]["attempts"]:
            delay_ms = backoff_delay_ms(job, job["attemptsMade"])
            pipe.zadd(self.keys.delayed, {json.dumps(job): self.clock() + delay_ms / 1000})
            pipe.execute()
            logger.warning(
                "Job %s (%s) failed on attempt %d, retrying in %dms: %s",
                job["id"], job["name"], job["attemptsMade"], delay_ms, error,
            )
            return

        job["finishedOn"] = self.clock()
        pipe.lpush(self.keys.failed, json.dumps(job))
        pipe.ltrim(self.keys.failed, 0, self.options.keep_failed - 1)
        pipe.execute()
        logger.error("Job %s (%s) failed after %d attempts: %s", job["id"], job["name"], job["attemptsMade"], error)

    def run(self, poll_timeout=1, max_jobs=None):
        self._running = True
        self.heartbeat()
        # leftovers from an earlier run under the same worker id
        self._requeue(self.active)
        next_stall_check = self.clock()
        processed = 0
        logger.info("Event worker %s started on %s", self.worker_id, self.keys.wait)
        try:
            while self._running:
                if self.clock() >= next_stall_check:
                    self.requeue_stalled()
                    next_stall_check = self.clock() + self.lock_ttl_ms / 1000
                result = self.process_next(timeout=poll_timeout)
                if result is not None:
                    processed += 1
                    if max_jobs is not None and processed >= max_jobs:
                        break
        finally:
            self.release()
        logger.info("Event worker %s stopped after %d jobs", self.worker_id, processed)
        return processed

    def stop(self):
        self._running = False
