"""
Event bus between the transactional write path and the analytics sink.

Each published event becomes one job per subscribed consumer on a Redis
queue. Jobs are JSON documents kept in a handful of keys:

    <queue>:wait              list, LPUSH by producers, popped from the right (FIFO)
    <queue>:active:<worker>   list, jobs one worker is currently running
    <queue>:lock:<worker>     string with a TTL, refreshed while that worker is alive
    <queue>:workers           set, ids of workers that may own an active list
    <queue>:delayed           sorted set, jobs waiting for a retry (score = due time)
    <queue>:completed         list, the most recent completed jobs
    <queue>:failed            list, the most recent jobs that exhausted their attempts

A worker whose lock has expired is considered dead; any worker may then move
its active jobs back onto the wait list.

Delivery is at-least-once: a consumer may see the same event twice.
"""
import json
import logging
import time
import uuid
from dataclasses import dataclass
from functools import lru_cache

import redis
from django.conf import settings

from analytics.sink import get_analytics_sink
from common.exceptions import TransientInfrastructureError

from .routing import SUBSCRIPTIONS, build_consumers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobOptions:
    attempts: int = 3
    backoff_delay_ms: int = 2000
    keep_completed: int = 100
    keep_failed: int = 1000


DEFAULT_JOB_OPTIONS = JobOptions()


class QueueKeys:
    def __init__(self, queue_name):
        self.queue_name = queue_name
        self.wait = f"{queue_name}:wait"
        self.workers = f"{queue_name}:workers"
        self.delayed = f"{queue_name}:delayed"
        self.completed = f"{queue_name}:completed"
        self.failed = f"{queue_name}:failed"

    def active(self, worker_id):
        return f"{self.queue_name}:active:{worker_id}"

    def lock(self, worker_id):
        return f"{self.queue_name}:lock:{worker_id}"


def backoff_delay_ms(job, attempts_made):
    """Exponential backoff: delay, 2 * delay, 4 * delay, ..."""
    return job["opts"]["backoff"]["delay"] * 2 ** (attempts_made - 1)


class EventBus:
    def publish(self, event):
        raise NotImplementedError


class RedisEventBus(EventBus):

    def __init__(self, client, queue_name="events", options=DEFAULT_JOB_OPTIONS, clock=time.time):
        self.client = client
        self.queue_name = queue_name
        self.keys = QueueKeys(queue_name)
        self.options = options
        self.clock = clock

    def build_job(self, envelope, consumer):
        return {
            "id": uuid.uuid4().hex,
            "name": f"{envelope['type']}:{consumer}",
            "consumer": consumer,
            "event": envelope,
            "attemptsMade": 0,
            "opts": {
                "attempts": self.options.attempts,
                "backoff": {"type": "exponential", "delay": self.options.backoff_delay_ms},
            },
            "timestamp": self.clock(),
        }

    def publish(self, event):
        envelope = event.to_envelope()
        consumers = SUBSCRIPTIONS.get(event.event_type, ())
        if not consumers:
            logger.debug("No consumers subscribed to %s", envelope["type"])
            return

        jobs = [self.build_job(envelope, consumer) for consumer in consumers]
        try:
            pipe = self.client.pipeline()
            for job in jobs:
                pipe.lpush(self.keys.wait, json.dumps(job))
            pipe.execute()
        except redis.RedisError as e:
            logger.error("Failed to publish event %s: %s", envelope["type"], e)
            raise TransientInfrastructureError(f"Failed to publish event {envelope['type']}") from e

        logger.debug("Event published: %s (%d jobs)", envelope["type"], len(jobs))


class InMemoryEventBus(EventBus):
    """Dispatches straight to the consumers; for local development only."""

    def __init__(self, consumers):
        self.consumers = consumers

    def publish(self, event):
        for name in SUBSCRIPTIONS.get(event.event_type, ()):
            self.consumers[name].handle(event)


@lru_cache(maxsize=None)
def get_redis_client():
    return redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)


@lru_cache(maxsize=None)
def get_event_bus():
    backend = settings.EVENT_BUS_BACKEND
    if backend == "redis":
        return RedisEventBus(get_redis_client(), queue_name=settings.EVENT_QUEUE_NAME)
    if backend == "memory":
        return InMemoryEventBus(build_consumers(get_analytics_sink()))
    raise ValueError(f"Unknown EVENT_BUS_BACKEND: {backend}")
