import logging
from datetime import timedelta

from django.utils import timezone

from .repository import AnalyticsRepository
from .sink import get_analytics_sink

logger = logging.getLogger(__name__)

TODAY = "today"
LAST_7_DAYS = "last7days"
LAST_30_DAYS = "last30days"
CUSTOM = "custom"
DATE_PRESETS = (TODAY, LAST_7_DAYS, LAST_30_DAYS, CUSTOM)


def resolve_date_range(preset=LAST_30_DAYS, date_from=None, date_to=None, today=None):
    """
    Turn a preset into an inclusive ``(date_from, date_to)`` pair of dates.

    ``date_to`` defaults to today for every preset. ``custom`` without a
    ``date_from`` falls back to the last 30 days; unknown presets do too.
    """
    today = today or timezone.now().date()
    end = date_to or today

    if preset == TODAY:
        start = today
    elif preset == LAST_7_DAYS:
        start = end - timedelta(days=7)
    elif preset == CUSTOM and date_from is not None:
        start = date_from
    else:
        start = end - timedelta(days=30)
    return start, end


class AnalyticsService:
    def __init__(self, analytics_repository=None, sink=None):
        self.analytics_repository = analytics_repository or AnalyticsRepository(sink or get_analytics_sink())

    def get_promo_code_stats(self, promo_code_id, date_from=None, date_to=None):
        today = timezone.now().date()
        date_to = date_to or today
        date_from = date_from or date_to - timedelta(days=30)
        try:
            return self.analytics_repository.get_promo_code_stats(promo_code_id, date_from, date_to)
        except Exception:
            logger.exception("Failed to get promo code stats: %s", promo_code_id)
            raise

    def get_promo_codes_list(self, date_preset=LAST_30_DAYS, date_from=None, date_to=None, page=1, limit=10,
                             sort_by="usage_count", sort_order="desc"):
        start, end = resolve_date_range(date_preset, date_from, date_to)
        try:
            return self.analytics_repository.get_promo_codes_list(start, end, page, limit, sort_by, sort_order)
        except Exception:
            logger.exception("Failed to get promo codes list")
            raise

    def get_users_list(self, date_preset=LAST_30_DAYS, date_from=None, date_to=None, page=1, limit=10,
                       sort_by="total_amount", sort_order="desc"):
        start, end = resolve_date_range(date_preset, date_from, date_to)
        try:
            return self.analytics_repository.get_users_list(start, end, page, limit, sort_by, sort_order)
        except Exception:
            logger.exception("Failed to get users list")
            raise

    def get_promo_code_usage_history(self, promo_code_id=None, date_preset=LAST_30_DAYS, date_from=None,
                                     date_to=None, page=1, limit=10, sort_by="created_at", sort_order="desc"):
        start, end = resolve_date_range(date_preset, date_from, date_to)
        try:
            return self.analytics_repository.get_promo_code_usage_history(
                start, end, promo_code_id, page, limit, sort_by, sort_order
            )
        except Exception:
            logger.exception("Failed to get promo code usage history")
            raise
