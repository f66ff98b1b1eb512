import math

from rest_framework import serializers

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def create_paginated_result(items, total, page, limit):
    """
    Wrap one page of items with the paging metadata the frontend tables use.
    totalPages is ceil(total / limit); a limit below 1 is rejected.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    return {
        "items": list(items),
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit),
    }


def get_skip(page, limit):
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be at least 1")
    return (page - 1) * limit


class PaginationQuerySerializer(serializers.Serializer):
    SORT_ORDER_CHOICES = (
        ("asc", "Ascending"),
        ("desc", "Descending"),
    )

    page = serializers.IntegerField(min_value=1, default=DEFAULT_PAGE)
    limit = serializers.IntegerField(min_value=1, max_value=MAX_LIMIT, default=DEFAULT_LIMIT)
    sortBy = serializers.CharField(default="createdAt")
    sortOrder = serializers.ChoiceField(choices=SORT_ORDER_CHOICES, default="desc")
