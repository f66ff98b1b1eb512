"""
Read side of the analytics store.

Sort columns are interpolated into SQL, so every listing maps the requested
column through a whitelist; all values go through ClickHouse server-side
parameters (``{name:Type}``).
"""
from common.pagination import create_paginated_result, get_skip

PROMO_CODE_SORT_COLUMNS = ("usage_count", "total_discount", "total_revenue", "unique_users", "promo_code")
USER_SORT_COLUMNS = ("total_amount", "orders_count", "promo_codes_used", "user_id")
USAGE_HISTORY_SORT_COLUMNS = ("created_at", "order_amount", "discount_amount", "promo_code", "user_id")

EMPTY_STATS = {
    "usage_count": 0,
    "total_discount": 0,
    "total_revenue": 0,
    "unique_users": 0,
    "avg_discount": 0,
}


def order_clause(sort_by, sort_order, allowed):
    column = sort_by if sort_by in allowed else allowed[0]
    direction = "ASC" if sort_order == "asc" else "DESC"
    return f"{column} {direction}"


class AnalyticsRepository:

    def __init__(self, sink):
        self.sink = sink

    def get_promo_code_stats(self, promo_code_id, date_from, date_to):
        sql = """
            SELECT
                count() AS usage_count,
                sum(discount_amount) AS total_discount,
                sum(order_amount) AS total_revenue,
                uniq(user_id) AS unique_users,
                avg(discount_amount) AS avg_discount
            FROM promo_code_usages_analytics
            WHERE promo_code_id = {promoCodeId:String}
                AND event_date >= {dateFrom:Date}
                AND event_date <= {dateTo:Date}
        """
        rows = self.sink.query(sql, {
            "promoCodeId": str(promo_code_id),
            "dateFrom": date_from,
            "dateTo": date_to,
        })
        return rows[0] if rows else dict(EMPTY_STATS)

    def get_promo_codes_list(self, date_from, date_to, page, limit, sort_by, sort_order):
        subquery = """
            SELECT
                promo_code_id,
                promo_code,
                count() AS usage_count,
                sum(discount_amount) AS total_discount,
                sum(order_amount) AS total_revenue,
                uniq(user_id) AS unique_users
            FROM promo_code_usages_analytics
            WHERE event_date >= {dateFrom:Date}
                AND event_date <= {dateTo:Date}
            GROUP BY promo_code_id, promo_code
        """
        return self._paginate(
            subquery,
            {"dateFrom": date_from, "dateTo": date_to},
            page, limit,
            order_clause(sort_by, sort_order, PROMO_CODE_SORT_COLUMNS),
        )

    def get_users_list(self, date_from, date_to, page, limit, sort_by, sort_order):
        subquery = """
            SELECT
                user_id,
                sum(orders_count) AS orders_count,
                sum(total_amount) AS total_amount,
                sum(promo_codes_used) AS promo_codes_used
            FROM users_analytics
            WHERE event_date >= {dateFrom:Date}
                AND event_date <= {dateTo:Date}
            GROUP BY user_id
        """
        return self._paginate(
            subquery,
            {"dateFrom": date_from, "dateTo": date_to},
            page, limit,
            order_clause(sort_by, sort_order, USER_SORT_COLUMNS),
        )

    def get_promo_code_usage_history(self, date_from, date_to, promo_code_id, page, limit, sort_by, sort_order):
        parameters = {"dateFrom": date_from, "dateTo": date_to}
        where = "event_date >= {dateFrom:Date} AND event_date <= {dateTo:Date}"
        if promo_code_id is not None:
            where = "promo_code_id = {promoCodeId:String} AND " + where
            parameters["promoCodeId"] = str(promo_code_id)

        subquery = f"""
            SELECT
                promo_code,
                user_id,
                order_id,
                order_amount,
                discount_amount,
                created_at
            FROM promo_code_usages_analytics
            WHERE {where}
        """
        return self._paginate(
            subquery,
            parameters,
            page, limit,
            order_clause(sort_by, sort_order, USAGE_HISTORY_SORT_COLUMNS),
        )

    def _paginate(self, subquery, parameters, page, limit, ordering):
        parameters = {**parameters, "limit": limit, "offset": get_skip(page, limit)}
        count_rows = self.sink.query(f"SELECT count() AS count FROM ({subquery})", parameters)
        items = self.sink.query(
            f"SELECT * FROM ({subquery}) ORDER BY {ordering} "
            "LIMIT {limit:UInt32} OFFSET {offset:UInt32}",
            parameters,
        )
        total = count_rows[0]["count"] if count_rows else 0
        return create_paginated_result(items, total, page, limit)
