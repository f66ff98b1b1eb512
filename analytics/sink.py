import logging
from functools import lru_cache

import clickhouse_connect
from clickhouse_connect.driver.exceptions import OperationalError
from django.conf import settings

from common.exceptions import TransientInfrastructureError

logger = logging.getLogger(__name__)


class AnalyticsSink:
    """Append-only store receiving one denormalised row per event."""

    def insert(self, table, row):
        raise NotImplementedError

    def query(self, sql, parameters=None):
        raise NotImplementedError


class ClickHouseSink(AnalyticsSink):

    def __init__(self, client=None, host="localhost", port=8123, username="default", password="",
                 database="analytics"):
        self._client = client
        self.connection = {
            "host": host,
            "port": port,
            "username": username,
            "password": password,
            "database": database,
        }

    @property
    def client(self):
        if self._client is None:
            try:
                self._client = clickhouse_connect.get_client(**self.connection)
            except OperationalError as e:
                raise TransientInfrastructureError("ClickHouse is unavailable") from e
            logger.info("ClickHouse client initialized (%s:%s)", self.connection["host"], self.connection["port"])
        return self._client

    def insert(self, table, row):
        columns = list(row)
        try:
            self.client.insert(table, [[row[column] for column in columns]], column_names=columns)
        except OperationalError as e:
            raise TransientInfrastructureError(f"Failed to insert into {table}") from e

    def query(self, sql, parameters=None):
        try:
            result = self.client.query(sql, parameters=parameters or {})
        except OperationalError as e:
            raise TransientInfrastructureError("ClickHouse query failed") from e
        return list(result.named_results())

    def command(self, sql):
        try:
            return self.client.command(sql)
        except OperationalError as e:
            raise TransientInfrastructureError("ClickHouse command failed") from e


@lru_cache(maxsize=None)
def get_analytics_sink():
    return ClickHouseSink(
        host=settings.CLICKHOUSE_HOST,
        port=settings.CLICKHOUSE_PORT,
        username=settings.CLICKHOUSE_USER,
        password=settings.CLICKHOUSE_PASSWORD,
        database=settings.CLICKHOUSE_DATABASE,
    )
