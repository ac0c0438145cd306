"""
Runs compiled time-spent queries against the log store
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from django.db import connections, DEFAULT_DB_ALIAS, InterfaceError, OperationalError

from .exceptions import StorageUnavailable
from .query_builder import compile_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregateRow:
    user_id: int
    username: str
    first_name: str
    last_name: str
    total_seconds_spent: int
    course_id: Optional[int] = None


@dataclass(frozen=True)
class AggregateResult:
    rows: Tuple[AggregateRow, ...] = ()

    @property
    def total_count(self):
        # Rows of the executed query, not a separate COUNT
        return len(self.rows)

    @property
    def is_empty(self):
        return not self.rows


def _to_row(record):
    return AggregateRow(
        user_id=record['user_id'],
        username=record['username'] or '',
        first_name=record['first_name'] or '',
        last_name=record['last_name'] or '',
        total_seconds_spent=int(record['total_seconds_spent'] or 0),
        course_id=record.get('course_id'),
    )


def run(compiled, offset=None, limit=None, using=DEFAULT_DB_ALIAS):
    """Execute a compiled query, optionally windowed, and collect its rows"""
    if limit is not None:
        compiled = compiled.paginate(offset, limit)

    try:
        with connections[using].cursor() as cursor:
            cursor.execute(compiled.sql, list(compiled.params))
            columns = [col[0] for col in cursor.description]
            records = [dict(zip(columns, values)) for values in cursor.fetchall()]
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Time-spent log store unavailable: {e}")
        raise StorageUnavailable("The activity log store could not be queried") from e

    result = AggregateResult(rows=tuple(_to_row(record) for record in records))
    logger.debug(f"Time-spent aggregation returned {result.total_count} rows")
    return result


def aggregate(filter_set, dialect=None, using=DEFAULT_DB_ALIAS):
    """Compile and run the report query for a FilterSet within its pagination window"""
    window = filter_set.pagination
    return run(compile_query(filter_set, dialect), window.offset, window.limit, using=using)
