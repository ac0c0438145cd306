"""
Compiles a FilterSet into the aggregation query for the active dialect
"""

from typing import NamedTuple, Tuple

from .dialects import Predicate, QueryShape, Tables, active_dialect
from .exceptions import InvalidArgument
from .filters import SITE_ERRORS

SITE_ERROR_ACTIONS = ('error', 'infected')

LIKE_ESCAPE = '|'


class CompiledQuery(NamedTuple):
    sql: str
    params: Tuple
    windowed: bool = False

    def paginate(self, offset=None, limit=None):
        """Append a LIMIT/OFFSET window; no limit leaves the query unchanged"""
        if limit is None:
            return self
        if self.windowed:
            raise InvalidArgument("Query already carries a LIMIT/OFFSET window")
        return CompiledQuery(
            f"{self.sql} LIMIT %s OFFSET %s",
            self.params + (int(limit), int(offset or 0)),
            windowed=True,
        )


def escape_like(value):
    """Escape LIKE wildcards so the value matches literally"""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace('%', LIKE_ESCAPE + '%')
        .replace('_', LIKE_ESCAPE + '_')
    )


def action_predicate(action):
    """Case-insensitive substring match on the action; a leading '-' negates it"""
    negate = action.startswith('-')
    needle = action[1:] if negate else action
    operator = 'NOT LIKE' if negate else 'LIKE'
    return Predicate(
        f"LOWER({{log}}.action) {operator} %s ESCAPE '{LIKE_ESCAPE}'",
        (f"%{escape_like(needle.lower())}%",),
    )


def user_predicate(filter_set):
    if filter_set.user_id:
        return Predicate("{log}.user_id = %s", (filter_set.user_id,))
    if filter_set.group_member_ids is not None:
        if not filter_set.group_member_ids:
            # A group without members matches nobody
            return Predicate("1 = 0")
        members = tuple(sorted(filter_set.group_member_ids))
        placeholders = ', '.join(['%s'] * len(members))
        return Predicate(f"{{log}}.user_id IN ({placeholders})", members)
    return None


def build_predicates(filter_set):
    """WHERE predicates for the filter set, in the order they are applied"""
    predicates = []

    if not filter_set.all_courses or filter_set.activity_id:
        predicates.append(Predicate("{log}.course_id = %s", (filter_set.course_id,)))

    if filter_set.module_name:
        predicates.append(Predicate("{log}.module_name = %s", (filter_set.module_name,)))

    if filter_set.activity_id == SITE_ERRORS:
        predicates.append(Predicate("{log}.action IN (%s, %s)", SITE_ERROR_ACTIONS))
    elif filter_set.activity_id:
        predicates.append(Predicate("{log}.context_instance_id = %s", (filter_set.activity_id,)))

    if filter_set.action:
        predicates.append(action_predicate(filter_set.action))

    users = user_predicate(filter_set)
    if users is not None:
        predicates.append(users)

    if filter_set.date_from:
        predicates.append(Predicate(
            "{log}.time_created >= %s AND {log}.time_created < %s",
            (filter_set.date_from, filter_set.date_upper),
        ))

    return tuple(predicates)


def compile_query(filter_set, dialect=None, tables=None):
    """
    Aggregation query for a FilterSet, without a LIMIT/OFFSET window.

    The report pagination is applied when the query runs, see
    aggregator.aggregate.
    """
    dialect = dialect or active_dialect()
    tables = tables or Tables.from_models()
    shape = QueryShape(
        predicates=build_predicates(filter_set),
        per_course=filter_set.all_courses,
        exclude_zero=filter_set.excludes_zero_time,
    )
    sql, params = dialect.compile(shape, tables)
    return CompiledQuery(sql, params)
