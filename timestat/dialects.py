"""
SQL shapes for the time-spent aggregation.

Two strategies produce the same result set: an inner join with GROUP BY/SUM
for the MySQL family, and a SELECT DISTINCT with a correlated subquery for
other engines. The active strategy is picked once when the app is loaded.
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple, Tuple

from django.contrib.auth import get_user_model
from django.db import connections, DEFAULT_DB_ALIAS

from .conf import get_setting

logger = logging.getLogger(__name__)


class Predicate(NamedTuple):
    """WHERE fragment written against a {log} table alias, with its bound values"""
    template: str
    params: Tuple = ()

    def render(self, alias):
        return self.template.format(log=alias)


@dataclass(frozen=True)
class QueryShape:
    predicates: Tuple[Predicate, ...]
    per_course: bool = False
    exclude_zero: bool = True


@dataclass(frozen=True)
class Tables:
    log: str
    fact: str
    user: str

    @classmethod
    def from_models(cls):
        from core.models import StandardLog
        from .models import TimeSpent
        return cls(
            log=StandardLog._meta.db_table,
            fact=TimeSpent._meta.db_table,
            user=get_user_model()._meta.db_table,
        )


USER_COLUMNS = ('username', 'first_name', 'last_name')


class Dialect:
    name = None
    vendors = ()

    def compile(self, shape, tables):
        """Return (sql, params) for the shape"""
        raise NotImplementedError

    def _from_clause(self, tables):
        return (
            f"FROM {tables.log} l "
            f"INNER JOIN {tables.fact} t ON t.log_id = l.id "
            f"LEFT JOIN {tables.user} u ON u.id = l.user_id"
        )

    def _order_clause(self, shape):
        order = "ORDER BY total_seconds_spent DESC, l.user_id ASC"
        if shape.per_course:
            order += ", l.course_id ASC"
        return order

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class JoinAggregateDialect(Dialect):
    """Inner join from log to fact rows, summed per user with GROUP BY"""
    name = 'join'
    vendors = ('mysql',)

    def compile(self, shape, tables):
        user_fields = [f"u.{column}" for column in USER_COLUMNS]
        columns = ['l.user_id'] + user_fields + ['SUM(t.seconds_spent) AS total_seconds_spent']
        group_by = ['l.user_id'] + user_fields
        if shape.per_course:
            columns.append('l.course_id')
            group_by.append('l.course_id')

        params = []
        sql = f"SELECT {', '.join(columns)} {self._from_clause(tables)}"
        if shape.predicates:
            sql += " WHERE " + " AND ".join(p.render('l') for p in shape.predicates)
            for predicate in shape.predicates:
                params.extend(predicate.params)
        sql += f" GROUP BY {', '.join(group_by)}"
        if shape.exclude_zero:
            sql += " HAVING SUM(t.seconds_spent) > 0"
        sql += " " + self._order_clause(shape)
        return sql, tuple(params)


class CorrelatedSubqueryDialect(Dialect):
    """Distinct users with a scalar subquery summing their seconds"""
    name = 'subquery'
    vendors = ('postgresql', 'sqlite', 'oracle')

    def _subquery(self, shape, tables):
        correlation = ["l2.user_id = l.user_id"]
        if shape.per_course:
            # Site-level rows carry no course; NULL must match NULL
            correlation.append(
                "(l2.course_id = l.course_id OR (l2.course_id IS NULL AND l.course_id IS NULL))"
            )
        conditions = correlation + [p.render('l2') for p in shape.predicates]
        params = []
        for predicate in shape.predicates:
            params.extend(predicate.params)
        sql = (
            f"(SELECT SUM(t2.seconds_spent) FROM {tables.log} l2 "
            f"INNER JOIN {tables.fact} t2 ON t2.log_id = l2.id "
            f"WHERE {' AND '.join(conditions)})"
        )
        return sql, params

    def compile(self, shape, tables):
        subquery, subquery_params = self._subquery(shape, tables)
        columns = ['l.user_id'] + [f"u.{column}" for column in USER_COLUMNS]
        columns.append(f"{subquery} AS total_seconds_spent")
        if shape.per_course:
            columns.append('l.course_id')

        params = list(subquery_params)
        conditions = [p.render('l') for p in shape.predicates]
        for predicate in shape.predicates:
            params.extend(predicate.params)
        if shape.exclude_zero:
            conditions.append(f"{subquery} > 0")
            params.extend(subquery_params)

        sql = f"SELECT DISTINCT {', '.join(columns)} {self._from_clause(tables)}"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " " + self._order_clause(shape)
        return sql, tuple(params)


DIALECTS = {
    JoinAggregateDialect.name: JoinAggregateDialect,
    CorrelatedSubqueryDialect.name: CorrelatedSubqueryDialect,
}

_active_dialect = None


def dialect_for(setting='auto', vendor=None):
    """Dialect named by the setting, or the one matching the database vendor for 'auto'"""
    if setting and setting != 'auto':
        try:
            return DIALECTS[setting]()
        except KeyError:
            raise ValueError(f"Unknown TIMESTAT SQL_DIALECT {setting!r}; expected auto, join or subquery")
    if vendor in JoinAggregateDialect.vendors:
        return JoinAggregateDialect()
    return CorrelatedSubqueryDialect()


def configure(using=DEFAULT_DB_ALIAS):
    """Pick the dialect for the configured database once"""
    global _active_dialect
    vendor = connections[using].vendor
    _active_dialect = dialect_for(get_setting('SQL_DIALECT'), vendor)
    logger.info(f"Time-spent reports use the {_active_dialect.name} SQL dialect ({vendor})")
    return _active_dialect


def active_dialect():
    if _active_dialect is None:
        return configure()
    return _active_dialect
