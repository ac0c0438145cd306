"""
Tests for query compilation and for both SQL dialects against a fixture log store.
"""

from django.test import SimpleTestCase, TestCase

from .aggregator import aggregate, run
from .dialects import (
    CorrelatedSubqueryDialect, JoinAggregateDialect, Tables, dialect_for,
)
from .exceptions import InvalidArgument
from .filters import SITE_ERRORS, FilterSet, Pagination
from .testing import BASE_TIME, LogStoreMixin, add_log
from .query_builder import build_predicates, compile_query, escape_like

DIALECTS = (JoinAggregateDialect(), CorrelatedSubqueryDialect())
TABLES = Tables(log='core_standardlog', fact='timestat_timespent', user='auth_user')


class PredicateTestCase(SimpleTestCase):

    def test_predicate_order(self):
        filter_set = FilterSet(
            course_id=4, module_name='quiz', activity_id=9, action='view',
            user_id=3, date_from=1000,
        )
        templates = [p.template for p in build_predicates(filter_set)]
        self.assertEqual(templates, [
            "{log}.course_id = %s",
            "{log}.module_name = %s",
            "{log}.context_instance_id = %s",
            "LOWER({log}.action) LIKE %s ESCAPE '|'",
            "{log}.user_id = %s",
            "{log}.time_created >= %s AND {log}.time_created < %s",
        ])

    def test_all_courses_skips_course_predicate(self):
        self.assertEqual(build_predicates(FilterSet(course_id=1, all_courses=True)), ())

    def test_all_courses_with_activity_keeps_course_predicate(self):
        predicates = build_predicates(FilterSet(course_id=1, all_courses=True, activity_id=5))
        self.assertEqual(predicates[0].params, (1,))

    def test_site_errors(self):
        predicate = build_predicates(FilterSet(course_id=1, activity_id=SITE_ERRORS))[1]
        self.assertEqual(predicate.template, "{log}.action IN (%s, %s)")
        self.assertEqual(predicate.params, ('error', 'infected'))

    def test_negated_action(self):
        predicate = build_predicates(FilterSet(course_id=1, action='-View'))[1]
        self.assertIn('NOT LIKE', predicate.template)
        self.assertEqual(predicate.params, ('%view%',))

    def test_like_wildcards_are_escaped(self):
        self.assertEqual(escape_like('50%_a|b'), '50|%|_a||b')
        predicate = build_predicates(FilterSet(course_id=1, action='user_view'))[1]
        self.assertEqual(predicate.params, ('%user|_view%',))

    def test_empty_group_matches_nobody(self):
        predicate = build_predicates(FilterSet(course_id=1, group_id=2, group_member_ids=frozenset()))[1]
        self.assertEqual(predicate.template, "1 = 0")

    def test_group_members_are_bound(self):
        predicate = build_predicates(FilterSet(course_id=1, group_id=2, group_member_ids=frozenset({7, 3})))[1]
        self.assertEqual(predicate.template, "{log}.user_id IN (%s, %s)")
        self.assertEqual(predicate.params, (3, 7))

    def test_date_range_is_half_open(self):
        predicate = build_predicates(FilterSet(course_id=1, date_from=1000))[1]
        self.assertEqual(predicate.params, (1000, 1000 + 86400))


class CompileQueryTestCase(SimpleTestCase):

    def test_user_values_never_reach_sql_text(self):
        hostile = "x'; DROP TABLE users; --"
        filter_set = FilterSet(course_id=1, action=hostile, module_name='quiz')
        for dialect in DIALECTS:
            compiled = compile_query(filter_set, dialect, TABLES)
            self.assertNotIn('DROP TABLE', compiled.sql)
            self.assertIn(f"%{hostile.lower()}%", compiled.params)

    def test_join_dialect_shape(self):
        compiled = compile_query(FilterSet(course_id=1), JoinAggregateDialect(), TABLES)
        self.assertIn('INNER JOIN timestat_timespent t ON t.log_id = l.id', compiled.sql)
        self.assertIn('GROUP BY l.user_id', compiled.sql)
        self.assertIn('HAVING SUM(t.seconds_spent) > 0', compiled.sql)
        self.assertTrue(compiled.sql.endswith('ORDER BY total_seconds_spent DESC, l.user_id ASC'))
        self.assertEqual(compiled.params, (1,))

    def test_subquery_dialect_shape(self):
        compiled = compile_query(FilterSet(course_id=1), CorrelatedSubqueryDialect(), TABLES)
        self.assertTrue(compiled.sql.startswith('SELECT DISTINCT'))
        self.assertIn('l2.user_id = l.user_id', compiled.sql)
        self.assertNotIn('GROUP BY', compiled.sql)
        # Select subquery, outer predicate, zero-time subquery
        self.assertEqual(compiled.params, (1, 1, 1))

    def test_single_user_keeps_zero_time(self):
        for dialect in DIALECTS:
            compiled = compile_query(FilterSet(course_id=1, user_id=5), dialect, TABLES)
            self.assertNotIn('> 0', compiled.sql)

    def test_compiled_query_has_no_window(self):
        filter_set = FilterSet(course_id=1, pagination=Pagination(offset=20, limit=10))
        for dialect in DIALECTS:
            self.assertNotIn('LIMIT', compile_query(filter_set, dialect, TABLES).sql)

    def test_limit_offset_bound(self):
        compiled = compile_query(FilterSet(course_id=1), JoinAggregateDialect(), TABLES).paginate(20, 10)
        self.assertTrue(compiled.sql.endswith('LIMIT %s OFFSET %s'))
        self.assertEqual(compiled.params[-2:], (10, 20))

    def test_window_is_applied_once(self):
        compiled = compile_query(FilterSet(course_id=1), JoinAggregateDialect(), TABLES).paginate(0, 10)
        with self.assertRaises(InvalidArgument):
            compiled.paginate(0, 2)

    def test_unrestricted_has_no_limit(self):
        compiled = compile_query(FilterSet(course_id=1), JoinAggregateDialect(), TABLES).paginate(0, None)
        self.assertNotIn('LIMIT', compiled.sql)


class DialectSelectionTestCase(SimpleTestCase):

    def test_auto_follows_vendor(self):
        self.assertIsInstance(dialect_for('auto', 'mysql'), JoinAggregateDialect)
        self.assertIsInstance(dialect_for('auto', 'postgresql'), CorrelatedSubqueryDialect)
        self.assertIsInstance(dialect_for('auto', 'sqlite'), CorrelatedSubqueryDialect)

    def test_setting_forces_dialect(self):
        self.assertIsInstance(dialect_for('join', 'sqlite'), JoinAggregateDialect)
        self.assertIsInstance(dialect_for('subquery', 'mysql'), CorrelatedSubqueryDialect)

    def test_unknown_setting(self):
        with self.assertRaises(ValueError):
            dialect_for('fancy', 'sqlite')


class DialectEquivalenceTestCase(LogStoreMixin, TestCase):

    def setUp(self):
        self.create_log_store()

    def _both(self, filter_set):
        join_rows = aggregate(filter_set, JoinAggregateDialect()).rows
        subquery_rows = aggregate(filter_set, CorrelatedSubqueryDialect()).rows
        self.assertEqual(join_rows, subquery_rows)
        return join_rows

    def test_all_users_ranked_by_total(self):
        rows = self._both(FilterSet(course_id=self.course.pk))
        self.assertEqual(
            [(row.username, row.total_seconds_spent) for row in rows],
            [('frank', 600), ('alice', 500), ('bob', 400), ('erin', 250), ('carol', 100)],
        )
        self.assertEqual(rows[1].first_name, 'Alice')
        self.assertEqual(rows[1].last_name, 'Smith')

    def test_equivalence_over_filter_sets(self):
        group = frozenset({self.alice.pk, self.bob.pk, self.dave.pk})
        filter_sets = [
            FilterSet(course_id=self.course.pk, action='view'),
            FilterSet(course_id=self.course.pk, action='-view'),
            FilterSet(course_id=self.course.pk, activity_id=11),
            FilterSet(course_id=self.course.pk, module_name='forum'),
            FilterSet(course_id=self.course.pk, group_id=1, group_member_ids=group),
            FilterSet(course_id=self.course.pk, date_from=BASE_TIME - 10),
            FilterSet(course_id=self.course.pk, date_from=BASE_TIME - 10, date_to=BASE_TIME + 3 * 86400),
            FilterSet(course_id=self.course.pk, user_id=self.dave.pk),
            FilterSet(course_id=self.site.pk, all_courses=True),
        ]
        for filter_set in filter_sets:
            with self.subTest(filter_set=filter_set):
                self._both(filter_set)

    def test_group_filter(self):
        group = frozenset({self.alice.pk, self.bob.pk, self.dave.pk})
        rows = self._both(FilterSet(course_id=self.course.pk, group_id=1, group_member_ids=group))
        self.assertEqual([row.username for row in rows], ['alice', 'bob'])

    def test_empty_group_yields_no_rows(self):
        rows = self._both(FilterSet(course_id=self.course.pk, group_id=1, group_member_ids=frozenset()))
        self.assertEqual(rows, ())

    def test_self_view_keeps_zero_time_row(self):
        rows = self._both(FilterSet(course_id=self.course.pk, user_id=self.dave.pk))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].user_id, self.dave.pk)
        self.assertEqual(rows[0].total_seconds_spent, 0)

    def test_all_users_view_drops_zero_time_rows(self):
        rows = self._both(FilterSet(course_id=self.course.pk))
        self.assertNotIn(self.dave.pk, [row.user_id for row in rows])

    def test_action_filter(self):
        rows = self._both(FilterSet(course_id=self.course.pk, action='VIEW'))
        self.assertEqual(
            [(row.username, row.total_seconds_spent) for row in rows],
            [('frank', 600), ('bob', 400), ('alice', 300), ('erin', 250)],
        )
        rows = self._both(FilterSet(course_id=self.course.pk, action='-view'))
        self.assertEqual([row.username for row in rows], ['alice', 'carol'])

    def test_underscore_matches_literally(self):
        rows = self._both(FilterSet(course_id=self.course.pk, action='r_v'))
        self.assertEqual([row.username for row in rows], ['erin'])

    def test_date_range(self):
        rows = self._both(FilterSet(course_id=self.course.pk, date_from=BASE_TIME + 2 * 86400 - 10))
        self.assertEqual([(row.username, row.total_seconds_spent) for row in rows], [('alice', 200)])

    def test_site_errors(self):
        add_log(self.bob, self.course, 30, action='error')
        add_log(self.carol, self.course, 45, action='infected')
        rows = self._both(FilterSet(course_id=self.course.pk, activity_id=SITE_ERRORS))
        self.assertEqual([(row.username, row.total_seconds_spent) for row in rows],
                         [('carol', 45), ('bob', 30)])

    def test_all_courses_rows_per_course(self):
        other = self.course.__class__.objects.create(short_name='JS', full_name='JavaScript')
        add_log(self.alice, other, 50)
        add_log(self.alice, None, 70)
        rows = self._both(FilterSet(course_id=self.site.pk, all_courses=True))
        alice_rows = {row.course_id: row.total_seconds_spent for row in rows if row.user_id == self.alice.pk}
        self.assertEqual(alice_rows, {self.course.pk: 500, other.pk: 50, None: 70})

    def test_pagination_windows(self):
        full = self._both(FilterSet(course_id=self.course.pk))
        pages = []
        for offset in (0, 2, 4):
            filter_set = FilterSet(course_id=self.course.pk, pagination=Pagination(offset=offset, limit=2))
            pages.append(self._both(filter_set))
        self.assertEqual([len(page) for page in pages], [2, 2, 1])
        self.assertEqual(pages[0] + pages[1] + pages[2], full)

    def test_total_count_is_number_of_rows(self):
        result = aggregate(FilterSet(course_id=self.course.pk, pagination=Pagination(offset=0, limit=3)),
                           JoinAggregateDialect())
        self.assertEqual(result.total_count, 3)

    def test_run_applies_window(self):
        filter_set = FilterSet(course_id=self.course.pk, pagination=Pagination(offset=0, limit=100))
        for dialect in DIALECTS:
            with self.subTest(dialect=dialect):
                result = run(compile_query(filter_set, dialect), offset=1, limit=2)
                self.assertEqual([row.username for row in result.rows], ['alice', 'bob'])

    def test_double_window_is_a_programming_error(self):
        compiled = compile_query(FilterSet(course_id=self.course.pk), JoinAggregateDialect()).paginate(0, 100)
        with self.assertRaises(InvalidArgument):
            run(compiled, offset=0, limit=2)
