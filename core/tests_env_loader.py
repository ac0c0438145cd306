"""
Tests for the environment loader getters.
"""

import os
from unittest import mock

from django.test import SimpleTestCase

from .env_loader import get_bool_env, get_int_env, get_list_env, validate_environment


class EnvLoaderTestCase(SimpleTestCase):

    def test_validate_environment_reports_missing_keys(self):
        env = {'DB_NAME': 'timestat', 'DB_USER': ''}
        with mock.patch.dict(os.environ, env, clear=True):
            with self.assertLogs('core.env_loader', level='WARNING'):
                missing = validate_environment(['DB_NAME', 'DB_USER', 'DB_PASSWORD'])
        self.assertEqual(missing, ['DB_USER', 'DB_PASSWORD'])

    def test_validate_environment_all_present(self):
        with mock.patch.dict(os.environ, {'DB_NAME': 'timestat'}, clear=True):
            self.assertEqual(validate_environment(['DB_NAME']), [])

    def test_typed_getters(self):
        env = {'FLAG': 'Yes', 'COUNT': 'seven', 'HOSTS': 'a, b,,c'}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertTrue(get_bool_env('FLAG'))
            with self.assertLogs('core.env_loader', level='WARNING'):
                self.assertEqual(get_int_env('COUNT', 3), 3)
            self.assertEqual(get_list_env('HOSTS'), ['a', 'b', 'c'])
