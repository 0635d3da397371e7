"""
Test form helpers, settings and logging setup.
"""

import logging

import pytest

from utils.config import DEFAULT_WEEKLY_HOURS, load_settings
from utils.errors import RecordNotFound
from utils.logger import get_logger, setup_logging
from utils.project_helpers import (
    EDUCATION_KEYS,
    EXPERIENCE_KEYS,
    format_list_input,
    format_record_lines,
    parse_list_input,
    parse_record_lines,
    safe_currency_display,
    safe_hours_display,
    within_word_limit,
    word_count,
)


class TestFormatting:

    def test_currency(self):
        assert safe_currency_display(75000) == '$75,000'
        assert safe_currency_display(None) == '-'
        assert safe_currency_display(float('nan')) == '-'

    def test_hours(self):
        assert safe_hours_display(600) == '600 hrs'
        assert safe_hours_display(769.2307, decimals=1) == '769.2 hrs'
        assert safe_hours_display(None) == '-'


class TestDescriptionLimit:

    def test_word_count(self):
        assert word_count('  one two\nthree  ') == 3
        assert word_count(None) == 0

    def test_limit(self):
        assert within_word_limit(' '.join(['word'] * 150))
        assert not within_word_limit(' '.join(['word'] * 151))


class TestListInput:

    def test_parse(self):
        assert parse_list_input('React, Next.js ,, AWS') == ['React', 'Next.js', 'AWS']
        assert parse_list_input('') == []

    def test_format(self):
        assert format_list_input(['React', 'AWS']) == 'React, AWS'
        assert format_list_input(None) == ''

    def test_parse_records(self):
        text = 'MBA | Stanford University | 2012\n\nBS\n'
        assert parse_record_lines(text, EDUCATION_KEYS) == [
            {'degree': 'MBA', 'institution': 'Stanford University', 'year': '2012'},
            {'degree': 'BS', 'institution': '', 'year': ''},
        ]

    def test_parse_records_keeps_extra_separators_in_last_field(self):
        records = parse_record_lines('Acme | Dev | 2020 | APIs | SDKs', EXPERIENCE_KEYS)
        assert records[0]['description'] == 'APIs | SDKs'

    def test_format_records(self):
        records = [{'degree': 'MBA', 'institution': 'Stanford', 'year': '2012'}, 'Self-taught']
        assert format_record_lines(records, EDUCATION_KEYS) == 'MBA | Stanford | 2012\nSelf-taught'


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ('STAFFING_DB_PATH', 'STAFFING_WEEKLY_HOURS', 'STAFFING_LOG_LEVEL'):
            monkeypatch.delenv(name, raising=False)
        settings = load_settings()
        assert settings.db_path.name == 'staffing_dashboard.db'
        assert settings.weekly_hours == DEFAULT_WEEKLY_HOURS
        assert settings.log_level == 'INFO'

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv('STAFFING_DB_PATH', str(tmp_path / 'x.db'))
        monkeypatch.setenv('STAFFING_WEEKLY_HOURS', '37.5')
        monkeypatch.setenv('STAFFING_LOG_LEVEL', 'debug')
        settings = load_settings()
        assert settings.db_path == tmp_path / 'x.db'
        assert settings.weekly_hours == 37.5
        assert settings.log_level == 'DEBUG'

    def test_bad_weekly_hours(self, monkeypatch):
        monkeypatch.setenv('STAFFING_WEEKLY_HOURS', 'forty')
        with pytest.raises(ValueError):
            load_settings()


class TestLogging:

    def test_setup_writes_log_file(self, tmp_path):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        try:
            setup_logging(log_level='warning', log_dir=tmp_path, log_name='test.log')
            get_logger('tests').warning('hello from tests')
            for handler in root.handlers:
                handler.flush()
            assert root.level == logging.WARNING
            assert 'hello from tests' in (tmp_path / 'test.log').read_text()
        finally:
            for handler in root.handlers:
                if handler not in handlers:
                    handler.close()
            root.handlers[:] = handlers
            root.setLevel(level)


def test_record_not_found_message():
    error = RecordNotFound('Project', 'p-9')
    assert str(error) == 'Project not found: p-9'
    assert isinstance(error, ValueError)
