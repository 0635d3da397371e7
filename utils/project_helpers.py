"""
Helper functions for project-related formatting and form input.
"""
import pandas as pd

DESCRIPTION_WORD_LIMIT = 150


def safe_currency_display(value):
    """Safely display currency with NULL handling."""
    if value is None or pd.isna(value):
        return '-'
    return f"${value:,.0f}"


def safe_hours_display(value, decimals=0):
    """Format an hours value as '600 hrs', '-' when missing."""
    if value is None or pd.isna(value):
        return '-'
    return f"{value:,.{decimals}f} hrs"


def word_count(text):
    if not text:
        return 0
    return len([word for word in str(text).split() if word])


def within_word_limit(text, limit=DESCRIPTION_WORD_LIMIT):
    return word_count(text) <= limit


def parse_list_input(text):
    """'React, Next.js ,, AWS' -> ['React', 'Next.js', 'AWS']"""
    if not text:
        return []
    return [item.strip() for item in str(text).replace('\n', ',').split(',') if item.strip()]


def format_list_input(values):
    """Inverse of parse_list_input for prefilling text inputs."""
    if not values:
        return ''
    return ', '.join(str(v) for v in values)


EDUCATION_KEYS = ('degree', 'institution', 'year')
EXPERIENCE_KEYS = ('company', 'role', 'duration', 'description')


def parse_record_lines(text, keys):
    """
    One record per line, fields separated by '|'.

    'MBA | Stanford University | 2012' -> {'degree': 'MBA', 'institution': 'Stanford University', 'year': '2012'}
    Missing trailing fields become empty strings; blank lines are skipped.
    """
    records = []
    for line in str(text or '').splitlines():
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split('|')]
        parts += [''] * (len(keys) - len(parts))
        record = dict(zip(keys, parts[:len(keys) - 1]))
        # Anything past the last separator belongs to the final field
        record[keys[-1]] = ' | '.join(parts[len(keys) - 1:]).strip(' |')
        records.append(record)
    return records


def format_record_lines(records, keys):
    """Inverse of parse_record_lines; plain strings are kept as-is."""
    lines = []
    for record in records or []:
        if isinstance(record, dict):
            lines.append(' | '.join(str(record.get(key) or '') for key in keys))
        else:
            lines.append(str(record))
    return '\n'.join(lines)
