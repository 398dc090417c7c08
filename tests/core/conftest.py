import pytest

from cldrunits.core import lexical
from cldrunits.core import locales


@pytest.fixture
def lexicon() -> lexical.Lexicon:
    """The built-in lexicon plus units from a test configuration."""
    return lexical.Lexicon(additional=_ADDITIONAL)


_ADDITIONAL = {
    'vehicle': {
        'base_unit': 'unit',
        'factor': 1,
        'offset': 0,
        'sort_before': 'all',
    },
    'person': {
        'base_unit': 'unit',
        'factor': 1,
        'offset': 0,
        'sort_before': 'all',
    },
}


@pytest.fixture
def custom() -> locales.Locale:
    """A locale with explicit-value and words-only patterns.

    Its plural rules are the French rules, which put 1.5 in the category
    ``'one'``.
    """
    return locales.Locale.from_mapping(_CUSTOM)


@pytest.fixture
def catalog(custom: locales.Locale) -> locales.Catalog:
    """The bundled locales plus the custom test locale."""
    return locales.Catalog(custom)


_CUSTOM = {
    'locale': 'xx',
    'genders': ['common'],
    'plural_rules': 'french',
    'number': {'decimal': '.', 'group': ','},
    'list': {'2': '{0} & {1}', 'end': '{0} & {1}'},
    'grammar': {
        'plural': {'per': ['compound', 'other']},
    },
    'styles': {
        'long': {
            'units': {
                'hour': {
                    'nominative': {
                        '0': 'no hours',
                        'one': 'an hour',
                        'other': '{0} hours',
                    },
                },
                'day': {
                    'nominative': {
                        'one': '{0} day',
                        'other': '{0} days',
                    },
                    'dative': {
                        'other': '{0} dayz',
                    },
                },
                'meter': {
                    'nominative': {
                        'one': '{0} meter',
                        'other': '{0} meters',
                    },
                },
                'second': {
                    'nominative': {
                        'other': '{0} seconds',
                    },
                },
            },
            'prefixes': {'10p3': 'KILO {0}'},
            'powers': {'power2': {'other': '{0} squared'}},
            'compound': {'times': '{0} x {1}', 'per': '{0} every {1}'},
        },
    },
}
