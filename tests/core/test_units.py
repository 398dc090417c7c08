import configparser
import fractions

import numpy
import pytest

from cldrunits.core import composition
from cldrunits.core import conversion
from cldrunits.core import grammar
from cldrunits.core import lexical
from cldrunits.core import locales
from cldrunits.core import parser
from cldrunits.core import units


@pytest.fixture
def strings():
    """Test cases for formatting quantities as text."""
    return {
        (5, 'kilometer per hour', 'en'): '5 kilometers per hour',
        (1234567, 'meter', 'en'): '1,234,567 meters',
        (1234.5, 'meter', 'de'): '1.234,5 Meter',
        (1.5, 'meter', 'fr'): '1,5 mètre',
        (1, 'day', 'ar'): 'يوم',
        (3, 'day', 'ar'): '3 أيام',
    }


@pytest.mark.render
def test_to_string(strings):
    """Test formatting numbers and units together."""
    for (value, unit, locale), expected in strings.items():
        assert units.to_string(value, unit, locale=locale) == expected
    assert units.to_string(5, 'meter', style='short') == '5 m'
    assert units.to_string(5, 'meter', locale=None) == '5 meters'


@pytest.mark.render
def test_to_string_custom(catalog):
    """Test formatting with a caller-supplied locale."""
    assert units.to_string(0, 'hour', locale='xx', catalog=catalog) == (
        'no hours'
    )
    assert units.to_string(2, 'hour', locale='xx', catalog=catalog) == (
        '2 hours'
    )


def test_defaults():
    """The default options come from the configuration file."""
    assert units.defaults() == {
        'locale': 'en',
        'style': 'long',
        'grammatical_case': 'nominative',
    }


@pytest.mark.render
def test_defaults_read_once(monkeypatch):
    """Rendering should not read the configuration file on every call."""
    lexical.default()
    reads = []
    read = configparser.ConfigParser.read

    def counted(self, *args, **kwargs):
        reads.append(args)
        return read(self, *args, **kwargs)

    units.defaults.cache_clear()
    monkeypatch.setattr(configparser.ConfigParser, 'read', counted)
    options = {
        'locale': 'en',
        'style': 'long',
        'grammatical_case': 'nominative',
    }
    for _ in range(3):
        assert units.to_string(5, 'meter', **options) == '5 meters'
    units.format_list([(5, 'meter'), (1, 'hour')], **options)
    assert reads == []
    for _ in range(3):
        assert units.to_string(5, 'meter') == '5 meters'
    units.format_list([(5, 'meter'), (1, 'hour')])
    assert len(reads) == 1


@pytest.mark.render
def test_format_list(catalog):
    """Test joining several quantities into one phrase."""
    assert units.format_list([(5, 'meter'), (1, 'hour')]) == (
        '5 meters and 1 hour'
    )
    quantities = [(1, 'kilometer'), (2, 'meter'), (3, 'foot')]
    assert units.format_list(quantities) == (
        '1 kilometer, 2 meters, and 3 feet'
    )
    assert units.format_list([(5, 'meter'), (1, 'hour')], locale='de') == (
        '5 Meter und 1 Stunde'
    )
    assert units.format_list([(5, 'meter')]) == '5 meters'
    assert units.format_list([]) == ''
    assert units.format_list(
        [(1, 'hour'), (2, 'meter')], locale='xx', catalog=catalog
    ) == 'an hour & 2 meters'


def test_dimensions():
    """Test computing the exponent of each base atom."""
    lexicon = lexical.Lexicon()
    cases = {
        'meter': {'meter': 1},
        'kilometer per square second': {'meter': 1, 'second': -2},
        'liter': {'meter': 3},
        'hectare per meter': {'meter': 1},
        'meter per meter': {},
        'kilogram meter per square second': {
            'kilogram': 1, 'meter': 1, 'second': -2,
        },
    }
    for unit, expected in cases.items():
        assert units.dimensions(unit, lexicon=lexicon) == expected


@pytest.fixture
def conversions():
    """Test cases for exact unit conversion."""
    return {
        (1, 'kilometer', 'meter'): 1000,
        (1, 'meter', 'kilometer'): fractions.Fraction(1, 1000),
        (1, 'foot', 'meter'): fractions.Fraction('0.3048'),
        (100, 'celsius', 'fahrenheit'): 212,
        (32, 'fahrenheit', 'celsius'): 0,
        (0, 'celsius', 'kelvin'): fractions.Fraction('273.15'),
        (1, 'kilometer per hour', 'meter per second'): fractions.Fraction(5, 18),
        (1000, 'liter', 'cubic meter'): 1,
        (1, 'square kilometer', 'hectare'): 100,
        (1, 'kibibyte', 'bit'): 8192,
        ('0.5', 'hour', 'minute'): 30,
    }


def test_convert(conversions):
    """Test converting values between compatible units."""
    lexicon = lexical.Lexicon()
    for (value, source, target), expected in conversions.items():
        result = units.convert(value, source, target, lexicon=lexicon)
        assert result == expected, (source, target)


def test_convert_types():
    """Test converting floats and arrays."""
    lexicon = lexical.Lexicon()
    result = units.convert(1.5, 'kilometer', 'meter', lexicon=lexicon)
    assert isinstance(result, float)
    assert result == 1500.0
    array = numpy.array([1, 2, 3])
    result = units.convert(array, 'kilometer', 'meter', lexicon=lexicon)
    assert list(result) == [1000, 2000, 3000]
    result = units.convert([0, 100], 'celsius', 'kelvin', lexicon=lexicon)
    assert list(result) == [
        fractions.Fraction('273.15'),
        fractions.Fraction('373.15'),
    ]


def test_convert_incompatible():
    """Converting between different quantities should fail."""
    lexicon = lexical.Lexicon()
    with pytest.raises(conversion.UnitConversionError) as exc:
        units.convert(1, 'meter', 'second', lexicon=lexicon)
    assert str(exc.value) == "Incompatible units from 'meter' to 'second'"
    with pytest.raises(conversion.UnitConversionError):
        units.convert(1, 'meter per second', 'meter', lexicon=lexicon)


def test_convert_result():
    """The soft variant should capture conversion and parsing errors."""
    result = units.convert_result(1, 'kilometer', 'meter')
    assert result.ok
    assert result.value == 1000
    result = units.convert_result(1, 'meter', 'second')
    assert not result.ok
    assert isinstance(result.error, conversion.UnitConversionError)
    result = units.convert_result(1, 'fluxom', 'meter')
    assert isinstance(result.error, parser.UnknownUnitError)
    with pytest.raises(parser.UnknownUnitError):
        result.unwrap()


def test_grammar():
    """Test annotating the composition tree of a unit."""
    Leaf = composition.Leaf
    Slot = grammar.GrammarSlot
    INHERITED = grammar.INHERITED
    tree = units.grammar('kilometer per hour', locale='de')
    assert tree == composition.Per(
        composition.Prefix(
            Leaf('10p3', Slot('nominative', 'one')),
            Leaf('meter', Slot(INHERITED, INHERITED)),
        ),
        Leaf('hour', Slot('accusative', 'one')),
    )
    tree = units.grammar('meter per hour', locale='en')
    assert tree.denominator.slot == Slot('nominative', 'one')


def test_soft_variants():
    """Soft variants return results instead of raising."""
    result = units.to_string_result(5, 'meter')
    assert result.ok and result.value == '5 meters'
    result = units.to_string_result(5, 'meter', locale='tlh')
    assert isinstance(result.error, locales.UnknownLocaleError)
    result = units.format_list_result([(5, 'fluxom')])
    assert isinstance(result.error, parser.UnknownUnitError)
    result = units.grammar_result('meter', locale='tlh')
    assert isinstance(result.error, locales.UnknownLocaleError)
    assert units.to_string_result.__name__ == 'to_string_result'
