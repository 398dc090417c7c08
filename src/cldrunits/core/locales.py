"""
Bundled locale data for rendering units.

Each locale lives in a JSON file under ``data/locales``. A file provides unit
patterns for each style, grammatical features, number symbols, list patterns
and the name of the locale's plural rules.
"""

import collections.abc
import decimal
import fractions
import functools
import logging
import numbers
import pathlib
import typing

from cldrunits.core import iotools
from cldrunits.core import iterables
from cldrunits.core import substitution


log = logging.getLogger(__name__)


DATA = pathlib.Path(__file__).parent.parent / 'data' / 'locales'
"""The directory that contains bundled locale files."""


PLURALS = ('zero', 'one', 'two', 'few', 'many', 'other')
"""All CLDR plural categories."""


class UnknownLocaleError(KeyError):
    """There is no data for the requested locale."""

    def __init__(self, name: str, available: typing.Iterable[str]=()) -> None:
        self.name = name
        self.available = sorted(available)

    def __str__(self) -> str:
        string = f"No locale data for {self.name!r}"
        if self.available:
            string += f" (available: {', '.join(self.available)})"
        return string


class Operands(typing.NamedTuple):
    """Plural operands of a number, as defined by CLDR."""

    n: decimal.Decimal
    i: int
    v: int
    f: int
    e: int = 0


_CONTEXT = decimal.Context(prec=100)


def to_decimal(value, digits: int=3) -> decimal.Decimal:
    """Convert a real number to a decimal number.

    Floats convert through their shortest representation. Fractions round to
    `digits` fraction digits, which is the precision used for formatting.
    """
    if isinstance(value, decimal.Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("Cannot treat a boolean as a number")
    if isinstance(value, numbers.Integral):
        return decimal.Decimal(int(value))
    if isinstance(value, float):
        return decimal.Decimal(repr(value))
    if isinstance(value, numbers.Rational):
        exact = fractions.Fraction(value)
        number = _CONTEXT.divide(
            decimal.Decimal(exact.numerator),
            decimal.Decimal(exact.denominator),
        )
        return _quantize(number, digits).normalize(_CONTEXT)
    if isinstance(value, str):
        return decimal.Decimal(value)
    raise TypeError(f"Cannot convert {type(value)} to a decimal number")


def _quantize(number: decimal.Decimal, digits: int) -> decimal.Decimal:
    """Round `number` to at most `digits` fraction digits."""
    quantum = decimal.Decimal(1).scaleb(-digits)
    if number.as_tuple().exponent >= -digits:
        return number
    return number.quantize(
        quantum,
        rounding=decimal.ROUND_HALF_EVEN,
        context=_CONTEXT,
    )


def operands(value) -> Operands:
    """Compute the plural operands of `value`."""
    number = abs(to_decimal(value))
    exponent = number.as_tuple().exponent
    v = max(0, -exponent)
    integer = int(number)
    if v:
        digits = f"{number:f}".partition('.')[2]
        f = int(digits)
    else:
        f = 0
    return Operands(n=number, i=integer, v=v, f=f)


def _integral(n: decimal.Decimal) -> bool:
    return n == n.to_integral_value()


def _rule_one_other(ops: Operands) -> str:
    if ops.i == 1 and ops.v == 0:
        return 'one'
    return 'other'


def _rule_french(ops: Operands) -> str:
    if ops.i in (0, 1):
        return 'one'
    if ops.e == 0 and ops.i != 0 and ops.i % 1000000 == 0 and ops.v == 0:
        return 'many'
    return 'other'


def _rule_arabic(ops: Operands) -> str:
    n = ops.n
    if not _integral(n):
        return 'other'
    if n == 0:
        return 'zero'
    if n == 1:
        return 'one'
    if n == 2:
        return 'two'
    remainder = int(n) % 100
    if 3 <= remainder <= 10:
        return 'few'
    if 11 <= remainder <= 99:
        return 'many'
    return 'other'


PLURAL_RULES = {
    'one_other': _rule_one_other,
    'french': _rule_french,
    'arabic': _rule_arabic,
}
"""Plural rules by name. Locale files refer to these names."""


class Locale(iterables.ReprStrMixin):
    """The rendering data of a single locale."""

    _display = ('name',)

    def __init__(self, data: typing.Mapping[str, typing.Any]) -> None:
        self._data = data
        self.name = data['locale']
        self.genders = tuple(data.get('genders', ()))
        self.default_gender = data.get('default_gender') or (
            self.genders[0] if self.genders else None
        )
        rule = data.get('plural_rules', 'one_other')
        if rule not in PLURAL_RULES:
            raise ValueError(f"Unknown plural rules {rule!r} for {self.name}")
        self._rule = PLURAL_RULES[rule]
        symbols = data.get('number', {})
        self.decimal = symbols.get('decimal', '.')
        self.group = symbols.get('group', ',')

    @classmethod
    def from_mapping(cls, data: typing.Mapping[str, typing.Any]) -> 'Locale':
        """Create a locale from in-memory data."""
        return cls(data)

    @property
    def styles(self) -> typing.Tuple[str, ...]:
        """The names of the styles this locale defines."""
        return tuple(self._data.get('styles', {}))

    def patterns(self, style: str) -> typing.Optional[typing.Mapping]:
        """The pattern table for `style`, if this locale defines it."""
        return self._data.get('styles', {}).get(style)

    def grammar_features(self) -> typing.Mapping[str, typing.Mapping]:
        """Locale-specific grammatical features of structural roles."""
        return self._data.get('grammar', {})

    def plural_category(self, value) -> str:
        """The plural category of `value` in this locale."""
        return self._rule(operands(value))

    def format_number(self, value, fraction_digits: int=3) -> str:
        """Format `value` with this locale's number symbols.

        The result has at most `fraction_digits` fraction digits, rounded
        half to even, without trailing zeros.
        """
        number = _quantize(to_decimal(value, fraction_digits), fraction_digits)
        sign = '-' if number < 0 else ''
        integer, _, fraction = f"{abs(number):f}".partition('.')
        fraction = fraction.rstrip('0')
        string = self._group_digits(integer)
        if fraction:
            string += f"{self.decimal}{fraction}"
        return f"{sign}{string}"

    def _group_digits(self, digits: str) -> str:
        groups = []
        while len(digits) > 3:
            groups.insert(0, digits[-3:])
            digits = digits[:-3]
        groups.insert(0, digits)
        return self.group.join(groups)

    def join(self, items: typing.Sequence[str]) -> str:
        """Join `items` into a list phrase."""
        patterns = self._data.get('list', {})
        items = list(items)
        if not items:
            return ''
        if len(items) == 1:
            return items[0]
        if len(items) == 2:
            return substitution.format(patterns.get('2', '{0}, {1}'), *items)
        end = patterns.get('end', '{0}, {1}')
        middle = patterns.get('middle', '{0}, {1}')
        start = patterns.get('start', '{0}, {1}')
        phrase = substitution.format(end, items[-2], items[-1])
        for item in reversed(items[1:-2]):
            phrase = substitution.format(middle, item, phrase)
        return substitution.format(start, items[0], phrase)


def available() -> typing.Tuple[str, ...]:
    """The names of all bundled locales."""
    return tuple(sorted(path.stem for path in DATA.glob('*.json')))


@functools.lru_cache(maxsize=None)
def load(name: str) -> Locale:
    """Load a bundled locale."""
    path = DATA / f"{name}.json"
    if not path.exists():
        raise UnknownLocaleError(name, available())
    log.debug("Loading locale data from %s", path)
    return Locale(iotools.read_json(path))


class Catalog(collections.abc.Mapping):
    """Locales by name, with bundled data behind any custom locales.

    A name with a region or script subtag (e.g., ``'en-US'``) falls back to
    its language subtag when there is no locale with the full name.
    """

    def __init__(self, *custom: Locale) -> None:
        self._custom = {locale.name: locale for locale in custom}

    def __getitem__(self, name: str) -> Locale:
        for candidate in iterables.unique(name, _language(name)):
            if candidate in self._custom:
                return self._custom[candidate]
            if candidate in available():
                return load(candidate)
        raise UnknownLocaleError(name, self)

    def __iter__(self):
        yield from iterables.unique(*self._custom, *available())

    def __len__(self) -> int:
        return len(list(iter(self)))


def _language(name: str) -> str:
    return name.replace('-', '_').split('_', 1)[0]


CATALOG = Catalog()
"""The bundled locales."""
