"""
Static tables of unit names, aliases and prefixes.

The `Lexicon` class gathers these tables into the immutable lookup data that
the parser and renderer consult. All conversion factors are exact fractions.
"""

import collections
import fractions
import functools
import json
import logging
import typing

from cldrunits import Environment
from cldrunits.core import conversion
from cldrunits.core import iterables


log = logging.getLogger(__name__)


_si_prefixes = [
    {'name': 'quetta', 'base': 10, 'power': 30},
    {'name': 'ronna', 'base': 10, 'power': 27},
    {'name': 'yotta', 'base': 10, 'power': 24},
    {'name': 'zetta', 'base': 10, 'power': 21},
    {'name': 'exa', 'base': 10, 'power': 18},
    {'name': 'peta', 'base': 10, 'power': 15},
    {'name': 'tera', 'base': 10, 'power': 12},
    {'name': 'giga', 'base': 10, 'power': 9},
    {'name': 'mega', 'base': 10, 'power': 6},
    {'name': 'kilo', 'base': 10, 'power': 3},
    {'name': 'hecto', 'base': 10, 'power': 2},
    {'name': 'deka', 'base': 10, 'power': 1},
    {'name': 'deci', 'base': 10, 'power': -1},
    {'name': 'centi', 'base': 10, 'power': -2},
    {'name': 'milli', 'base': 10, 'power': -3},
    {'name': 'micro', 'base': 10, 'power': -6},
    {'name': 'nano', 'base': 10, 'power': -9},
    {'name': 'pico', 'base': 10, 'power': -12},
    {'name': 'femto', 'base': 10, 'power': -15},
    {'name': 'atto', 'base': 10, 'power': -18},
    {'name': 'zepto', 'base': 10, 'power': -21},
    {'name': 'yocto', 'base': 10, 'power': -24},
    {'name': 'ronto', 'base': 10, 'power': -27},
    {'name': 'quecto', 'base': 10, 'power': -30},
    {'name': 'kibi', 'base': 1024, 'power': 1},
    {'name': 'mebi', 'base': 1024, 'power': 2},
    {'name': 'gibi', 'base': 1024, 'power': 3},
    {'name': 'tebi', 'base': 1024, 'power': 4},
    {'name': 'pebi', 'base': 1024, 'power': 5},
    {'name': 'exbi', 'base': 1024, 'power': 6},
    {'name': 'zebi', 'base': 1024, 'power': 7},
    {'name': 'yobi', 'base': 1024, 'power': 8},
]

SI_PREFIXES = iterables.Table(_si_prefixes)


_power_prefixes = [
    {'name': 'square', 'power': 2},
    {'name': 'cubic', 'power': 3},
]

POWER_PREFIXES = iterables.Table(_power_prefixes)


ALIASES = {
    'metre': 'meter',
    'litre': 'liter',
    'tonne': 'metric_ton',
    'celcius': 'celsius',
    'fahrenheight': 'fahrenheit',
    'feet': 'foot',
}
"""Alternative spellings and their canonical replacements."""


BASE_UNITS = (
    'kilogram',
    'meter',
    'second',
    'ampere',
    'kelvin',
    'mole',
    'candela',
    'revolution',
    'item',
    'portion',
    'bit',
    'pixel',
    'em',
    'joule',
    'watt',
    'newton',
    'pascal',
    'hertz',
    'volt',
    'ohm',
    'lux',
)
"""The base atoms, in canonical display order."""


_PI = fractions.Fraction(411557987, 131002976)

_AREA = ('square', 'meter')
_VOLUME = ('cubic', 'meter')

_units = [
    # length
    {'name': 'meter', 'base': 'meter', 'factor': 1},
    {'name': 'foot', 'base': 'meter', 'factor': '0.3048'},
    {'name': 'inch', 'base': 'meter', 'factor': '0.0254'},
    {'name': 'yard', 'base': 'meter', 'factor': '0.9144'},
    {'name': 'mile', 'base': 'meter', 'factor': '1609.344'},
    {'name': 'light_year', 'base': 'meter', 'factor': 9460730472580800},
    {'name': 'astronomical_unit', 'base': 'meter', 'factor': 149597870700},
    {'name': 'parsec', 'base': 'meter', 'factor': 30856775814913673},
    {'name': 'nautical_mile', 'base': 'meter', 'factor': 1852},
    {'name': 'furlong', 'base': 'meter', 'factor': '201.168'},
    {'name': 'fathom', 'base': 'meter', 'factor': '1.8288'},
    {'name': 'mile_scandinavian', 'base': 'meter', 'factor': 10000},
    {'name': 'point', 'base': 'meter', 'factor': fractions.Fraction(127, 360000)},
    {'name': 'earth_radius', 'base': 'meter', 'factor': 6378100},
    {'name': 'solar_radius', 'base': 'meter', 'factor': 695700000},
    # mass
    {'name': 'kilogram', 'base': 'kilogram', 'factor': 1},
    {'name': 'gram', 'base': 'kilogram', 'factor': '0.001'},
    {'name': 'pound', 'base': 'kilogram', 'factor': '0.45359237'},
    {'name': 'ounce', 'base': 'kilogram', 'factor': fractions.Fraction('0.45359237') / 16},
    {'name': 'ton', 'base': 'kilogram', 'factor': '907.18474'},
    {'name': 'metric_ton', 'base': 'kilogram', 'factor': 1000},
    {'name': 'stone', 'base': 'kilogram', 'factor': '6.35029318'},
    {'name': 'carat', 'base': 'kilogram', 'factor': '0.0002'},
    {'name': 'grain', 'base': 'kilogram', 'factor': '0.00006479891'},
    {'name': 'troy_ounce', 'base': 'kilogram', 'factor': '0.0311034768'},
    {'name': 'dalton', 'base': 'kilogram', 'factor': '1.66053878283e-27'},
    {'name': 'earth_mass', 'base': 'kilogram', 'factor': '5.9722e24'},
    {'name': 'solar_mass', 'base': 'kilogram', 'factor': '1.98847e30'},
    # time
    {'name': 'second', 'base': 'second', 'factor': 1},
    {'name': 'minute', 'base': 'second', 'factor': 60},
    {'name': 'hour', 'base': 'second', 'factor': 3600},
    {'name': 'day', 'base': 'second', 'factor': 86400},
    {'name': 'week', 'base': 'second', 'factor': 604800},
    {'name': 'month', 'base': 'second', 'factor': 2629800},
    {'name': 'year', 'base': 'second', 'factor': 31557600},
    {'name': 'decade', 'base': 'second', 'factor': 315576000},
    {'name': 'century', 'base': 'second', 'factor': 3155760000},
    # temperature
    {'name': 'kelvin', 'base': 'kelvin', 'factor': 1},
    {
        'name': 'celsius',
        'base': 'kelvin',
        'factor': 1,
        'offset': fractions.Fraction(5463, 20),
    },
    {
        'name': 'fahrenheit',
        'base': 'kelvin',
        'factor': fractions.Fraction(5, 9),
        'offset': fractions.Fraction(45967, 100),
    },
    {'name': 'rankine', 'base': 'kelvin', 'factor': fractions.Fraction(5, 9)},
    # area
    {'name': 'hectare', 'base': _AREA, 'factor': 10000},
    {'name': 'acre', 'base': _AREA, 'factor': '4046.8564224'},
    {'name': 'dunam', 'base': _AREA, 'factor': 1000},
    # volume
    {'name': 'liter', 'base': _VOLUME, 'factor': '0.001'},
    {'name': 'gallon', 'base': _VOLUME, 'factor': '0.003785411784'},
    {'name': 'gallon_imperial', 'base': _VOLUME, 'factor': '0.00454609'},
    {'name': 'cup', 'base': _VOLUME, 'factor': '0.0002365882365'},
    {'name': 'pint', 'base': _VOLUME, 'factor': '0.000473176473'},
    {'name': 'quart', 'base': _VOLUME, 'factor': '0.000946352946'},
    {'name': 'fluid_ounce', 'base': _VOLUME, 'factor': '0.0000295735295625'},
    {'name': 'tablespoon', 'base': _VOLUME, 'factor': '0.00001478676478125'},
    {'name': 'teaspoon', 'base': _VOLUME, 'factor': '0.00000492892159375'},
    {'name': 'barrel', 'base': _VOLUME, 'factor': '0.158987294928'},
    # digital
    {'name': 'bit', 'base': 'bit', 'factor': 1},
    {'name': 'byte', 'base': 'bit', 'factor': 8},
    # energy
    {'name': 'joule', 'base': 'joule', 'factor': 1},
    {'name': 'calorie', 'base': 'joule', 'factor': '4.184'},
    {'name': 'foodcalorie', 'base': 'joule', 'factor': 4184},
    {'name': 'electronvolt', 'base': 'joule', 'factor': '1.602176634e-19'},
    {'name': 'british_thermal_unit', 'base': 'joule', 'factor': '1055.05585262'},
    # power
    {'name': 'watt', 'base': 'watt', 'factor': 1},
    {'name': 'horsepower', 'base': 'watt', 'factor': '745.69987158227022'},
    # force
    {'name': 'newton', 'base': 'newton', 'factor': 1},
    {'name': 'pound_force', 'base': 'newton', 'factor': '4.4482216152605'},
    # pressure
    {'name': 'pascal', 'base': 'pascal', 'factor': 1},
    {'name': 'bar', 'base': 'pascal', 'factor': 100000},
    {'name': 'atmosphere', 'base': 'pascal', 'factor': 101325},
    {'name': 'inch_ofhg', 'base': 'pascal', 'factor': '3386.388640341'},
    {'name': 'millimeter_ofhg', 'base': 'pascal', 'factor': '133.322387415'},
    # electromagnetic
    {'name': 'hertz', 'base': 'hertz', 'factor': 1},
    {'name': 'volt', 'base': 'volt', 'factor': 1},
    {'name': 'ampere', 'base': 'ampere', 'factor': 1},
    {'name': 'ohm', 'base': 'ohm', 'factor': 1},
    {'name': 'lux', 'base': 'lux', 'factor': 1},
    {'name': 'candela', 'base': 'candela', 'factor': 1},
    {'name': 'mole', 'base': 'mole', 'factor': 1},
    # angle
    {'name': 'revolution', 'base': 'revolution', 'factor': 1},
    {'name': 'degree', 'base': 'revolution', 'factor': fractions.Fraction(1, 360)},
    {'name': 'radian', 'base': 'revolution', 'factor': 1 / (2 * _PI)},
    {'name': 'arc_minute', 'base': 'revolution', 'factor': fractions.Fraction(1, 21600)},
    {'name': 'arc_second', 'base': 'revolution', 'factor': fractions.Fraction(1, 1296000)},
    # typography
    {'name': 'pixel', 'base': 'pixel', 'factor': 1},
    {'name': 'em', 'base': 'em', 'factor': 1},
    # concentration
    {'name': 'item', 'base': 'item', 'factor': 1},
    {'name': 'portion', 'base': 'portion', 'factor': 1},
    {'name': 'percent', 'base': 'portion', 'factor': fractions.Fraction(1, 100)},
    {'name': 'permille', 'base': 'portion', 'factor': fractions.Fraction(1, 1000)},
]

UNITS = iterables.Table(_units)


class AdditionalUnitError(Exception):
    """The definition of an additional unit is invalid."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason

    def __str__(self) -> str:
        return f"Cannot register additional unit {self.name!r}: {self.reason}"


class Lexicon(iterables.ReprStrMixin):
    """The immutable lookup tables consulted while parsing units.

    Parameters
    ----------
    additional : mapping, optional
        Definitions of units beyond the built-in table, keyed by unit name.
        Each definition must contain ``'base_unit'`` and may contain
        ``'factor'`` (default 1), ``'offset'`` (default 0) and
        ``'sort_before'``. The value of ``'sort_before'`` is either ``'all'``,
        to rank the new base unit before every other base unit, or the name of
        an existing base unit; without it, the new base unit ranks last.
    """

    _display = ('additional',)

    def __init__(
        self,
        additional: typing.Mapping[str, typing.Mapping]=None,
    ) -> None:
        self.additional = dict(additional or {})
        self.aliases = dict(ALIASES)
        self.conversions = {
            entry['name']: conversion.create(
                entry['base'],
                factor=entry['factor'],
                offset=entry.get('offset', 0),
            ) for entry in UNITS
        }
        order = list(BASE_UNITS)
        for name, definition in self.additional.items():
            self._register(name, definition, order)
        self.base_order = {atom: rank for rank, atom in enumerate(order)}
        self.si_scales = {
            entry['name']: fractions.Fraction(entry['base']) ** entry['power']
            for entry in SI_PREFIXES
        }
        self.si_keys = {
            entry['name']: f"{entry['base']}p{entry['power']}"
            for entry in SI_PREFIXES
        }
        self.powers = dict(
            zip(
                POWER_PREFIXES.column('name'),
                POWER_PREFIXES.column('power'),
            )
        )
        self._si_names = sorted(self.si_scales, key=len, reverse=True)
        self._index = self._build_index(self.conversions)
        self._magnitudes = self._build_magnitudes(self.si_scales)

    def _register(
        self,
        name: str,
        definition: typing.Mapping,
        order: typing.List[str],
    ) -> None:
        """Add a single unit definition to this lexicon."""
        if 'base_unit' not in definition:
            raise AdditionalUnitError(name, "missing 'base_unit'")
        base = str(definition['base_unit'])
        try:
            self.conversions[name] = conversion.create(
                base,
                factor=definition.get('factor', 1),
                offset=definition.get('offset', 0),
            )
        except (ValueError, TypeError) as err:
            raise AdditionalUnitError(name, str(err)) from err
        if base in order:
            return
        before = definition.get('sort_before')
        if before is None:
            order.append(base)
        elif before == 'all':
            order.insert(0, base)
        elif before in order:
            order.insert(order.index(before), base)
        else:
            raise AdditionalUnitError(
                name, f"cannot sort before unknown base unit {before!r}"
            )
        log.debug("Registered additional base unit %r for %r", base, name)

    @staticmethod
    def _build_index(names: typing.Iterable[str]):
        """Index known names by first character, longest name first."""
        index = collections.defaultdict(list)
        for name in names:
            index[name[0]].append(name)
        return {
            key: sorted(values, key=len, reverse=True)
            for key, values in index.items()
        }

    @staticmethod
    def _build_magnitudes(scales: typing.Mapping[str, fractions.Fraction]):
        """Rank SI prefixes (and the absence of one) by descending scale."""
        items = list(scales.items()) + [(None, fractions.Fraction(1))]
        ordered = sorted(items, key=lambda item: item[1], reverse=True)
        return {name: rank for rank, (name, _) in enumerate(ordered)}

    @property
    def names(self) -> typing.Tuple[str, ...]:
        """All registered unit names."""
        return tuple(self.conversions)

    def __contains__(self, name: str) -> bool:
        return name in self.conversions

    def conversion_for(self, name: str) -> typing.Optional[conversion.Conversion]:
        """The registered conversion for `name`, if any."""
        return self.conversions.get(name)

    def match_alias(self, text: str) -> typing.Optional[str]:
        """Replace an alias at the start of `text`, if there is one."""
        for alias, target in self.aliases.items():
            if text.startswith(alias):
                return target + text[len(alias):]

    def match_unit(self, text: str) -> typing.Optional[str]:
        """The longest registered unit name at the start of `text`."""
        if not text:
            return None
        for name in self._index.get(text[0], ()):
            if text.startswith(name):
                return name

    def match_power(self, text: str) -> typing.Optional[str]:
        """The power prefix, followed by ``'_'``, at the start of `text`."""
        for name in self.powers:
            if text.startswith(f"{name}_"):
                return name

    def match_si(self, text: str) -> typing.Optional[str]:
        """The longest SI prefix at the start of `text`."""
        for name in self._si_names:
            if text.startswith(name):
                return name

    def split_power(self, name: str) -> typing.Optional[typing.Tuple[str, str]]:
        """Split `name` into a power prefix and the remaining subunit."""
        power = self.match_power(name)
        if power is not None:
            rest = name[len(power) + 1:]
            if rest:
                return power, rest

    def split_si(self, name: str) -> typing.Optional[typing.Tuple[str, str]]:
        """Split `name` into an SI prefix and a registered unit name."""
        for prefix in self._si_names:
            if name.startswith(prefix) and name[len(prefix):] in self:
                return prefix, name[len(prefix):]

    def rank(self, atom: str) -> int:
        """The position of `atom` in the canonical base-unit order."""
        try:
            return self.base_order[atom]
        except KeyError:
            raise KeyError(f"No base unit named {atom!r}") from None

    def magnitude(self, prefix: typing.Optional[str]) -> int:
        """The rank of an SI prefix by descending scale."""
        return self._magnitudes[prefix]

    def si_key(self, prefix: str) -> str:
        """The locale pattern key for an SI prefix (e.g., ``'10p3'``)."""
        return self.si_keys[prefix]

    def power_key(self, prefix: str) -> str:
        """The locale pattern key for a power prefix (e.g., ``'power2'``)."""
        return f"power{self.powers[prefix]}"


@functools.lru_cache(maxsize=None)
def default() -> Lexicon:
    """The lexicon built from built-in tables plus configured units."""
    section = Environment('additional_units')
    additional = {name: json.loads(value) for name, value in section.items()}
    if additional:
        log.debug("Loaded additional units %s", sorted(additional))
    return Lexicon(additional=additional)
