import collections
import fractions
import numbers
import typing

import numpy


POWERS = {
    'square': 2,
    'cubic': 3,
}
"""The power atoms that may precede a base atom, with their exponents."""


class UnitConversionError(Exception):
    """Unknown conversion between units."""

    def __init__(self, reason: str, source=None, target=None) -> None:
        self.reason = reason
        self.source = source
        self.target = target

    def __str__(self) -> str:
        string = f"{self.reason}"
        if self.source and self.target:
            string += f" from '{self.source}' to '{self.target}'"
        return string


class Conversion(typing.NamedTuple):
    """The exact conversion of a unit into its base unit(s).

    A value in this unit converts to the base unit(s) as
    ``(value + offset) * factor``.
    """

    base_units: typing.Tuple[str, ...]
    factor: fractions.Fraction
    offset: fractions.Fraction = fractions.Fraction(0)

    def scale(self, value: numbers.Rational) -> 'Conversion':
        """Multiply the factor by `value` (e.g., an SI-prefix scale)."""
        return self._replace(factor=self.factor * fractions.Fraction(value))

    def power(self, atom: str) -> 'Conversion':
        """Apply the power atom `atom` (e.g., ``'square'``)."""
        exponent = POWERS[atom]
        return self._replace(
            base_units=(atom, *self.base_units),
            factor=self.factor ** exponent,
        )

    @property
    def affine(self) -> bool:
        """True if this conversion has a nonzero offset."""
        return self.offset != 0


class ResolvedTerm(typing.NamedTuple):
    """A unit name paired with its base conversion."""

    name: str
    conversion: Conversion


def create(
    base_units: typing.Union[str, typing.Iterable[str]],
    factor: typing.Union[numbers.Real, str]=1,
    offset: typing.Union[numbers.Real, str]=0,
) -> Conversion:
    """Create a conversion from loosely typed arguments.

    Factors and offsets given as strings (e.g., ``'0.3048'``) or as integers
    convert to exact fractions. Floating-point values convert via their
    shortest decimal representation rather than their binary expansion.
    """
    if isinstance(base_units, str):
        base_units = (base_units,)
    base_units = tuple(base_units)
    if not base_units:
        raise ValueError("A conversion needs at least one base unit")
    exact = fractions.Fraction(_exact(factor))
    if exact <= 0:
        raise ValueError(f"Conversion factor must be positive, not {factor}")
    return Conversion(base_units, exact, fractions.Fraction(_exact(offset)))


def _exact(value):
    """Prepare `value` for exact conversion to a fraction."""
    if isinstance(value, float):
        return repr(value)
    return value


Signature = typing.Dict[str, int]


def signature(
    terms: typing.Iterable[ResolvedTerm],
    sign: int=1,
    into: Signature=None,
) -> Signature:
    """Compute the dimension signature of `terms`.

    The signature maps each base atom to its total exponent. Power atoms apply
    to the base atom that follows them; `sign` is ``-1`` for a denominator.
    """
    current = collections.Counter() if into is None else into
    for term in terms:
        exponent = 1
        for atom in term.conversion.base_units:
            if atom in POWERS:
                exponent *= POWERS[atom]
            else:
                current[atom] += sign * exponent
    return current


def total_factor(
    numerator: typing.Iterable[ResolvedTerm],
    denominator: typing.Iterable[ResolvedTerm]=(),
) -> fractions.Fraction:
    """The exact factor of a product (or quotient) of terms."""
    factor = fractions.Fraction(1)
    for term in numerator:
        factor *= term.conversion.factor
    for term in denominator:
        factor /= term.conversion.factor
    return factor


def compatible(a: Signature, b: Signature) -> bool:
    """True if two dimension signatures describe the same quantity."""
    keys = set(a) | set(b)
    return all(a.get(k, 0) == b.get(k, 0) for k in keys)


def apply(value, factor: fractions.Fraction, offset=0, inverse: bool=False):
    """Apply an exact linear or affine conversion to `value`.

    Scalar integers, fractions and decimal strings stay exact. Floats convert
    through their decimal representation and return a float. Array-like values
    convert element-wise as arrays of exact fractions.
    """
    if isinstance(value, numpy.ndarray) or isinstance(value, (list, tuple)):
        array = numpy.asarray(value, dtype=object)
        converted = numpy.vectorize(
            lambda v: apply(v, factor, offset=offset, inverse=inverse),
            otypes=[object],
        )(array)
        return converted
    floating = isinstance(value, float)
    exact = fractions.Fraction(_exact(value))
    offset = fractions.Fraction(offset)
    if inverse:
        result = exact / factor - offset
    else:
        result = (exact + offset) * factor
    if floating:
        return float(result)
    return result
