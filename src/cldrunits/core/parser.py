"""
Parse unit names into canonical sequences of exactly resolved terms.

A unit string passes through these stages:

1. normalization (case, whitespace and hyphens);
2. splitting at the first ``'_per_'`` into numerator and denominator;
3. tokenization, which replaces aliases and splits the string at the
   boundaries of known unit names, SI prefixes and power prefixes;
4. power normalization, which regroups repeated tokens into ``square_`` or
   ``cubic_`` tokens;
5. base resolution, which maps each token to an exact `~conversion.Conversion`;
6. sorting into the canonical order of base units and SI magnitudes.
"""

import logging
import re
import typing

from cldrunits.core import conversion
from cldrunits.core import lexical
from cldrunits.core import result
from cldrunits.core import spelling


log = logging.getLogger(__name__)


PER = '_per_'
"""The separator between the numerator and denominator of a unit name."""


class ParseError(Exception):
    """Base class for errors that occur while parsing a unit."""

    kind = 'ParseError'

    def __init__(self, substring: str) -> None:
        self.substring = substring

    def __str__(self) -> str:
        return f"Cannot parse unit at {self.substring!r}"


class UnknownUnitError(ParseError):
    """The tokenizer could not match the remaining input."""

    kind = 'UnknownUnit'

    def __init__(
        self,
        substring: str,
        suggestions: typing.Sequence[str]=(),
    ) -> None:
        super().__init__(substring)
        self.suggestions = list(suggestions)

    def __str__(self) -> str:
        string = f"Unknown unit was detected at {self.substring!r}"
        hint = spelling.suggestion(self.suggestions)
        if hint:
            string += f". {hint}"
        return string


class PowerLimitError(UnknownUnitError):
    """A unit appears more often than a power prefix can express."""

    def __init__(self, substring: str, count: int) -> None:
        super().__init__(substring)
        self.count = count

    def __str__(self) -> str:
        return (
            "Unable to parse more than square and cubic powers."
            f" The requested unit would require a base unit of"
            f" {self.substring!r} to the power of {self.count}"
        )


class UnknownBaseUnitError(ParseError):
    """A token has no registered base conversion."""

    kind = 'UnknownBaseUnit'

    def __str__(self) -> str:
        return f"No base unit is registered for {self.substring!r}"


class Simple(typing.NamedTuple):
    """A product of resolved terms."""

    terms: typing.Tuple[conversion.ResolvedTerm, ...]


class Compound(typing.NamedTuple):
    """A quotient of two products of resolved terms."""

    numerator: typing.Tuple[conversion.ResolvedTerm, ...]
    denominator: typing.Tuple[conversion.ResolvedTerm, ...]


ParsedUnit = typing.Union[Simple, Compound]


_SEPARATORS = re.compile(r'[\s\-]+')


def normalize(string: str) -> str:
    """Convert `string` into the lower-case, underscore-joined form."""
    return _SEPARATORS.sub('_', string.strip().lower())


class Tokenizer:
    """Split unit strings at the boundaries of known names."""

    def __init__(self, lexicon: lexical.Lexicon) -> None:
        self.lexicon = lexicon
        self._spelling = spelling.SpellChecker(*lexicon.names)

    def __call__(self, string: str) -> typing.List[str]:
        """Split `string` into unit, SI-prefixed and power tokens."""
        tokens = []
        rest = string
        while rest:
            rest = self._dealias(rest)
            unit = self.lexicon.match_unit(rest)
            if unit is not None:
                tokens.append(unit)
                rest = rest[len(unit):]
                continue
            power = self.lexicon.match_power(rest)
            if power is not None:
                tokens.append(power)
                rest = rest[len(power) + 1:]
                continue
            prefix = self.lexicon.match_si(rest)
            if prefix is not None:
                remainder = rest[len(prefix):]
                if not remainder:
                    raise self._unknown(rest)
                subtokens = self(remainder)
                if not subtokens:
                    raise self._unknown(rest)
                subtokens[0] = prefix + subtokens[0]
                tokens.extend(subtokens)
                return tokens
            if rest.startswith('_'):
                rest = rest[1:]
                continue
            raise self._unknown(rest)
        return tokens

    def _dealias(self, text: str) -> str:
        """Replace aliases at the head of `text` until none match."""
        current = text
        while True:
            replaced = self.lexicon.match_alias(current)
            if replaced is None:
                return current
            current = replaced

    def _unknown(self, rest: str) -> UnknownUnitError:
        """Create an error, with suggestions, for unmatched input."""
        head = rest.split('_', 1)[0]
        suggestions = self._spelling.check(head)
        log.debug("No unit matches %r (suggestions: %s)", rest, suggestions)
        return UnknownUnitError(rest, suggestions)


def expand_powers(
    tokens: typing.Sequence[str],
    lexicon: lexical.Lexicon,
) -> typing.List[str]:
    """Replace power-prefixed tokens with repeated plain tokens."""
    expanded = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token in lexicon.powers and index + 1 < len(tokens):
            n = lexicon.powers[token]
            expanded.extend([tokens[index + 1]] * n)
            index += 2
            continue
        split = lexicon.split_power(token)
        if split is not None:
            power, unit = split
            expanded.extend([unit] * lexicon.powers[power])
        else:
            expanded.append(token)
        index += 1
    return expanded


def combine_powers(
    tokens: typing.Sequence[str],
    lexicon: lexical.Lexicon,
) -> typing.List[str]:
    """Group identical tokens and re-apply power prefixes to each group."""
    counts = {}
    for token in tokens:
        counts[token] = counts.get(token, 0) + 1
    names = {power: name for name, power in lexicon.powers.items()}
    combined = []
    for token, count in counts.items():
        if count == 1:
            combined.append(token)
        elif count in names:
            combined.append(f"{names[count]}_{token}")
        else:
            raise PowerLimitError(token, count)
    return combined


def resolve(name: str, lexicon: lexical.Lexicon) -> conversion.ResolvedTerm:
    """Resolve a single token to its exact base conversion."""
    return conversion.ResolvedTerm(name, _resolve(name, lexicon))


def _resolve(name: str, lexicon: lexical.Lexicon) -> conversion.Conversion:
    """Recursively strip one prefix at a time and compose the conversion."""
    direct = lexicon.conversion_for(name)
    if direct is not None:
        return direct
    split = lexicon.split_power(name)
    if split is not None:
        power, subunit = split
        return _resolve(subunit, lexicon).power(power)
    for prefix in (p for p in lexicon.si_scales if name.startswith(p)):
        remainder = name[len(prefix):]
        if not remainder:
            continue
        try:
            base = _resolve(remainder, lexicon)
        except UnknownBaseUnitError:
            continue
        return base.scale(lexicon.si_scales[prefix])
    raise UnknownBaseUnitError(name)


def si_prefix(
    name: str,
    lexicon: lexical.Lexicon,
) -> typing.Optional[str]:
    """The SI prefix of a (possibly power-prefixed) term name, if any."""
    split = lexicon.split_power(name)
    if split is not None:
        name = split[1]
    found = lexicon.split_si(name)
    return found[0] if found else None


def sort_key(
    term: conversion.ResolvedTerm,
    lexicon: lexical.Lexicon,
) -> typing.Tuple[int, int]:
    """The canonical sort key of a resolved term.

    The primary key ranks the term's final base atom; the secondary key ranks
    its SI prefix by descending magnitude, placing unprefixed terms at the
    magnitude of unity.
    """
    base = term.conversion.base_units[-1]
    return (
        lexicon.rank(base),
        lexicon.magnitude(si_prefix(term.name, lexicon)),
    )


def parse_subunit(
    string: str,
    lexicon: lexical.Lexicon,
) -> typing.Tuple[conversion.ResolvedTerm, ...]:
    """Parse one side of a unit name into sorted, resolved terms."""
    tokens = Tokenizer(lexicon)(string)
    if not tokens:
        raise UnknownUnitError(string)
    log.debug("Tokenized %r as %s", string, tokens)
    expanded = expand_powers(tokens, lexicon)
    combined = combine_powers(expanded, lexicon)
    terms = [resolve(token, lexicon) for token in combined]
    return tuple(sorted(terms, key=lambda term: sort_key(term, lexicon)))


def parse(string: str, lexicon: lexical.Lexicon=None) -> ParsedUnit:
    """Parse a unit name into its canonical representation.

    Parameters
    ----------
    string : str
        A unit name, such as ``'kilogram per light year'``.

    lexicon : `~lexical.Lexicon`, optional
        The lookup tables to use. The default lexicon includes any additional
        units from the configuration file.

    Returns
    -------
    `Simple` or `Compound`

    Raises
    ------
    UnknownUnitError
        Part of the string does not correspond to any known unit.

    UnknownBaseUnitError
        A token has no registered base conversion.
    """
    lexicon = lexicon or lexical.default()
    sides = normalize(string).split(PER, 1)
    parsed = [parse_subunit(side, lexicon) for side in sides]
    if len(parsed) == 1:
        return Simple(parsed[0])
    return Compound(*parsed)


def _subunit_name(terms: typing.Iterable[conversion.ResolvedTerm]) -> str:
    return '_'.join(term.name for term in terms)


def canonical_name(
    unit: typing.Union[ParsedUnit, str],
    lexicon: lexical.Lexicon=None,
) -> str:
    """The canonical name of a parsed unit or of a unit string.

    Examples
    --------
    >>> canonical_name('meter meter')
    'square_meter'
    >>> canonical_name('meter kilogram')
    'kilogram_meter'
    >>> canonical_name('meter per kilogram')
    'meter_per_kilogram'
    """
    if isinstance(unit, str):
        unit = parse(unit, lexicon=lexicon)
    if isinstance(unit, Compound):
        numerator = _subunit_name(unit.numerator)
        denominator = _subunit_name(unit.denominator)
        return f"{numerator}{PER}{denominator}"
    return _subunit_name(unit.terms)


parse_result = result.capture(parse, ParseError)
canonical_name_result = result.capture(canonical_name, ParseError)
