"""
High-level operations on quantities with units.
"""

import functools
import logging
import typing

from cldrunits import Environment
from cldrunits.core import composition
from cldrunits.core import conversion
from cldrunits.core import grammar as _grammar
from cldrunits.core import lexical
from cldrunits.core import locales
from cldrunits.core import parser
from cldrunits.core import rendering
from cldrunits.core import result
from cldrunits.core import substitution


log = logging.getLogger(__name__)


_OPTIONS = ('locale', 'style', 'grammatical_case')


@functools.lru_cache(maxsize=None)
def defaults() -> typing.Mapping[str, str]:
    """Default rendering options from the configuration file.

    The file is read once per process. Callers must not modify the result.
    """
    section = Environment('defaults')
    return {key: section[key] for key in _OPTIONS if key in section}


def _options(given: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:
    options = {k: v for k, v in given.items() if v is not None}
    missing = [key for key in _OPTIONS if key not in options]
    if missing:
        configured = defaults()
        options.update({k: configured[k] for k in missing if k in configured})
    return options


def to_string(value, unit, **options) -> str:
    """Format a value with a unit as locale-specific text.

    Parameters
    ----------
    value : real number
        The quantity.

    unit : str or parsed unit
        The unit of `value`.

    **options
        Keyword arguments to `~rendering.render`. Unspecified values of
        ``locale``, ``style`` and ``grammatical_case`` come from the
        ``[defaults]`` section of the configuration file.

    Examples
    --------
    >>> to_string(5, 'kilometer per hour', locale='en')
    '5 kilometers per hour'
    """
    options = _options(options)
    parts = rendering.render(value, unit, **options)
    catalog = options.get('catalog') or locales.CATALOG
    number = catalog[options.get('locale', 'en')].format_number(value)
    return substitution.fill(parts, number)


def format_list(
    quantities: typing.Iterable[typing.Tuple[typing.Any, typing.Any]],
    **options
) -> str:
    """Format several quantities as a single list phrase.

    Each member of `quantities` is a ``(value, unit)`` pair. This function
    renders each quantity independently, then joins them with the locale's
    list patterns.
    """
    options = _options(options)
    strings = [to_string(value, unit, **options) for value, unit in quantities]
    catalog = options.get('catalog') or locales.CATALOG
    return catalog[options.get('locale', 'en')].join(strings)


def _parsed(unit, lexicon: lexical.Lexicon) -> parser.ParsedUnit:
    if isinstance(unit, str):
        return parser.parse(unit, lexicon=lexicon)
    return unit


def _sides(unit: parser.ParsedUnit):
    if isinstance(unit, parser.Compound):
        return unit.numerator, unit.denominator
    return unit.terms, ()


def dimensions(unit, lexicon: lexical.Lexicon=None) -> conversion.Signature:
    """The exponent of each base atom in `unit`."""
    lexicon = lexicon or lexical.default()
    numerator, denominator = _sides(_parsed(unit, lexicon))
    signature = conversion.signature(numerator)
    conversion.signature(denominator, sign=-1, into=signature)
    return {k: v for k, v in signature.items() if v != 0}


def convert(value, source, target, lexicon: lexical.Lexicon=None):
    """Convert `value` from unit `source` to unit `target`.

    Conversion is exact for integers, fractions and decimal strings. Floats
    produce floats and array-like values convert element-wise. Affine units
    (e.g., temperatures) apply their offsets only when they stand alone.

    Raises
    ------
    UnitConversionError
        The units do not measure the same quantity.
    """
    lexicon = lexicon or lexical.default()
    this = _parsed(source, lexicon)
    that = _parsed(target, lexicon)
    if not conversion.compatible(
        dimensions(this, lexicon), dimensions(that, lexicon)
    ):
        raise conversion.UnitConversionError(
            "Incompatible units",
            parser.canonical_name(this),
            parser.canonical_name(that),
        )
    these = _sides(this)
    those = _sides(that)
    single = all(
        len(side[0]) == 1 and not side[1] for side in (these, those)
    )
    if single and (
        these[0][0].conversion.affine or those[0][0].conversion.affine
    ):
        a = these[0][0].conversion
        b = those[0][0].conversion
        base = conversion.apply(value, a.factor, offset=a.offset)
        return conversion.apply(base, b.factor, offset=b.offset, inverse=True)
    factor = (
        conversion.total_factor(*these) / conversion.total_factor(*those)
    )
    log.debug("Converting %s to %s by %s", source, target, factor)
    return conversion.apply(value, factor)


def grammar(unit, locale: str='en', lexicon: lexical.Lexicon=None, catalog=None):
    """The composition tree of `unit` with grammatical slots for `locale`."""
    lexicon = lexicon or lexical.default()
    catalog = locales.CATALOG if catalog is None else catalog
    table = _grammar.features(catalog[locale].grammar_features())
    tree = composition.build(_parsed(unit, lexicon), lexicon)
    return _grammar.resolve(tree, table)


_RENDER_ERRORS = (
    rendering.RenderError,
    parser.ParseError,
    locales.UnknownLocaleError,
)

to_string_result = result.capture(to_string, *_RENDER_ERRORS)
format_list_result = result.capture(format_list, *_RENDER_ERRORS)
convert_result = result.capture(
    convert,
    conversion.UnitConversionError,
    parser.ParseError,
)
grammar_result = result.capture(
    grammar,
    parser.ParseError,
    locales.UnknownLocaleError,
)
