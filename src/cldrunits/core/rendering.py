"""
Render parsed units as locale-specific sequences of parts.

The result of rendering is a tuple of text and `~substitution.NUMBER`
placeholders. Callers substitute the formatted numeral at each placeholder
(see `~units.to_string`).
"""

import decimal
import fractions
import logging
import math
import numbers
import re
import typing

from cldrunits.core import composition
from cldrunits.core import grammar
from cldrunits.core import iterables
from cldrunits.core import lexical
from cldrunits.core import locales
from cldrunits.core import parser
from cldrunits.core import result
from cldrunits.core import substitution


log = logging.getLogger(__name__)


STYLES = ('long', 'short', 'narrow')
"""The supported rendering styles."""


CASES = (
    'abessive',
    'ablative',
    'accusative',
    'adessive',
    'allative',
    'causal',
    'comitative',
    'dative',
    'delative',
    'elative',
    'ergative',
    'genitive',
    'illative',
    'inessive',
    'instrumental',
    'locative',
    'locativecopulative',
    'nominative',
    'oblique',
    'partitive',
    'prepositional',
    'sociative',
    'sublative',
    'superessive',
    'terminative',
    'translative',
    'vocative',
)
"""All grammatical cases that CLDR recognizes."""


DEFAULT_CASE = 'nominative'
DEFAULT_PLURAL = 'other'
DEFAULT_PER_PLURAL = 'one'

EXACT_PLURALS = {0: 'zero', 1: 'one', 2: 'two'}
"""Plural categories that correspond to a single integer value."""


class RenderError(Exception):
    """Base class for errors that occur while rendering a unit."""

    kind = 'RenderError'


class UnknownStyleError(RenderError):
    """The requested style is not available."""

    kind = 'UnknownStyle'

    def __init__(self, style: str, locale: str=None) -> None:
        self.style = style
        self.locale = locale

    def __str__(self) -> str:
        string = f"Unknown style {self.style!r}"
        if self.locale:
            string += f" for locale {self.locale!r}"
        return f"{string}. Expected one of {STYLES}"


class UnknownGrammaticalCaseError(RenderError):
    """The requested grammatical case is not known."""

    kind = 'UnknownGrammaticalCase'

    def __init__(self, case: str) -> None:
        self.case = case

    def __str__(self) -> str:
        return f"Unknown grammatical case {self.case!r}"


class UnknownGrammaticalGenderError(RenderError):
    """The requested grammatical gender is not valid for the locale."""

    kind = 'UnknownGrammaticalGender'

    def __init__(
        self,
        gender: str,
        locale: str,
        genders: typing.Iterable[str]=(),
    ) -> None:
        self.gender = gender
        self.locale = locale
        self.genders = tuple(genders)

    def __str__(self) -> str:
        return (
            f"Unknown grammatical gender {self.gender!r} for locale"
            f" {self.locale!r}. Expected one of {self.genders}"
        )


class NoPatternError(RenderError):
    """The locale data has no applicable pattern."""

    kind = 'NoPattern'

    def __init__(self, unit: str, case, gender, plural) -> None:
        self.unit = unit
        self.case = case
        self.gender = gender
        self.plural = plural

    def __str__(self) -> str:
        return (
            f"No pattern found for unit {self.unit!r} with case={self.case},"
            f" gender={self.gender}, plural={self.plural}"
        )


class InvalidValueError(RenderError):
    """The value is not a finite real number."""

    kind = 'InvalidValue'

    def __init__(self, value) -> None:
        self.value = value

    def __str__(self) -> str:
        return f"Cannot render the non-finite value {self.value!r}"


class Context(typing.NamedTuple):
    """The caller's choices that apply to every node of a render."""

    patterns: typing.Mapping[str, typing.Any]
    integer: typing.Optional[int]
    case: str
    gender: typing.Optional[str]
    plural: str
    per_plural: str


def _finite(value) -> bool:
    if isinstance(value, decimal.Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def integer_value(value) -> typing.Optional[int]:
    """The exact non-negative integer that `value` represents, if any."""
    if isinstance(value, bool) or not _finite(value):
        return None
    if isinstance(value, numbers.Integral):
        integer = int(value)
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        integer = int(value)
    elif isinstance(value, (fractions.Fraction, decimal.Decimal)):
        if value != int(value):
            return None
        integer = int(value)
    else:
        return None
    return integer if integer >= 0 else None


def _inherit(given, fallback):
    """Use `fallback` if `given` is inherited from the caller."""
    return fallback if given is grammar.INHERITED else given


def _unit_patterns(context: Context, name: str) -> typing.Mapping:
    return context.patterns.get('units', {}).get(name) or {}


def _general(forms: typing.Mapping, case: str, plural: str):
    """Look up a pattern by case and plural with the default fallbacks."""
    for levels in (
        (case, plural),
        (DEFAULT_CASE, plural),
        (case, DEFAULT_PLURAL),
        (DEFAULT_CASE, DEFAULT_PLURAL),
    ):
        pattern = iterables.get_nested(forms, levels)
        if isinstance(pattern, str):
            return pattern


def _exact(forms: typing.Mapping, case: str, key: str):
    """Look up a pattern for an explicit value or a forced category."""
    for levels in ((case, key), (DEFAULT_CASE, key)):
        pattern = iterables.get_nested(forms, levels)
        if isinstance(pattern, str):
            return pattern


def select_pattern(
    name: str,
    slot: grammar.GrammarSlot,
    context: Context,
) -> substitution.Parts:
    """Select the pattern for a single unit.

    Parameters
    ----------
    name : str
        The name of the unit.

    slot : `~grammar.GrammarSlot`
        The grammatical case and plural category of the unit's position in
        its composition tree. Inherited values take the caller's choice.

    context : `Context`
        The caller's choices.

    Notes
    -----
    Selection proceeds as follows:

    1. a pattern for the exact integer value, if the locale defines one;
    2. if the integer value is the only member of the plural category (0 for
       ``'zero'``, 1 for ``'one'``, 2 for ``'two'``), the pattern for that
       category or for ``'other'``;
    3. for ``'zero'``, ``'one'`` and ``'two'`` otherwise, the pattern for the
       category only if it contains a numeral placeholder, since a pattern
       without one is only valid for the exact value; otherwise the pattern
       for ``'other'``;
    4. any other category, falling back first to the nominative case and
       then to ``'other'``.
    """
    slot = slot or grammar.ROOT
    forms = _unit_patterns(context, name)
    case = _inherit(slot.case, context.case)
    plural = _inherit(slot.plural, context.plural)
    integer = context.integer
    pattern = None
    if integer is not None:
        pattern = _exact(forms, case, str(integer))
    if pattern is None:
        if integer is not None and EXACT_PLURALS.get(integer) == context.plural:
            pattern = _general(forms, case, plural)
        elif context.plural in EXACT_PLURALS.values():
            candidate = _general(forms, case, plural)
            if candidate is not None and _has_number(candidate):
                pattern = candidate
            else:
                log.debug(
                    "Pattern for %r in category %r has no numeral; "
                    "using the default category", name, context.plural,
                )
                pattern = _exact(forms, case, DEFAULT_PLURAL)
        else:
            pattern = _general(forms, case, plural)
    if pattern is None:
        raise NoPatternError(name, case, context.gender, plural)
    return substitution.parse(pattern)


def _has_number(pattern: str) -> bool:
    return substitution.has_placeholder(substitution.parse(pattern))


def prefix_pattern(key: str, context: Context) -> substitution.Parts:
    """The pattern for an SI prefix, such as ``'kilo{0}'``."""
    pattern = context.patterns.get('prefixes', {}).get(key)
    if not isinstance(pattern, str):
        raise NoPatternError(key, context.case, context.gender, context.plural)
    return substitution.parse(pattern)


def power_pattern(key: str, context: Context) -> substitution.Parts:
    """The pattern for a power prefix, such as ``'square {0}'``.

    Locale data may nest these patterns by gender, plural category and case.
    """
    forms = context.patterns.get('powers', {}).get(key)
    if isinstance(forms, str):
        return substitution.parse(forms)
    for levels in (
        (context.gender, context.plural, context.case),
        (context.gender, context.plural),
        (context.plural, context.case),
        (context.plural,),
        (DEFAULT_CASE,),
        (DEFAULT_PLURAL,),
    ):
        pattern = iterables.get_nested(forms, levels)
        if isinstance(pattern, str):
            return substitution.parse(pattern)
    raise NoPatternError(key, context.case, context.gender, context.plural)


_FIRST_TOKEN = re.compile(r'^(\s*)(\S+)')
_LAST_TOKEN = re.compile(r'(\S+)(\s*)$')


def merge_prefix(
    prefix: substitution.Parts,
    unit: substitution.Parts,
) -> substitution.Parts:
    """Merge a prefix pattern into rendered unit text.

    The prefix text attaches to the token of the unit text nearest the
    numeral placeholder. A prefix that precedes its placeholder without
    trailing whitespace lower-cases the unit text that it joins.
    """
    fragment = ''.join(p for p in prefix if isinstance(p, str))
    leading = bool(prefix) and isinstance(prefix[0], str)
    lower = leading and not fragment[-1:].isspace()

    def attach(string: str, first: bool) -> str:
        if lower:
            string = string.lower()
        regex = _FIRST_TOKEN if first else _LAST_TOKEN
        match = regex.search(string)
        if match is None:
            return f"{fragment}{string}" if leading else f"{string}{fragment}"
        token = match.group(2) if first else match.group(1)
        merged = f"{fragment}{token}" if leading else f"{token}{fragment}"
        if first:
            return string[:match.start(2)] + merged + string[match.end(2):]
        return string[:match.start(1)] + merged + string[match.end(1):]

    parts = list(unit)
    index = next(
        (i for i, p in enumerate(parts) if isinstance(p, substitution.Placeholder)),
        None,
    )
    if index is None:
        string = ''.join(p for p in parts if isinstance(p, str))
        if lower:
            string = string.lower()
        return (f"{fragment}{string}" if leading else f"{string}{fragment}",)
    after = index + 1
    before = index - 1
    if after < len(parts) and isinstance(parts[after], str):
        parts[after] = attach(parts[after], first=True)
    elif before >= 0 and isinstance(parts[before], str):
        parts[before] = attach(parts[before], first=False)
    else:
        parts.insert(index if leading else after, fragment)
    return substitution.merge(parts)


def _compound_pattern(context: Context, operator: str) -> substitution.Parts:
    pattern = context.patterns.get('compound', {}).get(operator)
    if not isinstance(pattern, str):
        raise NoPatternError(
            operator, context.case, context.gender, context.plural
        )
    return substitution.parse(pattern)


def render_node(
    node: composition.Node,
    context: Context,
) -> substitution.Parts:
    """Render a slot-annotated composition tree."""
    if isinstance(node, composition.Leaf):
        return select_pattern(node.unit, node.slot, context)
    if isinstance(node, composition.Prefix):
        pattern = prefix_pattern(node.prefix.unit, context)
        return merge_prefix(pattern, render_node(node.operand, context))
    if isinstance(node, composition.Power):
        pattern = power_pattern(node.power.unit, context)
        return merge_prefix(pattern, render_node(node.operand, context))
    if isinstance(node, composition.Times):
        left = render_node(node.left, context)
        right = substitution.text(render_node(node.right, context))
        return substitution.substitute(
            [left, right], _compound_pattern(context, 'times')
        )
    if isinstance(node, composition.Per):
        numerator = render_node(node.numerator, context)
        denominator = node.denominator
        if isinstance(denominator, composition.Leaf):
            per_unit = context.patterns.get('per_unit', {}).get(
                denominator.unit
            )
            if isinstance(per_unit, str):
                return substitution.substitute([numerator], per_unit)
        rendered = render_node(
            denominator, context._replace(plural=context.per_plural)
        )
        return substitution.substitute(
            [numerator, substitution.text(rendered)],
            _compound_pattern(context, 'per'),
        )
    raise TypeError(f"Cannot render {node!r}")


def per_plural(locale: locales.Locale) -> str:
    """The plural category of the denominator of a quotient."""
    table = locale.grammar_features().get('plural', {})
    values = table.get('per', ())
    if len(values) > 1:
        value = grammar.value(values[1])
        if value is not grammar.INHERITED:
            return value
    return DEFAULT_PER_PLURAL


def render(
    value,
    unit: typing.Union[str, parser.ParsedUnit],
    locale: str='en',
    style: str='long',
    grammatical_case: str=DEFAULT_CASE,
    gender: str=None,
    plural: str=None,
    lexicon: lexical.Lexicon=None,
    catalog: typing.Mapping[str, locales.Locale]=None,
) -> substitution.Parts:
    """Render a value with a unit as a sequence of parts.

    Parameters
    ----------
    value : real number
        The quantity. It determines the plural category unless `plural` is
        given, and it selects explicit-value patterns.

    unit : str or parsed unit
        The unit, either as a name or as returned by `~parser.parse`.

    locale : str, default='en'
        The name of the locale.

    style : {'long', 'short', 'narrow'}
        The rendering style.

    grammatical_case : str, default='nominative'
        The grammatical case of the whole phrase.

    gender : str, optional
        The grammatical gender. The default is the locale's default gender.

    plural : str, optional
        The plural category to use instead of the one that the locale's plural
        rules assign to `value`.

    lexicon : `~lexical.Lexicon`, optional
        The lookup tables to use when `unit` is a string.

    catalog : mapping, optional
        Locales by name. The default is the bundled locales.

    Returns
    -------
    tuple
        Text parts and `~substitution.NUMBER` placeholders.
    """
    catalog = locales.CATALOG if catalog is None else catalog
    data = catalog[locale]
    if grammatical_case not in CASES:
        raise UnknownGrammaticalCaseError(grammatical_case)
    if gender is None:
        gender = data.default_gender
    elif gender not in data.genders:
        raise UnknownGrammaticalGenderError(gender, data.name, data.genders)
    if style not in STYLES:
        raise UnknownStyleError(style)
    patterns = data.patterns(style)
    if patterns is None:
        raise UnknownStyleError(style, data.name)
    if not _finite(value):
        raise InvalidValueError(value)
    lexicon = lexicon or lexical.default()
    if isinstance(unit, str):
        unit = parser.parse(unit, lexicon=lexicon)
    context = Context(
        patterns=patterns,
        integer=integer_value(value),
        case=grammatical_case,
        gender=gender,
        plural=plural or data.plural_category(value),
        per_plural=per_plural(data),
    )
    name = parser.canonical_name(unit)
    if name in patterns.get('units', {}):
        tree = composition.Leaf(name, grammar.ROOT)
    else:
        table = grammar.features(data.grammar_features())
        tree = grammar.resolve(composition.build(unit, lexicon), table)
    log.debug("Rendering %r in %s/%s as %s", name, data.name, style, tree)
    return render_node(tree, context)


render_result = result.capture(
    render,
    RenderError,
    parser.ParseError,
    locales.UnknownLocaleError,
)
