"""
Trees that describe how a parsed unit was assembled.

A tree mirrors the algebraic shape of a parsed unit: SI prefixes applied to
a unit, powers of a unit, products of units and a single quotient of two
products. Power and prefix atoms are leaves themselves (e.g.,
``Leaf('power2')`` and ``Leaf('10p3')``) so that they can carry grammatical
slots like any other unit.
"""

import functools
import typing

from cldrunits.core import conversion
from cldrunits.core import lexical
from cldrunits.core import parser


class Leaf(typing.NamedTuple):
    """A single unit, or a power or prefix atom."""

    unit: str
    slot: typing.Any = None


class Times(typing.NamedTuple):
    """The product of two nodes."""

    left: typing.Any
    right: typing.Any


class Per(typing.NamedTuple):
    """The quotient of two nodes."""

    numerator: typing.Any
    denominator: typing.Any


class Power(typing.NamedTuple):
    """A power atom applied to a node."""

    power: Leaf
    operand: typing.Any


class Prefix(typing.NamedTuple):
    """An SI-prefix atom applied to a unit."""

    prefix: Leaf
    operand: Leaf


Node = typing.Union[Leaf, Times, Per, Power, Prefix]


def node(name: str, lexicon: lexical.Lexicon) -> Node:
    """Re-derive the structure of a single term name."""
    if name in lexicon:
        return Leaf(name)
    split = lexicon.split_power(name)
    if split is not None:
        power, subunit = split
        return Power(Leaf(lexicon.power_key(power)), node(subunit, lexicon))
    split = lexicon.split_si(name)
    if split is not None:
        prefix, unit = split
        return Prefix(Leaf(lexicon.si_key(prefix)), Leaf(unit))
    return Leaf(name)


def fold(
    terms: typing.Sequence[conversion.ResolvedTerm],
    lexicon: lexical.Lexicon,
) -> Node:
    """Fold a sequence of terms left-associatively into `Times` nodes."""
    nodes = [node(term.name, lexicon) for term in terms]
    return functools.reduce(Times, nodes)


def build(unit: parser.ParsedUnit, lexicon: lexical.Lexicon=None) -> Node:
    """Build the composition tree of a parsed unit."""
    lexicon = lexicon or lexical.default()
    if isinstance(unit, parser.Compound):
        return Per(
            fold(unit.numerator, lexicon),
            fold(unit.denominator, lexicon),
        )
    return fold(unit.terms, lexicon)


def traverse(tree: Node, function: typing.Callable):
    """Apply `function` to every node of `tree`, from the leaves upward.

    Each composite node passes to `function` with its children replaced by
    the values that `function` returned for them.
    """
    if isinstance(tree, Leaf):
        return function(tree)
    children = [traverse(child, function) for child in tree]
    return function(type(tree)(*children))


def leaves(tree: Node) -> typing.Iterator[Leaf]:
    """Iterate over the leaves of `tree` from left to right."""
    if isinstance(tree, Leaf):
        yield tree
    else:
        for child in tree:
            yield from leaves(child)
