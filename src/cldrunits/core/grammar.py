import enum
import typing

from cldrunits.core import composition


class Inheritance(enum.Enum):
    """Grammatical values that come from the caller."""

    INHERITED = 'compound'


INHERITED = Inheritance.INHERITED


class GrammarSlot(typing.NamedTuple):
    """The grammatical case and plural category of a leaf."""

    case: typing.Union[str, Inheritance]
    plural: typing.Union[str, Inheritance]


ROOT = GrammarSlot(INHERITED, INHERITED)
"""The slot of a unit that is not part of a compound."""


ROOT_FEATURES = {
    'case': {
        'per': ('compound', 'nominative'),
        'times': ('nominative', 'compound'),
        'power': ('nominative', 'compound'),
        'prefix': ('nominative', 'compound'),
    },
    'plural': {
        'per': ('compound', 'one'),
        'times': ('one', 'compound'),
        'power': ('one', 'compound'),
        'prefix': ('one', 'compound'),
    },
}
"""Grammatical features of structural roles that apply to every locale."""


ROLES = {
    composition.Times: 'times',
    composition.Per: 'per',
    composition.Power: 'power',
    composition.Prefix: 'prefix',
}


def features(
    custom: typing.Mapping[str, typing.Mapping]=None,
) -> typing.Dict[str, typing.Dict[str, typing.Sequence[str]]]:
    """Merge locale-specific grammatical features over the root features."""
    merged = {key: dict(value) for key, value in ROOT_FEATURES.items()}
    for key, roles in (custom or {}).items():
        merged.setdefault(key, {}).update(roles)
    return merged


def value(given: typing.Optional[str]) -> typing.Union[str, Inheritance]:
    """Convert a feature value into a slot value."""
    if given is None or given == INHERITED.value:
        return INHERITED
    return given


def slot(
    table: typing.Mapping[str, typing.Mapping[str, typing.Sequence[str]]],
    role: str,
    position: int,
) -> GrammarSlot:
    """The slot of the child at `position` of a node with `role`."""
    cases = table['case'].get(role, ())
    plurals = table['plural'].get(role, ())
    return GrammarSlot(
        case=value(cases[position] if position < len(cases) else None),
        plural=value(plurals[position] if position < len(plurals) else None),
    )


def resolve(
    tree: composition.Node,
    table: typing.Mapping[str, typing.Mapping]=None,
) -> composition.Node:
    """Assign a grammatical slot to every leaf of `tree`.

    Parameters
    ----------
    tree : composition node
        The tree to annotate. It is not modified.

    table : mapping, optional
        Grammatical features, as returned by `features`. The default is the
        root features.

    Returns
    -------
    composition node
        A new tree in which each leaf carries a `GrammarSlot`.
    """
    table = table or features()
    if isinstance(tree, composition.Leaf):
        return tree._replace(slot=ROOT)
    return _annotate(tree, table)


def _annotate(tree, table):
    role = ROLES[type(tree)]
    children = []
    for position, child in enumerate(tree):
        if isinstance(child, composition.Leaf):
            children.append(child._replace(slot=slot(table, role, position)))
        else:
            children.append(_annotate(child, table))
    return type(tree)(*children)
