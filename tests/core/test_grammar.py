from cldrunits.core import composition
from cldrunits.core import grammar


Leaf = composition.Leaf
INHERITED = grammar.INHERITED
Slot = grammar.GrammarSlot


def test_inheritance():
    """The inherited marker should be an explicit enum member."""
    assert grammar.value('compound') is INHERITED
    assert grammar.value(None) is INHERITED
    assert grammar.value('dative') == 'dative'
    assert grammar.ROOT == Slot(INHERITED, INHERITED)


def test_features():
    """Locale features should override root features by role."""
    table = grammar.features({'case': {'per': ['compound', 'accusative']}})
    assert table['case']['per'] == ['compound', 'accusative']
    assert table['case']['times'] == ('nominative', 'compound')
    assert table['plural'] == grammar.ROOT_FEATURES['plural']
    assert grammar.features() == grammar.ROOT_FEATURES


def test_resolve_leaf():
    """A unit that stands alone takes its grammar from the caller."""
    tree = grammar.resolve(Leaf('meter'))
    assert tree == Leaf('meter', Slot(INHERITED, INHERITED))


def test_resolve_times():
    """Test slots in a product of units."""
    tree = composition.Times(
        composition.Times(Leaf('kilogram'), Leaf('meter')),
        Leaf('second'),
    )
    resolved = grammar.resolve(tree)
    assert resolved.left.left.slot == Slot('nominative', 'one')
    assert resolved.left.right.slot == Slot(INHERITED, INHERITED)
    assert resolved.right.slot == Slot(INHERITED, INHERITED)
    assert tree.left.left.slot is None


def test_resolve_per():
    """Test slots in a quotient of units."""
    tree = composition.Per(
        composition.Prefix(Leaf('10p3'), Leaf('meter')),
        Leaf('hour'),
    )
    resolved = grammar.resolve(tree)
    assert resolved.numerator.prefix.slot == Slot('nominative', 'one')
    assert resolved.numerator.operand.slot == Slot(INHERITED, INHERITED)
    assert resolved.denominator.slot == Slot('nominative', 'one')
    table = grammar.features({'case': {'per': ['compound', 'accusative']}})
    resolved = grammar.resolve(tree, table)
    assert resolved.denominator.slot == Slot('accusative', 'one')


def test_resolve_power():
    """Test slots of a power and its operand."""
    tree = composition.Power(Leaf('power2'), Leaf('foot'))
    resolved = grammar.resolve(tree)
    assert resolved.power.slot == Slot('nominative', 'one')
    assert resolved.operand.slot == Slot(INHERITED, INHERITED)
