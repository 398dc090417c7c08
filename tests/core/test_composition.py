from cldrunits.core import composition
from cldrunits.core import lexical
from cldrunits.core import parser


Leaf = composition.Leaf
Times = composition.Times
Per = composition.Per
Power = composition.Power
Prefix = composition.Prefix


def test_node():
    """Test re-deriving the structure of individual terms."""
    lexicon = lexical.Lexicon()
    cases = {
        'meter': Leaf('meter'),
        'kilogram': Leaf('kilogram'),
        'kilometer': Prefix(Leaf('10p3'), Leaf('meter')),
        'kibibyte': Prefix(Leaf('1024p1'), Leaf('byte')),
        'square_foot': Power(Leaf('power2'), Leaf('foot')),
        'cubic_centimeter': Power(
            Leaf('power3'), Prefix(Leaf('10p-2'), Leaf('meter'))
        ),
        'fluxom': Leaf('fluxom'),
    }
    for name, expected in cases.items():
        assert composition.node(name, lexicon) == expected


def test_build():
    """Test building trees from parsed units."""
    lexicon = lexical.Lexicon()
    cases = {
        'meter': Leaf('meter'),
        'kilogram meter': Times(Leaf('kilogram'), Leaf('meter')),
        'kilogram meter second': Times(
            Times(Leaf('kilogram'), Leaf('meter')), Leaf('second')
        ),
        'kilogram per light year': Per(Leaf('kilogram'), Leaf('light_year')),
        'kilometer per hour': Per(
            Prefix(Leaf('10p3'), Leaf('meter')), Leaf('hour')
        ),
        'meter per square second': Per(
            Leaf('meter'), Power(Leaf('power2'), Leaf('second'))
        ),
    }
    for string, expected in cases.items():
        parsed = parser.parse(string, lexicon=lexicon)
        assert composition.build(parsed, lexicon) == expected


def test_traverse():
    """Test applying a function from the leaves upward."""
    tree = Per(Prefix(Leaf('10p3'), Leaf('meter')), Leaf('hour'))

    def describe(node):
        if isinstance(node, Leaf):
            return node.unit
        if isinstance(node, Per):
            return f"({node.numerator})/({node.denominator})"
        if isinstance(node, Prefix):
            return f"{node.prefix}:{node.operand}"
        return str(node)

    assert composition.traverse(tree, describe) == "(10p3:meter)/(hour)"


def test_leaves():
    """Test iterating over the leaves of a tree."""
    tree = Times(Power(Leaf('power2'), Leaf('foot')), Leaf('second'))
    units = [leaf.unit for leaf in composition.leaves(tree)]
    assert units == ['power2', 'foot', 'second']
