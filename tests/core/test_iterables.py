import pytest

from cldrunits.core import iterables


def test_unique():
    """Test the function that extracts unique items while preserving order."""
    cases = {
        'a': ['a'],
        ('a', 'b'): ['a', 'b'],
        ('a', 'b', 'a'): ['a', 'b'],
        ('a', 'b', 'a', 'c'): ['a', 'b', 'c'],
        ('a', 'b', 'b', 'a', 'c'): ['a', 'b', 'c'],
    }
    for items, expected in cases.items():
        assert list(iterables.unique(*items)) == expected


def test_get_nested():
    """Test walking down nested mappings."""
    mapping = {'meter': {'nominative': {'one': '{0} meter'}}}
    levels = ('meter', 'nominative', 'one')
    assert iterables.get_nested(mapping, levels) == '{0} meter'
    assert iterables.get_nested(mapping, ('meter',)) == mapping['meter']
    assert iterables.get_nested(mapping, ('meter', 'dative')) is None
    assert iterables.get_nested(mapping, levels + ('other',)) is None
    assert iterables.get_nested(None, ('meter',)) is None
    assert iterables.get_nested(mapping, ()) is mapping


def test_repr_str_mixin():
    """Test the mixin that displays named attributes."""
    class Pair(iterables.ReprStrMixin):
        _display = ('a', 'b')

        def __init__(self, a, b):
            self.a = a
            self.b = b

    pair = Pair(1, 'x')
    assert str(pair) == "a=1, b='x'"
    assert repr(pair).endswith("Pair(a=1, b='x')")


@pytest.fixture
def entries():
    """A table of SI-like prefixes."""
    return [
        {'name': 'kilo', 'base': 10, 'power': 3},
        {'name': 'milli', 'base': 10, 'power': -3},
        {'name': 'kibi', 'base': 1024, 'power': 1, 'binary': True},
    ]


def test_table(entries):
    """Test the ordered collection of mappings."""
    table = iterables.Table(entries)
    assert len(table) == 3
    assert table[0]['name'] == 'kilo'
    assert table.keys == {'name', 'base', 'power'}
    assert table.column('power') == (3, -3, 1)
    with pytest.raises(iterables.TableKeyError):
        table.column('binary')
    assert str(iterables.TableKeyError('binary')) == (
        "Table has no common key 'binary'"
    )
