import pytest

from cldrunits import Environment
from cldrunits.core import iotools


def test_defaults_section():
    """The bundled configuration file provides rendering defaults."""
    env = Environment('defaults')
    assert env['locale'] == 'en'
    assert env['style'] == 'long'
    assert env['grammatical_case'] == 'nominative'
    assert 'locale' in env
    assert env.path.name == 'cldrunits.ini'


def test_missing_section():
    """A missing section behaves like an empty mapping."""
    env = Environment('not_a_section')
    assert len(env) == 0
    assert dict(env) == {}
    with pytest.raises(KeyError) as exc:
        env['color']
    assert "has no value for 'color'" in str(exc.value)


def test_local_file(tmp_path, monkeypatch):
    """A configuration file in the working directory takes precedence."""
    path = tmp_path / 'cldrunits.ini'
    path.write_text(
        "[defaults]\nlocale = de\n\n"
        "[additional_units]\n"
        'vehicle = {"base_unit": "unit", "sort_before": "all"}\n'
    )
    monkeypatch.chdir(tmp_path)
    env = Environment('defaults')
    assert env.path == path.resolve()
    assert dict(env) == {'locale': 'de'}
    assert list(Environment('additional_units')) == ['vehicle']


def test_search(tmp_path):
    """Test searching directories for a named file."""
    (tmp_path / 'a.ini').write_text('')
    found = iotools.search([None, tmp_path / 'missing', tmp_path], 'a.ini')
    assert found == (tmp_path / 'a.ini').resolve()
    assert iotools.search([tmp_path], 'b.ini') is None
    with pytest.raises(iotools.NonExistentPathError):
        iotools.read_json(tmp_path / 'b.json')
