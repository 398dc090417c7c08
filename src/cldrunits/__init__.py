import collections.abc
import configparser
import json
import os
import pathlib

from cldrunits.core import iotools


# read version from installed package
from importlib.metadata import version
__version__ = version("cldrunits")


class Environment(collections.abc.Mapping):
    """The settings in one section of ``cldrunits.ini``.

    The package reads two sections:

    ``[defaults]``
        Rendering options (``locale``, ``style`` and ``grammatical_case``)
        that `~core.units.to_string` and `~core.units.format_list` use when
        the caller omits them.

    ``[additional_units]``
        Units to register in the default `~core.lexical.Lexicon`. Each value
        is a JSON object with the keys ``base_unit``, ``factor``, ``offset``
        and ``sort_before``.

    The first ``cldrunits.ini`` found in the working directory, the home
    directory, ``~/.config``, ``/etc/cldrunits``, the directory named by
    ``$CLDRUNITS_INI`` or the package directory wins. A missing section is
    an empty mapping.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        """The name of the configuration section to select."""
        self._package = f"{__package__}.{self.name}"
        home = pathlib.Path('~').expanduser()
        paths = [
            pathlib.Path.cwd(), # The current working directory
            home, # The user's home directory
            home / '.config', # Linux standard (local)
            '/etc/cldrunits', # Linux standard (global)
            os.environ.get('CLDRUNITS_INI'), # A known environment variable
            pathlib.Path(__file__).parent, # The package top
        ]
        config = configparser.ConfigParser()
        path = iotools.search(paths, 'cldrunits.ini')
        if path is None:
            raise iotools.NonExistentPathError('cldrunits.ini')
        config.read(path)
        self._config = config[self.name] if config.has_section(name) else {}
        self.path = path

    def __len__(self) -> int:
        """The number of available parameter values."""
        return len(self._config)

    def __iter__(self):
        """Iterate over available parameter values."""
        yield from self._config

    def __getitem__(self, key: str):
        """Access parameter values by mapping key."""
        if key in self._config:
            return self._config[key]
        raise KeyError(
            f"{self._package} has no value for {key!r}"
        ) from None

    def __str__(self) -> str:
        return json.dumps(
            dict(self._config),
            indent=4,
            sort_keys=True,
        )

    def __repr__(self) -> str:
        return f"{self._package}({self.path}):\n{self}"
