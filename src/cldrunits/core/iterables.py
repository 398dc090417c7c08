import collections.abc
import typing


T = typing.TypeVar('T')


def unique(*items: T) -> typing.List[T]:
    """Remove repeated items while preserving order."""
    collection = []
    for item in items:
        if item not in collection:
            collection.append(item)
    return collection


def get_nested(mapping: typing.Any, levels: typing.Iterable):
    """Walk down `levels` of nested mappings.

    Returns ``None`` as soon as a level is missing or the current object is not
    a mapping, rather than raising an exception.
    """
    current = mapping
    for level in levels:
        if not isinstance(current, collections.abc.Mapping):
            return None
        if level not in current:
            return None
        current = current[level]
    return current


class ReprStrMixin:
    """A mixin class that provides support for `__repr__` and `__str__`.

    Subclasses name the attributes to show in `_display`.
    """

    _display: typing.Tuple[str, ...] = ()

    def __str__(self) -> str:
        """A simplified representation of this object."""
        return ', '.join(
            f"{name}={getattr(self, name)!r}" for name in self._display
        )

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        module = f"{self.__module__.replace('cldrunits.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({self})"


class TableKeyError(KeyError):
    """No common key with this name."""
    def __str__(self) -> str:
        if len(self.args) > 0:
            return f"Table has no common key '{self.args[0]}'"
        return "Key not found in table"


class Table(collections.abc.Sequence):
    """An ordered collection of mappings with column access.

    Each entry is a mapping with (at least) the keys common to all entries.
    Entries keep the order in which they were given, since lexical tables rely
    on that order (e.g., for ranking).
    """

    def __init__(self, entries: typing.Iterable[typing.Mapping]) -> None:
        self._entries = tuple(entries)
        self._keys = None

    @property
    def keys(self) -> typing.Set[str]:
        """All the keys common to the individual mappings."""
        if self._keys is None:
            all_keys = [set(entry) for entry in self._entries]
            self._keys = (
                set.intersection(*all_keys) if all_keys else set()
            )
        return self._keys

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index):
        return self._entries[index]

    def column(self, key: str) -> typing.Tuple[typing.Any, ...]:
        """Get all the values for a given key if it is common."""
        if key in self.keys:
            return tuple(entry[key] for entry in self._entries)
        raise TableKeyError(key)
