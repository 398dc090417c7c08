import string
import typing


def suggestion(suggested: typing.Sequence[str]) -> str:
    """Format spelling suggestions for an error message."""
    if not suggested:
        return ''
    if len(suggested) == 1:
        return f"Did you mean '{suggested[0]}'?"
    return f"Did you mean one of {list(suggested)}?"


class SpellChecker:
    """A simple spell-checker for unit names.

    This is based on https://norvig.com/spell-correct.html. Unit names are
    lower-case words joined by underscores, so candidate edits draw from that
    alphabet.
    """
    def __init__(self, *words: str) -> None:
        self.words = set(words)
        self.letters = string.ascii_lowercase + '_'

    def check(self, name: str) -> typing.List[str]:
        """Known words one edit away from `name`, in sorted order.

        The result is empty if `name` is itself a known word.
        """
        if name in self.words:
            return []
        return sorted(self.known(self.edits(name)))

    def known(self, words: typing.Iterable[str]) -> set:
        """The subset of `words` that is in the list of known words."""
        return {word for word in words if word in self.words}

    def edits(self, word: str) -> typing.Set[str]:
        """All edits that are one edit away from `word`."""
        return set(
            self.deletes(word)
            + self.transposes(word)
            + self.replaces(word)
            + self.inserts(word)
        )

    def splits(self, word: str) -> typing.List[typing.Tuple[str, str]]:
        """The strings made by splitting `word` at each pair of letters."""
        return [(word[:i], word[i:]) for i in range(len(word) + 1)]

    def deletes(self, word: str) -> typing.List[str]:
        """The strings made by deleting one letter from `word`."""
        return [l + r[1:] for l, r in self.splits(word) if r]

    def transposes(self, word: str) -> typing.List[str]:
        """The strings made by swapping two adjacent letters of `word`."""
        return [
            l + r[1] + r[0] + r[2:]
            for l, r in self.splits(word) if len(r) > 1
        ]

    def replaces(self, word: str) -> typing.List[str]:
        """The strings made by replacing one letter of `word`."""
        return [
            l + c + r[1:]
            for l, r in self.splits(word) if r for c in self.letters
        ]

    def inserts(self, word: str) -> typing.List[str]:
        """The strings made by inserting one letter into `word`."""
        return [l + c + r for l, r in self.splits(word) for c in self.letters]
