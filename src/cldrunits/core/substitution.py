import functools
import re
import typing


class Placeholder(typing.NamedTuple):
    """A substitution site in a parsed template."""

    index: int


NUMBER = Placeholder(0)
"""The site of the formatted numeral in a unit pattern."""


Part = typing.Union[str, Placeholder]
Parts = typing.Tuple[Part, ...]


_PLACEHOLDER = re.compile(r'\{(\d+)\}')


@functools.lru_cache(maxsize=None)
def parse(template: str) -> Parts:
    """Split a ``'{0} meters'``-style template into text and placeholders."""
    parts = []
    position = 0
    for match in _PLACEHOLDER.finditer(template):
        if match.start() > position:
            parts.append(template[position:match.start()])
        parts.append(Placeholder(int(match.group(1))))
        position = match.end()
    if position < len(template):
        parts.append(template[position:])
    return tuple(parts)


def parts(pattern: typing.Union[str, typing.Sequence[Part]]) -> Parts:
    """Make sure `pattern` is a parsed template."""
    if isinstance(pattern, str):
        return parse(pattern)
    return tuple(pattern)


def substitute(
    args: typing.Sequence[typing.Union[Part, typing.Sequence[Part]]],
    template: typing.Union[str, typing.Sequence[Part]],
) -> Parts:
    """Replace the placeholders in `template` with the corresponding `args`.

    Each argument may be text, a placeholder or a sequence of parts, which
    is spliced into the result. Adjacent text merges into a single part.
    """
    result = []
    for part in parts(template):
        if not isinstance(part, Placeholder):
            result.append(part)
            continue
        arg = args[part.index]
        if isinstance(arg, (str, Placeholder)):
            result.append(arg)
        else:
            result.extend(arg)
    return merge(result)


def merge(sequence: typing.Iterable[Part]) -> Parts:
    """Join adjacent text parts and drop empty text."""
    merged = []
    for part in sequence:
        if isinstance(part, str):
            if not part:
                continue
            if merged and isinstance(merged[-1], str):
                merged[-1] += part
                continue
        merged.append(part)
    return tuple(merged)


def has_placeholder(sequence: typing.Sequence[Part]) -> bool:
    """True if `sequence` contains a substitution site."""
    return any(isinstance(part, Placeholder) for part in sequence)


def text(sequence: typing.Sequence[Part]) -> str:
    """The text of `sequence` without its placeholders, trimmed."""
    return ''.join(p for p in sequence if isinstance(p, str)).strip()


def fill(sequence: typing.Sequence[Part], number: str) -> str:
    """Replace the numeral site in `sequence` and join the result."""
    return ''.join(
        number if isinstance(part, Placeholder) else part
        for part in sequence
    )


def format(template: str, *args: str) -> str:
    """Substitute text `args` into `template` and join the result."""
    return ''.join(str(part) for part in substitute(args, template))
