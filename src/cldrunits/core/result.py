import typing


T = typing.TypeVar('T')


class Result(typing.NamedTuple):
    """The outcome of an operation that may fail.

    Soft variants of the public operations return an instance of this class
    instead of raising. The corresponding hard variant is exactly
    ``result.unwrap()``.
    """

    value: typing.Any = None
    error: typing.Optional[Exception] = None

    @property
    def ok(self) -> bool:
        """True if the operation succeeded."""
        return self.error is None

    def unwrap(self):
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value


def capture(
    function: typing.Callable[..., T],
    *errors: typing.Type[Exception],
) -> typing.Callable[..., Result]:
    """Create a soft variant of `function` that captures `errors`."""
    def wrapped(*args, **kwargs) -> Result:
        try:
            return Result(value=function(*args, **kwargs))
        except errors as err:
            return Result(error=err)
    wrapped.__name__ = f"{function.__name__}_result"
    wrapped.__qualname__ = f"{function.__qualname__}_result"
    wrapped.__doc__ = (
        f"Call `{function.__name__}` and return a `~result.Result`."
    )
    return wrapped
