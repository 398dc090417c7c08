import json
import os
import pathlib
import typing


PathLike = typing.TypeVar('PathLike')
PathLike = typing.Union[str, pathlib.Path]


class NonExistentPathError(Exception):

    def __init__(self, path: str=None):
        self._path = path

    @property
    def path(self) -> str:
        if self._path is None:
            self._path = "The requested path"
        return self._path

    def __str__(self):
        return f"{self.path} does not exist."


def fullpath(path: PathLike) -> pathlib.Path:
    """Expand the user wildcard in `path` and resolve it."""
    return pathlib.Path(os.path.expandvars(str(path))).expanduser().resolve()


def search(
    paths: typing.Iterable[typing.Optional[PathLike]],
    file: PathLike,
) -> typing.Optional[pathlib.Path]:
    """Search `paths` for `file`.

    Parameters
    ----------
    paths : iterable of path-like
        The paths to search, in the order given. Members that are ``None`` or
        that do not name an existing directory are skipped.

    file : path-like
        The file to locate.

    Returns
    -------
    path or `None`
        The full path to the file, if found.
    """
    for p in paths:
        if p is None:
            continue
        path = fullpath(p)
        if path.is_dir():
            test = path / str(file)
            if test.exists():
                return test


def read_json(path: PathLike) -> typing.Dict[str, typing.Any]:
    """Read the JSON object stored at `path`."""
    target = fullpath(path)
    if not target.exists():
        raise NonExistentPathError(target)
    with target.open('r', encoding='utf-8') as fp:
        return json.load(fp)
