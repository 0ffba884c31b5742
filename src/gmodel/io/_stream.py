"""Shared file handling for the text writers."""

from __future__ import annotations

import contextlib
from typing import Iterator, TextIO

from gmodel.errors import ExportError


@contextlib.contextmanager
def open_for_writing(path_or_file) -> Iterator[TextIO]:
    """Yield a text stream for ``path_or_file``.

    Streams are used as given and left open; paths are opened, and
    closed when done.  Any :class:`OSError` is re-raised as
    :class:`~gmodel.errors.ExportError`.
    """
    if hasattr(path_or_file, 'write'):
        stream = path_or_file
        close_when_done = False
    else:
        try:
            stream = open(path_or_file, 'w', encoding='ascii', newline='\n')
        except OSError as exc:
            raise ExportError(f"cannot open {path_or_file} for writing: {exc}",
                              path=path_or_file, cause=exc) from exc
        close_when_done = True

    try:
        yield stream
    except OSError as exc:
        raise ExportError(f"cannot write {path_or_file}: {exc}",
                          path=path_or_file, cause=exc) from exc
    finally:
        if close_when_done:
            stream.close()
