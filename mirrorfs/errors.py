"""Exceptions raised by backing stores and mirror wrappers."""

from __future__ import annotations

import errno


class StoreError(OSError):
    """A backing store primitive failed.

    Carries an ``errno`` code, a message and the virtual path involved,
    like the builtin ``OSError`` subclasses it stands in for.
    """


class DetachedError(StoreError):
    """Operation on a mirror wrapper whose directory was deleted or replaced."""

    def __init__(self, path: str):
        super().__init__(errno.ESTALE, "Mirror wrapper is detached", path)


class Exit(Exception):
    """Raised by a process runner when the guest process exits.

    Attributes:
        code: The integer exit code.
    """

    def __init__(self, code: int):
        super().__init__(f"Process exited with code {code}")
        self.code = code
