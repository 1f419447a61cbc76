"""
errors.py – Exceptions shared by the storage modules.
"""

from typing import Optional


class StorageError(OSError):
    """
    Raised when the key file or the configuration file cannot be read or
    written for a reason other than "the file does not exist".

    The original OSError is chained as __cause__.

    Attributes
    ----------
    path : str or None
        The file that could not be accessed.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path: Optional[str] = path
