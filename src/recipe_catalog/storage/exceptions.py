"""Recipe storage exceptions.

Caught by the endpoint layer and converted to a 500 error envelope.
"""

from __future__ import annotations


class RecipeStorageError(Exception):
    """Raised when the data file cannot be written.

    The previous file contents are left in place when this is raised.
    """
