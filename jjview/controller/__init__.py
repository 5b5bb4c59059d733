"""Action controller and its domain groups."""

from .bookmarks import is_backwards_move_error, is_bookmark_exists_error
from .core import ActionController

__all__ = [
    "ActionController",
    "is_backwards_move_error",
    "is_bookmark_exists_error",
]
