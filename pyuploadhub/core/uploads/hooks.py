"""Default naming and post-move hooks for the upload pipeline."""

from __future__ import annotations

import random
from typing import Any, Callable

NameHook = Callable[[str, dict[str, Any]], str]
PostMoveHook = Callable[[str, dict[str, Any]], None]


def random_prefix_name(original_name: str, additional_data: dict[str, Any]) -> str:
    """
    Prefix the original filename with a random 4-digit number.

    Names are not checked for uniqueness; two uploads of the same name
    drawing the same number will overwrite each other.
    """
    return f"{random.randint(1111, 9999)}-{original_name}"


def no_post_move(target_path: str, additional_data: dict[str, Any]) -> None:
    """Default post-move hook: do nothing."""
    return None
