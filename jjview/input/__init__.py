"""Input-layer public API: key decoding, key routing and the footer prompt.

``read_key`` turns raw terminal bytes into key tokens; ``KeyRouter`` maps
those tokens onto controller actions for the current view.
"""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import KeyRouter
from .prompt import handle_prompt_key, open_prompt, submit_prompt

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyRouter",
    "handle_prompt_key",
    "open_prompt",
    "submit_prompt",
]
