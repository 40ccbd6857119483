"""Input-layer public API for key decoding and mode dispatch.

Low-level terminal decoding lives in ``reader``; routing of decoded key
tokens to state transitions lives in ``dispatch``.
"""

from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .dispatch import ModeDispatcher, handle_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "ModeDispatcher",
    "handle_key",
]
