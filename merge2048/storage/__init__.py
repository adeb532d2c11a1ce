# -*- coding: utf-8 -*-
"""
Persistence of game sessions in key-value stores.
"""

from .codec import InvalidStateError, decode_state, encode_state, load_state, save_state
from .store import FileStore, KeyValueStore, MemoryStore

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "FileStore",
    "InvalidStateError",
    "encode_state",
    "decode_state",
    "save_state",
    "load_state",
]
