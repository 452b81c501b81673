"""
Helper tools to test the code that does the conditional updates.

This module is a part of the library's public interface.
"""
from kcas._kits.memory import MemoryStore

__all__ = [
    'MemoryStore',
]
