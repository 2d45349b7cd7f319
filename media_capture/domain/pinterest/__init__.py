"""
Pinterest Domain

Pins, boards and account profiles.
"""

from .entities import Board, Pin, PinterestUser
from .value_objects import BoardAttributes, BoardId, PinId, PinMetadata, PinterestProfile, UserId

__all__ = [
    'Pin',
    'Board',
    'PinterestUser',
    'PinId',
    'BoardId',
    'UserId',
    'PinMetadata',
    'BoardAttributes',
    'PinterestProfile',
]
