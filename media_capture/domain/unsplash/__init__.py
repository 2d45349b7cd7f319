"""
Unsplash Domain

Photos, curated collections, photo licenses and followable artists.
"""

from .entities import Artist, Collection, License, Photo
from .value_objects import (
    ArtistId,
    ArtistProfile,
    CollectionAttributes,
    CollectionId,
    LicenseId,
    LicenseTerms,
    LicenseType,
    PhotoAttributes,
    PhotoId,
    RevenueModel,
)

__all__ = [
    'Photo',
    'Collection',
    'License',
    'Artist',
    'PhotoId',
    'CollectionId',
    'ArtistId',
    'LicenseId',
    'PhotoAttributes',
    'CollectionAttributes',
    'ArtistProfile',
    'LicenseTerms',
    'LicenseType',
    'RevenueModel',
]
