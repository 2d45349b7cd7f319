"""
media-capture

Capture and download lifecycle for content found on Instagram,
Pinterest, Twitter, Unsplash and video sites, modelled as aggregates
that emit domain events.
"""

__version__ = "0.1.0"
