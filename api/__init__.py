"""
Módulo API
"""
from .centrometeo import (
    FeedError,
    feed_url,
    fetch_feed_text,
)

__all__ = [
    'FeedError',
    'feed_url',
    'fetch_feed_text',
]
