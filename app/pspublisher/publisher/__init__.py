"""Publishing API clients.

This module exports the Publisher interface and its Google Play implementation.
"""

from pspublisher.publisher.base import Publisher
from pspublisher.publisher.google_play import GooglePlayPublisher

__all__ = ["GooglePlayPublisher", "Publisher"]
