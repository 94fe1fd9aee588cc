"""pspublisher - upload Android packages to Google Play release tracks."""

__version__ = "1.0.0"
