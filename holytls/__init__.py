"""Chrome-shaped HTTP/2 headers, client hints, SETTINGS profiles and session plumbing."""

__version__ = "0.1.0"