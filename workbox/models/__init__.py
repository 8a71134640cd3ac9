"""Data models for workbox."""
