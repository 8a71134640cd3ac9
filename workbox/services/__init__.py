"""Services for workbox."""
