"""Code shared between Photos CDN entry points."""
