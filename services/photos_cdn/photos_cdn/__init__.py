"""Photos CDN — on-demand resizing of photos into cacheable WebP variants."""
