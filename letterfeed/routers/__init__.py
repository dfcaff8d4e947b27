"""HTTP routers of the feed service."""
