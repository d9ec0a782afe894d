"""HTTP surface: REST routers and SSE change feeds."""
