"""Wire formats: Logpull NDJSON in, Prometheus text out."""
