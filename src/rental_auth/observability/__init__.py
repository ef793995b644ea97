"""
rental_auth.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
- Prometheus counters for the identity pipeline.
"""

# Package marker.
