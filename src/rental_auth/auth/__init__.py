"""
rental_auth.auth

Credential package.

Responsibilities:
- Signing and verification of session credentials (HS256, fixed in code).
- FastAPI dependencies turning a bearer credential into a typed caller + role checks.
"""

# Package marker.
