"""
rental_auth.identity

Post-authentication identity pipeline.

Responsibilities:
- Provision one profile per principal (`provisioner`).
- Resolve a principal's current role (`resolver`).
- Mint role-bearing session credentials (`minter`).
- Define the store capability the three components are constructed with (`store`).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Components never reach for a global connection; the app factory builds one
# store and hands it to each of them.
