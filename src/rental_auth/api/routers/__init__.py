"""
rental_auth.api.routers

HTTP routers: health, auth-engine hooks, profiles, admin.
"""

# Package marker; routers are imported directly from submodules.
