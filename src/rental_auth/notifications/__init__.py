"""
rental_auth.notifications

Outbound email used by the auth engine for verification and password-reset mails.
"""

# Package marker.
