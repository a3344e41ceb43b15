"""
teamdesk - organization membership and invitation workflow

Organizations, member roles and e-mail invitations resolved at sign-in or
sign-up time, on top of a pluggable document store and auth provider.
"""

__version__ = "1.0.0"
