"""
Invitations package - single-use, time-bounded tokens granting location access.

Accepting an invitation makes the user a member of the location's owning account.
"""
