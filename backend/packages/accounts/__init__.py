"""
Accounts package - tenancy boundary.

Accounts group locations and memberships. A user may act on an account only
through a membership row; every account-scoped mutation checks it first.
"""
