"""
Billing package - plan tiers, entitlements and usage quotas.

Subscriptions are synced from Stripe out of band and only read here. The
price catalog maps Stripe price ids to plan tiers.
"""
