"""Cache key generators for billing package."""


def subscription_by_user_key(user_id: str) -> str:
    """Generate cache key for subscription by user ID."""
    return f"subscription:user:{user_id}"


def stripe_prices_key() -> str:
    return "billing:stripe_prices"
