"""
Account enums.
"""

from enum import Enum


class MembershipRole(str, Enum):
    """
    Role stored on a membership.

    Both roles grant the same access; the role records how the membership
    came to exist. Only owned accounts count towards the location quota.
    """

    OWNER = "owner"  # Created the account via the connect flow
    MEMBER = "member"  # Joined through a merge, an invitation or an access request


class AccessRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ToneOfVoice(str, Enum):
    FRIENDLY = "friendly"
    FORMAL = "formal"
    HUMOROUS = "humorous"
    PROFESSIONAL = "professional"


class LanguageMode(str, Enum):
    AUTO_DETECT = "auto_detect"
    HEBREW = "hebrew"
    ENGLISH = "english"
