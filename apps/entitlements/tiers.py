"""
Static subscription tier table.

Each tier fully determines the listing quota and the content features of a
privileged account. Subscriptions copy these values on every save.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class TierFeatures:
    max_listings: int
    allow_photography: bool
    allow_reviews: bool
    allow_podcasts: bool
    allow_videos: bool

    def as_dict(self):
        return {
            'max_listings': self.max_listings,
            'allow_photography': self.allow_photography,
            'allow_reviews': self.allow_reviews,
            'allow_podcasts': self.allow_podcasts,
            'allow_videos': self.allow_videos,
        }


TIER_BASIC = 'basic'
TIER_STANDARD = 'standard'
TIER_PREMIUM = 'premium'

TIER_CHOICES = [
    (TIER_BASIC, 'Basic'),
    (TIER_STANDARD, 'Standard'),
    (TIER_PREMIUM, 'Premium'),
]

DEFAULT_TIER = TIER_BASIC

TIER_TABLE = {
    TIER_BASIC: TierFeatures(
        max_listings=10,
        allow_photography=True,
        allow_reviews=False,
        allow_podcasts=False,
        allow_videos=False,
    ),
    TIER_STANDARD: TierFeatures(
        max_listings=20,
        allow_photography=True,
        allow_reviews=True,
        allow_podcasts=True,
        allow_videos=False,
    ),
    TIER_PREMIUM: TierFeatures(
        max_listings=40,
        allow_photography=True,
        allow_reviews=True,
        allow_podcasts=True,
        allow_videos=True,
    ),
}

# Content kinds mapped to the subscription flag that gates them
FEATURE_FLAGS = {
    'photography': 'allow_photography',
    'review': 'allow_reviews',
    'podcast': 'allow_podcasts',
    'video': 'allow_videos',
}


def is_valid_tier(tier):
    return tier in TIER_TABLE


def features_for(tier):
    """Return the feature set for ``tier``; raises KeyError if unknown."""
    return TIER_TABLE[tier]
