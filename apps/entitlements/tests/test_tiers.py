"""
Tests for the static tier table.
"""
import pytest

from apps.entitlements.tiers import (
    TIER_TABLE, DEFAULT_TIER, FEATURE_FLAGS, features_for, is_valid_tier,
)


class TestTierTable:
    """Each tier fully determines quota and content features."""

    @pytest.mark.parametrize('tier,expected', [
        ('basic', {
            'max_listings': 10, 'allow_photography': True, 'allow_reviews': False,
            'allow_podcasts': False, 'allow_videos': False,
        }),
        ('standard', {
            'max_listings': 20, 'allow_photography': True, 'allow_reviews': True,
            'allow_podcasts': True, 'allow_videos': False,
        }),
        ('premium', {
            'max_listings': 40, 'allow_photography': True, 'allow_reviews': True,
            'allow_podcasts': True, 'allow_videos': True,
        }),
    ])
    def test_features(self, tier, expected):
        assert features_for(tier).as_dict() == expected

    def test_default_tier_is_basic(self):
        assert DEFAULT_TIER == 'basic'

    def test_exactly_three_tiers(self):
        assert set(TIER_TABLE) == {'basic', 'standard', 'premium'}

    def test_unknown_tier(self):
        assert not is_valid_tier('platinum')
        with pytest.raises(KeyError):
            features_for('platinum')

    def test_feature_flags_map_to_columns(self):
        for flag in FEATURE_FLAGS.values():
            assert flag in features_for('premium').as_dict()
