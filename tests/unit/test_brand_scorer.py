"""
Tests for component -> benefit scoring.
"""

import pytest

from src.data_layer.entities import BENEFITS, Brand
from src.simulation_layer.brand_scorer import score_brand, score_brands


def brand_with(level, electronics, rd=0.0, **kwargs):
    return Brand(
        id="b1", team_id="t1", name="Test",
        frame=level, wheels=level, drivetrain=level, brakes=level,
        suspension=level, seat=level, handlebars=level,
        electronics=electronics, rd_investment=rd, **kwargs,
    )


class TestScoreBrand:
    def test_top_components(self):
        score = score_brand(brand_with(5, 5, rd=600_000))
        assert score.performance == pytest.approx(1.0)
        assert score.durability == pytest.approx(1.0)
        assert score.comfort == pytest.approx(1.0)
        assert score.lightweight == pytest.approx(1.0)
        assert score.style == pytest.approx((1.5 + 1.5 + 1.0 + 0.2) / 5)
        assert score.customization == pytest.approx((1.5 + 0.3) / 5)

    def test_default_components(self):
        score = score_brand(brand_with(3, 0))
        assert score.performance == pytest.approx(0.6)
        assert score.style == pytest.approx(0.48)
        assert score.customization == pytest.approx(0.02)

    def test_rd_threshold_is_strict(self):
        at = score_brand(brand_with(3, 0, rd=500_000))
        above = score_brand(brand_with(3, 0, rd=500_001))
        assert at.customization == pytest.approx(0.02)
        assert above.customization == pytest.approx(0.06)

    def test_all_scores_bounded(self):
        for level in range(6):
            for electronics in range(6):
                scores = score_brand(brand_with(level, electronics, rd=1e9)).scores()
                assert set(scores) == set(BENEFITS)
                assert all(0.0 <= v <= 1.0 for v in scores.values())

    def test_out_of_range_components_clamped(self):
        brand = brand_with(3, 0)
        brand.frame = 99  # bypass recompute
        assert score_brand(brand).lightweight == pytest.approx((5 * 0.5 + 3 * 0.3 + 3 * 0.2) / 5)


class TestScoreBrands:
    def test_inactive_skipped_and_order_kept(self):
        brands = [
            Brand(id="b1", team_id="t1", name="One"),
            Brand(id="b2", team_id="t1", name="Two", is_active=False),
            Brand(id="b3", team_id="t1", name="Three"),
        ]
        assert [s.brand.id for s in score_brands(brands)] == ["b1", "b3"]
