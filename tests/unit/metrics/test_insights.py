"""
Tests for TrendAnalyzer - per-item analysis, pool insights and editorial recommendations.
"""
from datetime import timedelta

import pytest

from personalization.cache.store import CacheStore
from personalization.config_loader import CacheConfig
from personalization.metrics.aggregator import MetricsAggregator
from personalization.metrics.insights import TrendAnalyzer
from personalization.metrics.models import ContentMetrics, InteractionType
from personalization.metrics.quality import PerformanceSample, StaticPerformanceSource
from tests.factories import NOW, make_article, make_job


@pytest.fixture
def aggregator(clock):
    store = CacheStore("content_metrics", CacheConfig(ttl_seconds=3600, max_size=500, persistent=False), clock=clock)
    return MetricsAggregator(store)


@pytest.fixture
def performance():
    return StaticPerformanceSource()


@pytest.fixture
def analyzer(aggregator, performance):
    return TrendAnalyzer(aggregator, performance_source=performance)


def _views(aggregator, item_id, count, when=NOW):
    if count:
        aggregator.record(item_id, InteractionType.VIEW, value=count, timestamp=when)


class TestAnalyze:

    def test_01_analyze_stores_scores_with_metrics(self, analyzer, aggregator):
        item = make_article("post_1", created_days_ago=0)
        _views(aggregator, "post_1", 20)

        trending = analyzer.analyze(item, now=NOW)
        stored = aggregator.get("post_1")

        assert stored.quality_score == pytest.approx(0.4)
        assert stored.trending_score == trending.metrics.trending_score
        assert 0.0 < stored.trending_score <= 1.0
        assert stored.views == 20

    def test_02_direction_and_change(self, analyzer, aggregator, performance):
        item = make_article("post_1", created_days_ago=0)
        performance.put("post_1", PerformanceSample(score=1.0))
        _views(aggregator, "post_1", 30)

        trending = analyzer.analyze(item, now=NOW, baseline=ContentMetrics("post_1", views=20))

        assert trending.direction == "up"
        assert trending.change_percentage == pytest.approx(50.0)

    def test_03_item_without_metrics(self, analyzer, aggregator):
        bare = make_article("post_9", created_days_ago=400, content="", featured_image=None, tags=[])
        trending = analyzer.analyze(bare, now=NOW)
        assert trending.metrics.views == 0
        assert trending.direction == "down"
        assert aggregator.get("post_9") is not None

    def test_04_performance_sample_raises_trending(self, aggregator, performance):
        item = make_article("post_1", created_days_ago=3)
        without = TrendAnalyzer(aggregator).analyze(item, now=NOW).metrics.trending_score

        performance.put("post_1", PerformanceSample(score=0.9, lcp_ms=1200))
        with_sample = TrendAnalyzer(aggregator, performance).analyze(item, now=NOW).metrics.trending_score

        assert with_sample > without


class TestGenerateInsights:

    @pytest.fixture
    def pool(self, aggregator, performance):
        """Seven fresh articles with full performance; views 70, 60, ... 10."""
        items = []
        for i in range(7):
            item = make_article(f"post_{i}", created_days_ago=0, category="technology" if i % 2 else "sustainability")
            performance.put(item.id, PerformanceSample(score=1.0))
            _views(aggregator, item.id, 10 * (7 - i))
            items.append(item)
        return items

    def test_01_rankings_follow_trending_score(self, analyzer, pool):
        insights = analyzer.generate_insights(pool, now=NOW)

        assert [t.item.id for t in insights.top_performers] == [f"post_{i}" for i in range(5)]
        assert [t.ranking for t in insights.top_performers] == [1, 2, 3, 4, 5]
        scores = [t.metrics.trending_score for t in insights.top_performers]
        assert scores == sorted(scores, reverse=True)

    def test_02_emerging_excludes_top_performers(self, analyzer, pool):
        baselines = {
            "post_0": ContentMetrics("post_0", views=10),   # big jump, but already top
            "post_5": ContentMetrics("post_5", views=10),   # +100%
            "post_6": ContentMetrics("post_6", views=9),    # +11%
        }
        insights = analyzer.generate_insights(pool, now=NOW, baselines=baselines)

        assert [t.item.id for t in insights.emerging_trends] == ["post_5"]
        assert insights.emerging_trends[0].ranking == 6

    def test_03_category_breakdown_sums_views(self, analyzer, pool):
        insights = analyzer.generate_insights(pool, now=NOW)
        # even indexes: 70 + 50 + 30 + 10, odd: 60 + 40 + 20
        assert insights.category_breakdown == {"sustainability": 160, "technology": 120}

    def test_04_uncategorized_bucket(self, analyzer, aggregator):
        item = make_article("post_x", category="")
        _views(aggregator, "post_x", 3)
        insights = analyzer.generate_insights([item], now=NOW)
        assert insights.category_breakdown == {"uncategorized": 3}

    def test_05_underperformers(self, analyzer, aggregator):
        stale = [
            make_article(f"old_{i}", created_days_ago=200, content="", featured_image=None, tags=[])
            for i in range(3)
        ]
        _views(aggregator, "old_0", 50, when=NOW - timedelta(days=150))
        _views(aggregator, "old_1", 5, when=NOW - timedelta(days=150))

        insights = analyzer.generate_insights(stale, now=NOW)

        # old_1 has too few views, old_2 none at all
        assert [t.item.id for t in insights.underperformers] == ["old_0"]

    def test_06_behavior_summary(self, analyzer, aggregator):
        a = make_article("post_a")
        b = make_article("post_b")
        _views(aggregator, "post_a", 10)
        aggregator.record("post_a", InteractionType.ENGAGE, value=5000, timestamp=NOW)
        _views(aggregator, "post_b", 30)
        aggregator.record("post_b", InteractionType.ENGAGE, value=395000, timestamp=NOW)

        behavior = analyzer.generate_insights([a, b], now=NOW).behavior

        assert behavior.average_time_spent_ms == pytest.approx(10000)
        assert behavior.bounce_rate == 0.5
        assert behavior.conversion_rate == 0.0

    def test_07_empty_pool(self, analyzer):
        insights = analyzer.generate_insights([], now=NOW)
        assert insights.top_performers == []
        assert insights.category_breakdown == {}
        assert insights.behavior.bounce_rate == 0.0

    def test_08_to_dict(self, analyzer, pool):
        data = analyzer.generate_insights(pool, now=NOW).to_dict()
        assert set(data) == {"top_performers", "emerging_trends", "underperformers", "category_breakdown", "behavior"}
        assert data["top_performers"][0]["item_id"] == "post_0"
        assert data["top_performers"][0]["ranking"] == 1

    def test_09_job_postings_use_department_as_category(self, analyzer, aggregator):
        job = make_job("job_1")
        _views(aggregator, "job_1", 4)
        insights = analyzer.generate_insights([job], now=NOW)
        assert insights.category_breakdown == {"Construction": 4}


class TestPerformanceRecommendations:

    def test_01_no_metrics_no_recommendations(self, analyzer):
        assert analyzer.performance_recommendations(make_article("nothing")) == []

    def test_02_struggling_article(self, analyzer, aggregator):
        _views(aggregator, "post_1", 200)
        aggregator.record("post_1", InteractionType.SHARE, timestamp=NOW)
        aggregator.record("post_1", InteractionType.ENGAGE, value=1000, timestamp=NOW)

        recommendations = analyzer.performance_recommendations(make_article("post_1"))

        assert len(recommendations) == 6
        assert "Optimize for sharing on social networks" in recommendations
        assert "Improve the content structure" in recommendations

    def test_03_healthy_article(self, analyzer, aggregator):
        _views(aggregator, "post_1", 10)
        for _ in range(5):
            aggregator.record("post_1", InteractionType.SHARE, timestamp=NOW)
        aggregator.record("post_1", InteractionType.ENGAGE, value=900000, timestamp=NOW)

        assert analyzer.performance_recommendations(make_article("post_1")) == []

    def test_04_job_without_conversions(self, analyzer, aggregator):
        _views(aggregator, "job_1", 20)
        recommendations = analyzer.performance_recommendations(make_job("job_1"))

        assert "Simplify the application process" in recommendations
        assert "Improve the content structure" not in recommendations
