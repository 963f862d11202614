import pytest

from resume_optimizer.models.schemas.metrics import MetricType
from resume_optimizer.services.metric_extractor import (
    check_preservation,
    extract_metric_strings,
    extract_metrics,
    is_equivalent_metric,
    normalize_value,
)


class TestExtractMetrics:
    def test_percentage_and_currency(self):
        extraction = extract_metrics("Reduced latency by 40% and saved $1.2M annually")
        by_type = {m.type: m for m in extraction.metrics}
        assert by_type[MetricType.PERCENTAGE].value == "40%"
        assert by_type[MetricType.CURRENCY].value == "$1.2M"
        assert by_type[MetricType.CURRENCY].normalized == pytest.approx(1_200_000)
        # "1.2M" inside the currency amount is not double counted as scale
        assert MetricType.SCALE not in by_type

    def test_counts_and_scale(self):
        extraction = extract_metrics("Served 10,000 users")
        values = {(m.type, m.value) for m in extraction.metrics}
        assert (MetricType.SCALE, "10,000") in values
        assert (MetricType.NUMBER, "10,000 users") in values

    def test_multiplier_and_timeframe(self):
        extraction = extract_metrics("Cut build time 3x in 2 weeks")
        values = {(m.type, m.value) for m in extraction.metrics}
        assert (MetricType.MULTIPLIER, "3x") in values
        assert (MetricType.TIMEFRAME, "2 weeks") in values

    def test_context_window(self):
        bullet = "Over the last year the team improved conversion by 15% across all regions"
        metric = extract_metrics(bullet).metrics[0]
        assert metric.value in metric.context
        assert len(metric.context) <= len(metric.value) + 40

    def test_no_metrics(self):
        extraction = extract_metrics("Led design reviews")
        assert extraction.metrics == []
        assert not extraction.has_quantification


class TestCheckPreservation:
    def test_identical_text_fully_preserved(self):
        bullet = "Helped the team improve performance by 25% for 300 customers"
        assert check_preservation(extract_metrics(bullet), bullet) == (1.0, [])

    def test_no_metrics_is_vacuously_preserved(self):
        assert check_preservation(extract_metrics("Led design reviews"), "Anything") == (1.0, [])

    def test_changed_value_is_missing(self):
        rate, missing = check_preservation(extract_metrics("Improved speed by 25%"), "Improved speed by 30%")
        assert rate == 0.0
        assert missing == ["25%"]

    def test_reformatted_value_still_counts(self):
        extraction = extract_metrics("Saved $ 50,000 yearly")
        rate, missing = check_preservation(extraction, "Saved $50,000 every year")
        assert rate == 1.0
        assert missing == []

    @pytest.mark.parametrize(
        "original,rewritten,lost",
        [
            ("Improved speed by 25%", "Improved speed by 125%", "25%"),
            ("Served 300 customers", "Served 3000 customers", "300 customers"),
            ("Cut costs by $5M", "Cut costs by $15M", "$5M"),
            ("Shipped the MVP in 2 weeks", "Shipped 2 features in 6 weeks", "2 weeks"),
        ],
    )
    def test_inflated_value_is_missing(self, original, rewritten, lost):
        rate, missing = check_preservation(extract_metrics(original), rewritten)
        assert rate == 0.0
        assert missing == [lost]

    def test_value_inside_longer_sentence_counts(self):
        extraction = extract_metrics("Improved speed by 25%")
        assert check_preservation(extraction, "Drove a 25% improvement in page speed") == (1.0, [])


def test_extract_metric_strings():
    text = "Grew revenue 10x to $2M for 500 users at 25%"
    assert extract_metric_strings(text) == ["10x", "$2M", "500 users", "25%"]


class TestEquivalentMetric:
    def test_within_ten_percent(self):
        assert is_equivalent_metric("25%", "26%")
        assert is_equivalent_metric("$1M", "$1.05M")

    def test_too_far_apart(self):
        assert not is_equivalent_metric("25%", "40%")

    def test_different_units(self):
        assert not is_equivalent_metric("25%", "$25")


def test_normalize_value():
    assert normalize_value("1.5K") == pytest.approx(1500)
    assert normalize_value("10,000") == pytest.approx(10000)
    assert normalize_value("none") is None
