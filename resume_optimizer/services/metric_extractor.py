"""Quantified-fact extraction so rewrites can be checked for lost metrics.

Per-bullet extraction is typed (percentage, currency, scale, timeframe,
counted nouns, multipliers). Document-wide metric strings use a looser
pattern and feed the authenticity audit.
"""

import logging
import re

from resume_optimizer.models.schemas.metrics import ExtractedMetric, MetricExtraction, MetricType

logger = logging.getLogger(__name__)

CONTEXT_WINDOW = 20
BULLET_TOLERANCE = 0.01  # relative numeric difference still treated as the same metric
DOCUMENT_TOLERANCE = 0.10

_PERCENT_RE = re.compile(r"\d+(?:\.\d+)?\s*%")
_CURRENCY_RE = re.compile(
    r"\$\s*\d+(?:,\d{3})*(?:\.\d+)?(?:\s*[KMB]\b)?"
    r"|\b\d+(?:,\d{3})*(?:\.\d+)?\s*(?:dollars?|USD|INR|EUR)\b",
    re.IGNORECASE,
)
_SCALE_RE = re.compile(r"\b\d+(?:\.\d+)?\s*[KMB]\b|\b\d{1,3}(?:,\d{3})+\b", re.IGNORECASE)
_MULTIPLIER_RE = re.compile(r"\b\d+(?:\.\d+)?x\b", re.IGNORECASE)
_TIMEFRAME_RE = re.compile(r"\b\d+\s*(?:days?|weeks?|months?|years?|hours?|minutes?)\b", re.IGNORECASE)
_COUNT_RE = re.compile(
    r"\b\d+(?:,\d{3})*\+?\s*(?:users?|customers?|clients?|requests?|transactions?|"
    r"projects?|people|engineers?|developers?|members?|teams?|services?|"
    r"applications?|apps?|servers?|records?|downloads?)\b",
    re.IGNORECASE,
)

# Whole-document pattern; "10x" style multipliers included so fabricated
# speed-ups are visible to the audit.
_DOCUMENT_METRIC_RE = re.compile(
    r"\d+(?:\.\d+)?%"
    r"|\$\d+(?:,\d{3})*(?:\.\d+)?[KMB]?"
    r"|\b\d+(?:\.\d+)?x\b"
    r"|\d+(?:,\d{3})*\+?\s*(?:users?|customers?|clients?|projects?|team|people|million|k\b)",
    re.IGNORECASE,
)
_NUMBER_RE = re.compile(r"\d+(?:,\d{3})*(?:\.\d+)?")
_SUFFIX_RE = re.compile(r"(\d)\s*([KMB])\b", re.IGNORECASE)
_UNIT_RE = re.compile(r"[%$KMB]")

_SUFFIX_MULTIPLIERS = {"k": 1e3, "m": 1e6, "b": 1e9}


def normalize_value(value: str) -> float | None:
    """Numeric value of a metric string with K/M/B suffixes expanded."""
    m = _NUMBER_RE.search(value)
    if not m:
        return None
    number = float(m.group(0).replace(",", ""))
    suffix = _SUFFIX_RE.search(value)
    if suffix:
        number *= _SUFFIX_MULTIPLIERS[suffix.group(2).lower()]
    return number


def _overlaps(span: tuple[int, int], spans: list[tuple[int, int]]) -> bool:
    return any(span[0] < end and start < span[1] for start, end in spans)


def extract_metrics(bullet: str) -> MetricExtraction:
    metrics: list[ExtractedMetric] = []

    def add(m: re.Match, metric_type: MetricType) -> None:
        start, end = m.span()
        metrics.append(ExtractedMetric(
            value=m.group(0).strip(),
            type=metric_type,
            context=bullet[max(0, start - CONTEXT_WINDOW):end + CONTEXT_WINDOW],
            normalized=normalize_value(m.group(0)),
        ))

    for m in _PERCENT_RE.finditer(bullet):
        add(m, MetricType.PERCENTAGE)

    currency_spans = []
    for m in _CURRENCY_RE.finditer(bullet):
        currency_spans.append(m.span())
        add(m, MetricType.CURRENCY)

    for m in _SCALE_RE.finditer(bullet):
        if not _overlaps(m.span(), currency_spans):
            add(m, MetricType.SCALE)

    for m in _MULTIPLIER_RE.finditer(bullet):
        add(m, MetricType.MULTIPLIER)

    for m in _TIMEFRAME_RE.finditer(bullet):
        add(m, MetricType.TIMEFRAME)

    for m in _COUNT_RE.finditer(bullet):
        add(m, MetricType.NUMBER)

    return MetricExtraction(bullet=bullet, metrics=metrics)


def _mentions(value: str, text: str) -> bool:
    """``value`` appears in ``text`` without extra digits on either side."""
    return re.search(rf"(?<![\d.,]){re.escape(value)}(?![\d])", text, re.IGNORECASE) is not None


def _metric_present(metric: ExtractedMetric, rewritten: str, candidates: list[ExtractedMetric]) -> bool:
    if _mentions(metric.value, rewritten):
        return True
    # A compact form only counts while it still carries its unit
    compact = re.sub(r"[^\d.%$KMB]", "", metric.value)
    if _UNIT_RE.search(compact) and any(ch.isdigit() for ch in compact) and _mentions(compact, rewritten):
        return True
    if metric.normalized is None:
        return False
    for other in candidates:
        if other.type != metric.type or other.normalized is None:
            continue
        largest = max(abs(metric.normalized), abs(other.normalized))
        if largest == 0 or abs(metric.normalized - other.normalized) / largest <= BULLET_TOLERANCE:
            return True
    return False


def check_preservation(extraction: MetricExtraction, rewritten: str) -> tuple[float, list[str]]:
    """Return (preservation rate, missing metric values) for a rewrite.

    A bullet without metrics is fully preserved by any rewrite.
    """
    if not extraction.metrics:
        return 1.0, []
    candidates = extract_metrics(rewritten).metrics
    missing = [m.value for m in extraction.metrics if not _metric_present(m, rewritten, candidates)]
    rate = (len(extraction.metrics) - len(missing)) / len(extraction.metrics)
    return rate, missing


def extract_metric_strings(text: str) -> list[str]:
    """Loose document-wide metric strings ("25%", "$1.2M", "10x", "500 users")."""
    return [m.group(0) for m in _DOCUMENT_METRIC_RE.finditer(text)]


def _metric_unit(metric: str) -> str:
    if "%" in metric:
        return "percent"
    if "$" in metric:
        return "currency"
    if re.search(r"\dx\b", metric, re.IGNORECASE):
        return "multiplier"
    return "count"


def is_equivalent_metric(a: str, b: str) -> bool:
    """Same unit and within 10% of each other."""
    if a == b:
        return True
    if _metric_unit(a) != _metric_unit(b):
        return False
    x, y = normalize_value(a), normalize_value(b)
    if x is None or y is None:
        return False
    largest = max(abs(x), abs(y))
    return largest == 0 or abs(x - y) / largest <= DOCUMENT_TOLERANCE
