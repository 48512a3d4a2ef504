"""Prometheus metrics for survey submissions."""

from prometheus_client import Counter, Histogram

SURVEY_SUBMISSIONS = Counter(
    "survey_submissions_total",
    "Survey submit cycles by outcome",
    ["outcome"],
)

PREDICTION_LATENCY = Histogram(
    "prediction_request_seconds",
    "Time spent waiting for the prediction service",
)
