"""
Tests for risk level classification
"""

import pytest

from fleet_maintenance.models.fleet_models import Prediction, PredictionType, RiskLevel
from fleet_maintenance.services.risk_classifier import RiskClassifier


def prediction(probability):
    return Prediction(
        type=PredictionType.ENGINE_FAILURE,
        probability=probability,
        timeframe="",
        recommended_action="",
        cost_impact=0.0,
    )


@pytest.fixture
def classifier():
    return RiskClassifier()


class TestRiskClassifier:
    @pytest.mark.parametrize(
        "health, probabilities, expected",
        [
            (95, [], RiskLevel.LOW),
            (80, [], RiskLevel.LOW),
            (95, [0.35], RiskLevel.MEDIUM),
            (79, [], RiskLevel.MEDIUM),
            (60, [0.5], RiskLevel.MEDIUM),
            (85, [0.55], RiskLevel.HIGH),
            (59, [], RiskLevel.HIGH),
            (40, [0.7], RiskLevel.HIGH),
            (90, [0.75], RiskLevel.CRITICAL),
            (39, [], RiskLevel.CRITICAL),
            (0, [], RiskLevel.CRITICAL),
        ],
    )
    def test_rules_in_order(self, classifier, health, probabilities, expected):
        predictions = [prediction(p) for p in probabilities]
        assert classifier.classify(health, predictions) == expected

    def test_any_surfaced_prediction_prevents_low(self, classifier):
        assert classifier.classify(100, [prediction(0.31)]) != RiskLevel.LOW
