"""
Risk Classifier Service

Maps a health score and the surfaced predictions to a risk level. Rules are
evaluated in order and the first match wins:

    LOW       health >= 80 and no predictions
    MEDIUM    health >= 60 and no prediction above 0.5
    HIGH      health >= 40 and no prediction above 0.7
    CRITICAL  otherwise
"""

from typing import Sequence

from fleet_maintenance.models.fleet_models import Prediction, RiskLevel


class RiskClassifier:
    """Pure function of (health score, predictions)."""

    def classify(self, health_score: float, predictions: Sequence[Prediction]) -> RiskLevel:
        if health_score >= 80 and not predictions:
            return RiskLevel.LOW
        if health_score >= 60 and not any(p.probability > 0.5 for p in predictions):
            return RiskLevel.MEDIUM
        if health_score >= 40 and not any(p.probability > 0.7 for p in predictions):
            return RiskLevel.HIGH
        return RiskLevel.CRITICAL
