"""
Fleet Alert Generator

Runs the truck health analysis over every active truck, persists a
predictive alert for high-probability failures and writes the refreshed
health score / risk level back to each truck.

At most one unresolved PREDICTIVE_FAILURE alert exists per truck. The alert
table enforces this with a unique key, and creation is also serialized per
truck inside the process so overlapping runs do not race each other.
"""

import logging
import threading
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from fleet_maintenance.models.fleet_models import (
    PREDICTIVE_FAILURE_ALERT,
    AlertSeverity,
    Prediction,
    PredictiveAlert,
    Truck,
    utc_now,
)
from fleet_maintenance.orchestrators.truck_health_analyzer import TruckHealthAnalyzer
from fleet_maintenance.services.failure_predictor import timeframe_to_days

logger = logging.getLogger(__name__)


class FleetAlertGenerator:
    """
    Fleet-wide predictive alert generation.

    Example Usage:
        generator = FleetAlertGenerator(truck_repo, alert_repo, analyzer)
        new_alerts = generator.generate_fleet_wide_alerts()
    """

    def __init__(
        self,
        truck_repo,
        alert_repo,
        analyzer: TruckHealthAnalyzer,
        probability_threshold: float = 0.6,
    ):
        self.truck_repo = truck_repo
        self.alert_repo = alert_repo
        self.analyzer = analyzer
        self.probability_threshold = probability_threshold

        self._locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._registry_lock = threading.Lock()

        logger.info(
            f"FleetAlertGenerator initialized (threshold={probability_threshold})"
        )

    def _truck_lock(self, truck_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks[truck_id]

    @staticmethod
    def build_alert(
        truck_id: str, prediction: Prediction, now: Optional[datetime] = None
    ) -> PredictiveAlert:
        """Alert record describing one surfaced prediction."""
        created = now or utc_now()
        label = prediction.type.label
        return PredictiveAlert(
            truck_id=truck_id,
            alert_type=PREDICTIVE_FAILURE_ALERT,
            title=f"{label} Risk Detected",
            description=(
                f"AI analysis predicts {prediction.probability * 100:.0f}% probability "
                f"of {label.lower()} within {prediction.timeframe}"
            ),
            severity=AlertSeverity.from_probability(prediction.probability),
            confidence=prediction.probability,
            predicted_failure_date=created
            + timedelta(days=timeframe_to_days(prediction.timeframe)),
            recommended_action=prediction.recommended_action,
            cost_impact=prediction.cost_impact,
            probability=prediction.probability,
            created_at=created,
        )

    def generate_alerts_for_truck(
        self, truck: Truck, as_of: Optional[datetime] = None
    ) -> List[PredictiveAlert]:
        """Analyze one truck, create its missing alerts, then store its health."""
        now = as_of or utc_now()
        analysis = self.analyzer.analyze(truck.id, now)
        created: List[PredictiveAlert] = []

        with self._truck_lock(truck.id):
            for prediction in analysis.predictions:
                if prediction.probability <= self.probability_threshold:
                    continue
                if self.alert_repo.find_unresolved(truck.id, PREDICTIVE_FAILURE_ALERT):
                    continue
                alert = self.alert_repo.create_if_absent(
                    self.build_alert(truck.id, prediction, now)
                )
                if alert is not None:
                    created.append(alert)
                    logger.info(
                        f"Alert created for {truck.id}: {alert.title} "
                        f"({alert.severity.value})"
                    )

        self.truck_repo.update_health(truck.id, analysis.health_score, analysis.risk_level)
        return created

    def generate_fleet_wide_alerts(self, as_of: Optional[datetime] = None) -> List[PredictiveAlert]:
        """
        Generate alerts for every active truck.

        Returns:
            Only the alerts created by this run, never pre-existing ones.
        """
        now = as_of or utc_now()
        try:
            trucks = self.truck_repo.get_active_trucks()
            alerts: List[PredictiveAlert] = []
            for truck in trucks:
                alerts.extend(self.generate_alerts_for_truck(truck, now))

            logger.info(f"Generated {len(alerts)} new alerts across {len(trucks)} trucks")
            return alerts

        except Exception as e:
            logger.error(f"Error generating fleet-wide alerts: {e}", exc_info=True)
            raise
