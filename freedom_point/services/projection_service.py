"""
Projection service coordinating plan checks, the projection engine and the
response payload for the HTTP layer.
"""

import logging
from typing import Any, Dict, Optional

from freedom_point.config import get_global_settings
from freedom_point.engine.projection import ProjectionEngine, ProjectionResult
from freedom_point.models.life_plan import LifePlan

logger = logging.getLogger(__name__)


class ProjectionService:
    """Service for running Financial Freedom Point projections."""

    def __init__(self, display_precision: Optional[int] = None) -> None:
        """Initialize the projection service.

        Args:
            display_precision: Decimal places for displayed points; defaults to
                the DISPLAY_PRECISION setting
        """
        self.logger = logging.getLogger(__name__)
        if display_precision is None:
            display_precision = get_global_settings().display_precision
        self.display_precision = display_precision

    def project(self, plan: LifePlan, strict: bool = False) -> ProjectionResult:
        """Project a life plan.

        Args:
            plan: Balance sheet and stages to project
            strict: Refuse plans whose stages do not cover the horizon

        Returns:
            The projection result

        Raises:
            InvalidPlanShape: If ``strict`` and the plan shape is invalid
        """
        if strict:
            plan.validate_shape()
        else:
            for issue in plan.validation_issues():
                self.logger.warning(f"Projecting plan with shape issue: {issue}")

        self.logger.info(
            f"Starting projection from age {plan.balance_sheet.begin} to "
            f"{plan.balance_sheet.end} over {len(plan.stages)} stages"
        )
        result = ProjectionEngine.from_plan(plan).run()

        if result.reached:
            self.logger.info(
                f"Financial freedom point at age {result.freedom_point.x:.3f} "
                f"({len(result.crossings)} crossings)"
            )
        else:
            self.logger.info("Plan does not reach a financial freedom point")
        return result

    def build_response(self, plan: LifePlan, result: ProjectionResult) -> Dict[str, Any]:
        """Serialise a projection result for API clients.

        Args:
            plan: The projected plan
            result: Result of ``project``

        Returns:
            JSON-ready dictionary
        """
        places = self.display_precision
        return {
            "net_worth": result.net_worth,
            "net_worth_appreciation": result.net_worth_appreciation,
            "ages": plan.balance_sheet.ages(),
            "savings": list(result.savings),
            "required_capital": list(result.required_capital),
            "crossings": [list(point.as_tuple()) for point in result.crossings],
            "freedom_point": result.freedom_point_payload(places),
            "stages": [summary.model_dump() for summary in result.stage_summaries],
            "plan_issues": plan.validation_issues(),
            "chart": result.to_chart_payload(places),
        }
