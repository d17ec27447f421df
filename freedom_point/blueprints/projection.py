"""
Projection blueprint.

Endpoints for projecting a life plan and summarising single stages. Request
bodies are validated with the same pydantic models the engine consumes.
"""

from typing import Any, List

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from freedom_point.models.balance_sheet import BalanceSheet
from freedom_point.models.life_plan import InvalidPlanShape, LifePlan
from freedom_point.models.stage import Stage
from freedom_point.services.projection_service import ProjectionService

projection_bp = Blueprint("projection", __name__, url_prefix="/api")


class ProjectionRequest(BaseModel):
    """Body of ``POST /api/projection``."""

    model_config = ConfigDict(extra="forbid")

    balance_sheet: BalanceSheet
    stages: List[Stage] = Field(default_factory=list)
    strict: bool = False

    def to_plan(self) -> LifePlan:
        return LifePlan(balance_sheet=self.balance_sheet, stages=self.stages)


class StageSummaryRequest(BaseModel):
    """Body of ``POST /api/stages/summary``."""

    model_config = ConfigDict(extra="forbid")

    stage: Stage


def _validation_details(exc: ValidationError) -> List[Any]:
    return exc.errors(include_url=False, include_context=False, include_input=False)


@projection_bp.route("/projection", methods=["POST"])
def project_plan() -> Any:
    """Project a plan and locate its Financial Freedom Point.

    Returns:
        JSON response with both trajectories, all crossings and the
        freedom point (or an explicit not-reached marker)
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be JSON"}), 400

    try:
        projection_request = ProjectionRequest.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": "Invalid plan", "detail": _validation_details(e)}), 400

    try:
        service = ProjectionService(current_app.config["DISPLAY_PRECISION"])
        plan = projection_request.to_plan()
        result = service.project(plan, strict=projection_request.strict)
        return jsonify(service.build_response(plan, result)), 200

    except InvalidPlanShape as e:
        return jsonify({"error": "Invalid plan shape", "issues": e.issues}), 422

    except Exception as e:
        current_app.logger.error(f"Error projecting plan: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projection_bp.route("/stages/summary", methods=["POST"])
def summarise_stage() -> Any:
    """Income, expense and earning of a single stage.

    Returns:
        JSON response with the stage summary
    """
    data = request.get_json(silent=True)
    if data is None:
        return jsonify({"error": "Request body must be JSON"}), 400

    try:
        summary_request = StageSummaryRequest.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": "Invalid stage", "detail": _validation_details(e)}), 400

    stage = summary_request.stage
    payload = {**stage.summary().model_dump(), "stage_length": stage.stage_length}
    return jsonify(payload), 200
