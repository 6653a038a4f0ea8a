"""Analytics API endpoints."""

from flask import request
from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.services.analytics_service import FocusAnalytics
from aurora.utils import current_user_id, success_response


@api_bp.route("/analytics/focus-summary", methods=["GET"])
@jwt_required()
def get_focus_summary():
    """
    Focus summary for a period.

    Query params:
    - period: today | week | month (default week)
    """
    period = request.args.get("period", "week")
    return success_response(FocusAnalytics().summarize(current_user_id(), period))


@api_bp.route("/analytics/streak", methods=["GET"])
@jwt_required()
def get_streak():
    return success_response(FocusAnalytics().streak(current_user_id()))


@api_bp.route("/analytics/productivity-insights", methods=["GET"])
@jwt_required()
def get_productivity_insights():
    return success_response(
        FocusAnalytics().productivity_insights(current_user_id())
    )
