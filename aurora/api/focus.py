"""Focus sessions API endpoints."""

from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.services.focus_service import FocusSessionService
from aurora.services.task_service import TaskService
from aurora.utils import current_user_id, require_json, success_response


@api_bp.route("/focus-sessions", methods=["POST"])
@jwt_required()
def create_focus_session():
    """
    Record a finished focus session.

    Request body:
    {
        "duration": 1500,           (seconds, required)
        "status": "completed" | "interrupted",
        "type": "focus" | "shortBreak" | "longBreak",
        "taskId": 1,
        "notes": "optional",
        "startedAt": "...", "endedAt": "..."
    }
    """
    session = FocusSessionService().create_session(current_user_id(), require_json())
    return success_response(
        {"session": session.to_dict(), "xpEarned": session.xp_earned},
        status_code=201,
    )


@api_bp.route("/focus-sessions", methods=["GET"])
@jwt_required()
def get_focus_sessions():
    sessions = FocusSessionService().list_sessions(current_user_id())
    return success_response({"sessions": [s.to_dict() for s in sessions]})


@api_bp.route("/focus-sessions/stats", methods=["GET"])
@jwt_required()
def get_focus_stats():
    return success_response(FocusSessionService().stats(current_user_id()))


@api_bp.route("/focus-sessions/task/<int:task_id>", methods=["GET"])
@jwt_required()
def get_task_focus_sessions(task_id: int):
    user_id = current_user_id()
    TaskService().get_owned_task(user_id, task_id)
    sessions = FocusSessionService().list_sessions(user_id, task_id=task_id)
    return success_response({"sessions": [s.to_dict() for s in sessions]})
