"""Tasks API endpoints."""

from flask import request
from flask_jwt_extended import jwt_required

from aurora.api import api_bp
from aurora.services.task_service import TaskService
from aurora.utils import current_user_id, require_json, success_response


@api_bp.route("/tasks", methods=["GET"])
@jwt_required()
def get_tasks():
    """
    Get all tasks for current user, newest first.

    Query params:
    - status: filter by status (pending, in-progress, completed)
    """
    tasks = TaskService().list_tasks(current_user_id(), request.args.get("status"))
    return success_response({"tasks": [t.to_dict() for t in tasks], "total": len(tasks)})


@api_bp.route("/tasks", methods=["POST"])
@jwt_required()
def create_task():
    """
    Create a new task.

    Request body:
    {
        "title": "Lab report",
        "subject": "Chemistry",
        "taskType": "lab" | "assignment" | "project",
        "description": "optional",
        "priority": "low" | "medium" | "high",
        "dueDate": "2024-05-01T12:00:00Z"
    }
    """
    task, xp_earned = TaskService().create_task(current_user_id(), require_json())
    return success_response(
        {"task": task.to_dict(), "xpEarned": xp_earned}, status_code=201
    )


@api_bp.route("/tasks/<int:task_id>", methods=["GET"])
@jwt_required()
def get_task(task_id: int):
    task = TaskService().get_owned_task(current_user_id(), task_id)
    return success_response({"task": task.to_dict()})


@api_bp.route("/tasks/<int:task_id>", methods=["PUT"])
@jwt_required()
def update_task(task_id: int):
    """Partially update a task. Completion XP is reported in ``xpEarned``."""
    task, xp_earned = TaskService().update_task(
        current_user_id(), task_id, require_json()
    )
    return success_response({"task": task.to_dict(), "xpEarned": xp_earned})


@api_bp.route("/tasks/<int:task_id>", methods=["DELETE"])
@jwt_required()
def delete_task(task_id: int):
    TaskService().delete_task(current_user_id(), task_id)
    return success_response(message="Task deleted")
