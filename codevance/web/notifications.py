from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from codevance.errors import ResourceNotFoundError
from codevance.services.container import container

notifications_bp = Blueprint("notifications", __name__)

@notifications_bp.route("/notifications", methods=["GET"])
@login_required
def list_notifications():
    limit = min(request.args.get('limit', 20, type=int), 100)
    unread_only = request.args.get('unread', 'false').lower() == 'true'
    notifications = container().get('notification_repository').list_for_user(
        current_user.id, limit=limit, unread_only=unread_only
    )
    return jsonify({"notifications": [n.to_dict() for n in notifications]})

@notifications_bp.route("/notifications/<notification_id>/read", methods=["POST"])
@login_required
def mark_read(notification_id):
    if not container().get('notification_repository').mark_as_read(notification_id, current_user.id):
        raise ResourceNotFoundError("Notification not found")
    return jsonify({"message": "Notification marked as read"})

@notifications_bp.route("/notifications/read-all", methods=["POST"])
@login_required
def mark_all_read():
    count = container().get('notification_repository').mark_all_as_read(current_user.id)
    return jsonify({"message": "Notifications marked as read", "count": count})
