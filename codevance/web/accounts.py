import logging

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required

from codevance.errors import ConflictError, ValidationError
from codevance.extensions import limiter
from codevance.forms import form_errors
from codevance.forms.accounts import LinkAccountForm
from codevance.platforms import PLATFORMS, get_platform
from codevance.services.container import container
from codevance.services.sync import sync_states
from codevance.tasks.sync_tasks import start_account_sync

accounts_bp = Blueprint("accounts", __name__)
log = logging.getLogger(__name__)

def _sync_rate_limit():
    return current_app.config.get('SYNC_RATE_LIMIT', '10 per minute')

@accounts_bp.route("/accounts", methods=["GET"])
@login_required
def list_accounts():
    accounts = container().get('account_service').list_accounts(current_user.id)
    return jsonify({"accounts": [account.to_dict() for account in accounts]})

@accounts_bp.route("/accounts", methods=["POST"])
@login_required
def link_account():
    form = LinkAccountForm()
    if not form.validate():
        raise ValidationError("Invalid account details", details=form_errors(form))

    account = container().get('account_service').link_account(
        current_user.id, form.platform.data, form.username.data
    )
    return jsonify(account.to_dict()), 201

@accounts_bp.route("/accounts/<account_id>", methods=["DELETE"])
@login_required
def unlink_account(account_id):
    removed = container().get('account_service').unlink_account(current_user.id, account_id)
    return jsonify({"message": "Account unlinked", "removed_problems": removed})

@accounts_bp.route("/accounts/<account_id>/sync", methods=["POST"])
@login_required
@limiter.limit(_sync_rate_limit)
def sync_account(account_id):
    """Start a background sync. Progress is reported by /api/sync/status."""
    account = container().get('account_service').get_account(current_user.id, account_id)

    future = start_account_sync(account)
    if future is None:
        platform = get_platform(account.platform)
        if platform is None or not platform.has_sync:
            raise ValidationError(f"Sync is not available for {account.platform}")
        raise ConflictError(f"A {account.platform} sync is already in progress")

    return jsonify({
        "status": "started",
        "account_id": account.id,
        "platform": account.platform,
    }), 202

@accounts_bp.route("/sync/status", methods=["GET"])
@login_required
def sync_status():
    return jsonify({"syncing": sync_states.state_for(current_user.id).snapshot()})

@accounts_bp.route("/platforms", methods=["GET"])
def list_platforms():
    return jsonify({
        "platforms": [
            {"name": p.name, "description": p.description, "has_sync": p.has_sync}
            for p in PLATFORMS
        ]
    })
