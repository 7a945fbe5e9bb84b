import logging

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from codevance.errors import ValidationError
from codevance.forms import form_errors
from codevance.forms.problems import ProblemForm, ProblemUpdateForm
from codevance.services.container import container

problems_bp = Blueprint("problems", __name__)
log = logging.getLogger(__name__)

def _submitted_fields(form):
    """Form data restricted to the keys present in the JSON body."""
    body = request.get_json(silent=True) or {}
    return {name: value for name, value in form.data.items() if name in body}

@problems_bp.route("/problems", methods=["GET"])
@login_required
def list_problems():
    platform = request.args.get('platform')
    problems = container().get('problem_service').list_problems(current_user.id, platform)
    return jsonify({"problems": [problem.to_dict() for problem in problems]})

@problems_bp.route("/problems", methods=["POST"])
@login_required
def add_problem():
    form = ProblemForm()
    if not form.validate():
        raise ValidationError("Invalid problem", details=form_errors(form))

    problem = container().get('problem_service').add_problem(current_user.id, form.data)
    return jsonify(problem.to_dict()), 201

@problems_bp.route("/problems/<int:problem_id>", methods=["PATCH"])
@login_required
def update_problem(problem_id):
    form = ProblemUpdateForm()
    if not form.validate():
        raise ValidationError("Invalid problem", details=form_errors(form))

    problem = container().get('problem_service').update_problem(
        current_user.id, problem_id, _submitted_fields(form)
    )
    return jsonify(problem.to_dict())

@problems_bp.route("/problems/<int:problem_id>", methods=["DELETE"])
@login_required
def delete_problem(problem_id):
    container().get('problem_service').delete_problem(current_user.id, problem_id)
    return jsonify({"message": "Problem deleted"})

@problems_bp.route("/problems/<int:problem_id>/toggle", methods=["POST"])
@login_required
def toggle_problem(problem_id):
    problem = container().get('problem_service').toggle_completion(current_user.id, problem_id)
    return jsonify(problem.to_dict())

@problems_bp.route("/problems/reset", methods=["POST"])
@login_required
def reset_problems():
    count = container().get('problem_service').reset_problems(current_user.id)
    container().get('stats_service').invalidate_platform_stats()
    return jsonify({"message": "Problems reset", "deleted": count})

@problems_bp.route("/stats", methods=["GET"])
@login_required
def user_stats():
    return jsonify(container().get('stats_service').user_stats(current_user.id))

@problems_bp.route("/stats/platform", methods=["GET"])
def platform_stats():
    return jsonify(container().get('stats_service').platform_stats())
