import logging
from datetime import datetime

from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user

from codevance.errors import AuthException, ValidationError
from codevance.extensions import db, limiter
from codevance.forms import form_errors
from codevance.forms.auth import LoginForm, RegistrationForm
from codevance.models.user import User
from codevance.models.user_repository import SqlAlchemyUserRepository

auth_bp = Blueprint("auth", __name__)
log = logging.getLogger(__name__)
user_repository = SqlAlchemyUserRepository(db)

@auth_bp.route("/register", methods=["POST"])
@limiter.limit("10 per hour")
def register():
    form = RegistrationForm()
    if not form.validate():
        raise ValidationError("Invalid registration details", details=form_errors(form))

    user = User(
        username=form.username.data,
        email=form.email.data.lower(),
        full_name=form.full_name.data or None,
    )
    user.set_password(form.password.data)
    user_repository.save(user)

    login_user(user)
    log.info(f"New user registered: {user.username}")
    return jsonify(user.to_dict()), 201

@auth_bp.route("/login", methods=["POST"])
@limiter.limit("20 per minute")
def login():
    form = LoginForm()
    if not form.validate():
        raise ValidationError("Invalid login details", details=form_errors(form))

    user = user_repository.get_by_email(form.email.data)
    if user is None or not user.check_password(form.password.data):
        log.warning(f"Failed login attempt for {form.email.data}")
        raise AuthException("Invalid email or password")
    if not user.is_active:
        raise AuthException("Account is disabled")

    login_user(user, remember=form.remember_me.data)
    user.last_login_at = datetime.utcnow()
    user_repository.save(user)

    log.info(f"User {user.id} logged in")
    return jsonify(user.to_dict())

@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    log.info(f"User {current_user.id} logged out")
    logout_user()
    return jsonify({"message": "Logged out"})

@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.to_dict())
