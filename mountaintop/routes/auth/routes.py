import logging

from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from sqlalchemy.exc import IntegrityError

from mountaintop import db, limiter, login_manager
from mountaintop.errors import ConflictError, ForbiddenError, ValidationError
from mountaintop.forms.auth import LoginForm, RegistrationForm
from mountaintop.models import User
from mountaintop.routes.auth import bp
from mountaintop.utils.validation import form_errors_to_details

logger = logging.getLogger(__name__)


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@bp.route("/register", methods=["POST"])
@limiter.limit("5 per minute")
def register():
    """Create an account and sign it in"""
    form = RegistrationForm()
    if not form.validate_on_submit():
        raise ValidationError("Validation failed", form_errors_to_details(form.errors))

    user = User(
        username=form.username.data,
        email=form.email.data.lower(),
        display_name=form.display_name.data or None,
    )
    user.set_password(form.password.data)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as e:
        # Taken by a concurrent registration after the form checked
        db.session.rollback()
        raise ConflictError("Username or email already exists") from e

    login_user(user)
    logger.info(f"New user registered: {user.username}")
    return jsonify(user.to_dict()), 201


@bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError("Validation failed", form_errors_to_details(form.errors))

    user = User.query.filter_by(username=form.username.data).first()
    if user is None or not user.check_password(form.password.data):
        logger.warning(f"Failed login attempt for username '{form.username.data}'")
        return (
            jsonify(
                {"error": "Invalid username or password", "code": "UNAUTHORIZED"}
            ),
            401,
        )

    if not user.is_active:
        raise ForbiddenError("Your account has been deactivated")

    login_user(user, remember=form.remember_me.data)
    user.update_last_login()
    logger.info(f"User {user.username} logged in")

    return jsonify(user.to_dict())


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logger.info(f"User {current_user.username} logged out")
    logout_user()
    return jsonify({"success": True})


@bp.route("/me")
@login_required
def me():
    data = current_user.to_dict()
    data["leagues"] = [league.to_dict() for league in current_user.get_leagues()]
    return jsonify(data)


@bp.route("/csrf-token")
def csrf_token():
    """Token for the X-CSRFToken header on session-authenticated writes"""
    return jsonify({"csrf_token": generate_csrf()})
