from functools import wraps

from flask_login import current_user, login_required

from mountaintop.errors import ForbiddenError


def admin_required(f):
    """Require a logged-in site admin; anonymous users get a 401"""

    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            raise ForbiddenError("Admin privileges required")
        return f(*args, **kwargs)

    return decorated_function
