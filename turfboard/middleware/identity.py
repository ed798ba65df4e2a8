# turfboard/middleware/identity.py

from flask import current_app, g
from flask_login import LoginManager, UserMixin

from turfboard.utils.permissions import normalize_email


class Identity(UserMixin):
    """Caller identity carried by the request; the email is the only attribute"""

    def __init__(self, email):
        self.email = email

    def get_id(self):
        return self.email

    def __repr__(self):
        return f"<Identity {self.email}>"


def load_identity_from_request(request):
    """Read the caller email from the identity header, falling back to ?userEmail="""
    header_name = current_app.config.get("IDENTITY_HEADER", "X-User-Email")
    email = normalize_email(request.headers.get(header_name))
    if email is None:
        email = normalize_email(request.args.get("userEmail"))
    if email is None:
        return None
    return Identity(email)


def init_identity_middleware(app):
    """Initialize request identity loading through flask_login"""
    login_manager = LoginManager()
    login_manager.init_app(app)
    login_manager.request_loader(load_identity_from_request)

    # Identities never live in the session; every request carries its own
    @login_manager.user_loader
    def load_user(user_id):
        return None

    # g lives on the app context, which may outlive a single request
    @app.teardown_request
    def forget_identity(exc):
        g.pop("_login_user", None)

    app.extensions["login_manager"] = login_manager
    return login_manager
