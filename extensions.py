from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager

# Extensions are created unbound and attached in create_app()

# Database
db = SQLAlchemy()

# Bearer-token authentication (see permissions.load_user_from_request)
login_manager = LoginManager()


@contextmanager
def transaction():
    """Run a multi-statement write as one unit.

    Commits when the block exits normally, rolls back and re-raises on any
    exception. The session itself is released at app-context teardown.
    """
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
