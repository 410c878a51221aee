import logging

from extensions import db, transaction
from models import Role, RoleName, User, assign_role
from security import hash_password

logger = logging.getLogger(__name__)


def create_user(email, password, role, first_name="", last_name=""):
    """Create an account holding ``role``. Must run inside an app context."""
    role = RoleName(role)
    email = email.strip().lower()

    # Email must be unique
    existing_user = User.query.filter_by(email=email).first()
    if existing_user:
        logger.warning("User '%s' already exists with roles %s", email, sorted(existing_user.role_names))
        return existing_user

    role_row = Role.query.filter_by(name=role.value).first()
    if role_row is None:
        raise SystemExit(f"Role {role.value} is missing, run seed_reference.py --create first")

    with transaction():
        user = User(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name or email.split("@")[0],
            last_name=last_name or "-",
        )
        db.session.add(user)
        db.session.flush()
        assign_role(user, role_row)
        if role is not RoleName.USER:
            user_role = Role.query.filter_by(name=RoleName.USER.value).first()
            if user_role is not None:
                assign_role(user, user_role)

    logger.info("Created user %s (role: %s)", email, role.value)
    return user


if __name__ == '__main__':
    import argparse

    from app import create_app

    parser = argparse.ArgumentParser(description='Create a new user.')
    parser.add_argument('email', help='Email')
    parser.add_argument('password', help='Password')
    parser.add_argument('--role', choices=[r.value for r in RoleName], default=RoleName.USER.value, help='User role')
    parser.add_argument('--first-name', default='', help='First name')
    parser.add_argument('--last-name', default='', help='Last name')

    args = parser.parse_args()
    with create_app().app_context():
        create_user(args.email, args.password, args.role, args.first_name, args.last_name)
