"""Shared SQLAlchemy models: users and their roles."""

import enum

from flask_login import UserMixin

from errors import DomainError, NotFound
from extensions import db
from utils import isoformat, utcnow


class RoleName(str, enum.Enum):
    """The closed set of roles a user can hold."""

    ADMIN = "ADMIN"
    PRACTITIONER = "PRACTITIONER"
    USER = "USER"


class UserRole(db.Model):
    __tablename__ = "user_roles"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True)
    assigned_at = db.Column(db.DateTime, default=utcnow, nullable=False)


class Role(db.Model):
    __tablename__ = "roles"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    description = db.Column(db.String(255))

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Role {self.name}>"


class User(UserMixin, db.Model):
    """Represents an application user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(50), nullable=False)
    last_name = db.Column(db.String(50), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    roles = db.relationship("Role", secondary="user_roles", lazy="selectin", order_by="Role.name")

    @property
    def role_names(self) -> set[str]:
        return {role.name for role in self.roles}

    def has_role(self, role: RoleName) -> bool:
        return role.value in self.role_names

    def to_dict(self, with_updated: bool = False) -> dict:
        data = {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "created_at": isoformat(self.created_at),
        }
        if with_updated:
            data["updated_at"] = isoformat(self.updated_at)
        return data

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.email}>"


# ---------- Role operations ----------

def role_names_for(user_id: int) -> set[str]:
    rows = (db.session.query(Role.name)
            .join(UserRole, UserRole.role_id == Role.id)
            .filter(UserRole.user_id == user_id)
            .all())
    return {name for (name,) in rows}


def count_role_holders(role: RoleName) -> int:
    return (db.session.query(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .filter(Role.name == role.value)
            .count())


def assign_role(user: User, role: Role) -> bool:
    """Give ``role`` to ``user``. Returns False when the user already holds it."""
    existing = db.session.get(UserRole, (user.id, role.id))
    if existing is not None:
        return False
    db.session.add(UserRole(user_id=user.id, role_id=role.id))
    db.session.flush()
    db.session.expire(user, ["roles"])
    return True


def remove_role(user_id: int, role: RoleName) -> None:
    """Take ``role`` away from a user, refusing to remove the last ADMIN."""
    assignment = (db.session.query(UserRole)
                  .join(Role, Role.id == UserRole.role_id)
                  .filter(UserRole.user_id == user_id, Role.name == role.value)
                  .first())
    if assignment is None:
        raise NotFound("Attribution de rôle non trouvée")

    if role is RoleName.ADMIN and count_role_holders(RoleName.ADMIN) <= 1:
        raise DomainError("Impossible de supprimer le dernier administrateur")

    db.session.delete(assignment)
    db.session.flush()
    user = db.session.get(User, user_id)
    if user is not None:
        db.session.expire(user, ["roles"])
