# --- models/user.py ---
from models import db, BIGINT
from datetime import datetime


USER_ROLES = ("student", "tutor", "shopper", "school", "parent_student")
ADMIN_ROLES = ("super_admin", "manager", "support", "sales", "finance")


# --- Storefront account ---
class User(db.Model):
    __tablename__ = "users"

    id = db.Column(BIGINT, primary_key=True)
    username = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone_number = db.Column(db.String(20), nullable=True)
    password = db.Column(db.String(255), nullable=False)   # bcrypt hash
    role = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
        }

    def __repr__(self):
        return f"<User id={self.id} role={self.role}>"


# --- Back-office account ---
class Admin(db.Model):
    __tablename__ = "admins"

    id = db.Column(BIGINT, primary_key=True)
    username = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    phone_number = db.Column(db.String(20), nullable=True)
    password = db.Column(db.String(255), nullable=False)
    admin_role = db.Column(db.String(20), nullable=False, index=True)
    created_by = db.Column(BIGINT, db.ForeignKey("admins.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = db.Column(db.DateTime, nullable=True)

    creator = db.relationship("Admin", remote_side=[id])

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "admin_role": self.admin_role,
        }

    def __repr__(self):
        return f"<Admin id={self.id} admin_role={self.admin_role}>"
