# --- models/product.py ---
# Each category lives in its own table with its own naming; search
# discovers the shapes through introspection rather than a shared base.
from models import db, BIGINT
from datetime import datetime


def _money(value):
    return float(value) if value is not None else 0.0


class Book(db.Model):
    __tablename__ = "books"

    book_id = db.Column(BIGINT, primary_key=True)
    book_title = db.Column(db.String(255), nullable=False)
    author = db.Column(db.String(150), nullable=True)
    publisher = db.Column(db.String(150), nullable=True, index=True)
    grade = db.Column(db.String(20), nullable=True, index=True)            # "4", "form-2", ...
    category = db.Column(db.String(100), nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "book_id": self.book_id,
            "book_title": self.book_title,
            "author": self.author,
            "publisher": self.publisher,
            "grade": self.grade,
            "price": _money(self.price),
            "image_url": self.image_url,
            "category": self.category,
        }


class Apparatus(db.Model):
    __tablename__ = "apparatus"

    apparatus_id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=True, index=True)
    element = db.Column(db.String(50), nullable=True)                      # chemistry kits
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255), nullable=True)

    def to_dict(self):
        return {
            "apparatus_id": self.apparatus_id,
            "name": self.name,
            "price": _money(self.price),
            "image_url": self.image_url,
            "category": self.category,
        }


class ScienceApparatus(db.Model):
    __tablename__ = "science_apparatus"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    element = db.Column(db.String(50), nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "image_url": self.image_url,
            "price": _money(self.price),
        }


class Stationery(db.Model):
    __tablename__ = "stationeries"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    brand = db.Column(db.String(100), nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "description": self.description,
            "price": _money(self.price),
            "image_url": self.image_url,
        }


class PlaygroundEquipment(db.Model):
    __tablename__ = "playground_equipment"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(100), nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "price": _money(self.price),
            "image_url": self.image_url,
        }


class Electronics(db.Model):
    __tablename__ = "electronics"

    id = db.Column(BIGINT, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    brand = db.Column(db.String(100), nullable=True)
    model = db.Column(db.String(100), nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    image_url = db.Column(db.String(255), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "brand": self.brand,
            "model": self.model,
            "category": self.category,
            "description": self.description,
            "price": _money(self.price),
            "image_url": self.image_url,
        }
