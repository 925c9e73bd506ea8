import logging
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

db = SQLAlchemy()

logger = logging.getLogger(__name__)


class DatabaseUnavailable(RuntimeError):
    """Raised when the products table is used after a failed startup connection."""


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    price = db.Column(db.Float, nullable=False)
    category = db.Column(db.String(100), nullable=False)
    shopkeeper = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), nullable=False)
    image = db.Column(db.String(500), nullable=True)
    created_at = db.Column(
        db.DateTime, default=lambda: datetime.now(timezone.utc)
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "shopkeeper": self.shopkeeper,
            "location": self.location,
            "image": self.image,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class ProductRepository:
    """Create and list access to the products table.

    One instance is built by ``create_app`` and handed to the routes through
    ``app.extensions``. ``initialize`` must succeed once at startup; until it
    does every operation raises :class:`DatabaseUnavailable`.
    """

    def __init__(self, database):
        self.db = database
        self.available = False

    def initialize(self, app):
        """Bind the database to ``app`` and check it answers.

        Engine construction happens in ``init_app``, so an unknown dialect or
        a missing driver is caught here along with connection errors.
        """
        with app.app_context():
            try:
                self.db.init_app(app)
                self.db.create_all()
                self.db.session.execute(self.db.text("SELECT 1"))
            except (SQLAlchemyError, ImportError):
                logger.exception("Error connecting to the database")
                self.available = False
            else:
                logger.info("Connected to the database")
                self.available = True
            finally:
                self.db.session.remove()
        return self.available

    def ensure_available(self):
        if not self.available:
            raise DatabaseUnavailable("database connection was not established at startup")

    def ping(self):
        if not self.available:
            return False
        try:
            self.db.session.execute(self.db.text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database health check failed")
            self.db.session.rollback()
            return False
        return True

    def add(self, **fields):
        self.ensure_available()
        product = Product(**fields)
        self.db.session.add(product)
        try:
            self.db.session.commit()
        except SQLAlchemyError:
            self.db.session.rollback()
            raise
        return product

    def all(self):
        self.ensure_available()
        return Product.query.all()
