import logging
import math

from flask import Blueprint, Response, current_app, jsonify, request, send_from_directory
from sqlalchemy.exc import SQLAlchemyError

from .models import DatabaseUnavailable

catalog_bp = Blueprint("catalog", __name__)

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "category", "shopkeeper", "location")

MISSING_FIELDS = "All fields are required!"
BAD_PRICE = "Price must be a non-negative number!"
PRODUCT_ADDED = '<h1>Product Added Successfully!</h1><a href="/">Add Another Product</a>'


class InvalidProduct(ValueError):
    pass


def _repository():
    return current_app.extensions["catalog_repository"]


def _storage():
    return current_app.extensions["catalog_storage"]


def _plain(body, status):
    return Response(body, status=status, mimetype="text/plain")


def _parse_price(raw):
    if isinstance(raw, bool):
        raise InvalidProduct(BAD_PRICE)
    try:
        price = float(raw)
    except (TypeError, ValueError):
        raise InvalidProduct(BAD_PRICE) from None
    if not math.isfinite(price) or price < 0:
        raise InvalidProduct(BAD_PRICE)
    return price


def clean_product(data):
    """Return the validated product fields from a submitted form or JSON body.

    Text fields must be non-blank strings. A price of 0 is accepted.
    """
    fields = {}
    for key in TEXT_FIELDS:
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise InvalidProduct(MISSING_FIELDS)
        fields[key] = value.strip()

    raw_price = data.get("price")
    if raw_price is None or (isinstance(raw_price, str) and not raw_price.strip()):
        raise InvalidProduct(MISSING_FIELDS)
    fields["price"] = _parse_price(raw_price)
    return fields


@catalog_bp.errorhandler(DatabaseUnavailable)
def database_unavailable(exc):
    logger.warning("Refusing %s %s: %s", request.method, request.path, exc)
    return _plain("Database unavailable", 503)


@catalog_bp.route("/")
def index():
    return current_app.send_static_file("form.html")


@catalog_bp.route("/uploads/<path:filename>")
def uploaded_file(filename):
    return send_from_directory(current_app.config["UPLOAD_FOLDER"], filename)


@catalog_bp.route("/products", methods=["POST"])
def create_product():
    repository = _repository()
    repository.ensure_available()

    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
    else:
        data = request.form

    # Stored before validation; a rejected submission leaves the file behind.
    image = _storage().save(request.files.get("image"))

    try:
        fields = clean_product(data)
    except InvalidProduct as exc:
        logger.info("Rejected product submission: %s", exc)
        return _plain(str(exc), 400)

    try:
        repository.add(image=image, **fields)
    except SQLAlchemyError:
        logger.exception("Error saving product")
        return _plain("Database error", 500)

    return PRODUCT_ADDED


@catalog_bp.route("/items", methods=["GET"])
def list_items():
    try:
        products = _repository().all()
    except SQLAlchemyError:
        logger.exception("Error fetching products")
        return _plain("Error fetching products from the database", 500)
    return jsonify([p.to_dict() for p in products])
