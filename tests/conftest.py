from __future__ import annotations

from pathlib import Path

import pytest

from catalog import create_app


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def app(upload_dir: Path):
    return create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "UPLOAD_FOLDER": str(upload_dir),
            "USE_OBJECT_STORAGE": None,
        }
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def offline_app(tmp_path: Path, upload_dir: Path):
    # The parent directory does not exist, so SQLite cannot open the file.
    missing = tmp_path / "missing" / "catalog.db"
    return create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{missing}",
            "UPLOAD_FOLDER": str(upload_dir),
            "USE_OBJECT_STORAGE": None,
        }
    )


def product_form(**overrides):
    form = {
        "name": "Handwoven Basket",
        "price": "12.5",
        "category": "Home",
        "shopkeeper": "Amina Stores",
        "location": "Central Market",
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}
