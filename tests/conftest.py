import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from database import products_store
from schemas import Product, UserProfile


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def sample_products():
    docs = [
        {"id": "p1", "name": "Aloe Gel", "category": "Skincare", "brand": "Earth Puran",
         "price": 100.0, "description": "Soothing aloe", "imageUrl": "/aloe.png", "stock": 5, "rating": 4.2},
        {"id": "p2", "name": "Face Oil", "category": "Skincare", "brand": "Earth Puran",
         "price": 900.0, "description": "Saffron oil", "imageUrl": "/oil.png", "stock": 2, "rating": 4.8},
        {"id": "p3", "name": "Lip Balm", "category": "Makeup", "brand": "Earth Puran",
         "price": 250.0, "description": "Beetroot tint", "imageUrl": "/balm.png", "stock": 0},
        {"id": "p4", "name": "Hair Oil", "category": "Haircare", "brand": "Earth Puran",
         "price": 500.0, "description": "Bhringraj blend", "imageUrl": "/hair.png", "stock": 10, "rating": 4.2},
    ]
    products_store.write(docs)
    return [Product.model_validate(d) for d in docs]


@pytest.fixture
def profile():
    return UserProfile(first_name="Asha", last_name="Rao", email="asha@example.com", phone_number="9999999999")


@pytest.fixture
def client():
    from main import app

    return TestClient(app)
