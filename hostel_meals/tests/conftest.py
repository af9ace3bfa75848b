"""
测试配置文件
提供内存数据库、测试应用、种子数据和认证请求头
"""

import json

import pytest
from fastapi.testclient import TestClient

from ..app import create_app
from ..config.settings import Settings
from ..core.database import DatabaseManager, utcnow
from ..core.security import SecurityManager


@pytest.fixture
def test_settings():
    """测试环境配置"""
    return Settings(
        _env_file=None,
        database_url="duckdb://:memory:",
        jwt_secret_key="test-secret-key-for-hostel-meals-0123456789",
        api_title="Hostel Meals API (Test)",
        api_version="1.0.0-test",
        stripe_secret_key="sk_test_123",
        log_level="WARNING",
    )


@pytest.fixture
def test_db():
    """测试数据库（内存）"""
    db_manager = DatabaseManager(":memory:")
    db_manager.open()
    yield db_manager
    db_manager.close()


@pytest.fixture
def app_instance(test_settings, test_db):
    return create_app(settings=test_settings, db=test_db)


@pytest.fixture
def client(app_instance):
    """测试客户端"""
    with TestClient(app_instance) as test_client:
        yield test_client


@pytest.fixture
def security(test_settings):
    return SecurityManager(test_settings)


def insert_user(db, email, name=None, role="user", badge="bronze"):
    with db.transaction() as conn:
        return conn.execute(
            "INSERT INTO users(email, name, role, badge, created_at) VALUES (?,?,?,?,?) RETURNING id",
            [email, name, role, badge, utcnow()]
        ).fetchone()[0]


def insert_meal(db, title="Chicken Curry", likes=0, reviews_count=0, email="admin@hostel.test"):
    with db.transaction() as conn:
        return conn.execute(
            "INSERT INTO meals(title, category, price, ingredients_json, email, distributor_name, "
            "rating, likes, reviews_count, post_time) VALUES (?,?,?,?,?,?,?,?,?,?) RETURNING id",
            [title, "lunch", 5.5, json.dumps(["rice", "chicken"]), email, "Admin",
             0, likes, reviews_count, utcnow()]
        ).fetchone()[0]


def insert_upcoming_meal(db, title="Beef Stew"):
    with db.transaction() as conn:
        return conn.execute(
            "INSERT INTO upcoming_meals(title, category, price, ingredients_json, email, distributor_name, "
            "rating, likes, reviews_count, post_time) VALUES (?,?,?,?,?,?,?,?,?,?) RETURNING id",
            [title, "dinner", 7.0, json.dumps(["beef"]), "admin@hostel.test", "Admin",
             4.5, 0, 0, utcnow()]
        ).fetchone()[0]


@pytest.fixture
def admin_user(test_db):
    """管理员用户"""
    email = "admin@hostel.test"
    return {"id": insert_user(test_db, email, "Admin", role="admin", badge="platinum"), "email": email}


@pytest.fixture
def gold_user(test_db):
    """付费会员"""
    email = "gold@hostel.test"
    return {"id": insert_user(test_db, email, "Gold User", badge="gold"), "email": email}


@pytest.fixture
def bronze_user(test_db):
    """免费等级用户"""
    email = "bronze@hostel.test"
    return {"id": insert_user(test_db, email, "Bronze User", badge="bronze"), "email": email}


@pytest.fixture
def sample_meal(test_db):
    return {"id": insert_meal(test_db), "title": "Chicken Curry"}


@pytest.fixture
def upcoming_meal(test_db):
    return {"id": insert_upcoming_meal(test_db), "title": "Beef Stew"}


@pytest.fixture
def make_headers(security):
    """按邮箱生成认证请求头"""
    def _make(email):
        return {"Authorization": f"Bearer {security.create_jwt_token(email)}"}
    return _make


@pytest.fixture
def admin_headers(make_headers, admin_user):
    return make_headers(admin_user["email"])


@pytest.fixture
def gold_headers(make_headers, gold_user):
    return make_headers(gold_user["email"])


@pytest.fixture
def bronze_headers(make_headers, bronze_user):
    return make_headers(bronze_user["email"])
