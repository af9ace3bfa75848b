"""
用户、支付和看板API集成测试
"""

from unittest.mock import MagicMock

import requests


class TestUsersAPI:
    """用户API测试"""
    
    def test_register_and_fetch(self, client):
        created = client.post("/users", json={"email": "new@hostel.test", "name": "New"})
        again = client.post("/users", json={"email": "new@hostel.test", "name": "New"})
        
        assert created.json()["message"] == "User created"
        assert again.json() == {"message": "User already exists", "insertedId": None}
        
        user = client.get("/users/new@hostel.test").json()
        assert user["badge"] == "bronze"
        assert client.get("/users/new@hostel.test/role").json() == {"role": "user"}
    
    def test_search_users(self, client, admin_headers, gold_user):
        response = client.get("/users/search", params={"query": "gold"}, headers=admin_headers)
        
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == [gold_user["email"]]
    
    def test_search_users_empty_query(self, client, admin_headers):
        response = client.get("/users/search", params={"query": ""}, headers=admin_headers)
        
        assert response.status_code == 400
        assert response.json()["message"] == "Search query required"
    
    def test_search_users_requires_admin(self, client, gold_headers):
        assert client.get("/users/search", params={"query": "gold"}).status_code == 401
        assert client.get("/users/search", params={"query": "gold"}, headers=gold_headers).status_code == 403
    
    def test_unknown_user(self, client):
        response = client.get("/users/ghost@hostel.test")
        
        assert response.status_code == 404
        assert response.json()["message"] == "User not found"
    
    def test_update_role_requires_admin(self, client, gold_user, gold_headers, admin_headers):
        url = f"/users/{gold_user['id']}/role"
        
        assert client.patch(url, json={"role": "admin"}, headers=gold_headers).status_code == 403
        response = client.patch(url, json={"role": "admin"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["role"] == "admin"
    
    def test_update_role_rejects_unknown_role(self, client, gold_user, admin_headers):
        response = client.patch(f"/users/{gold_user['id']}/role", json={"role": "owner"}, headers=admin_headers)
        assert response.status_code == 422
    
    def test_update_own_badge(self, client, bronze_user, bronze_headers, sample_meal):
        response = client.patch(f"/users/badge/{bronze_user['email']}", json={"badge": "silver"},
                                headers=bronze_headers)
        
        assert response.status_code == 200
        assert response.json()["badge"] == "silver"
        
        requested = client.post("/meal-requests", json={"mealId": sample_meal["id"],
                                                        "userEmail": bronze_user["email"]})
        assert requested.status_code == 200
    
    def test_cannot_update_someone_elses_badge(self, client, gold_user, bronze_headers):
        response = client.patch(f"/users/badge/{gold_user['email']}", json={"badge": "bronze"},
                                headers=bronze_headers)
        assert response.status_code == 403


class TestPaymentsAPI:
    """支付API测试"""
    
    def test_create_payment_intent(self, client, app_instance, gold_headers):
        provider_response = MagicMock(status_code=200, content=b"{}")
        provider_response.json.return_value = {"client_secret": "pi_1_secret_2"}
        app_instance.state.payment_gateway.session = MagicMock()
        app_instance.state.payment_gateway.session.post.return_value = provider_response
        
        response = client.post("/create-payment-intent", json={"price": 12.5}, headers=gold_headers)
        
        assert response.status_code == 200
        assert response.json() == {"clientSecret": "pi_1_secret_2"}
        _, kwargs = app_instance.state.payment_gateway.session.post.call_args
        assert kwargs["data"]["amount"] == 1250
    
    def test_payment_intent_requires_token(self, client):
        assert client.post("/create-payment-intent", json={"price": 12.5}).status_code == 401
    
    def test_provider_failure_is_502(self, client, app_instance, gold_headers):
        app_instance.state.payment_gateway.session = MagicMock()
        app_instance.state.payment_gateway.session.post.side_effect = requests.ConnectionError("down")
        
        response = client.post("/create-payment-intent", json={"price": 3}, headers=gold_headers)
        
        assert response.status_code == 502
        assert response.json()["error_code"] == "PAYMENT_PROVIDER_ERROR"
    
    def test_record_and_list_payments(self, client, gold_user, gold_headers, bronze_headers):
        payload = {"email": gold_user["email"], "amount": 9.99, "transactionId": "tx_9", "badge": "gold"}
        
        assert client.post("/payments", json=payload, headers=bronze_headers).status_code == 403
        created = client.post("/payments", json=payload, headers=gold_headers)
        assert created.status_code == 200
        
        history = client.get(f"/payments/{gold_user['email']}", headers=gold_headers).json()
        assert [p["transactionId"] for p in history] == ["tx_9"]


class TestDashboardAPI:
    """看板API测试"""
    
    def test_admin_dashboard(self, client, admin_headers, sample_meal):
        client.patch(f"/meals/like/{sample_meal['id']}", json={"email": "a@hostel.test"})
        
        response = client.get("/admin/dashboard-stats", headers=admin_headers)
        
        assert response.status_code == 200
        assert response.json() == {"totalMeals": 1, "totalReviews": 0, "totalLikes": 1, "totalRequests": 0}
    
    def test_admin_dashboard_rejects_non_admin(self, client, gold_headers):
        response = client.get("/admin/dashboard-stats", headers=gold_headers)
        
        assert response.status_code == 403
        assert response.json()["error_code"] == "ADMIN_REQUIRED"
    
    def test_admin_dashboard_requires_token(self, client):
        assert client.get("/admin/dashboard-stats").status_code == 401
    
    def test_user_dashboard(self, client, gold_user, gold_headers):
        response = client.get("/user/dashboard-stats", params={"email": gold_user["email"]}, headers=gold_headers)
        
        assert response.status_code == 200
        assert response.json() == {"requestedMeals": 0, "reviews": 0, "payments": 0, "badge": "gold"}
    
    def test_consistency_and_logs(self, client, admin_headers, sample_meal, test_db):
        client.patch(f"/meals/like/{sample_meal['id']}", json={"email": "a@hostel.test"})
        test_db.connection.execute("UPDATE meals SET likes = 5 WHERE id = ?", [sample_meal["id"]])
        
        report = client.get("/admin/consistency", headers=admin_headers).json()
        assert report["summary"]["status"] == "issues_found"
        
        repaired = client.post("/admin/consistency/repair", headers=admin_headers).json()
        assert repaired["repaired"] == 1
        assert client.get(f"/meals/{sample_meal['id']}").json()["likes"] == 1
        
        logs = client.get("/admin/logs", params={"action": "counter_repair"}, headers=admin_headers).json()
        assert logs["total"] == 1
        assert logs["logs"][0]["detail"] == {"meal_ids": [sample_meal["id"]]}
