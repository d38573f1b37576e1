from fastapi.testclient import TestClient
from textblast.main import app

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert data["success"] is False
    assert "error" in data
    assert data["code"] == "HTTP_ERROR"

def test_405_method_not_allowed():
    response = client.get("/send-messages")
    assert response.status_code == 405
    assert response.json()["code"] == "HTTP_ERROR"

def test_validation_error_structure():
    # /test-send requires both phone and message
    response = client.post("/test-send", json={"phone": "4045550100"})
    assert response.status_code == 422
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "VALIDATION_ERROR"
    assert "details" in data
    assert len(data["details"]) > 0

def test_wrong_type_in_campaign_body():
    response = client.post("/send-messages", json={"message": "Hi", "alreadySentPhones": "14045550100"})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"

def test_custom_exception():
    from textblast.core.exceptions import ExternalServiceError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ExternalServiceError(message="Twilio is down")

    response = client.get("/test-custom-error")
    assert response.status_code == 502
    data = response.json()
    assert data["code"] == "EXTERNAL_SERVICE_ERROR"
    assert data["error"] == "Twilio is down"
