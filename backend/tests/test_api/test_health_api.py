"""
API tests for the root and health endpoints
"""
from unittest.mock import MagicMock, patch


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()['status'] == "online"


@patch('app.main.get_db_connection_dict_with_retry')
def test_health_connected(mock_get_conn, client):
    mock_get_conn.return_value = MagicMock()

    body = client.get("/health").json()

    assert body['status'] == "healthy"
    assert body['database']['status'] == "connected"


@patch('app.main.get_db_connection_dict_with_retry')
def test_health_degraded_without_database(mock_get_conn, client):
    mock_get_conn.side_effect = Exception("DATABASE_URL not configured")

    body = client.get("/health").json()

    assert body['status'] == "degraded"
    assert body['database']['error'] == "DATABASE_URL not configured"
