def test_root_reports_running(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "SNS API Server is running!"}


def test_unknown_route_uses_error_body(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not Found"}
