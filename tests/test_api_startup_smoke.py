from fastapi.testclient import TestClient


REQUIRED_ROUTES = {
    "/api/auth/register",
    "/api/auth/login",
    "/api/auth/token",
    "/api/users/me",
    "/api/users/profile",
    "/api/users/discount-info",
    "/api/menu",
    "/api/menu/categories",
    "/api/menu/category/{category_id}",
    "/api/menu/{menu_item_id}",
    "/api/orders",
    "/api/orders/{order_id}",
    "/api/internal/metrics",
}


def test_api_startup_and_router_registration(monkeypatch):
    from food_ordering import main

    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    with TestClient(main.app) as client:
        response = client.get("/")
        health_response = client.get("/health")
        docs_response = client.get("/docs")
        openapi_response = client.get("/openapi.json")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert health_response.json() == {"status": "healthy"}
    assert docs_response.status_code == 200
    assert openapi_response.status_code == 200

    paths = set(openapi_response.json()["paths"])
    assert REQUIRED_ROUTES.issubset(paths)


def test_startup_creates_sqlite_schema(monkeypatch):
    from food_ordering import main

    calls = []
    monkeypatch.setattr(main, "DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setattr(main, "validate_runtime_environment", lambda: calls.append("validate"))
    monkeypatch.setattr(main.Base.metadata, "create_all", lambda bind: calls.append("create_all"))
    monkeypatch.setattr(main, "ensure_migrations_applied", lambda **_: calls.append("migrations"))

    main._startup_tasks()

    assert calls == ["validate", "create_all"]


def test_startup_checks_migrations_outside_sqlite(monkeypatch):
    from food_ordering import main

    calls = []
    monkeypatch.setattr(main, "DATABASE_URL", "postgresql://db/app")
    monkeypatch.setattr(main, "validate_runtime_environment", lambda: calls.append("validate"))
    monkeypatch.setattr(main, "apply_migrations", lambda **_: calls.append("apply"))
    monkeypatch.setattr(main, "ensure_migrations_applied", lambda **_: calls.append("migrations"))

    main._startup_tasks()

    assert calls == ["validate", "apply", "migrations"]
