from unittest.mock import patch

from appointly import main


def test_root(api):
    response = api.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Appointly API is running"}


def test_health(api):
    assert api.get("/health").json() == {"status": "healthy"}


def test_cors_preflight_allows_configured_origin(api):
    response = api.options(
        "/api/services",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_admin_seeding_skipped_without_credentials():
    with patch.object(main, "ADMIN_EMAIL", None), patch.object(main, "SessionLocal") as session_local:
        main.seed_admin_account()

    session_local.assert_not_called()


def test_admin_seeding_uses_configured_account():
    with patch.object(main, "ADMIN_EMAIL", "root@example.com"), patch.object(
        main, "ADMIN_PASSWORD", "Sup3r-Secret-Pass!"
    ), patch.object(main, "SessionLocal") as session_local, patch.object(main, "AuthService") as auth_service:
        main.seed_admin_account()

    auth_service.return_value.seed_admin.assert_called_once_with(
        "root@example.com", "Sup3r-Secret-Pass!", main.ADMIN_FULL_NAME
    )
    session_local.return_value.close.assert_called_once()
