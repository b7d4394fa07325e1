"""
Relay database URL handling.
"""

from tileduel.api.database import ROOMS_DB_FILENAME, resolve_database_url


def test_default_is_a_rooms_file_beside_the_package():
    url = resolve_database_url(None)
    assert url.startswith("sqlite:///")
    assert url.endswith(ROOMS_DB_FILENAME)


def test_hosted_postgres_urls_are_rewritten():
    assert resolve_database_url("postgres://u:p@host/db") == "postgresql://u:p@host/db"
    assert resolve_database_url("postgresql://u:p@host/db") == "postgresql://u:p@host/db"
    assert resolve_database_url("sqlite:////tmp/x.db") == "sqlite:////tmp/x.db"
