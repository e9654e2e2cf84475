"""Cookie jar and last-username persistence used by the CLI."""

import stat

import httpx

from sessionkit.persistence import (
    COOKIE_FILENAME,
    get_last_username,
    load_cookies,
    save_cookies,
    save_last_username,
)


def test_saved_cookies_load_back(tmp_path):
    cookies = httpx.Cookies()
    cookies.set("access_token", "abc", domain="auth.test", path="/")
    cookies.set("refresh_token", "def", domain="auth.test", path="/")

    save_cookies(cookies, tmp_path / "state")
    loaded = load_cookies(tmp_path / "state")

    assert loaded.get("access_token", domain="auth.test") == "abc"
    assert loaded.get("refresh_token", domain="auth.test") == "def"


def test_cookie_file_is_private(tmp_path):
    save_cookies(httpx.Cookies(), tmp_path)

    mode = stat.S_IMODE((tmp_path / COOKIE_FILENAME).stat().st_mode)
    assert mode == 0o600


def test_existing_cookie_file_is_made_private(tmp_path):
    path = tmp_path / COOKIE_FILENAME
    path.write_text("[]", encoding="utf-8")
    path.chmod(0o644)

    save_cookies(httpx.Cookies(), tmp_path)

    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_missing_or_corrupt_cookie_file(tmp_path):
    assert len(load_cookies(tmp_path)) == 0

    (tmp_path / COOKIE_FILENAME).write_text("{not json")
    assert len(load_cookies(tmp_path)) == 0

    (tmp_path / COOKIE_FILENAME).write_text('[{"value": "no name"}]')
    assert len(load_cookies(tmp_path)) == 0


def test_last_username(tmp_path):
    assert get_last_username(tmp_path) is None

    save_last_username("user@example.com", tmp_path)

    assert get_last_username(tmp_path) == "user@example.com"
