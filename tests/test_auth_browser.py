# Tests for auth/browser.py
# Created: 2026-10-12

from unittest.mock import patch

from nbngcli.auth.browser import browser_command, open_browser

URL = "https://accounts.google.com/o/oauth2/v2/auth?client_id=x&scope=a%20b"


class TestBrowserCommand:
    def test_macos(self):
        assert browser_command(URL, system="Darwin") == ["open", URL]

    def test_windows(self):
        assert browser_command(URL, system="Windows") == ["cmd", "/c", "start", "", URL]

    def test_linux(self):
        assert browser_command(URL, system="Linux") == ["xdg-open", URL]


class TestOpenBrowser:
    def test_spawns_detached(self):
        with patch("nbngcli.auth.browser.subprocess.Popen") as popen:
            assert open_browser(URL) is True
        args, kwargs = popen.call_args
        assert args[0][-1] == URL
        assert kwargs["start_new_session"] is True

    def test_missing_opener_returns_false(self):
        with patch(
            "nbngcli.auth.browser.subprocess.Popen",
            side_effect=FileNotFoundError("xdg-open"),
        ):
            assert open_browser(URL) is False
