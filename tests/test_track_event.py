"""
Tests for the track_event command line.
"""

import logging

import pytest

import track_event


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_parse_page_view_args():
    args = track_event._parse_args(["page-view", "http://x.test", "--title", "Home", "--context", "{}"])
    assert args.event == "page-view"
    assert args.url == "http://x.test"
    assert args.title == "Home"
    assert args.context == "{}"


def test_parse_struct_requires_value():
    with pytest.raises(SystemExit):
        track_event._parse_args(["struct", "shop"])


def test_dry_run_page_view(capsys):
    code = track_event.main(["--dry-run", "page-view", "http://x.test", "--title", "Home"])
    assert code == 0
    assert "Dry run" in capsys.readouterr().out


def test_dry_run_structured_event(capsys):
    code = track_event.main(["--dry-run", "--plain", "struct", "shop", "--value", "42", "--context", '{"k":"v"}'])
    assert code == 0


def test_invalid_input_returns_error_code():
    assert track_event.main(["--dry-run", "page-view", ""]) == 2


def test_unsupported_platform_returns_error_code():
    assert track_event.main(["--dry-run", "--platform", "xbox", "screen-view", "Home"]) == 2


def test_malformed_unstructured_data_returns_error_code():
    assert track_event.main(["--dry-run", "unstruct", "com.acme", "signup", "{broken"]) == 2


def test_send_uses_collector(monkeypatch, capsys):
    """Test a real send path with the HTTP emitter's session replaced."""
    sent = []

    class FakeResponse:
        status_code = 200

    def fake_get(self, url, params=None, timeout=None):
        sent.append((url, params))
        return FakeResponse()

    monkeypatch.setattr("requests.Session.get", fake_get)
    code = track_event.main(["--collector", "collector.test", "--user-id", "u1", "page-view", "http://x.test"])

    assert code == 0
    assert "Sent (200)" in capsys.readouterr().out
    url, params = sent[0]
    assert url == "https://collector.test/i"
    assert params["url"] == "http://x.test"
    assert params["uid"] == "u1"


def test_send_failure_returns_one(monkeypatch, capsys):
    class FakeResponse:
        status_code = 503

    monkeypatch.setattr("requests.Session.get", lambda self, url, params=None, timeout=None: FakeResponse())
    code = track_event.main(["--collector", "collector.test", "page-view", "http://x.test"])

    assert code == 1
    assert "503" in capsys.readouterr().err
