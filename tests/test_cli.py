"""Tests for the passport-photo command line."""
from functools import partial

import pytest

from conftest import BASE_URL, PHOTO_BYTES, TOKEN, PassportStub
from passport_photo import cli
from passport_photo.client import PhotoClient


@pytest.fixture
def stub_client(monkeypatch):
    """Route the CLI's PhotoClient through a Passport stub."""
    passport = PassportStub()
    monkeypatch.setattr("passport_photo.client.PhotoClient", partial(PhotoClient, transport=passport.transport))
    return passport


def test_public_photo_prints_path(stub_client, output_dir, capsys):
    code = cli.main(["public", "jdoe", "--base-url", BASE_URL, "-o", str(output_dir)])

    out = capsys.readouterr().out.strip()
    assert code == 0
    assert out == str((output_dir / "jdoe.jpg").resolve())
    assert (output_dir / "jdoe.jpg").read_bytes() == PHOTO_BYTES
    assert "Authorization" not in stub_client.requests[0].headers


def test_private_photo_uses_settings(stub_client, output_dir, monkeypatch, capsys):
    monkeypatch.setenv("PASSPORT_BASE_URL", BASE_URL)
    monkeypatch.setenv("PASSPORT_TOKEN", TOKEN)
    monkeypatch.setenv("DOWNLOAD_DIR", str(output_dir))

    code = cli.main(["private", "jdoe", "-p", "w=200", "-p", "fit=crop"])

    assert code == 0
    request = stub_client.requests[0]
    assert request.url.path == "/img/private/avatar/jdoe"
    assert dict(request.url.params) == {"w": "200", "fit": "crop"}
    assert request.headers["Authorization"] == f"Bearer {TOKEN}"
    assert capsys.readouterr().out.strip() == str((output_dir / "jdoe.jpg").resolve())


def test_token_option_overrides_settings(stub_client, output_dir, monkeypatch):
    monkeypatch.setenv("PASSPORT_TOKEN", "from-env")

    cli.main(["private", "jdoe", "--base-url", BASE_URL, "--token", TOKEN, "-o", str(output_dir)])

    assert stub_client.requests[0].headers["Authorization"] == f"Bearer {TOKEN}"


def test_private_photo_without_token_exits_1(stub_client, output_dir, capsys):
    code = cli.main(["private", "jdoe", "--base-url", BASE_URL, "-o", str(output_dir)])

    assert code == 1
    assert "photo unavailable: jdoe" in capsys.readouterr().err
    assert stub_client.requests == []


def test_http_failure_exits_1(monkeypatch, output_dir, capsys):
    passport = PassportStub(status_code=404)
    monkeypatch.setattr("passport_photo.client.PhotoClient", partial(PhotoClient, transport=passport.transport))

    code = cli.main(["public", "nobody", "--base-url", BASE_URL, "-o", str(output_dir)])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "photo unavailable: nobody" in captured.err


def test_missing_base_url_exits_2(stub_client, capsys):
    code = cli.main(["public", "jdoe"])

    assert code == 2
    assert "PASSPORT_BASE_URL" in capsys.readouterr().err
    assert stub_client.requests == []


@pytest.mark.parametrize("param", ["w200", "=200"])
def test_malformed_param_exits_2(stub_client, param, capsys):
    code = cli.main(["public", "jdoe", "--base-url", BASE_URL, "-p", param])

    assert code == 2
    assert "KEY=VALUE" in capsys.readouterr().err
    assert stub_client.requests == []


def test_param_value_may_contain_equals():
    assert cli._parse_params(["sig=a=b", "w="]) == {"sig": "a=b", "w": ""}


def test_subcommand_required(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main([])
    assert exc_info.value.code == 2


def test_invalid_base_url_exits_2(stub_client, capsys):
    code = cli.main(["public", "jdoe", "--base-url", "http://[::1"])

    assert code == 2
    assert "Invalid Passport base URL" in capsys.readouterr().err
    assert stub_client.requests == []


def test_options_are_applied_to_settings_for_factory(stub_client, output_dir, monkeypatch):
    monkeypatch.setenv("PASSPORT_TIMEOUT", "7")
    seen = []
    real_factory = cli.create_photo_client

    def recording_factory(settings):
        seen.append(settings)
        return real_factory(settings)

    monkeypatch.setattr(cli, "create_photo_client", recording_factory)

    cli.main(["private", "jdoe", "--base-url", BASE_URL, "--token", TOKEN, "-o", str(output_dir)])

    assert len(seen) == 1
    assert seen[0].passport_base_url == BASE_URL
    assert seen[0].passport_token == TOKEN
    assert seen[0].passport_timeout == 7.0
