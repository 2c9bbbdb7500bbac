"""Tests for the Flask integration."""

from __future__ import annotations

import pytest
from flask import Flask

from respond import Responder
from respond.errors import TemplateSetupError
from respond.flask_ext import build_response, get_responder, init_app, negotiate


@pytest.fixture()
def app(tmp_path):
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "item.html").write_text("<p>{{ name }}</p>", encoding="utf-8")

    app = Flask(__name__, root_path=str(tmp_path))
    app.config.update(
        {
            "TESTING": True,
            "RESPOND_AUTO_TEMPLATE": "item",
            "RESPOND_ADD_CHARSET": False,
        }
    )
    init_app(app)

    @app.route("/item")
    def item():
        return negotiate({"name": "widget"})

    @app.route("/strict-item")
    def strict_item():
        return negotiate({"name": "widget"}, default_format=None)

    @app.route("/download")
    def download():
        responder = get_responder()
        return build_response(
            lambda sink: responder.binary(sink, 200, b"payload", "item.bin")
        )

    @app.route("/nothing")
    def nothing():
        return build_response(get_responder().no_content)

    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def test_init_app_stores_initialized_responder(app) -> None:
    responder = get_responder(app)

    assert responder.initialized
    assert responder.options.auto_template == "item"
    assert responder.options.tpl_views_dir.endswith("templates")


def test_init_app_accepts_prebuilt_responder(tmp_path) -> None:
    app = Flask(__name__, root_path=str(tmp_path))
    responder = Responder(lambda opts: setattr(opts, "json_indent", True))

    assert init_app(app, responder) is responder
    assert get_responder(app).options.json_indent is True


def test_init_app_fails_on_bad_views_dir(tmp_path) -> None:
    app = Flask(__name__, root_path=str(tmp_path))
    app.config["RESPOND_TPL_VIEWS_DIR"] = str(tmp_path / "missing")

    with pytest.raises(TemplateSetupError):
        init_app(app)


def test_get_responder_without_init_app(tmp_path) -> None:
    app = Flask(__name__, root_path=str(tmp_path))

    with pytest.raises(RuntimeError):
        get_responder(app)


@pytest.mark.parametrize(
    ("accept", "content_type", "body"),
    [
        ("application/json", "application/json", b'{"name":"widget"}'),
        ("text/html", "text/html", b"<p>widget</p>"),
        ("text/plain", "text/plain", b"{'name': 'widget'}"),
    ],
)
def test_negotiate_follows_accept(client, accept, content_type, body) -> None:
    response = client.get("/item", headers={"Accept": accept})

    assert response.status_code == 200
    assert response.headers["Content-Type"] == content_type
    assert response.data == body


def test_negotiate_unsupported_type_is_406(client) -> None:
    response = client.get("/item", headers={"Accept": "image/png"})

    assert response.status_code == 406
    assert response.data == b"Not Acceptable"


@pytest.mark.parametrize("headers", [{}, {"Accept": ""}])
def test_negotiate_without_accept_defaults_to_json(client, headers) -> None:
    response = client.get("/item", headers=headers)

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/json"
    assert response.data == b'{"name":"widget"}'


def test_negotiate_without_accept_or_default_is_406(client) -> None:
    response = client.get("/strict-item")

    assert response.status_code == 406
    assert response.data == b"Not Acceptable"


def test_build_response_binary_download(client) -> None:
    response = client.get("/download")

    assert response.status_code == 200
    assert response.headers["Content-Disposition"] == "attachment; filename=item.bin"
    assert response.data == b"payload"


def test_build_response_no_content(client) -> None:
    response = client.get("/nothing")

    assert response.status_code == 204
    assert response.data == b""
