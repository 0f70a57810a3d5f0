from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from chessrules.protocol.http.app import create_app


def test_error_envelope_for_http_exception() -> None:
    app: FastAPI = create_app()

    @app.get("/boom")
    def boom():  # type: ignore[no-redef]
        raise HTTPException(status_code=400, detail="oops")

    client = TestClient(app)
    r = client.get("/boom")
    assert r.status_code == 400
    body = r.json()
    assert "error" in body
    err = body["error"]
    assert err["code"] == "bad_request"
    assert err["message"] == "oops"
    assert err["type"] == "client_error"
    assert err["request_id"]


def test_unknown_game_is_not_found() -> None:
    client = TestClient(create_app())
    r = client.get("/api/games/nope/state")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_validation_errors_list_fields() -> None:
    client = TestClient(create_app())
    gid = client.post("/api/games").json()["game_id"]
    r = client.post(f"/api/games/{gid}/move", json={})
    assert r.status_code == 422
    err = r.json()["error"]
    assert err["code"] == "unprocessable_entity"
    assert any(fe["field"].endswith("move") for fe in err["field_errors"])


def test_engine_errors_are_bad_requests() -> None:
    client = TestClient(create_app())
    r = client.post("/api/games", json={"fen": "not a fen"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "bad_request"
    assert "FEN" in err["message"]


def test_mode_errors_are_conflicts() -> None:
    client = TestClient(create_app())
    gid = client.post("/api/games").json()["game_id"]
    r = client.post(f"/api/games/{gid}/promote", json={"piece": "q"})
    assert r.status_code == 409
    err = r.json()["error"]
    assert err["code"] == "conflict"
    assert "gameplay" in err["message"]
