"""Tests for the FastAPI adapter."""

import base64

from fastapi.testclient import TestClient

from web.app import app

import encode

client = TestClient(app)


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class TestRunEndpoint:

    def test_run_image(self):
        text = [ord("O"), ord("K"), 0]
        image = encode.image(0x3000, [encode.lea(0, 2), encode.PUTS, encode.HALT] + text)
        response = client.post("/api/run", json={"image": b64(image)})
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["output_text"] == "OKHALT\n"

    def test_input_and_options(self):
        image = encode.image(0x3000, [encode.GETC, encode.st(0, 1), encode.HALT, 0])
        response = client.post(
            "/api/run",
            json={
                "images": [b64(image)],
                "input": "x",
                "options": {"watch": [0x3003], "initial_memory": {"x3010": 5}},
            },
        )
        body = response.json()
        assert body["status"] == "ok"
        assert body["final_memory"] == {str(0x3003): ord("x")}

    def test_error_reported(self):
        image = encode.image(0x3000, [0xD000])
        body = client.post("/api/run", json={"image": b64(image)}).json()
        assert body["status"] == "error"
        assert body["error"]["type"] == "IllegalOpcode"

    def test_missing_image(self):
        response = client.post("/api/run", json={})
        assert response.status_code == 400

    def test_invalid_base64(self):
        response = client.post("/api/run", json={"image": "not base64!"})
        assert response.status_code == 400

    def test_invalid_memory_key(self):
        image = encode.image(0x3000, [encode.HALT])
        response = client.post(
            "/api/run",
            json={"image": b64(image), "options": {"initial_memory": {"zz": 1}}},
        )
        assert response.status_code == 400
