"""Tests for POST /api/generate and GET /api/styles."""
from urllib.parse import urlparse

from ai.services import AIServiceError
from tests.conftest import make_png

PHOTO_URL = "http://testserver/assets/facecraft-uploads/1700000000000-photo.png"


def _generate(client, photo_url=PHOTO_URL, style="anime"):
    return client.post("/api/generate", json={"photoUrl": photo_url, "style": style})


def test_generate_returns_avatar_style_and_description(client, fake_ai, blob_store):
    response = _generate(client)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["style"] == "anime"
    assert body["description"] == fake_ai.description
    assert body["avatarUrl"] != PHOTO_URL
    assert body["avatarUrl"].startswith("http://testserver/assets/facecraft-avatars/")
    assert len(blob_store.puts) == 1


def test_generate_calls_describe_then_generate_once(client, fake_ai):
    _generate(client, style="cyberpunk")

    assert len(fake_ai.describe_calls) == 1
    image_ref, instruction = fake_ai.describe_calls[0]
    assert image_ref == PHOTO_URL
    assert "for constructing a Cyberpunk-style avatar" in instruction

    assert len(fake_ai.generate_calls) == 1
    prompt = fake_ai.generate_calls[0]
    assert "Cyberpunk" in prompt
    assert fake_ai.description in prompt


def test_generated_avatar_url_serves_generated_bytes(client, fake_ai):
    response = _generate(client)

    fetched = client.get(urlparse(response.json()["avatarUrl"]).path)
    assert fetched.status_code == 200
    assert fetched.content == fake_ai.image


def test_generate_requires_photo_url(client, fake_ai):
    response = client.post("/api/generate", json={"style": "anime"})

    assert response.status_code == 400
    assert response.json() == {"error": "No photo URL provided"}
    assert fake_ai.call_count == 0


def test_generate_requires_style(client, fake_ai):
    response = client.post("/api/generate", json={"photoUrl": PHOTO_URL})

    assert response.status_code == 400
    assert response.json() == {"error": "No style selected"}
    assert fake_ai.call_count == 0


def test_generate_rejects_blank_fields(client, fake_ai):
    assert _generate(client, photo_url="").json() == {"error": "No photo URL provided"}
    assert _generate(client, style="   ").json() == {"error": "No style selected"}
    assert fake_ai.call_count == 0


def test_generate_without_body_reports_missing_photo(client, fake_ai):
    response = client.post("/api/generate")

    assert response.status_code == 400
    assert response.json() == {"error": "No photo URL provided"}
    assert fake_ai.call_count == 0


def test_generate_with_malformed_json_is_client_error(client, fake_ai):
    response = client.post(
        "/api/generate",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request body"}
    assert fake_ai.call_count == 0


def test_empty_description_still_generates(client, fake_ai, blob_store):
    fake_ai.description = ""

    response = _generate(client)

    assert response.status_code == 200
    assert response.json()["description"] == ""
    assert len(fake_ai.generate_calls) == 1
    assert len(blob_store.puts) == 1


def test_missing_description_is_treated_as_empty(client, fake_ai):
    fake_ai.description = None

    response = _generate(client)

    assert response.status_code == 200
    assert response.json()["description"] == ""


def test_no_generated_image_fails_and_stores_nothing(client, fake_ai, blob_store):
    fake_ai.image = b""

    response = _generate(client)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate avatar"}
    assert len(fake_ai.describe_calls) == 1
    assert blob_store.puts == []


def test_vision_failure_is_server_error_without_generation(client, fake_ai, blob_store):
    fake_ai.describe_error = AIServiceError("vision service unavailable")

    response = _generate(client)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate avatar"}
    assert fake_ai.generate_calls == []
    assert blob_store.puts == []


def test_upstream_error_details_are_not_leaked(client, fake_ai):
    fake_ai.generate_error = AIServiceError("quota exceeded for key sk-secret")

    response = _generate(client)

    assert response.status_code == 500
    assert "sk-secret" not in response.text


def test_store_failure_is_server_error(client, blob_store):
    blob_store.fail_with = OSError("read-only file system")

    response = _generate(client)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate avatar"}


def test_identical_requests_produce_distinct_avatars(client, fake_ai):
    first = _generate(client).json()["avatarUrl"]
    second = _generate(client).json()["avatarUrl"]

    assert first != second
    assert len(fake_ai.generate_calls) == 2


def test_free_form_style_is_accepted(client, fake_ai, blob_store):
    response = _generate(client, style="Vaporwave Dreams")

    assert response.status_code == 200
    assert response.json()["style"] == "Vaporwave Dreams"
    assert "vaporwave-dreams" in blob_store.puts[0].pathname
    assert "Vaporwave Dreams-style avatar" in fake_ai.describe_calls[0][1]


def test_upload_then_generate_end_to_end(client, fake_ai):
    upload = client.post(
        "/api/upload",
        files={"file": ("portrait.png", make_png(2 * 1024 * 1024), "image/png")},
    )
    assert upload.status_code == 200
    photo_url = upload.json()["url"]

    response = _generate(client, photo_url=photo_url, style="anime")

    assert response.status_code == 200
    body = response.json()
    assert body["avatarUrl"] != photo_url
    assert body["description"] is not None
    assert fake_ai.describe_calls[0][0] == photo_url


def test_styles_lists_wizard_menu(client):
    response = client.get("/api/styles")

    assert response.status_code == 200
    styles = response.json()["styles"]
    ids = [s["id"] for s in styles]
    assert len(ids) == 9
    assert "anime" in ids and "lowpoly" in ids
    assert all({"id", "name", "description"} <= set(s) for s in styles)
