from __future__ import annotations

API = "/api/v1"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

COMPANY = {
    "name": "PipeDesk Ltd",
    "email": "billing@pipedesk.io",
    "website": "https://pipedesk.io",
    "address": {"street": "1 Main St", "city": "Austin", "state": "TX", "zip_code": "78701", "country": "US"},
}


def test_company_profile_and_logo_roundtrip(api_client, auth_header, storage_dir):
    headers = auth_header()
    assert api_client.get(f"{API}/company", headers=headers).json() is None

    saved = api_client.put(f"{API}/company", json=COMPANY, headers=headers)
    assert saved.status_code == 200
    assert saved.json()["logo_url"] is None

    uploaded = api_client.post(
        f"{API}/company/logo",
        files={"file": ("logo.png", PNG_BYTES, "image/png")},
        headers=headers,
    )
    assert uploaded.status_code == 200
    body = uploaded.json()
    assert body["logo_key"].startswith("company/logos/")
    assert body["logo_url"] == f"{API}/files/{body['logo_key']}"
    assert (storage_dir / body["logo_key"]).is_file()

    downloaded = api_client.get(body["logo_url"], headers=headers)
    assert downloaded.status_code == 200
    assert downloaded.content == PNG_BYTES

    removed = api_client.delete(f"{API}/company/logo", headers=headers)
    assert removed.json()["logo_key"] is None
    assert api_client.get(body["logo_url"], headers=headers).status_code == 404


def test_logo_upload_rejects_non_images(api_client, auth_header):
    headers = auth_header()
    api_client.put(f"{API}/company", json=COMPANY, headers=headers)

    response = api_client.post(
        f"{API}/company/logo",
        files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
        headers=headers,
    )
    assert response.status_code == 400
    assert "Invalid file type" in response.json()["detail"]


def test_company_requires_complete_address(api_client, auth_header):
    payload = {**COMPANY, "address": {**COMPANY["address"], "zip_code": ""}}
    response = api_client.put(f"{API}/company", json=payload, headers=auth_header())
    assert response.status_code == 422


def test_logo_named_as_html_is_served_as_image(api_client, auth_header):
    headers = auth_header()
    api_client.put(f"{API}/company", json=COMPANY, headers=headers)

    uploaded = api_client.post(
        f"{API}/company/logo",
        files={"file": ("x.html", PNG_BYTES, "image/png")},
        headers=headers,
    ).json()

    assert uploaded["logo_key"].endswith(".png")
    downloaded = api_client.get(uploaded["logo_url"], headers=headers)
    assert downloaded.status_code == 200
    assert downloaded.headers["content-type"].startswith("image/png")
