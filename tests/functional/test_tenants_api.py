"""Functional tests for client partners, clients and vendors."""

from __future__ import annotations


def _create(client, path: str, body: dict) -> int:
    resp = client.post(path, json=body)
    assert resp.status_code == 201, resp.text
    return int(resp.json()["id"])


def test_partner_lifecycle(client):
    pid = _create(client, "/api/client-partners", {"name": "Green Partners", "contact_email": "hi@green.example"})

    listed = client.get("/api/client-partners").json()["client_partners"]
    assert [(p["id"], p["client_count"]) for p in listed] == [(pid, 0)]

    assert client.put(f"/api/client-partners/{pid}", json={"name": "Greener Partners"}).status_code == 200
    assert client.get("/api/client-partners").json()["client_partners"][0]["name"] == "Greener Partners"

    assert client.delete(f"/api/client-partners/{pid}").status_code == 200
    assert client.get("/api/client-partners").json()["client_partners"] == []


def test_partner_name_is_required(client):
    resp = client.post("/api/client-partners", json={"name": "  "})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Field 'name' is required"


def test_unknown_partner_update_and_delete_return_not_found(client):
    assert client.put("/api/client-partners/999999", json={"name": "Nobody"}).status_code == 404
    assert client.delete("/api/client-partners/999999").status_code == 404


def test_client_defaults_and_partner_name(client):
    pid = _create(client, "/api/client-partners", {"name": "Acme Partners"})
    cid = _create(client, "/api/clients", {"client_partner_id": pid, "name": "Acme Retail"})

    clients = client.get("/api/clients", params={"partner_id": pid}).json()["clients"]

    assert [c["id"] for c in clients] == [cid]
    assert clients[0]["size"] == "Medium"
    assert clients[0]["partner_name"] == "Acme Partners"
    assert client.get("/api/client-partners").json()["client_partners"][0]["client_count"] == 1


def test_client_requires_existing_partner(client):
    missing_partner = client.post("/api/clients", json={"name": "Orphan"})
    unknown_partner = client.post("/api/clients", json={"client_partner_id": 999999, "name": "Orphan"})

    assert missing_partner.status_code == 400
    assert missing_partner.json()["detail"] == "Field 'client_partner_id' is required"
    assert unknown_partner.status_code == 404


def test_client_size_is_validated(client):
    pid = _create(client, "/api/client-partners", {"name": "Acme Partners"})

    resp = client.post("/api/clients", json={"client_partner_id": pid, "name": "Acme", "size": "Huge"})

    assert resp.status_code == 422


def test_client_update_and_delete(client):
    pid = _create(client, "/api/client-partners", {"name": "Acme Partners"})
    cid = _create(client, "/api/clients", {"client_partner_id": pid, "name": "Acme", "size": "Small"})

    assert client.put(f"/api/clients/{cid}", json={"name": "Acme Group", "size": "Enterprise"}).status_code == 200
    updated = client.get("/api/clients").json()["clients"][0]
    assert (updated["name"], updated["size"]) == ("Acme Group", "Enterprise")

    assert client.delete(f"/api/clients/{cid}").status_code == 200
    assert client.delete(f"/api/clients/{cid}").status_code == 404


def test_deleting_partner_cascades_to_clients(client):
    pid = _create(client, "/api/client-partners", {"name": "Acme Partners"})
    _create(client, "/api/clients", {"client_partner_id": pid, "name": "Acme"})

    client.delete(f"/api/client-partners/{pid}")

    assert client.get("/api/clients").json()["clients"] == []


def test_vendor_lifecycle(client):
    vid = _create(client, "/api/vendors", {"name": "Steel Co", "industry": "Metals"})

    vendors = client.get("/api/vendors").json()["vendors"]
    assert [(v["id"], v["survey_count"]) for v in vendors] == [(vid, 0)]

    assert client.put(f"/api/vendors/{vid}", json={"name": "Steel Corp"}).status_code == 200
    assert client.put("/api/vendors/999999", json={"name": "Nobody"}).status_code == 404
    assert client.post("/api/vendors", json={}).status_code == 400

    assert client.delete(f"/api/vendors/{vid}").status_code == 200
    assert client.get("/api/vendors").json()["vendors"] == []
