def publish_page(client, auth_headers, title="Headspa"):
    return client.post("/pages", headers=auth_headers, json={"title": title, "status": "published"}).json()


def test_public_page_renders_visible_blocks(client, auth_headers):
    page = publish_page(client, auth_headers)
    client.post(f"/blocks/pages/{page['id']}/blocks", headers=auth_headers,
                json={"type": "pricing", "content": {"plans": [{"name": "Basic", "price": "49"}], "title": ""}})
    hidden = client.post(f"/blocks/pages/{page['id']}/blocks", headers=auth_headers,
                         json={"type": "faq", "visible": False}).json()

    response = client.get(f"/public/pages/{page['slug']}")
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Headspa"
    assert len(data["blocks"]) == 1
    assert hidden["id"] not in [b["id"] for b in data["blocks"]]

    content = data["blocks"][0]["content"]
    assert content["plans"] == [{"name": "Basic", "price": "49"}]
    # "title" vide explicitement stocké reste vide, les autres champs viennent des défauts
    assert content["title"] == ""
    assert content["currency"] == "EUR"
    assert content["padding"]["top"] == "4rem"

def test_public_page_hides_client_stamp(client, auth_headers):
    page = publish_page(client, auth_headers)
    block = client.post(f"/blocks/pages/{page['id']}/blocks", headers=auth_headers,
                        json={"type": "text", "content": {"content": "Hallo"}}).json()
    client.put(f"/blocks/{block['id']}", headers=auth_headers,
               json={"content": {"content": "Willkommen"}, "clientUpdatedAt": 1000})

    data = client.get(f"/public/pages/{page['slug']}").json()
    content = data["blocks"][0]["content"]
    assert content["content"] == "Willkommen"
    assert "meta" not in content

def test_public_page_draft_not_found(client, auth_headers, test_page):
    response = client.get(f"/public/pages/{test_page['slug']}")
    assert response.status_code == 404

def test_public_page_inactive_not_found(client, auth_headers):
    page = publish_page(client, auth_headers)
    client.put(f"/pages/{page['id']}", headers=auth_headers, json={"active": False})
    assert client.get(f"/public/pages/{page['slug']}").status_code == 404

def test_public_page_unknown_slug(client):
    assert client.get("/public/pages/does-not-exist").status_code == 404

def test_healthz(client):
    response = client.get("/health/z")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
