"""Tour packages and stories over HTTP."""


async def test_guides_add_packages(client, users, auth_headers):
    response = await client.post(
        "/api/v1/packages",
        json={
            "title": "Cox's Bazar Beach Escape",
            "location": "Cox's Bazar",
            "price": "8500.50",
            "images": "https://img.example.com/cox.jpg",
            "plan": [{"day": 1, "title": "Arrival", "details": "Sunset at Laboni beach"}],
        },
        headers=auth_headers(users["guide"].email),
    )
    assert response.status_code == 201
    package = response.json()
    assert package["price"] == 8500.5
    assert package["images"] == ["https://img.example.com/cox.jpg"]
    assert package["plan"][0]["title"] == "Arrival"
    assert package["created_by"] == users["guide"].email


async def test_customers_cannot_add_packages(client, users, auth_headers):
    response = await client.post(
        "/api/v1/packages",
        json={"title": "Nope", "price": 1},
        headers=auth_headers(users["customer"].email),
    )
    assert response.status_code == 403


async def test_package_listing_is_public(client, package):
    listing = await client.get("/api/v1/packages", params={"location": "khulna"})
    assert listing.json()["total"] == 1

    sample = await client.get("/api/v1/packages/random")
    assert [p["id"] for p in sample.json()] == [str(package.id)]


async def test_package_detail_needs_sign_in(client, package, users, auth_headers):
    url = f"/api/v1/packages/{package.id}"
    assert (await client.get(url)).status_code == 401

    detail = await client.get(url, headers=auth_headers(users["customer"].email))
    assert detail.status_code == 200
    assert detail.json()["title"] == "Sundarbans Mangrove Safari"


async def test_story_lifecycle(client, users, auth_headers):
    author = auth_headers(users["customer"].email)
    created = await client.post(
        "/api/v1/stories",
        json={"title": "Tea gardens", "body": "Srimangal in the rain."},
        headers=author,
    )
    assert created.status_code == 201
    story_id = created.json()["id"]

    listing = await client.get("/api/v1/stories", params={"author": users["customer"].email})
    assert listing.json()["total"] == 1

    refused = await client.delete(
        f"/api/v1/stories/{story_id}", headers=auth_headers(users["other"].email)
    )
    assert refused.status_code == 403

    deleted = await client.delete(f"/api/v1/stories/{story_id}", headers=author)
    assert deleted.status_code == 204
    assert (await client.get("/api/v1/stories")).json()["total"] == 0
