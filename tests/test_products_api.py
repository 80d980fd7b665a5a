import pytest
from fastapi.testclient import TestClient

from conftest import product_payload, review
from main import create_app


def _buttons(n):
    return [{"link": f"https://shop.example.com/item/{i}", "text": f"Store {i}"} for i in range(n)]


@pytest.mark.parametrize("count", [1, 2, 5, 10])
def test_accepts_one_to_ten_affiliate_buttons(client, make_category, count):
    category = make_category()
    r = client.post("/api/products", json=product_payload(category["id"], affiliateButtons=_buttons(count)))
    assert r.status_code == 201, r.text
    assert len(r.json()["affiliateButtons"]) == count

    product_id = r.json()["id"]
    r = client.put(f"/api/products/{product_id}", json=product_payload(category["id"], affiliateButtons=_buttons(count)))
    assert r.status_code == 200


@pytest.mark.parametrize("count", [0, 11, 15])
def test_rejects_zero_or_more_than_ten_affiliate_buttons(client, make_category, count):
    category = make_category()
    r = client.post("/api/products", json=product_payload(category["id"], affiliateButtons=_buttons(count)))
    assert r.status_code == 400
    assert r.json()["success"] is False


@pytest.mark.parametrize(
    "button",
    [
        {"link": "not a url", "text": "Buy"},
        {"link": "https://", "text": "Buy"},
        {"link": "https://shop.example.com", "text": "x" * 51},
        {"link": "https://shop.example.com", "text": "   "},
    ],
)
def test_rejects_malformed_affiliate_button(client, make_category, button):
    category = make_category()
    r = client.post("/api/products", json=product_payload(category["id"], affiliateButtons=[button]))
    assert r.status_code == 400


def test_affiliate_link_is_stored_as_sent(client, make_category):
    category = make_category()
    buttons = [{"link": "https://amzn.to/abc", "text": "Amazon"}]
    r = client.post("/api/products", json=product_payload(category["id"], affiliateButtons=buttons))
    assert r.json()["affiliateButtons"] == buttons


@pytest.mark.parametrize(
    "field, value",
    [
        ("productPrice", "349.9"),
        ("productPrice", "free"),
        ("productTitle", "ab"),
        ("productDescription", "too short"),
        ("productScore", 101),
        ("productRank", -1),
        ("productPhotos", [f"https://cdn.example.com/{i}.png" for i in range(6)]),
    ],
)
def test_field_validation(client, make_category, field, value):
    category = make_category()
    r = client.post("/api/products", json=product_payload(category["id"], **{field: value}))
    assert r.status_code == 400


def test_create_defaults_and_derived_fields(client, make_category):
    category = make_category("Headphones")
    body = product_payload(category["id"], productPhotos=["https://cdn.example.com/1.png", "  "])
    del body["productScore"]
    body["redditReviews"] = [
        review("positive", n=1),
        review("positive", n=2),
        review("negative", "Terrible clamping force after an hour", n=3),
        review("neutral", "They are fine for the price I suppose", n=4),
    ]
    # derived values sent by a client are ignored
    body["positiveReviewPercentage"] = 99

    r = client.post("/api/products", json=body)
    assert r.status_code == 201
    product = r.json()
    assert product["productScore"] == 50
    assert product["productRank"] is None
    assert product["productPhotos"] == ["https://cdn.example.com/1.png"]
    assert product["slug"] == "sony-wh-1000xm5"
    assert product["category"] == "Headphones"
    assert product["categoryId"] == category["id"]
    assert product["positiveReviewPercentage"] == 50
    assert product["negativeReviewPercentage"] == 25
    assert product["neutralReviewPercentage"] == 25
    assert product["likeCount"] == 0
    assert product["anonymousLikeCount"] == 0


def test_create_without_reviews_has_zero_percentages(make_product):
    product = make_product()
    assert (
        product["positiveReviewPercentage"],
        product["negativeReviewPercentage"],
        product["neutralReviewPercentage"],
    ) == (0, 0, 0)


def test_rejects_review_with_bad_link_or_tag(client, make_category):
    category = make_category()
    bad_link = dict(review(), link="reddit dot com")
    r = client.post("/api/products", json=product_payload(category["id"], redditReviews=[bad_link]))
    assert r.status_code == 400

    bad_tag = dict(review(), tag="mixed")
    r = client.post("/api/products", json=product_payload(category["id"], redditReviews=[bad_tag]))
    assert r.status_code == 400


def test_unknown_category_is_rejected(client):
    r = client.post("/api/products", json=product_payload(12345))
    assert r.status_code == 400
    assert r.json()["error"] == "Category does not exist"


def test_update_recomputes_percentages(client, make_product):
    product = make_product(redditReviews=[review("positive")])
    assert product["positiveReviewPercentage"] == 100

    body = product_payload(
        product["categoryId"],
        productTitle="Sony WH-1000XM5 (2024)",
        redditReviews=[review("negative", "Worst purchase of the year honestly", n=1), review("neutral", n=2)],
    )
    r = client.put(f"/api/products/{product['id']}", json=body)
    assert r.status_code == 200
    updated = r.json()
    assert updated["positiveReviewPercentage"] == 0
    assert updated["negativeReviewPercentage"] == 50
    assert updated["neutralReviewPercentage"] == 50
    assert updated["slug"] == "sony-wh-1000xm5-2024"


def test_update_missing_product(client, make_category):
    category = make_category()
    r = client.put("/api/products/999", json=product_payload(category["id"]))
    assert r.status_code == 404
    assert r.json()["error"] == "Product not found"


def test_get_by_id_and_slug(client, make_product):
    product = make_product(productTitle="Keychron K2 (Version 2)")

    r = client.get(f"/api/products/{product['id']}")
    assert r.status_code == 200
    assert r.json()["productTitle"] == "Keychron K2 (Version 2)"

    r = client.get("/api/products/slug/keychron-k2-version-2")
    assert r.status_code == 200
    assert r.json()["id"] == product["id"]

    assert client.get("/api/products/slug/no-such-product").status_code == 404
    assert client.get("/api/products/4040").status_code == 404


def test_check_title_is_case_insensitive(client, make_product):
    make_product(productTitle="AirPods Pro")

    r = client.get("/api/products/check-title", params={"title": " airpods pro "})
    assert r.json() == {"exists": True, "title": "airpods pro"}

    r = client.get("/api/products/check-title", params={"title": "AirPods Max"})
    assert r.json()["exists"] is False

    assert client.get("/api/products/check-title").status_code == 400


def test_delete_by_path_and_query(client, make_product):
    first = make_product(productTitle="First Product")
    second = make_product(productTitle="Second Product")

    r = client.delete(f"/api/products/{first['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Product deleted successfully"
    assert r.json()["deletedProduct"]["id"] == first["id"]

    r = client.delete("/api/products", params={"id": second["id"]})
    assert r.status_code == 200
    assert r.json()["deletedProduct"]["productTitle"] == "Second Product"

    assert client.get("/api/products").json() == []


def test_delete_errors(client):
    assert client.delete("/api/products").status_code == 400
    assert client.delete("/api/products", params={"id": "abc"}).status_code == 400
    assert client.delete("/api/products", params={"id": "77"}).status_code == 404


def test_list_sort_search_and_pages(client, make_product):
    make_product(productTitle="Budget Mouse", productPrice="$19.99", productScore=60, productRank=3)
    make_product(productTitle="Pro Mouse", productPrice="$149.00", productScore=90, productRank=9)
    make_product(
        productTitle="Wireless Keyboard",
        productDescription="A quiet wireless keyboard for the office.",
        productPrice="45",
        productScore=75,
    )

    r = client.get("/api/products")
    assert r.headers["X-Total-Count"] == "3"
    assert [p["productTitle"] for p in r.json()] == ["Wireless Keyboard", "Pro Mouse", "Budget Mouse"]

    r = client.get("/api/products", params={"sort": "price"})
    assert [p["productPrice"] for p in r.json()] == ["$19.99", "45", "$149.00"]

    r = client.get("/api/products", params={"sort": "score"})
    assert [p["productScore"] for p in r.json()] == [90, 75, 60]

    r = client.get("/api/products", params={"sort": "rank"})
    assert [p["productTitle"] for p in r.json()] == ["Pro Mouse", "Budget Mouse", "Wireless Keyboard"]

    r = client.get("/api/products", params={"search": "MOUSE", "sort": "title"})
    assert [p["productTitle"] for p in r.json()] == ["Budget Mouse", "Pro Mouse"]
    assert r.headers["X-Total-Count"] == "2"

    r = client.get("/api/products", params={"page": 2, "perPage": 2})
    assert [p["productTitle"] for p in r.json()] == ["Budget Mouse"]
    assert r.headers["X-Total-Count"] == "3"

    assert client.get("/api/products", params={"sort": "random"}).status_code == 400


def test_list_filters_by_category(client, make_category):
    mice = make_category("Mice")
    keyboards = make_category("Keyboards")
    client.post("/api/products", json=product_payload(mice["id"], productTitle="Mouse One"))
    client.post("/api/products", json=product_payload(keyboards["id"], productTitle="Board One"))

    r = client.get("/api/products", params={"categoryId": keyboards["id"]})
    assert [p["productTitle"] for p in r.json()] == ["Board One"]


def test_anonymous_like_toggle(client, make_product):
    product = make_product()
    url = f"/api/products/{product['id']}/like"
    alice = {"X-Visitor-Id": "visitor-alice"}
    bob = {"X-Visitor-Id": "visitor-bob"}

    assert client.get(url, headers=alice).json() == {"likeCount": 0, "userHasLiked": False}

    assert client.post(url, headers=alice).json() == {"liked": True, "likeCount": 1}
    assert client.post(url, headers=bob).json() == {"liked": True, "likeCount": 2}
    assert client.get(url, headers=alice).json() == {"likeCount": 2, "userHasLiked": True}

    # second toggle removes the like instead of double counting
    assert client.post(url, headers=alice).json() == {"liked": False, "likeCount": 1}
    assert client.get(url, headers=alice).json()["userHasLiked"] is False

    r = client.get(f"/api/products/{product['id']}")
    assert r.json()["anonymousLikeCount"] == 1


def test_like_unknown_product(client):
    assert client.post("/api/products/999/like").status_code == 404


def test_update_keeps_likes(client, make_product):
    product = make_product()
    client.post(f"/api/products/{product['id']}/like", headers={"X-Visitor-Id": "v1"})

    r = client.put(f"/api/products/{product['id']}", json=product_payload(product["categoryId"]))
    assert r.json()["anonymousLikeCount"] == 1


def test_likes_and_dislikes_block(client, make_category):
    category = make_category()
    block = {
        "likes": [{"heading": "Sound", "points": ["Warm bass", "Clear mids"]}],
        "dislikes": [{"heading": "Comfort", "points": ["Gets warm"]}],
    }
    r = client.post("/api/products", json=product_payload(category["id"], likesAndDislikes=block))
    assert r.status_code == 201
    assert r.json()["likesAndDislikes"] == block

    too_many_points = {"likes": [{"heading": "Sound", "points": [f"p{i}" for i in range(11)]}]}
    r = client.post("/api/products", json=product_payload(category["id"], likesAndDislikes=too_many_points))
    assert r.status_code == 400


@pytest.fixture
def secured_client(settings):
    settings.ADMIN_API_TOKEN = "s3cret"
    with TestClient(create_app(settings)) as c:
        yield c


def test_admin_token_required_when_configured(secured_client):
    admin = {"Authorization": "Bearer s3cret"}
    image = {"url": "https://cdn.example.com/c.png", "fileId": "f1", "name": "c.png"}

    r = secured_client.post("/api/categories", json={"name": "Cameras", "image": image})
    assert r.status_code == 401
    assert r.json() == {"success": False, "error": "Unauthorized action"}

    r = secured_client.post(
        "/api/categories",
        json={"name": "Cameras", "image": image},
        headers={"Authorization": "Bearer wrong"},
    )
    assert r.status_code == 401

    r = secured_client.post("/api/categories", json={"name": "Cameras", "image": image}, headers=admin)
    assert r.status_code == 201
    category_id = r.json()["data"]["id"]

    r = secured_client.post("/api/products", json=product_payload(category_id))
    assert r.status_code == 401
    r = secured_client.post("/api/products", json=product_payload(category_id), headers=admin)
    assert r.status_code == 201
    product_id = r.json()["id"]

    # reads stay public
    assert secured_client.get(f"/api/products/{product_id}").status_code == 200
    assert secured_client.delete(f"/api/products/{product_id}").status_code == 401

    # a signed-in admin likes as an authenticated user
    r = secured_client.post(f"/api/products/{product_id}/like", headers=admin)
    assert r.json() == {"liked": True, "likeCount": 1}
    assert secured_client.get(f"/api/products/{product_id}").json()["likeCount"] == 1


def test_title_without_slug_characters_rejected(client, make_category):
    category = make_category()
    r = client.post("/api/products", json=product_payload(category["id"], productTitle="!!!"))
    assert r.status_code == 400


def test_check_title_folds_non_ascii_case(client, make_product):
    make_product(productTitle="Écran Pro 27")
    r = client.get("/api/products/check-title", params={"title": "écran pro 27"})
    assert r.json()["exists"] is True
