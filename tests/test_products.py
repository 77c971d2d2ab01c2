"""
Tests for products endpoints.
"""
from google.api_core.exceptions import NotFound

from factories import OTHER_PRODUCT_ID, PRODUCT_ID, THIRD_PRODUCT_ID, make_doc

NEW_PRODUCT = {
    "name": "Velvet Matte Lipstick",
    "itemCode": "COS-1002",
    "imageUrl": "https://images.example.com/lipstick.jpg",
}


def _stream(mock_firestore):
    return mock_firestore.collection.return_value.order_by.return_value.stream


def _doc_ref(mock_firestore):
    return mock_firestore.collection.return_value.document.return_value


def test_list_products_with_progress(auth_client, mock_firestore):
    """One of three products priced gives 1/3 = 33%."""
    _stream(mock_firestore).return_value = [
        make_doc(PRODUCT_ID, retailPrice=9.99),
        make_doc(OTHER_PRODUCT_ID, name="Velvet Matte Lipstick", itemCode="COS-1002"),
        make_doc(THIRD_PRODUCT_ID, name="Daily UV Shield", itemCode="COS-1003"),
    ]

    response = auth_client.get("/api/products")

    assert response.status_code == 200
    data = response.json()
    assert data["progress"] == {"completed": 1, "total": 3, "percent": 33}
    assert [p["id"] for p in data["products"]] == [PRODUCT_ID, OTHER_PRODUCT_ID, THIRD_PRODUCT_ID]
    assert data["products"][0]["retailPrice"] == 9.99
    assert data["products"][0]["bulkPrice"] is None

    mock_firestore.collection.assert_called_with("products")
    mock_firestore.collection.return_value.order_by.assert_called_once_with("createdAt", direction="ASCENDING")


def test_list_products_empty_store(auth_client, mock_firestore):
    _stream(mock_firestore).return_value = []

    response = auth_client.get("/api/products")

    assert response.status_code == 200
    assert response.json() == {"products": [], "progress": {"completed": 0, "total": 0, "percent": 0}}


def test_list_products_store_failure_is_generic_500(auth_client, mock_firestore):
    _stream(mock_firestore).side_effect = Exception("connection refused by db-internal-7")

    response = auth_client.get("/api/products")

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to fetch products"}
    assert "db-internal-7" not in response.text


def test_create_product_success(auth_client, mock_firestore):
    doc_ref = _doc_ref(mock_firestore)
    doc_ref.get.return_value = make_doc(PRODUCT_ID, **NEW_PRODUCT)

    response = auth_client.post("/api/products", json={**NEW_PRODUCT, "name": "  Velvet Matte Lipstick  "})

    assert response.status_code == 201
    data = response.json()
    assert data["id"] == PRODUCT_ID
    assert data["name"] == "Velvet Matte Lipstick"
    assert data["retailPrice"] is None
    assert data["bulkPrice"] is None

    stored = doc_ref.set.call_args[0][0]
    assert stored["name"] == "Velvet Matte Lipstick"
    assert stored["retailPrice"] is None
    assert stored["bulkPrice"] is None
    assert "createdAt" in stored and "updatedAt" in stored


def test_create_product_invalid_url_names_only_that_field(auth_client, mock_firestore):
    response = auth_client.post("/api/products", json={**NEW_PRODUCT, "imageUrl": "not-a-url"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid payload"
    assert set(body["errors"]) == {"imageUrl"}
    mock_firestore.collection.assert_not_called()


def test_create_product_blank_name_and_item_code(auth_client, mock_firestore):
    response = auth_client.post("/api/products", json={**NEW_PRODUCT, "name": "   ", "itemCode": ""})

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert set(errors) == {"name", "itemCode"}
    assert errors["name"] == ["Name is required"]
    mock_firestore.collection.assert_not_called()


def test_create_product_missing_field(auth_client):
    payload = dict(NEW_PRODUCT)
    del payload["itemCode"]

    response = auth_client.post("/api/products", json=payload)

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"itemCode"}


def test_update_clears_retail_price_only(auth_client, mock_firestore):
    doc_ref = _doc_ref(mock_firestore)
    doc_ref.get.return_value = make_doc(PRODUCT_ID, retailPrice=None, bulkPrice=7.5)

    response = auth_client.patch(f"/api/products/{PRODUCT_ID}", json={"retailPrice": None})

    assert response.status_code == 200
    assert response.json()["retailPrice"] is None
    assert response.json()["bulkPrice"] == 7.5

    mock_firestore.collection.return_value.document.assert_called_with(PRODUCT_ID)
    update_data = doc_ref.update.call_args[0][0]
    assert set(update_data) == {"retailPrice", "updatedAt"}
    assert update_data["retailPrice"] is None


def test_update_sets_both_prices(auth_client, mock_firestore):
    doc_ref = _doc_ref(mock_firestore)
    doc_ref.get.return_value = make_doc(PRODUCT_ID, retailPrice=12.5, bulkPrice=10)

    response = auth_client.patch(f"/api/products/{PRODUCT_ID}", json={"retailPrice": 12.5, "bulkPrice": 10})

    assert response.status_code == 200
    update_data = doc_ref.update.call_args[0][0]
    assert update_data["retailPrice"] == 12.5
    assert update_data["bulkPrice"] == 10.0


def test_update_malformed_id_is_400_before_store_access(auth_client, mock_firestore):
    response = auth_client.patch("/api/products/not-an-id", json={"retailPrice": 1.0})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid product id"}
    mock_firestore.collection.assert_not_called()


def test_update_unknown_id_is_404(auth_client, mock_firestore):
    _doc_ref(mock_firestore).update.side_effect = NotFound("No document to update")

    response = auth_client.patch(f"/api/products/{PRODUCT_ID}", json={"bulkPrice": 3.0})

    assert response.status_code == 404
    assert response.json() == {"message": "Product not found"}


def test_update_rejects_non_numeric_price(auth_client, mock_firestore):
    response = auth_client.patch(f"/api/products/{PRODUCT_ID}", json={"retailPrice": "abc"})

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"retailPrice"}
    mock_firestore.collection.assert_not_called()


def test_update_rejects_null_name(auth_client):
    response = auth_client.patch(f"/api/products/{PRODUCT_ID}", json={"name": None})

    assert response.status_code == 400
    assert set(response.json()["errors"]) == {"name"}


def test_update_store_failure_is_generic_500(auth_client, mock_firestore):
    _doc_ref(mock_firestore).update.side_effect = RuntimeError("deadline exceeded on shard 4")

    response = auth_client.patch(f"/api/products/{PRODUCT_ID}", json={"bulkPrice": 3.0})

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to update product"}


def test_delete_product_success(auth_client, mock_firestore):
    doc_ref = _doc_ref(mock_firestore)
    doc_ref.get.return_value = make_doc(PRODUCT_ID)

    response = auth_client.delete(f"/api/products/{PRODUCT_ID}")

    assert response.status_code == 200
    assert response.json() == {"message": "Product deleted"}
    doc_ref.delete.assert_called_once()


def test_delete_malformed_id_is_400(auth_client, mock_firestore):
    response = auth_client.delete("/api/products/123")

    assert response.status_code == 400
    mock_firestore.collection.assert_not_called()


def test_delete_unknown_id_is_404(auth_client, mock_firestore):
    doc_ref = _doc_ref(mock_firestore)
    doc_ref.get.return_value = make_doc(PRODUCT_ID, exists=False)

    response = auth_client.delete(f"/api/products/{PRODUCT_ID}")

    assert response.status_code == 404
    doc_ref.delete.assert_not_called()
