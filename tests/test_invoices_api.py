from fastapi import status


def test_get_invoice_after_payment(approving_client, pending_order, test_user):
    process = approving_client.post(
        "/api/payments/process",
        json={"orderId": pending_order.id, "userId": test_user.id, "paymentMethod": "credit_card"},
    )
    invoice_id = process.json()["invoiceId"]

    response = approving_client.get(f"/api/invoices/{invoice_id}")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    invoice = data["invoice"]
    assert invoice["id"] == invoice_id
    assert invoice["orderId"] == pending_order.id
    assert invoice["userId"] == test_user.id
    assert invoice["totalAmount"] == "100.00"
    assert [item["name"] for item in invoice["items"]] == ["Notebook", "Fountain pen"]
    assert invoice["order"]["id"] == pending_order.id
    assert invoice["order"]["status"] == "paid"
    assert invoice["user"]["email"] == test_user.email
    assert invoice["user"]["displayName"] == "Test User"


def test_get_invoice_not_found(client):
    response = client.get("/api/invoices/99999")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "message": "Failed to retrieve invoice: Invoice not found"}
