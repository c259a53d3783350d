from decimal import Decimal
import uuid

import pytest


BASE = "/api/v1/salary"


async def create_record(client, headers, employee, **overrides):
    payload = {
        "employee_id": str(employee.id),
        "month": 6,
        "year": 2025,
        "base_salary": 22000,
    }
    payload.update(overrides)
    return await client.post(BASE, json=payload, headers=headers)


# ==================== Create ====================

async def test_create_record_computes_amounts(client, admin_headers, make_employee):
    employee = await make_employee()

    response = await create_record(
        client, admin_headers, employee,
        base_salary=17600, overtime_hours=10, bonus=500, social_security=750,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "PENDING"
    assert data["overtime_rate"] == 1.5
    assert data["overtime_amount"] == 1500.0
    assert data["gross_salary"] == 19600.0
    assert data["total_deductions"] == 750.0
    assert data["net_salary"] == 18850.0
    assert data["employee"]["employee_code"] == employee.employee_code


async def test_create_duplicate_period_conflicts(client, admin_headers, make_employee):
    employee = await make_employee()
    assert (await create_record(client, admin_headers, employee)).status_code == 201

    response = await create_record(client, admin_headers, employee)

    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


async def test_create_for_unknown_employee_is_bad_request(client, admin_headers, org):
    response = await client.post(
        BASE,
        json={"employee_id": str(uuid.uuid4()), "month": 6, "year": 2025, "base_salary": 1000},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.parametrize(
    "overrides",
    [{"month": 13}, {"month": 0}, {"year": 2019}, {"base_salary": -1}, {"overtime_rate": 0.5}],
)
async def test_create_validates_input(client, admin_headers, make_employee, overrides):
    employee = await make_employee()
    response = await create_record(client, admin_headers, employee, **overrides)
    assert response.status_code == 422


# ==================== Update ====================

async def test_update_merges_and_recomputes(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(
        client, admin_headers, employee, base_salary=22000, allowances=3000, social_security=750,
    )).json()

    response = await client.patch(
        f"{BASE}/{created['id']}", json={"bonus": 1000, "notes": "Top performer"}, headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["allowances"] == 3000.0
    assert data["bonus"] == 1000.0
    assert data["gross_salary"] == 26000.0
    assert data["net_salary"] == 25250.0
    assert data["notes"] == "Top performer"


async def test_fractional_overtime_stable_across_updates(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(
        client, admin_headers, employee, base_salary=17600, overtime_hours="10.125",
    )).json()

    assert created["overtime_hours"] == 10.13
    assert created["overtime_amount"] == 1519.5
    assert created["gross_salary"] == 19119.5

    response = await client.patch(f"{BASE}/{created['id']}", json={"notes": "x"}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["overtime_hours"] == 10.13
    assert data["overtime_amount"] == 1519.5
    assert data["net_salary"] == created["net_salary"]


async def test_overtime_rate_above_limit_rejected(client, admin_headers, make_employee):
    employee = await make_employee()
    response = await create_record(client, admin_headers, employee, overtime_rate=100)
    assert response.status_code == 422


@pytest.mark.parametrize("action", ["pay", "cancel"])
async def test_update_rejected_once_closed(client, admin_headers, make_employee, action):
    employee = await make_employee()
    created = (await create_record(client, admin_headers, employee)).json()
    await client.patch(f"{BASE}/{created['id']}/{action}", headers=admin_headers)

    response = await client.patch(f"{BASE}/{created['id']}", json={"bonus": 1}, headers=admin_headers)

    assert response.status_code == 400
    assert "Cannot modify" in response.json()["detail"]


# ==================== Lifecycle ====================

async def test_approve_then_pay(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(client, admin_headers, employee)).json()

    approved = await client.patch(f"{BASE}/{created['id']}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    paid = await client.patch(
        f"{BASE}/{created['id']}/pay",
        params={"payment_method": "BANK_TRANSFER", "payment_ref": "TX-42"},
        headers=admin_headers,
    )
    assert paid.status_code == 200
    data = paid.json()
    assert data["status"] == "PAID"
    assert data["paid_at"] is not None
    assert data["payment_method"] == "BANK_TRANSFER"
    assert data["payment_ref"] == "TX-42"


async def test_pay_directly_from_pending(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(client, admin_headers, employee)).json()

    response = await client.patch(f"{BASE}/{created['id']}/pay", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "PAID"


async def test_invalid_transitions(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(client, admin_headers, employee)).json()
    record_url = f"{BASE}/{created['id']}"

    await client.patch(f"{record_url}/pay", headers=admin_headers)

    again = await client.patch(f"{record_url}/pay", headers=admin_headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "Record is already marked as paid"

    approve = await client.patch(f"{record_url}/approve", headers=admin_headers)
    assert approve.status_code == 400
    assert approve.json()["detail"] == "Can only approve PENDING records. Current status: PAID"

    cancel = await client.patch(f"{record_url}/cancel", headers=admin_headers)
    assert cancel.status_code == 400


async def test_cancelled_record_cannot_be_paid(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(client, admin_headers, employee)).json()
    await client.patch(f"{BASE}/{created['id']}/cancel", headers=admin_headers)

    response = await client.patch(f"{BASE}/{created['id']}/pay", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot mark cancelled record as paid"


async def test_missing_record_is_not_found(client, admin_headers, org):
    missing = uuid.uuid4()
    for method, url in (
        ("GET", f"{BASE}/{missing}"),
        ("PATCH", f"{BASE}/{missing}/approve"),
        ("DELETE", f"{BASE}/{missing}"),
    ):
        response = await client.request(method, url, headers=admin_headers)
        assert response.status_code == 404


async def test_delete_record(client, admin_headers, make_employee):
    employee = await make_employee()
    created = (await create_record(client, admin_headers, employee)).json()

    response = await client.delete(f"{BASE}/{created['id']}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"{BASE}/{created['id']}", headers=admin_headers)
    assert response.status_code == 404


# ==================== Generation & queries ====================

async def test_generate_endpoint(client, admin_headers, make_employee, assign_benefit, org):
    employee = await make_employee(base_salary=Decimal("22000"))
    await assign_benefit(employee, org["meal"], 1500)
    await assign_benefit(employee, org["health"], 1500)

    payload = {"month": 7, "year": 2025}
    first = await client.post(f"{BASE}/generate", json=payload, headers=admin_headers)
    second = await client.post(f"{BASE}/generate", json=payload, headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["created"] == 1
    assert second.json()["created"] == 0
    assert second.json()["skipped"] == 1

    month = await client.get(f"{BASE}/by-month/2025/7", headers=admin_headers)
    assert month.status_code == 200
    body = month.json()
    assert len(body["data"]) == 1
    assert body["data"][0]["gross_salary"] == 25000.0
    assert body["data"][0]["net_salary"] == 24250.0
    assert body["summary"]["total_records"] == 1
    assert body["summary"]["pending_count"] == 1


async def test_list_filters_and_paginates(client, admin_headers, make_employee):
    first = await make_employee()
    second = await make_employee()
    await create_record(client, admin_headers, first, month=1)
    await create_record(client, admin_headers, first, month=2)
    await create_record(client, admin_headers, second, month=2)

    response = await client.get(BASE, params={"month": 2, "limit": 1}, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["meta"] == {"total": 2, "page": 1, "limit": 1, "total_pages": 2}
    assert len(body["data"]) == 1

    response = await client.get(BASE, params={"employee_id": str(first.id)}, headers=admin_headers)
    months = [r["month"] for r in response.json()["data"]]
    assert months == [2, 1]


async def test_summary(client, admin_headers, make_employee):
    employee = await make_employee()
    other = await make_employee()
    paid = (await create_record(client, admin_headers, employee, base_salary=20000, bonus=1000)).json()
    await create_record(client, admin_headers, other, base_salary=10000, tax=200)
    await client.patch(f"{BASE}/{paid['id']}/pay", headers=admin_headers)

    response = await client.get(f"{BASE}/summary", params={"year": 2025, "month": 6}, headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["total_records"] == 2
    assert data["total_gross_salary"] == 31000.0
    assert data["total_net_salary"] == 30800.0
    assert data["total_bonus"] == 1000.0
    assert data["total_deductions"] == 200.0
    assert data["by_status"] == {"pending": 1, "approved": 0, "paid": 1, "cancelled": 0}


async def test_salary_history_of_employee(client, admin_headers, make_employee):
    employee = await make_employee()
    await create_record(client, admin_headers, employee, month=1, year=2024)
    await create_record(client, admin_headers, employee, month=3, year=2025)

    response = await client.get(f"/api/v1/employees/{employee.id}/salary-history", headers=admin_headers)

    assert response.status_code == 200
    assert [(r["year"], r["month"]) for r in response.json()] == [(2025, 3), (2024, 1)]


# ==================== Access control ====================

async def test_reads_need_a_token(client, org):
    response = await client.get(BASE)
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_invalid_token_rejected(client, org):
    response = await client.get(BASE, headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_unknown_user_rejected(client, make_headers, org):
    response = await client.get(BASE, headers=make_headers(999))
    assert response.status_code == 401


async def test_staff_can_read_but_not_write(client, staff_headers, make_employee):
    employee = await make_employee()

    assert (await client.get(BASE, headers=staff_headers)).status_code == 200

    response = await create_record(client, staff_headers, employee)
    assert response.status_code == 403

    response = await client.post(f"{BASE}/generate", json={"month": 1, "year": 2025}, headers=staff_headers)
    assert response.status_code == 403
