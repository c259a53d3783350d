import uuid
from datetime import date

import pytest

from app.services.employee_service import EmployeeService


BASE = "/api/v1/employees"


def employee_payload(org, **overrides):
    payload = {
        "employee_code": "EMP010",
        "first_name": "Somchai",
        "last_name": "Jaidee",
        "nickname": "Chai",
        "email": "somchai@restaurant.com",
        "national_id": "1100700000001",
        "department_id": str(org["department"].id),
        "position_id": str(org["position"].id),
        "base_salary": 22000,
    }
    payload.update(overrides)
    return payload


async def test_create_employee(client, admin_headers, org):
    response = await client.post(BASE, json=employee_payload(org), headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["employee_code"] == "EMP010"
    assert data["status"] == "ACTIVE"
    assert data["employment_type"] == "FULL_TIME"
    assert data["start_date"] == date.today().isoformat()
    assert data["base_salary"] == 22000.0
    assert data["department"]["code"] == "KITCHEN"
    assert data["position"]["code"] == "CHEF"


@pytest.mark.parametrize(
    "field, value",
    [
        ("employee_code", "EMP001"),
        ("email", "taken@restaurant.com"),
        ("national_id", "1100700000099"),
        ("food_ordering_user_id", 7),
    ],
)
async def test_create_rejects_duplicates(client, admin_headers, org, make_employee, field, value):
    await make_employee(
        employee_code="EMP001",
        email="taken@restaurant.com",
        national_id="1100700000099",
        food_ordering_user_id=7,
    )

    response = await client.post(BASE, json=employee_payload(org, **{field: value}), headers=admin_headers)

    assert response.status_code == 409


async def test_unique_constraint_race_is_conflict(client, admin_headers, org, make_employee, monkeypatch):
    await make_employee(employee_code="EMP001", email="taken@restaurant.com")

    async def no_check(self, values, exclude_id=None):
        return None

    # Both writers passed the pre-check; the store's constraint decides
    monkeypatch.setattr(EmployeeService, "_ensure_unique", no_check)

    response = await client.post(
        BASE, json=employee_payload(org, employee_code="EMP001"), headers=admin_headers,
    )
    assert response.status_code == 409

    other = await make_employee(email="other@restaurant.com")
    response = await client.patch(
        f"{BASE}/{other.id}", json={"email": "taken@restaurant.com"}, headers=admin_headers,
    )
    assert response.status_code == 409


async def test_create_with_unknown_department_is_bad_request(client, admin_headers, org):
    payload = employee_payload(org, department_id=str(uuid.uuid4()))
    response = await client.post(BASE, json=payload, headers=admin_headers)
    assert response.status_code == 400
    assert "Department" in response.json()["detail"]


async def test_get_employee_with_active_benefits(client, admin_headers, org, make_employee, assign_benefit):
    employee = await make_employee()
    await assign_benefit(employee, org["meal"], 1500)
    await assign_benefit(employee, org["health"], 1200, is_active=False)

    response = await client.get(f"{BASE}/{employee.id}", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(employee.id)
    assert [b["benefit"]["code"] for b in data["benefits"]] == ["MEAL"]
    assert data["benefits"][0]["amount"] == 1500.0

    benefits = await client.get(f"{BASE}/{employee.id}/benefits", headers=admin_headers)
    assert [b["benefit"]["code"] for b in benefits.json()] == ["MEAL"]


async def test_get_missing_employee(client, admin_headers, org):
    response = await client.get(f"{BASE}/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404


async def test_list_search_and_filter(client, admin_headers, make_employee):
    await make_employee(first_name="Somsri", nickname="Sri")
    await make_employee(first_name="Sompong")
    await make_employee(first_name="Somnuek", status="TERMINATED")

    response = await client.get(BASE, params={"search": "sri"}, headers=admin_headers)
    assert [e["first_name"] for e in response.json()["data"]] == ["Somsri"]

    response = await client.get(BASE, params={"status": "ACTIVE"}, headers=admin_headers)
    body = response.json()
    assert body["meta"]["total"] == 2
    assert {e["first_name"] for e in body["data"]} == {"Somsri", "Sompong"}


async def test_update_employee(client, admin_headers, make_employee):
    employee = await make_employee()

    response = await client.patch(
        f"{BASE}/{employee.id}",
        json={"base_salary": 25000, "status": "ON_LEAVE", "phone": "0812345678"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["base_salary"] == 25000.0
    assert data["status"] == "ON_LEAVE"
    assert data["phone"] == "0812345678"


async def test_update_to_taken_email_conflicts(client, admin_headers, make_employee):
    await make_employee(email="first@restaurant.com")
    second = await make_employee(email="second@restaurant.com")

    response = await client.patch(
        f"{BASE}/{second.id}", json={"email": "first@restaurant.com"}, headers=admin_headers,
    )
    assert response.status_code == 409

    response = await client.patch(
        f"{BASE}/{second.id}", json={"email": "second@restaurant.com"}, headers=admin_headers,
    )
    assert response.status_code == 200


async def test_delete_terminates_employee(client, admin_headers, make_employee):
    employee = await make_employee()

    response = await client.delete(f"{BASE}/{employee.id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "TERMINATED"
    assert response.json()["end_date"] == date.today().isoformat()

    response = await client.get(f"{BASE}/{employee.id}", headers=admin_headers)
    assert response.status_code == 200


async def test_link_and_unlink_user(client, admin_headers, make_employee):
    employee = await make_employee()
    other = await make_employee(food_ordering_user_id=5)

    response = await client.post(
        f"{BASE}/{employee.id}/link-user", json={"food_ordering_user_id": 3}, headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["food_ordering_user_id"] == 3

    response = await client.post(
        f"{BASE}/{employee.id}/link-user", json={"food_ordering_user_id": 5}, headers=admin_headers,
    )
    assert response.status_code == 409

    response = await client.post(f"{BASE}/{other.id}/unlink-user", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["food_ordering_user_id"] is None


async def test_generate_code(client, admin_headers, make_employee):
    response = await client.get(f"{BASE}/generate-code", headers=admin_headers)
    assert response.json() == {"employee_code": "EMP001"}

    await make_employee(employee_code="EMP001")
    await make_employee(employee_code="EMP009")
    await make_employee(employee_code="MGR-1")

    response = await client.get(f"{BASE}/generate-code", headers=admin_headers)
    assert response.json() == {"employee_code": "EMP010"}


async def test_staff_cannot_modify_employees(client, staff_headers, org, make_employee):
    employee = await make_employee()

    assert (await client.get(BASE, headers=staff_headers)).status_code == 200
    assert (await client.post(BASE, json=employee_payload(org), headers=staff_headers)).status_code == 403
    assert (await client.delete(f"{BASE}/{employee.id}", headers=staff_headers)).status_code == 403
