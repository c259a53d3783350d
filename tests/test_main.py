async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"] == "connected"


async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


async def test_service_errors_render_detail(client, admin_headers, org):
    response = await client.get(
        "/api/v1/salary/00000000-0000-0000-0000-000000000000", headers=admin_headers,
    )
    assert response.status_code == 404
    assert response.json() == {
        "detail": "Salary record with ID 00000000-0000-0000-0000-000000000000 not found"
    }


async def test_init_script_uses_app_table_setup(monkeypatch):
    from scripts import init_db as init_script

    calls = []

    async def record_init():
        calls.append("init_db")

    monkeypatch.setattr(init_script, "init_db", record_init)
    await init_script.main()

    assert calls == ["init_db"]
