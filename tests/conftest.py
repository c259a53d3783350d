"""
Shared fixtures: in-memory SQLite database, ASGI client and sample staff data.

Environment is set before ``app`` is imported so settings load without a .env.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["IDENTITY_PROVIDER"] = "stub"
os.environ["IDENTITY_FALLBACK_TO_STUB"] = "false"

from datetime import date
from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.database import Base, get_db
from app.main import app
from app.models import Benefit, BenefitType, Department, Employee, EmployeeBenefit, Position
from app.services.identity_service import StubIdentityProvider, get_identity_provider


ADMIN_ID = 1
STAFF_ID = 2


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = StubIdentityProvider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def auth_headers(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def make_headers():
    return auth_headers


@pytest.fixture
def admin_headers():
    return auth_headers(ADMIN_ID)


@pytest.fixture
def staff_headers():
    return auth_headers(STAFF_ID)


# ==================== Sample data ====================

@pytest.fixture
async def org(session_factory):
    """A kitchen department with a chef position and two benefit types."""
    async with session_factory() as session:
        department = Department(code="KITCHEN", name="Kitchen")
        session.add(department)
        await session.flush()

        position = Position(
            code="CHEF", name="Chef", level=2,
            base_salary=Decimal("22000"), department_id=department.id,
        )
        meal = Benefit(
            code="MEAL", name="Meal Allowance",
            type=BenefitType.MEAL_ALLOWANCE.value, default_amount=Decimal("1500"),
        )
        health = Benefit(
            code="HEALTH_INS", name="Health Insurance",
            type=BenefitType.HEALTH_INSURANCE.value, default_amount=Decimal("1500"),
        )
        session.add_all([position, meal, health])
        await session.commit()

    return {"department": department, "position": position, "meal": meal, "health": health}


@pytest.fixture
def make_employee(session_factory, org):
    """Factory creating committed employees in the sample department."""
    counter = {"n": 0}

    async def _make(**overrides) -> Employee:
        counter["n"] += 1
        values = {
            "employee_code": f"EMP{counter['n']:03d}",
            "first_name": f"Staff{counter['n']}",
            "last_name": "Test",
            "department_id": org["department"].id,
            "position_id": org["position"].id,
            "base_salary": Decimal("22000"),
            "start_date": date(2024, 1, 1),
        }
        values.update(overrides)
        async with session_factory() as session:
            employee = Employee(**values)
            session.add(employee)
            await session.commit()
        return employee

    return _make


@pytest.fixture
def assign_benefit(session_factory):
    async def _assign(employee: Employee, benefit: Benefit, amount, is_active: bool = True) -> EmployeeBenefit:
        async with session_factory() as session:
            assignment = EmployeeBenefit(
                employee_id=employee.id,
                benefit_id=benefit.id,
                amount=Decimal(str(amount)),
                is_active=is_active,
            )
            session.add(assignment)
            await session.commit()
        return assignment

    return _assign
