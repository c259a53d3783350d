"""Seed restaurant reference data, staff and two months of payroll."""
import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from app.database import async_session_factory, init_db
from app.models import (
    Department, Position, Benefit, BenefitType, Employee, EmployeeBenefit,
    EmployeeStatus, EmploymentType, Gender, SalaryStatus,
)
from app.schemas.salary import SalaryGenerateRequest
from app.services.salary_service import SalaryService


DEPARTMENTS = [
    {"code": "MANAGEMENT", "name": "Management", "description": "Runs the restaurant"},
    {"code": "KITCHEN", "name": "Kitchen", "description": "Food preparation"},
    {"code": "SERVICE", "name": "Service", "description": "Front of house"},
    {"code": "CASHIER", "name": "Cashier", "description": "Payments and billing"},
]

# (code, name, level, base salary, department code)
POSITIONS = [
    ("MANAGER", "Restaurant Manager", 4, 45000, "MANAGEMENT"),
    ("ASST_MANAGER", "Assistant Manager", 3, 35000, "MANAGEMENT"),
    ("HEAD_CHEF", "Head Chef", 3, 35000, "KITCHEN"),
    ("CHEF", "Chef", 2, 22000, "KITCHEN"),
    ("KITCHEN_HELPER", "Kitchen Helper", 1, 15000, "KITCHEN"),
    ("HEAD_WAITER", "Head Waiter", 2, 25000, "SERVICE"),
    ("WAITER", "Waiter", 1, 15000, "SERVICE"),
    ("SR_CASHIER", "Senior Cashier", 2, 20000, "CASHIER"),
    ("CASHIER", "Cashier", 1, 16000, "CASHIER"),
]

BENEFITS = [
    {"code": "HEALTH_INS", "name": "Health Insurance", "type": BenefitType.HEALTH_INSURANCE, "default_amount": 1500},
    {"code": "TRANSPORT", "name": "Transportation", "type": BenefitType.TRANSPORTATION, "default_amount": 1000},
    {"code": "MEAL", "name": "Meal Allowance", "type": BenefitType.MEAL_ALLOWANCE, "default_amount": 1500},
    {"code": "PHONE", "name": "Phone Allowance", "type": BenefitType.PHONE_ALLOWANCE, "default_amount": 500},
]

EMPLOYEES = [
    {
        "employee_code": "EMP001", "food_ordering_user_id": 1,
        "first_name": "Somchai", "last_name": "Jaidee", "nickname": "Chai",
        "email": "somchai@restaurant.com", "phone": "0812345678", "gender": Gender.MALE,
        "department": "MANAGEMENT", "position": "MANAGER", "base_salary": 45000,
        "start_date": date(2022, 1, 1), "bank_account": "1234567890", "bank_name": "Kasikorn Bank",
    },
    {
        "employee_code": "EMP002", "food_ordering_user_id": 3,
        "first_name": "Somsri", "last_name": "Rakkrua", "nickname": "Sri",
        "email": "somsri@restaurant.com", "phone": "0823456789", "gender": Gender.FEMALE,
        "department": "KITCHEN", "position": "HEAD_CHEF", "base_salary": 35000,
        "start_date": date(2022, 3, 15), "bank_account": "2345678901", "bank_name": "Bangkok Bank",
    },
    {
        "employee_code": "EMP003", "food_ordering_user_id": None,
        "first_name": "Somying", "last_name": "Borikandee", "nickname": "Ying",
        "email": "somying@restaurant.com", "phone": "0834567890", "gender": Gender.FEMALE,
        "department": "SERVICE", "position": "HEAD_WAITER", "base_salary": 25000,
        "start_date": date(2022, 6, 1), "bank_account": "3456789012", "bank_name": "Kasikorn Bank",
    },
    {
        "employee_code": "EMP004", "food_ordering_user_id": 2,
        "first_name": "Sompong", "last_name": "Serfkeng", "nickname": "Pong",
        "email": "sompong@restaurant.com", "phone": "0845678901", "gender": Gender.MALE,
        "department": "SERVICE", "position": "WAITER", "base_salary": 15000,
        "start_date": date(2023, 1, 15), "bank_account": "4567890123", "bank_name": "Siam Commercial Bank",
    },
    {
        "employee_code": "EMP005", "food_ordering_user_id": None,
        "first_name": "Somnuek", "last_name": "Kidlekkeng", "nickname": "Nuek",
        "email": "somnuek@restaurant.com", "phone": "0856789012", "gender": Gender.MALE,
        "department": "CASHIER", "position": "SR_CASHIER", "base_salary": 20000,
        "start_date": date(2023, 3, 1), "bank_account": "5678901234", "bank_name": "Krungthai Bank",
    },
]

# Every employee gets these; the manager also gets phone and transport
DEFAULT_BENEFITS = {"HEALTH_INS": 1500, "MEAL": 1500}
MANAGER_BENEFITS = {"PHONE": 1000, "TRANSPORT": 2000}


async def get_or_create(db, model, code: str, **values):
    result = await db.execute(select(model).where(model.code == code))
    instance = result.scalar_one_or_none()
    if instance is None:
        instance = model(code=code, **values)
        db.add(instance)
        await db.flush()
    return instance


async def seed():
    """Seed initial data. Existing rows (matched by code) are left untouched."""
    await init_db()

    async with async_session_factory() as db:
        try:
            print("Seeding data...")

            # 1. Departments
            print("Creating departments...")
            departments = {}
            for d in DEPARTMENTS:
                values = {k: v for k, v in d.items() if k != "code"}
                departments[d["code"]] = await get_or_create(db, Department, d["code"], **values)

            # 2. Positions
            print("Creating positions...")
            positions = {}
            for code, name, level, base_salary, dept_code in POSITIONS:
                positions[code] = await get_or_create(
                    db, Position, code,
                    name=name,
                    level=level,
                    base_salary=Decimal(base_salary),
                    department_id=departments[dept_code].id,
                )

            # 3. Benefit types
            print("Creating benefits...")
            benefits = {}
            for b in BENEFITS:
                benefits[b["code"]] = await get_or_create(
                    db, Benefit, b["code"],
                    name=b["name"],
                    type=b["type"].value,
                    default_amount=Decimal(b["default_amount"]),
                )

            # 4. Employees
            print("Creating employees...")
            employees = []
            for e in EMPLOYEES:
                result = await db.execute(
                    select(Employee).where(Employee.employee_code == e["employee_code"])
                )
                employee = result.scalar_one_or_none()
                if employee is None:
                    values = {k: v for k, v in e.items() if k not in ("department", "position")}
                    values["gender"] = e["gender"].value
                    values["base_salary"] = Decimal(e["base_salary"])
                    employee = Employee(
                        **values,
                        department_id=departments[e["department"]].id,
                        position_id=positions[e["position"]].id,
                        employment_type=EmploymentType.FULL_TIME.value,
                        status=EmployeeStatus.ACTIVE.value,
                    )
                    db.add(employee)
                    await db.flush()
                employees.append(employee)

            # 5. Benefit assignments
            print("Assigning benefits...")
            for employee in employees:
                assigned = dict(DEFAULT_BENEFITS)
                if employee.employee_code == "EMP001":
                    assigned.update(MANAGER_BENEFITS)
                for benefit_code, amount in assigned.items():
                    result = await db.execute(
                        select(EmployeeBenefit).where(
                            EmployeeBenefit.employee_id == employee.id,
                            EmployeeBenefit.benefit_id == benefits[benefit_code].id,
                        )
                    )
                    if result.scalar_one_or_none() is None:
                        db.add(EmployeeBenefit(
                            employee_id=employee.id,
                            benefit_id=benefits[benefit_code].id,
                            amount=Decimal(amount),
                            is_active=True,
                        ))

            await db.commit()

            # 6. Payroll: last month paid, current month pending
            print("Creating salary records...")
            today = date.today()
            last_month = 12 if today.month == 1 else today.month - 1
            last_month_year = today.year - 1 if today.month == 1 else today.year

            service = SalaryService(db)
            previous = await service.generate(SalaryGenerateRequest(month=last_month, year=last_month_year))
            records, _ = await service.list_by_month(last_month_year, last_month)
            for record in records:
                if record.status == SalaryStatus.PENDING.value:
                    await service.mark_paid(record.id, payment_method="BANK_TRANSFER")
            current = await service.generate(SalaryGenerateRequest(month=today.month, year=today.year))

            print(f"  {last_month}/{last_month_year}: created {previous.created}, skipped {previous.skipped}")
            print(f"  {today.month}/{today.year}: created {current.created}, skipped {current.skipped}")
            print("Seed data created successfully!")

        except Exception as e:
            await db.rollback()
            print(f"Error seeding data: {e}")
            raise


if __name__ == "__main__":
    asyncio.run(seed())
