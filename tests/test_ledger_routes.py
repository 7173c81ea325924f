from __future__ import annotations

from sqlalchemy import update

from finance_tracker.models import User


def test_new_user_has_empty_ledger(logged_in_client):
    response = logged_in_client.get("/get-user-data")

    assert response.status_code == 200
    assert response.get_json() == {"status": 0, "data": {"incomes": [], "expenses": []}}


def test_add_and_update_expense(logged_in_client):
    response = logged_in_client.post("/add-expense", json={"expenseName": "Rent", "expenseAmount": 1200})
    assert response.get_json() == {
        "status": 0,
        "data": {"incomes": [], "expenses": [{"name": "Rent", "amount": 1200.0}]},
    }

    response = logged_in_client.post("/add-expense", json={"expenseName": "RENT", "expenseAmount": "1500"})
    assert response.get_json()["data"]["expenses"] == [{"name": "Rent", "amount": 1500.0}]


def test_add_income(logged_in_client):
    response = logged_in_client.post("/add-income", json={"incomeName": "Salary", "incomeAmount": 3000})

    assert response.status_code == 200
    assert response.get_json()["data"]["incomes"] == [{"name": "Salary", "amount": 3000.0}]


def test_add_expense_with_bad_amount(logged_in_client):
    response = logged_in_client.post("/add-expense", json={"expenseName": "Rent", "expenseAmount": -4})

    assert response.status_code == 400
    assert response.get_json() == {"status": 1, "message": "Expense amount must be a positive number"}
    assert logged_in_client.get("/get-user-data").get_json()["data"]["expenses"] == []


def test_add_expense_without_name(logged_in_client):
    response = logged_in_client.post("/add-expense", json={"expenseAmount": 4})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Expense name is required"


def test_delete_expense_and_income(logged_in_client):
    logged_in_client.post("/add-expense", json={"expenseName": "Rent", "expenseAmount": 1200})
    logged_in_client.post("/add-income", json={"incomeName": "Salary", "incomeAmount": 3000})

    response = logged_in_client.delete("/delete-expense", json={"expenseName": "rent"})
    assert response.get_json() == {
        "status": 0,
        "data": {"incomes": [{"name": "Salary", "amount": 3000.0}], "expenses": []},
    }

    response = logged_in_client.delete("/delete-income", json={"incomeName": "SALARY"})
    assert response.get_json()["data"] == {"incomes": [], "expenses": []}


def test_delete_missing_entry(logged_in_client):
    response = logged_in_client.delete("/delete-income", json={"incomeName": "Lottery"})

    assert response.status_code == 404
    assert response.get_json() == {"status": 1, "message": 'Income with the name "Lottery" not found.'}


def test_oversized_ledger_is_rejected(logged_in_client, services):
    services.ledger.size_limit = 200

    response = logged_in_client.post("/add-expense", json={"expenseName": "x" * 300, "expenseAmount": 1})

    assert response.status_code == 413
    assert response.get_json() == {"status": 1, "message": "Data size limit exceeded"}


def test_dashboard_totals(logged_in_client):
    logged_in_client.post("/add-income", json={"incomeName": "Salary", "incomeAmount": 3000})
    logged_in_client.post("/add-expense", json={"expenseName": "Rent", "expenseAmount": 1200})

    response = logged_in_client.get("/dashboard")

    assert response.status_code == 200
    assert response.get_json()["data"] == {
        "username": "alice",
        "totals": {"income": 3000.0, "expenses": 1200.0, "balance": 1800.0},
    }


def test_get_user_data_for_deleted_user(logged_in_client, services):
    services.store.delete("alice")

    response = logged_in_client.get("/get-user-data")

    assert response.status_code == 404
    assert response.get_json() == {"status": 1, "data": None, "message": "User not found!"}


def test_unexpected_errors_are_not_leaked(logged_in_client, services, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("connection string with secrets")

    monkeypatch.setattr(services.ledger, "get_ledger", explode)

    response = logged_in_client.get("/dashboard")

    assert response.status_code == 500
    assert response.get_json() == {"status": 1, "message": "Unable to process request at this time."}


def test_unknown_route_is_plain_404(client):
    assert client.get("/does-not-exist").status_code == 404


def test_health(client):
    assert client.get("/health").get_json() == {"status": "healthy", "service": "finance-tracker"}


def test_add_expense_with_amount_too_large_for_a_float(logged_in_client):
    response = logged_in_client.post(
        "/add-expense", json={"expenseName": "Rent", "expenseAmount": int("9" * 400)}
    )

    assert response.status_code == 400
    assert response.get_json() == {"status": 1, "message": "Expense amount must be a positive number"}


def test_get_user_data_with_malformed_ledger(logged_in_client, services):
    with services.database.session() as session:
        session.execute(update(User).where(User.username == "alice").values(data={"expenses": []}))

    response = logged_in_client.get("/get-user-data")

    assert response.status_code == 500
    assert response.get_json() == {
        "status": 1,
        "data": None,
        "message": "Unable to process request at this time.",
    }
