"""HTTP contract tests."""

from datetime import date, timedelta


def future(days: int = 30) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


def create_client(api, name="Ana Perez"):
    res = api.post("/clients", json={"fullName": name, "document": "123", "phone": "555"})
    assert res.status_code == 201
    return res.json()["id"]


def create_loan(api, client_id, amount=1000, count=4):
    res = api.post(
        "/loans",
        json={
            "clientId": client_id,
            "amount": amount,
            "loanDate": future(),
            "installmentsCount": count,
        },
    )
    assert res.status_code == 201, res.text
    return res.json()["id"]


def test_health(api):
    assert api.get("/health").json() == {"status": "ok"}


class TestCapitalEndpoints:
    def test_set_and_get(self, api):
        res = api.put("/capital", json={"amount": 1500})
        assert res.status_code == 200
        assert res.json()["amount"] == 1500.0
        assert api.get("/capital").json()["amount"] == 1500.0

    def test_set_negative_is_client_error(self, api):
        res = api.put("/capital", json={"amount": -5})
        assert res.status_code == 400
        assert "error" in res.json()

    def test_adjust_and_movements(self, api):
        api.put("/capital", json={"amount": 100})
        res = api.post("/capital/adjust", json={"delta": -40, "note": "fees"})
        assert res.json()["amount"] == 60.0

        movements = api.get("/capital/movements").json()
        assert [m["type"] for m in movements] == ["manual_adjust", "manual_set"]
        assert movements[0]["note"] == "fees"

    def test_adjust_below_zero_conflicts(self, api):
        res = api.post("/capital/adjust", json={"delta": -1})
        assert res.status_code == 409
        assert res.json() == {"error": "capital cannot be negative"}


class TestClientEndpoints:
    def test_create_list_get(self, api):
        client_id = create_client(api)
        assert [c["id"] for c in api.get("/clients").json()] == [client_id]

        detail = api.get(f"/clients/{client_id}").json()
        assert detail["full_name"] == "Ana Perez"
        assert detail["loans"] == []

    def test_missing_fields(self, api):
        res = api.post("/clients", json={"fullName": "No Phone", "document": "1"})
        assert res.status_code == 422

    def test_unknown_client(self, api):
        assert api.get("/clients/99").status_code == 404
        assert api.delete("/clients/99").status_code == 404

    def test_delete_client_reports_loans(self, api):
        api.put("/capital", json={"amount": 2000})
        client_id = create_client(api)
        create_loan(api, client_id)
        create_loan(api, client_id, amount=500, count=2)

        res = api.delete(f"/clients/{client_id}")
        assert res.json() == {"ok": True, "deleted_loans": 2}
        assert api.get("/loans").json() == []


class TestLoanEndpoints:
    def test_create_and_detail(self, api):
        api.put("/capital", json={"amount": 1000})
        client_id = create_client(api)
        loan_id = create_loan(api, client_id)

        detail = api.get(f"/loans/{loan_id}").json()
        assert detail["total_payable"] == 1200.0
        assert detail["pending_total"] == 1200.0
        assert detail["status"] == "Activo"
        assert len(detail["installments"]) == 4
        assert all(i["status"] == "Pendiente" for i in detail["installments"])
        assert detail["payments"] == []
        assert api.get("/capital").json()["amount"] == 0.0

    def test_insufficient_capital(self, api):
        client_id = create_client(api)
        res = api.post(
            "/loans",
            json={"clientId": client_id, "amount": 1, "loanDate": future(), "installmentsCount": 1},
        )
        assert res.status_code == 409

    def test_client_not_found(self, api):
        api.put("/capital", json={"amount": 1000})
        res = api.post(
            "/loans",
            json={"clientId": 77, "amount": 100, "loanDate": future(), "installmentsCount": 2},
        )
        assert res.status_code == 404

    def test_non_positive_count_rejected(self, api):
        client_id = create_client(api)
        res = api.post(
            "/loans",
            json={"clientId": client_id, "amount": 100, "loanDate": future(), "installmentsCount": 0},
        )
        assert res.status_code == 422

    def test_list_filters(self, api):
        api.put("/capital", json={"amount": 3000})
        ana = create_client(api)
        luis = create_client(api, "Luis Gomez")
        create_loan(api, ana)
        luis_loan = create_loan(api, luis)

        rows = api.get("/loans", params={"clientId": luis}).json()
        assert [r["id"] for r in rows] == [luis_loan]
        assert rows[0]["client_name"] == "Luis Gomez"
        assert len(api.get("/loans", params={"status": "Activo"}).json()) == 2
        assert api.get("/loans", params={"status": "Finalizado"}).json() == []

    def test_manual_status(self, api):
        api.put("/capital", json={"amount": 1000})
        loan_id = create_loan(api, create_client(api))

        res = api.put(f"/loans/{loan_id}/status", json={"status": "En mora"})
        assert res.json() == {"status": "En mora"}
        assert api.put(f"/loans/{loan_id}/status", json={"status": "Otro"}).status_code == 400
        assert api.put("/loans/999/status", json={"status": "Activo"}).status_code == 404

    def test_delete_loan(self, api):
        api.put("/capital", json={"amount": 1000})
        loan_id = create_loan(api, create_client(api))

        assert api.delete(f"/loans/{loan_id}").json() == {"ok": True}
        assert api.get(f"/loans/{loan_id}").status_code == 404
        assert api.delete(f"/loans/{loan_id}").status_code == 404


class TestPaymentEndpoints:
    def test_normal_payment_and_history(self, api):
        api.put("/capital", json={"amount": 1000})
        loan_id = create_loan(api, create_client(api))

        res = api.post("/payments", json={"loanId": loan_id, "amount": 150, "paymentDate": future(1)})
        assert res.status_code == 201
        assert res.json()["amount"] == 150.0

        detail = api.get(f"/loans/{loan_id}").json()
        assert detail["paid_total"] == 150.0
        assert detail["installments"][0]["paid_amount"] == 150.0
        assert len(detail["payments"]) == 1

        history = api.get("/payments").json()
        assert history[0]["client_name"] == "Ana Perez"
        assert history[0]["loan_amount"] == 1000.0

    def test_pay_by_installment(self, api):
        api.put("/capital", json={"amount": 1000})
        loan_id = create_loan(api, create_client(api))
        second = api.get(f"/loans/{loan_id}").json()["installments"][1]["id"]

        res = api.post("/payments", json={"installmentId": second, "amount": 300})
        assert res.status_code == 201
        installments = api.get(f"/loans/{loan_id}").json()["installments"]
        assert [i["status"] for i in installments][:2] == ["Pendiente", "Pagada"]

    def test_payoff(self, api):
        api.put("/capital", json={"amount": 1000})
        loan_id = create_loan(api, create_client(api))

        res = api.post("/payments", json={"loanId": loan_id, "payoff": True})
        assert res.json()["amount"] == 1000.0
        detail = api.get(f"/loans/{loan_id}").json()
        assert detail["status"] == "Finalizado"
        assert detail["pending_total"] == 0.0

        again = api.post("/payments", json={"loanId": loan_id, "payoff": True})
        assert again.status_code == 409
        assert again.json() == {"error": "loan already paid"}

    def test_payment_errors(self, api):
        api.put("/capital", json={"amount": 1000})
        loan_id = create_loan(api, create_client(api))

        assert api.post("/payments", json={"loanId": loan_id}).status_code == 400
        assert api.post("/payments", json={"loanId": loan_id, "amount": 0}).status_code == 400
        assert api.post("/payments", json={"loanId": 999, "amount": 10}).status_code == 404
        assert api.post("/payments", json={"installmentId": 999, "amount": 10}).status_code == 404
        assert api.post("/payments", json={"loanId": loan_id, "amount": 5000}).status_code == 409


class TestReportEndpoints:
    def test_dashboard(self, api):
        api.put("/capital", json={"amount": 1500})
        loan_id = create_loan(api, create_client(api))
        api.post("/payments", json={"loanId": loan_id, "amount": 300})

        data = api.get("/dashboard").json()
        assert data == {
            "capital_available": 800.0,
            "total_loaned": 1000.0,
            "total_pending": 900.0,
            "total_recovered": 300.0,
            "active_clients": 1,
            "loans_in_mora": 0,
        }

    def test_debtors(self, api):
        api.put("/capital", json={"amount": 2000})
        ana = create_client(api)
        loan_id = create_loan(api, ana)
        api.post("/payments", json={"loanId": loan_id, "amount": 300})

        rows = api.get("/debtors").json()
        assert len(rows) == 1
        row = rows[0]
        assert row["client_id"] == ana
        assert row["total_loaned"] == 1000.0
        assert row["total_paid"] == 300.0
        assert row["total_pending"] == 900.0
        assert row["total_with_interest"] == 1200.0
        assert row["active_loans"] == 1
        assert row["installments_paid"] == 1
        assert row["installments_pending"] == 3
        assert row["installments_late"] == 0

        assert api.get("/debtors", params={"status": "finished"}).json() == []

    def test_fix_installment_dates(self, api):
        res = api.post("/maintenance/fix-installment-dates")
        assert res.json() == {"ok": True, "loans_checked": 0, "loans_fixed": 0}
