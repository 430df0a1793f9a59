"""
Test suite for company endpoints.

Tests cover:
- Listing with search and employee-count filters
- Retrieval with jobs
- Creation, partial update and deletion (admin only)
"""

from unittest.mock import MagicMock

import pytest

from jobly.core.exceptions import RangeInvalidError
from jobly.crud import company as company_crud


def handles(response):
    return sorted(company["handle"] for company in response.json()["companies"])


class TestListCompanies:
    """Tests for GET /companies"""

    def test_list_all(self, client, companies):
        response = client.get("/companies")

        assert response.status_code == 200
        assert sorted(response.json()["companies"], key=lambda c: c["handle"]) == [
            {"handle": "apple", "name": "Apple Computer, Inc"},
            {"handle": "nike", "name": "Nike, Inc"},
            {"handle": "sans-serif-labs", "name": "sans-serif, LLC"},
        ]

    def test_search(self, client, companies):
        response = client.get("/companies?search=Inc")

        assert response.status_code == 200
        assert handles(response) == ["apple", "nike"]

    def test_min_employees(self, client, companies):
        response = client.get("/companies?min_employees=2")

        assert handles(response) == ["apple", "nike"]

    def test_max_employees(self, client, companies):
        response = client.get("/companies?max_employees=50000")

        assert handles(response) == ["nike", "sans-serif-labs"]

    def test_min_and_max_employees(self, client, companies):
        response = client.get("/companies?min_employees=2&max_employees=50000")

        assert response.status_code == 200
        assert response.json() == {"companies": [{"handle": "nike", "name": "Nike, Inc"}]}

    def test_equal_bounds_no_match(self, client, companies):
        response = client.get("/companies?min_employees=50&max_employees=50")

        assert response.status_code == 200
        assert response.json() == {"companies": []}

    def test_equal_bounds_exact_match(self, client, companies):
        response = client.get("/companies?min_employees=30000&max_employees=30000")

        assert handles(response) == ["nike"]

    def test_min_greater_than_max(self, client, companies):
        response = client.get("/companies?min_employees=40&max_employees=10")

        assert response.status_code == 400
        assert response.json() == {
            "status": 400,
            "message": "Bad Request: max_employee query string parameter must be greater than min_employee.",
        }

    def test_zero_is_a_valid_bound(self, client, companies):
        response = client.get("/companies?max_employees=0")

        assert response.json() == {"companies": []}

    def test_non_numeric_bound_ignored(self, client, companies):
        response = client.get("/companies?min_employees=many")

        assert response.status_code == 200
        assert len(response.json()["companies"]) == 3

    def test_oversized_bound(self, client, companies):
        response = client.get("/companies?min_employees=" + "9" * 30)

        assert response.status_code == 400
        assert response.json()["message"] == "min_employees parameter value is out of range."


class TestGetCompany:
    """Tests for GET /companies/{handle}"""

    def test_get_with_jobs(self, client, jobs):
        response = client.get("/companies/apple")

        assert response.status_code == 200
        assert response.json() == {
            "company": {
                "handle": "apple",
                "name": "Apple Computer, Inc",
                "num_employees": 100000,
                "description": "Manufacturer of computer hardware and software",
                "logo_url": "https://apple-logo-url.com/",
                "jobs": [
                    {"title": "software engineer 2", "company_handle": "apple"},
                    {"title": "software engineer 1", "company_handle": "apple"},
                ],
            }
        }

    def test_get_nonexistent(self, client, companies):
        response = client.get("/companies/nope")

        assert response.status_code == 400
        assert response.json()["message"] == 'No company found with handle "nope"'


class TestCreateCompany:
    """Tests for POST /companies"""

    new_company = {
        "handle": "newCo",
        "name": "New Company, Inc",
        "num_employees": 100,
        "description": "This is a new company!",
        "logo_url": "https://www.newcompany.co/",
    }

    def test_create(self, client, admin_headers):
        response = client.post("/companies", json=self.new_company, headers=admin_headers)

        assert response.status_code == 201
        assert response.json() == {"company": self.new_company}

    def test_create_then_fetch(self, client, admin_headers):
        client.post("/companies", json=self.new_company, headers=admin_headers)

        response = client.get("/companies/newCo")

        assert response.json()["company"] == {**self.new_company, "jobs": []}

    def test_optional_fields_default_to_null(self, client, admin_headers):
        response = client.post("/companies", json={"handle": "tiny", "name": "Tiny"}, headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["company"] == {
            "handle": "tiny", "name": "Tiny", "num_employees": None, "description": None, "logo_url": None,
        }

    def test_duplicate_handle(self, client, companies, admin_headers):
        response = client.post("/companies", json={"handle": "nike", "name": "Other"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == 'Company with handle: "nike" already exists'

    def test_missing_name(self, client, admin_headers):
        response = client.post("/companies", json={"handle": "x"}, headers=admin_headers)

        assert response.status_code == 400
        assert any("name" in message for message in response.json()["message"])

    def test_num_employees_too_large(self, client, admin_headers):
        response = client.post("/companies", json={**self.new_company, "num_employees": 10 ** 30},
                               headers=admin_headers)

        assert response.status_code == 400
        assert any("num_employees" in message for message in response.json()["message"])

    def test_requires_admin(self, client, user_headers):
        response = client.post("/companies", json=self.new_company, headers=user_headers)

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized, admin access only"

    def test_requires_authentication(self, client):
        response = client.post("/companies", json=self.new_company)

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"

    def test_token_in_body(self, client, admin_headers):
        token = admin_headers["Authorization"].split(" ", 1)[1]

        response = client.post("/companies", json={**self.new_company, "_token": token})

        assert response.status_code == 201
        assert response.json()["company"]["handle"] == "newCo"


class TestUpdateCompany:
    """Tests for PATCH /companies/{handle}"""

    def test_partial_update(self, client, companies, admin_headers):
        response = client.patch("/companies/nike", json={"num_employees": 31000}, headers=admin_headers)

        assert response.status_code == 200
        company = response.json()["company"]
        assert company["num_employees"] == 31000
        assert company["name"] == "Nike, Inc"

    def test_token_in_body_not_written(self, client, companies, admin_headers):
        token = admin_headers["Authorization"].split(" ", 1)[1]

        response = client.patch("/companies/nike", json={"name": "Nike", "_token": token})

        assert response.status_code == 200
        assert response.json()["company"]["name"] == "Nike"

    def test_empty_update_rejected(self, client, companies, admin_headers):
        response = client.patch("/companies/nike", json={}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "No fields to update"

    def test_null_name_rejected(self, client, companies, admin_headers):
        response = client.patch("/companies/nike", json={"name": None}, headers=admin_headers)

        assert response.status_code == 400
        assert any("name" in message for message in response.json()["message"])
        assert client.get("/companies/nike").json()["company"]["name"] == "Nike, Inc"

    def test_null_optional_field_clears_it(self, client, companies, admin_headers):
        response = client.patch("/companies/nike", json={"logo_url": None}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["company"]["logo_url"] is None

    def test_update_nonexistent(self, client, admin_headers):
        response = client.patch("/companies/nope", json={"name": "x"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == 'No company found with handle "nope"'

    def test_rename_to_existing_handle(self, client, companies, admin_headers):
        response = client.patch("/companies/nike", json={"handle": "apple"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()["message"] == 'Company with handle: "apple" already exists'


class TestDeleteCompany:
    """Tests for DELETE /companies/{handle}"""

    def test_delete(self, client, jobs, admin_headers):
        response = client.delete("/companies/apple", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Company deleted"}
        assert client.get("/companies/apple").status_code == 400

    def test_delete_cascades_to_jobs(self, client, db_session, jobs, admin_headers):
        client.delete("/companies/apple", headers=admin_headers)

        titles = [item["job"]["title"] for item in client.get("/jobs", headers=admin_headers).json()["jobs"]]
        assert titles == ["designer", "CEO"]

    def test_delete_nonexistent_always_fails(self, client, admin_headers):
        for _ in range(2):
            response = client.delete("/companies/nope", headers=admin_headers)
            assert response.status_code == 400
            assert response.json()["message"] == 'No company found with handle "nope"'


class TestCompanyService:
    """Service-level checks that bypass HTTP"""

    def test_range_checked_before_storage(self):
        db = MagicMock()

        with pytest.raises(RangeInvalidError):
            company_crud.get_all(db, {"min_employees": 10, "max_employees": 1})

        db.execute.assert_not_called()

    def test_unfiltered_statement_used_without_criteria(self):
        db = MagicMock()
        db.execute.return_value.mappings.return_value.all.return_value = []

        company_crud.get_all(db, {})

        statement = db.execute.call_args[0][0]
        assert str(statement) == "SELECT handle, name FROM companies;"
