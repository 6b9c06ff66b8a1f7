"""
Tests for client endpoints. Froxlor calls are patched on FroxlorClient.
"""
from unittest.mock import patch

import pytest
from fastapi import status

from agency.models import AuthorizedPerson, EmailLog, WebDocumentationContact
from agency.services.froxlor import FroxlorClient, FroxlorError

FROXLOR_CUSTOMER = {"customerid": 5, "customernumber": "E25065", "loginname": "e25065"}


@pytest.mark.unit
class TestClientList:

    def test_list_and_search(self, client, sales_auth_headers, customer):
        response = client.get("/clients", headers=sales_auth_headers)
        assert response.status_code == status.HTTP_200_OK
        assert [c["customer_no"] for c in response.json()] == ["E25065"]

        response = client.get("/clients", params={"q": "nichtda"}, headers=sales_auth_headers)
        assert response.json() == []

    def test_requires_login(self, client):
        assert client.get("/clients").status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.unit
class TestClientDetail:

    def test_detail_assigns_server_and_loads_domains(self, client, auth_headers, customer, froxlor_server,
                                                     db_session):
        with patch.object(FroxlorClient, "search_customer", return_value=FROXLOR_CUSTOMER), \
                patch.object(FroxlorClient, "get_customer_domains",
                             return_value=[{"domain": "mueller-backstube.de"}]) as domains:
            response = client.get(f"/clients/{customer.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["server"]["name"] == "web01"
        assert data["froxlor_customer"]["loginname"] == "e25065"
        assert data["froxlor_domains"] == [{"domain": "mueller-backstube.de"}]
        domains.assert_called_once_with(5)
        db_session.refresh(customer)
        assert customer.server_id == froxlor_server.id

    def test_unreachable_panel_does_not_fail(self, client, auth_headers, customer, froxlor_server):
        with patch.object(FroxlorClient, "search_customer", side_effect=FroxlorError("HTTP 502: Bad Gateway")):
            response = client.get(f"/clients/{customer.id}", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["server"] is None
        assert data["froxlor_customer"] is None

    def test_detail_lists_projects_with_badges(self, client, auth_headers, customer, website_project):
        data = client.get(f"/clients/{customer.id}", headers=auth_headers).json()
        assert data["projects"][0]["display_name"] == "Relaunch"
        assert data["projects"][0]["status"]["label"] == "Webtermin"

    def test_unknown_client(self, client, auth_headers):
        response = client.get("/clients/00000000-0000-0000-0000-000000000000", headers=auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.unit
class TestHosting:

    @pytest.fixture
    def assigned(self, db_session, customer, froxlor_server):
        customer.server_id = froxlor_server.id
        db_session.commit()
        return customer

    def test_hosting_credentials(self, client, agent_auth_headers, assigned):
        with patch.object(FroxlorClient, "search_customer", return_value=FROXLOR_CUSTOMER), \
                patch.object(FroxlorClient, "get_customer_ftp_accounts", return_value=[
                    {"id": "11", "username": "e25065ftp1", "homedir": "/var/customers/e25065/",
                     "login_enabled": "N"},
                ]), \
                patch.object(FroxlorClient, "get_customer_databases", return_value=[
                    {"id": 3, "databasename": "e25065sql1", "description": "WordPress"},
                ]):
            response = client.get(f"/clients/{assigned.id}/hosting", headers=agent_auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["Cache-Control"] == "no-store"
        data = response.json()
        assert data["ftp_host"] == "ftp.web01.example"
        assert data["mysql_host"] == "10.0.0.1"
        assert data["customer_login"] == "e25065"
        assert data["ftp_accounts"][0] == {
            "id": 11,
            "username": "e25065ftp1",
            "homedir": "/var/customers/e25065/",
            "description": None,
            "login_enabled": False,
            "last_login": None,
        }
        assert data["databases"][0]["database_name"] == "e25065sql1"

    def test_hosting_needs_server(self, client, agent_auth_headers, customer):
        response = client.get(f"/clients/{customer.id}/hosting", headers=agent_auth_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_hosting_customer_missing_on_panel(self, client, agent_auth_headers, assigned):
        with patch.object(FroxlorClient, "search_customer", return_value=None):
            response = client.get(f"/clients/{assigned.id}/hosting", headers=agent_auth_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_sales_cannot_see_credentials(self, client, sales_auth_headers, assigned):
        response = client.get(f"/clients/{assigned.id}/hosting", headers=sales_auth_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_ftp_password_admin_only(self, client, agent_auth_headers, assigned):
        response = client.put(
            f"/clients/{assigned.id}/hosting/ftp-password",
            json={"ftp_id": 11, "password": "geheim12345"},
            headers=agent_auth_headers,
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_ftp_password_update(self, client, auth_headers, assigned):
        with patch.object(FroxlorClient, "search_customer", return_value=FROXLOR_CUSTOMER), \
                patch.object(FroxlorClient, "update_ftp_password",
                             return_value={"success": True, "message": "ok"}) as update:
            response = client.put(
                f"/clients/{assigned.id}/hosting/ftp-password",
                json={"ftp_id": 11, "password": "geheim12345"},
                headers=auth_headers,
            )
        assert response.status_code == status.HTTP_200_OK
        update.assert_called_once_with(11, 5, "geheim12345")

    def test_ftp_password_panel_error(self, client, auth_headers, assigned):
        with patch.object(FroxlorClient, "search_customer", return_value=FROXLOR_CUSTOMER), \
                patch.object(FroxlorClient, "update_ftp_password",
                             return_value={"success": False, "message": "HTTP 500: boom"}):
            response = client.put(
                f"/clients/{assigned.id}/hosting/ftp-password",
                json={"ftp_id": 11, "password": "geheim12345"},
                headers=auth_headers,
            )
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["message"] == "HTTP 500: boom"

    def test_short_password_rejected(self, client, auth_headers, assigned):
        response = client.put(
            f"/clients/{assigned.id}/hosting/ftp-password",
            json={"ftp_id": 11, "password": "kurz"},
            headers=auth_headers,
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.unit
class TestDomainAssignment:

    def test_assign_domain(self, client, agent_auth_headers, customer, website_project):
        response = client.post(
            f"/clients/{customer.id}/domain",
            json={"project_id": str(website_project.id), "domain": " Neue-Domain.de "},
            headers=agent_auth_headers,
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["domain"] == "neue-domain.de"


@pytest.mark.unit
class TestAuthorizedPersons:

    def test_crud(self, client, agent_auth_headers, customer):
        base = f"/clients/{customer.id}/authorized-persons"
        created = client.post(
            base,
            json={"firstname": "Eva", "lastname": "Müller", "email": "eva@mueller-backstube.de"},
            headers=agent_auth_headers,
        )
        assert created.status_code == status.HTTP_201_CREATED
        person_id = created.json()["id"]

        updated = client.patch(f"{base}/{person_id}", json={"position": "Inhaberin"}, headers=agent_auth_headers)
        assert updated.json()["position"] == "Inhaberin"
        assert updated.json()["firstname"] == "Eva"

        listed = client.get(base, headers=agent_auth_headers).json()
        assert [p["id"] for p in listed] == [person_id]

        deleted = client.delete(f"{base}/{person_id}", headers=agent_auth_headers)
        assert deleted.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(base, headers=agent_auth_headers).json() == []

    def test_sales_cannot_create(self, client, sales_auth_headers, customer):
        response = client.post(
            f"/clients/{customer.id}/authorized-persons",
            json={"firstname": "Eva", "lastname": "Müller", "email": "eva@mueller-backstube.de"},
            headers=sales_auth_headers,
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_unlinks_from_web_documentation(self, client, agent_auth_headers, customer, db_session,
                                                   web_documentation):
        person = AuthorizedPerson(client_id=customer.id, firstname="Eva", lastname="Müller",
                                  email="eva@mueller-backstube.de")
        db_session.add(person)
        db_session.flush()
        db_session.add(WebDocumentationContact(web_documentation_id=web_documentation.project_id,
                                               authorized_person_id=person.id))
        db_session.commit()

        response = client.delete(f"/clients/{customer.id}/authorized-persons/{person.id}",
                                 headers=agent_auth_headers)
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert db_session.query(WebDocumentationContact).count() == 0

    def test_delete_refused_while_web_documentation_is_released(self, client, auth_headers, agent_auth_headers,
                                                                customer, db_session, website_project,
                                                                web_documentation):
        webdoku_url = f"/projects/{website_project.id}/webdoku"
        data = client.post(
            f"{webdoku_url}/contacts/new",
            json={"firstname": "Eva", "lastname": "Müller", "email": "eva@mueller-backstube.de"},
            headers=agent_auth_headers,
        ).json()
        person_id = data["contacts"][0]["authorized_person"]["id"]
        assert client.post(f"{webdoku_url}/release", headers=agent_auth_headers).status_code == status.HTTP_200_OK

        response = client.delete(f"/clients/{customer.id}/authorized-persons/{person_id}",
                                 headers=agent_auth_headers)
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "WEBDOKU_LOCKED"
        data = client.get(webdoku_url, headers=agent_auth_headers).json()
        assert len(data["contacts"]) == 1
        assert db_session.query(AuthorizedPerson).count() == 1

        client.delete(f"{webdoku_url}/release", headers=auth_headers)
        response = client.delete(f"/clients/{customer.id}/authorized-persons/{person_id}",
                                 headers=agent_auth_headers)
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(webdoku_url, headers=agent_auth_headers).json()["contacts"] == []


@pytest.mark.unit
class TestEmailLogs:

    def test_logs_newest_first(self, client, auth_headers, customer, db_session):
        from datetime import datetime
        db_session.add_all([
            EmailLog(client_id=customer.id, to_email="a@b.de", subject="Alt", sent_at=datetime(2024, 1, 1)),
            EmailLog(client_id=customer.id, to_email="a@b.de", subject="Neu", sent_at=datetime(2024, 2, 1),
                     success=False, error="SMTP timeout"),
        ])
        db_session.commit()

        logs = client.get(f"/clients/{customer.id}/email-logs", headers=auth_headers).json()
        assert [log["subject"] for log in logs] == ["Neu", "Alt"]
        assert logs[0]["success"] is False
