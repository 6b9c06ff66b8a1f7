"""Clients, their hosting data and authorized persons."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from agency.db import get_db
from agency.deps import get_current_active_user
from agency.exceptions import BusinessLogicError, ExternalServiceError, NotFoundError
from agency.models import AuthorizedPerson, Client, EmailLog, Project, User
from agency.rbac import require_admin, require_editor
from agency.schemas import (
    AuthorizedPersonCreate,
    AuthorizedPersonResponse,
    AuthorizedPersonUpdate,
    ClientDetailResponse,
    ClientResponse,
    DomainAssignment,
    EmailLogResponse,
    FtpPasswordUpdate,
    HostingCredentialsResponse,
    ProjectSummary,
    ServerBrief,
)
from agency.services import webdoku_service
from agency.services.froxlor import FroxlorClient, client_from_server, to_numeric_id
from agency.services.project_service import project_summary
from agency.services.server_discovery import assign_server

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/clients", tags=["clients"])


# ============== Helper Functions ==============

def _get_client(db: Session, client_id: UUID) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        raise NotFoundError("Kunde", str(client_id))
    return client


def _froxlor_for(client: Client) -> FroxlorClient:
    if client.server is None:
        raise BusinessLogicError("Kunde ist keinem Server zugeordnet")
    froxlor = client_from_server(client.server)
    if froxlor is None:
        raise BusinessLogicError("Froxlor-Zugangsdaten des Servers sind unvollständig")
    return froxlor


def _froxlor_customer(client: Client, froxlor: FroxlorClient) -> dict:
    if not client.customer_no:
        raise BusinessLogicError("Kunde hat keine Kundennummer")
    customer = froxlor.find_customer_by_number(client.customer_no)
    if not customer:
        raise NotFoundError("Froxlor-Kunde", client.customer_no)
    return customer


def _get_person(db: Session, client_id: UUID, person_id: UUID) -> AuthorizedPerson:
    person = db.query(AuthorizedPerson).filter(
        AuthorizedPerson.id == person_id,
        AuthorizedPerson.client_id == client_id,
    ).first()
    if not person:
        raise NotFoundError("Ansprechpartner", str(person_id))
    return person


# ============== Clients ==============

@router.get("", response_model=List[ClientResponse])
def list_clients(
    q: Optional[str] = Query(None, description="Search name, customer number or email"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    query = db.query(Client).filter(Client.is_active.is_(True))
    if q:
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            Client.name.ilike(pattern),
            Client.customer_no.ilike(pattern),
            Client.email.ilike(pattern),
        ))
    return query.order_by(Client.name).all()


@router.get("/{client_id}", response_model=ClientDetailResponse)
def get_client(
    client_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Client detail. A client without server is looked up on all configured
    hosting panels first; Froxlor data is added when reachable.
    """
    client = _get_client(db, client_id)

    if not client.server_id and client.customer_no:
        assign_server(db, client)

    froxlor_customer = None
    froxlor_domains = []
    froxlor = client_from_server(client.server) if client.server else None
    if froxlor is not None and client.customer_no:
        froxlor_customer = froxlor.find_customer_by_number(client.customer_no)
        if froxlor_customer:
            froxlor_domains = froxlor.get_customer_domains(froxlor_customer.get("customerid"))

    return ClientDetailResponse(
        **ClientResponse.model_validate(client).model_dump(),
        server=ServerBrief.model_validate(client.server) if client.server else None,
        froxlor_customer=froxlor_customer,
        froxlor_domains=froxlor_domains,
        authorized_persons=[AuthorizedPersonResponse.model_validate(p) for p in client.authorized_persons],
        projects=[ProjectSummary(**project_summary(p)) for p in client.projects],
    )


@router.get("/{client_id}/hosting", response_model=HostingCredentialsResponse)
def get_hosting_credentials(
    client_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    client = _get_client(db, client_id)
    froxlor = _froxlor_for(client)
    customer = _froxlor_customer(client, froxlor)
    customer_id = to_numeric_id(customer.get("customerid"))

    ftp_accounts = [
        {
            "id": to_numeric_id(ftp.get("id")),
            "username": ftp.get("username") or "",
            "homedir": ftp.get("homedir"),
            "description": ftp.get("description"),
            "login_enabled": str(ftp.get("login_enabled", "Y")).upper() == "Y",
            "last_login": ftp.get("last_login"),
        }
        for ftp in froxlor.get_customer_ftp_accounts(customer_id)
    ]
    databases = [
        {
            "id": to_numeric_id(database.get("id")),
            "database_name": database.get("databasename") or "",
            "description": database.get("description"),
        }
        for database in froxlor.get_customer_databases(customer_id)
    ]
    return HostingCredentialsResponse(
        server_name=client.server.name,
        ftp_host=client.server.ftp_host or client.server.ip,
        mysql_host=client.server.mysql_host or client.server.ip,
        customer_login=customer.get("loginname"),
        ftp_accounts=ftp_accounts,
        databases=databases,
    )


@router.put("/{client_id}/hosting/ftp-password")
def update_ftp_password(
    client_id: UUID,
    data: FtpPasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    client = _get_client(db, client_id)
    froxlor = _froxlor_for(client)
    customer = _froxlor_customer(client, froxlor)

    result = froxlor.update_ftp_password(data.ftp_id, to_numeric_id(customer.get("customerid")), data.password)
    if not result["success"]:
        raise ExternalServiceError(result["message"], service_name="froxlor")
    logger.info(
        "FTP password updated for account %s", data.ftp_id,
        extra={"client_id": str(client.id), "user_id": str(current_user.id)},
    )
    return result


@router.post("/{client_id}/domain", response_model=ProjectSummary)
def assign_domain(
    client_id: UUID,
    data: DomainAssignment,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    """Set the domain of one of the client's website projects."""
    client = _get_client(db, client_id)
    project = db.query(Project).filter(Project.id == data.project_id, Project.client_id == client.id).first()
    if not project:
        raise NotFoundError("Projekt", str(data.project_id))
    if project.website is None:
        raise BusinessLogicError("Projekt hat keine Webseite")

    project.website.domain = data.domain.strip().lower()
    db.commit()
    db.refresh(project)
    return ProjectSummary(**project_summary(project))


@router.get("/{client_id}/email-logs", response_model=List[EmailLogResponse])
def list_email_logs(
    client_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    _get_client(db, client_id)
    return (
        db.query(EmailLog)
        .filter(EmailLog.client_id == client_id)
        .order_by(EmailLog.sent_at.desc())
        .all()
    )


# ============== Authorized persons ==============

@router.get("/{client_id}/authorized-persons", response_model=List[AuthorizedPersonResponse])
def list_authorized_persons(
    client_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    _get_client(db, client_id)
    return (
        db.query(AuthorizedPerson)
        .filter(AuthorizedPerson.client_id == client_id)
        .order_by(AuthorizedPerson.lastname, AuthorizedPerson.firstname)
        .all()
    )


@router.post(
    "/{client_id}/authorized-persons",
    response_model=AuthorizedPersonResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_authorized_person(
    client_id: UUID,
    data: AuthorizedPersonCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    _get_client(db, client_id)
    person = AuthorizedPerson(client_id=client_id, **data.model_dump())
    db.add(person)
    db.commit()
    db.refresh(person)
    return person


@router.patch("/{client_id}/authorized-persons/{person_id}", response_model=AuthorizedPersonResponse)
def update_authorized_person(
    client_id: UUID,
    person_id: UUID,
    data: AuthorizedPersonUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    person = _get_person(db, client_id, person_id)
    for name, value in data.model_dump(exclude_unset=True).items():
        setattr(person, name, value)
    db.commit()
    db.refresh(person)
    return person


@router.delete("/{client_id}/authorized-persons/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_authorized_person(
    client_id: UUID,
    person_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    """Delete a person. Fails with 409 while a released web documentation lists them."""
    person = _get_person(db, client_id, person_id)
    webdoku_service.unlink_person(db, person.id)
    db.delete(person)
    db.commit()
