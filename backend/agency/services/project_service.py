import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from agency.exceptions import BusinessLogicError, NotFoundError
from agency.models import (
    Client,
    FilmPreviewVersion,
    Project,
    ProjectFilm,
    ProjectStatus,
    ProjectType,
    ProjectWebsite,
)
from agency.schemas import FilmData, PreviewVersionCreate, ProjectCreate, WebsiteData
from agency.status.dates import format_naive_date
from agency.status.film_status import resolve_film_status
from agency.status.project_status import (
    StatusBadge,
    derive_project_status,
    get_project_display_name,
    label_for_material_status,
    label_for_production_status,
    label_for_seo_status,
    label_for_textit_status,
    label_for_website_priority,
    resolve_website_status,
    website_status_filter,
)

logger = logging.getLogger(__name__)


def project_badge(project: Project) -> StatusBadge:
    """Derived status badge of a project, by project type."""
    if project.type == ProjectType.FILM:
        return resolve_film_status(project.film)
    if project.type == ProjectType.WEBSITE:
        return resolve_website_status(project.website)
    status = project.status.value if project.status else ProjectStatus.WEBTERMIN.value
    return StatusBadge(status=status, label=status.title(), since=None)


def badge_dict(badge: StatusBadge) -> Dict[str, Any]:
    return {
        "status": badge.status,
        "label": badge.label,
        "since": badge.since,
        "since_display": format_naive_date(badge.since),
    }


def project_summary(project: Project) -> Dict[str, Any]:
    return {
        "id": project.id,
        "client_id": project.client_id,
        "title": project.title,
        "display_name": get_project_display_name(project.title, project.type),
        "type": project.type,
        "status": badge_dict(project_badge(project)),
        "domain": project.website.domain if project.website else None,
    }


def project_detail(project: Project) -> Dict[str, Any]:
    detail = project_summary(project)
    detail.update({
        "client_name": project.client.name,
        "created_at": project.created_at,
        "updated_at": project.updated_at,
        "website": None,
        "film": None,
    })
    website = project.website
    if website is not None:
        detail["website"] = {
            "domain": website.domain,
            "priority": website.priority,
            "priority_label": label_for_website_priority(website.priority),
            "p_status": website.p_status,
            "p_status_label": label_for_production_status(website.p_status),
            "material_status": website.material_status,
            "material_status_label": label_for_material_status(website.material_status),
            "seo": website.seo,
            "seo_label": label_for_seo_status(website.seo),
            "textit": website.textit,
            "textit_label": label_for_textit_status(website.textit),
            "web_date": website.web_date,
            "demo_date": website.demo_date,
            "online_date": website.online_date,
            "last_material_at": website.last_material_at,
            "has_web_documentation": website.web_documentation is not None,
        }
    film = project.film
    if film is not None:
        detail["film"] = {name: getattr(film, name) for name in FilmData.model_fields}
        detail["film"]["preview_versions"] = [
            {"id": v.id, "version": v.version, "sent_date": v.sent_date, "link": v.link}
            for v in film.preview_versions
        ]
    return detail


def get_project(db: Session, project_id: UUID) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Projekt", str(project_id))
    return project


def list_projects(
    db: Session,
    status: Optional[str] = None,
    project_type: Optional[ProjectType] = None,
    client_id: Optional[UUID] = None,
) -> List[Project]:
    """
    List projects, newest first. A status filter applies to website projects and
    is evaluated in SQL with the same rules as derive_project_status.
    """
    query = db.query(Project)
    if client_id:
        query = query.filter(Project.client_id == client_id)
    if project_type:
        query = query.filter(Project.type == project_type)
    if status:
        condition = website_status_filter(status.upper())
        if condition is None:
            raise BusinessLogicError(f"Unbekannter Status: {status}")
        query = query.join(ProjectWebsite, ProjectWebsite.project_id == Project.id).filter(condition)
    return query.order_by(Project.created_at.desc()).all()


def sync_project_status(project: Project) -> bool:
    """Store the derived website status on the project. Returns True if it changed."""
    if project.type != ProjectType.WEBSITE:
        return False
    derived = derive_project_status(project.website)
    if project.status == derived:
        return False
    project.status = derived
    return True


def sync_all_project_statuses(db: Session) -> int:
    """Re-derive the stored status of every website project."""
    changed = 0
    projects = db.query(Project).filter(Project.type == ProjectType.WEBSITE).all()
    for project in projects:
        before = project.status
        if sync_project_status(project):
            changed += 1
            logger.info(
                "Project status %s -> %s", before.value if before else None, project.status.value,
                extra={"project_id": str(project.id)},
            )
    db.commit()
    return changed


def _apply(target: Any, data: Any) -> None:
    for name, value in data.model_dump(exclude_unset=True).items():
        setattr(target, name, value)


def create_project(db: Session, data: ProjectCreate) -> Project:
    client = db.query(Client).filter(Client.id == data.client_id).first()
    if not client:
        raise NotFoundError("Kunde", str(data.client_id))

    project = Project(client_id=client.id, title=data.title, type=data.type)
    if data.type == ProjectType.WEBSITE:
        project.website = ProjectWebsite()
        if data.website:
            _apply(project.website, data.website)
    elif data.type == ProjectType.FILM:
        project.film = ProjectFilm()
        if data.film:
            _apply(project.film, data.film)

    db.add(project)
    db.flush()
    sync_project_status(project)
    db.commit()
    db.refresh(project)
    logger.info("Project created", extra={"project_id": str(project.id), "client_id": str(client.id)})
    return project


def update_website(db: Session, project_id: UUID, data: WebsiteData) -> Project:
    project = get_project(db, project_id)
    if project.website is None:
        raise BusinessLogicError("Projekt hat keine Webseite")
    _apply(project.website, data)
    sync_project_status(project)
    db.commit()
    db.refresh(project)
    return project


def update_film(db: Session, project_id: UUID, data: FilmData) -> Project:
    project = get_project(db, project_id)
    if project.film is None:
        raise BusinessLogicError("Projekt hat keinen Film")
    _apply(project.film, data)
    db.commit()
    db.refresh(project)
    return project


def add_preview_version(db: Session, project_id: UUID, data: PreviewVersionCreate) -> Project:
    project = get_project(db, project_id)
    film = project.film
    if film is None:
        raise BusinessLogicError("Projekt hat keinen Film")
    version = max((v.version for v in film.preview_versions), default=0) + 1
    film.preview_versions.append(FilmPreviewVersion(version=version, sent_date=data.sent_date, link=data.link))
    db.commit()
    db.refresh(project)
    return project
