from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from agency.db import get_db
from agency.deps import get_current_active_user
from agency.models import ProjectType, User
from agency.rbac import require_editor
from agency.schemas import (
    FilmData,
    PreviewVersionCreate,
    ProjectCreate,
    ProjectDetail,
    ProjectSummary,
    WebsiteData,
)
from agency.services import project_service

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=List[ProjectSummary])
def list_projects(
    status_filter: Optional[str] = Query(None, alias="status"),
    project_type: Optional[ProjectType] = Query(None, alias="type"),
    client_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """List projects with their derived status badge. `status` filters website projects."""
    projects = project_service.list_projects(db, status_filter, project_type, client_id)
    return [project_service.project_summary(p) for p in projects]


@router.post("", response_model=ProjectDetail, status_code=status.HTTP_201_CREATED)
def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    project = project_service.create_project(db, data)
    return project_service.project_detail(project)


@router.get("/{project_id}", response_model=ProjectDetail)
def get_project(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    project = project_service.get_project(db, project_id)
    return project_service.project_detail(project)


@router.patch("/{project_id}/website", response_model=ProjectDetail)
def update_website(
    project_id: UUID,
    data: WebsiteData,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    project = project_service.update_website(db, project_id, data)
    return project_service.project_detail(project)


@router.patch("/{project_id}/film", response_model=ProjectDetail)
def update_film(
    project_id: UUID,
    data: FilmData,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    project = project_service.update_film(db, project_id, data)
    return project_service.project_detail(project)


@router.post("/{project_id}/film/previews", response_model=ProjectDetail, status_code=status.HTTP_201_CREATED)
def add_preview_version(
    project_id: UUID,
    data: PreviewVersionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    project = project_service.add_preview_version(db, project_id, data)
    return project_service.project_detail(project)
