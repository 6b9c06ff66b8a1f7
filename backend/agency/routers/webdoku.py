"""
Web documentation wizard of a website project.

Reading is open to every signed-in user, editing to ADMIN and AGENT.
Deleting and revoking a customer release are ADMIN only.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID

from agency.db import get_db
from agency.deps import get_current_active_user
from agency.models import User, WebDocumentation
from agency.rbac import require_admin, require_editor
from agency.schemas import (
    FormCreate,
    FormFieldsUpdate,
    FormUpdate,
    MenuItemCreate,
    MenuItemMaterial,
    MenuItemOrder,
    MenuItemUpdate,
    NoFormsRequiredUpdate,
    ReleaseResponse,
    WebDocuContactAdd,
    WebDocuContactCreate,
    WebDocumentationResponse,
    WebDocuStep1Update,
    WebDocuStep2Update,
    WebDocuStep4Update,
    WebDocuStep6Update,
    WebDocuStep7Update,
    WizardStateResponse,
)
from agency.services import webdoku_service

router = APIRouter(prefix="/projects/{project_id}/webdoku", tags=["webdoku"])


def _response(doc: WebDocumentation) -> WebDocumentationResponse:
    response = WebDocumentationResponse.model_validate(doc)
    response.wizard = WizardStateResponse(**webdoku_service.get_wizard_state(doc))
    return response


# ============== Lifecycle ==============

@router.post("", response_model=WebDocumentationResponse, status_code=status.HTTP_201_CREATED)
def create_documentation(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.create_documentation(db, project_id, current_user))


@router.get("", response_model=WebDocumentationResponse)
def get_documentation(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return _response(webdoku_service.get_documentation(db, project_id))


@router.get("/wizard", response_model=WizardStateResponse)
def get_wizard_state(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    doc = webdoku_service.get_documentation(db, project_id)
    return webdoku_service.get_wizard_state(doc)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_documentation(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    webdoku_service.delete_documentation(db, project_id, current_user)


@router.post("/release", response_model=ReleaseResponse)
def release(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    doc = webdoku_service.release(db, project_id, current_user)
    return ReleaseResponse(released_at=doc.released_at, released_by_name=doc.released_by_name)


@router.delete("/release", response_model=ReleaseResponse)
def revoke_release(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    doc = webdoku_service.revoke_release(db, project_id, current_user)
    return ReleaseResponse(released_at=doc.released_at, released_by_name=doc.released_by_name)


# ============== Steps ==============

@router.put("/steps/1", response_model=WebDocumentationResponse)
def save_step1(
    project_id: UUID,
    data: WebDocuStep1Update,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_step1(db, project_id, data))


@router.put("/steps/2", response_model=WebDocumentationResponse)
def save_step2(
    project_id: UUID,
    data: WebDocuStep2Update,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_step(db, project_id, data))


@router.put("/steps/4", response_model=WebDocumentationResponse)
def save_step4(
    project_id: UUID,
    data: WebDocuStep4Update,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_step(db, project_id, data))


@router.put("/steps/6", response_model=WebDocumentationResponse)
def save_step6(
    project_id: UUID,
    data: WebDocuStep6Update,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_step(db, project_id, data))


@router.put("/steps/7", response_model=WebDocumentationResponse)
def save_step7(
    project_id: UUID,
    data: WebDocuStep7Update,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_step7(db, project_id, data))


# ============== Contacts ==============

@router.post("/contacts", response_model=WebDocumentationResponse)
def add_contact(
    project_id: UUID,
    data: WebDocuContactAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.add_contact(db, project_id, data))


@router.post("/contacts/new", response_model=WebDocumentationResponse)
def create_contact(
    project_id: UUID,
    data: WebDocuContactCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.create_contact(db, project_id, data))


@router.delete("/contacts/{contact_id}", response_model=WebDocumentationResponse)
def remove_contact(
    project_id: UUID,
    contact_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.remove_contact(db, project_id, contact_id))


# ============== Menu items ==============

@router.post("/menu-items", response_model=WebDocumentationResponse)
def add_menu_item(
    project_id: UUID,
    data: MenuItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.add_menu_item(db, project_id, data))


@router.post("/menu-items/defaults", response_model=WebDocumentationResponse)
def add_default_menu_items(
    project_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.add_default_menu_items(db, project_id))


@router.put("/menu-items/order", response_model=WebDocumentationResponse)
def reorder_menu_items(
    project_id: UUID,
    order: List[MenuItemOrder],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.reorder_menu_items(db, project_id, order))


@router.put("/menu-items/material", response_model=WebDocumentationResponse)
def update_menu_item_material(
    project_id: UUID,
    updates: List[MenuItemMaterial],
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_menu_item_material(db, project_id, updates))


@router.patch("/menu-items/{item_id}", response_model=WebDocumentationResponse)
def update_menu_item(
    project_id: UUID,
    item_id: UUID,
    data: MenuItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_menu_item(db, project_id, item_id, data))


@router.delete("/menu-items/{item_id}", response_model=WebDocumentationResponse)
def delete_menu_item(
    project_id: UUID,
    item_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.delete_menu_item(db, project_id, item_id))


# ============== Forms ==============

@router.put("/no-forms-required", response_model=WebDocumentationResponse)
def set_no_forms_required(
    project_id: UUID,
    data: NoFormsRequiredUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.set_no_forms_required(db, project_id, data.no_forms_required))


@router.post("/forms", response_model=WebDocumentationResponse, status_code=status.HTTP_201_CREATED)
def create_form(
    project_id: UUID,
    data: FormCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.create_form(db, project_id, data))


@router.patch("/forms/{form_id}", response_model=WebDocumentationResponse)
def update_form(
    project_id: UUID,
    form_id: UUID,
    data: FormUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_form(db, project_id, form_id, data))


@router.delete("/forms/{form_id}", response_model=WebDocumentationResponse)
def delete_form(
    project_id: UUID,
    form_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.delete_form(db, project_id, form_id))


@router.put("/forms/{form_id}/fields", response_model=WebDocumentationResponse)
def update_form_fields(
    project_id: UUID,
    form_id: UUID,
    data: FormFieldsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_editor),
):
    return _response(webdoku_service.update_form_fields(db, project_id, form_id, data.fields))
