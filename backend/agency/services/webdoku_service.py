"""
Web documentation (Webdoku) persistence operations.

Every mutation goes through _load_unlocked: once a documentation has been
released to the customer it is read-only until an admin revokes the release.
"""
import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from agency.exceptions import BusinessLogicError, ConflictError, NotFoundError, ValidationError, WebdokuLockedError
from agency.models import (
    AuthorizedPerson,
    Project,
    ProjectType,
    User,
    WebDocumentation,
    WebDocumentationContact,
    WebDocuForm,
    WebDocuFormField,
    WebDocuMenuItem,
)
from agency.schemas import (
    FormCreate,
    FormFieldSpec,
    FormUpdate,
    MenuItemCreate,
    MenuItemMaterial,
    MenuItemOrder,
    MenuItemUpdate,
    WebDocuContactAdd,
    WebDocuContactCreate,
    WebDocuStep1Update,
)
from agency.status.dates import to_naive_date
from agency.status.webdoku import WebDocuSnapshot, is_locked, wizard_state

logger = logging.getLogger(__name__)

DEFAULT_FOOTER_ITEMS = ["Impressum", "Datenschutz"]


def _log_extra(project_id: UUID, user: Optional[User] = None) -> Dict[str, str]:
    extra = {"project_id": str(project_id)}
    if user is not None:
        extra["user_id"] = str(user.id)
    return extra


def get_documentation(db: Session, project_id: UUID) -> WebDocumentation:
    doc = db.query(WebDocumentation).filter(WebDocumentation.project_id == project_id).first()
    if not doc:
        raise NotFoundError("Webdokumentation", str(project_id))
    return doc


def _load_unlocked(db: Session, project_id: UUID) -> WebDocumentation:
    doc = get_documentation(db, project_id)
    if is_locked(WebDocuSnapshot.from_record(doc)):
        raise WebdokuLockedError(str(project_id))
    return doc


def _touch(db: Session, doc: WebDocumentation) -> WebDocumentation:
    doc.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(doc)
    return doc


def get_wizard_state(doc: WebDocumentation) -> Dict:
    return wizard_state(WebDocuSnapshot.from_record(doc))


# ============= Lifecycle =============

def create_documentation(db: Session, project_id: UUID, user: User) -> WebDocumentation:
    """Create the documentation for a website project, pre-filled from client and website."""
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Projekt", str(project_id))
    if project.type != ProjectType.WEBSITE or project.website is None:
        raise BusinessLogicError("Webdokumentation ist nur für Webseiten-Projekte möglich")
    if project.website.web_documentation is not None:
        raise ConflictError("Webdokumentation existiert bereits", details={"project_id": str(project_id)})

    doc = WebDocumentation(
        project_id=project_id,
        contact_email=project.client.email if project.client else None,
        website_domain=project.website.domain,
        style_types=[],
        rejected_steps=[],
    )
    db.add(doc)
    db.commit()
    db.refresh(doc)
    logger.info("Web documentation created", extra=_log_extra(project_id, user))
    return doc


def delete_documentation(db: Session, project_id: UUID, user: User) -> None:
    doc = get_documentation(db, project_id)
    db.delete(doc)
    db.commit()
    logger.info("Web documentation deleted", extra=_log_extra(project_id, user))


def release(db: Session, project_id: UUID, user: User) -> WebDocumentation:
    """Release the documentation to the customer. Locks it for further edits."""
    doc = _load_unlocked(db, project_id)
    doc.released_at = datetime.utcnow()
    doc.released_by_user_id = user.id
    doc.released_by_name = user.name or user.email or "Unbekannt"
    doc = _touch(db, doc)
    logger.info("Web documentation released", extra=_log_extra(project_id, user))
    return doc


def revoke_release(db: Session, project_id: UUID, user: User) -> WebDocumentation:
    doc = get_documentation(db, project_id)
    doc.released_at = None
    doc.released_by_user_id = None
    doc.released_by_name = None
    doc = _touch(db, doc)
    logger.info("Web documentation release revoked", extra=_log_extra(project_id, user))
    return doc


# ============= Steps =============

def _blank(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def update_step1(db: Session, project_id: UUID, data: WebDocuStep1Update) -> WebDocumentation:
    missing = [
        name for name in ("contact_email", "website_domain", "domain_status")
        if _blank(getattr(data, name))
    ]
    if missing:
        raise ValidationError("Pflichtfelder fehlen", details={"missing_fields": missing})

    doc = _load_unlocked(db, project_id)
    doc.contact_email = data.contact_email.strip()
    doc.urgent_notes = data.urgent_notes or None
    doc.website_domain = data.website_domain.strip()
    doc.domain_status = data.domain_status
    return _touch(db, doc)


def update_step(db: Session, project_id: UUID, data: BaseModel) -> WebDocumentation:
    """Save the fields of step 2, 4 or 6. Empty strings are stored as NULL."""
    doc = _load_unlocked(db, project_id)
    for name, value in data.model_dump().items():
        if isinstance(value, str) and not value.strip():
            value = None
        setattr(doc, name, value)
    return _touch(db, doc)


def update_step7(db: Session, project_id: UUID, data: BaseModel) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    doc.material_logo_needed = data.material_logo_needed
    doc.material_authcode_needed = data.material_authcode_needed
    doc.material_notes = data.material_notes or None
    deadline = to_naive_date(data.material_deadline) if data.material_deadline else None
    if data.material_deadline and deadline is None:
        raise ValidationError("Ungültiges Datum", details={"material_deadline": data.material_deadline})
    doc.material_deadline = deadline
    return _touch(db, doc)


# ============= Contacts =============

def _link_contact(db: Session, doc: WebDocumentation, person_id: UUID, is_primary: bool) -> WebDocumentationContact:
    if is_primary:
        for contact in doc.contacts:
            contact.is_primary = False
    link = WebDocumentationContact(
        web_documentation_id=doc.project_id,
        authorized_person_id=person_id,
        is_primary=is_primary,
    )
    db.add(link)
    return link


def add_contact(db: Session, project_id: UUID, data: WebDocuContactAdd) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    person = db.query(AuthorizedPerson).filter(AuthorizedPerson.id == data.authorized_person_id).first()
    if not person:
        raise NotFoundError("Ansprechpartner", str(data.authorized_person_id))
    if person.client_id != doc.website.project.client_id:
        raise BusinessLogicError("Ansprechpartner gehört nicht zu diesem Kunden")
    if any(c.authorized_person_id == person.id for c in doc.contacts):
        raise ConflictError("Ansprechpartner ist bereits verknüpft")

    _link_contact(db, doc, person.id, data.is_primary)
    return _touch(db, doc)


def create_contact(db: Session, project_id: UUID, data: WebDocuContactCreate) -> WebDocumentation:
    """Create an authorized person for the project's client and link it in one go."""
    doc = _load_unlocked(db, project_id)
    person = AuthorizedPerson(
        client_id=doc.website.project.client_id,
        **data.model_dump(exclude={"is_primary"}),
    )
    db.add(person)
    db.flush()
    _link_contact(db, doc, person.id, data.is_primary)
    return _touch(db, doc)


def remove_contact(db: Session, project_id: UUID, contact_id: UUID) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    contact = next((c for c in doc.contacts if c.id == contact_id), None)
    if contact is None:
        raise NotFoundError("Kontakt", str(contact_id))
    doc.contacts.remove(contact)
    return _touch(db, doc)


def unlink_person(db: Session, person_id: UUID) -> int:
    """
    Remove an authorized person from every web documentation before the person
    is deleted. Refused while any of those documentations is released.
    Does not commit.
    """
    linked = select(WebDocumentationContact.web_documentation_id).where(
        WebDocumentationContact.authorized_person_id == person_id
    )
    docs = db.query(WebDocumentation).filter(WebDocumentation.project_id.in_(linked)).all()
    for doc in docs:
        if is_locked(WebDocuSnapshot.from_record(doc)):
            raise WebdokuLockedError(str(doc.project_id))

    removed = 0
    for doc in docs:
        for contact in [c for c in doc.contacts if c.authorized_person_id == person_id]:
            doc.contacts.remove(contact)
            removed += 1
        doc.updated_at = datetime.utcnow()
    return removed


# ============= Menu items =============

def _menu_item(doc: WebDocumentation, item_id: UUID) -> WebDocuMenuItem:
    item = next((i for i in doc.menu_items if i.id == item_id), None)
    if item is None:
        raise NotFoundError("Menüpunkt", str(item_id))
    return item


def _next_menu_sort_order(db: Session, doc: WebDocumentation, parent_id: Optional[UUID]) -> int:
    query = db.query(func.max(WebDocuMenuItem.sort_order)).filter(
        WebDocuMenuItem.web_documentation_id == doc.project_id
    )
    if parent_id is None:
        query = query.filter(WebDocuMenuItem.parent_id.is_(None))
    else:
        query = query.filter(WebDocuMenuItem.parent_id == parent_id)
    current = query.scalar()
    return 0 if current is None else current + 1


def add_menu_item(db: Session, project_id: UUID, data: MenuItemCreate) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    if data.parent_id is not None:
        _menu_item(doc, data.parent_id)
    db.add(WebDocuMenuItem(
        web_documentation_id=doc.project_id,
        name=data.name.strip(),
        parent_id=data.parent_id,
        is_footer_menu=data.is_footer_menu,
        sort_order=_next_menu_sort_order(db, doc, data.parent_id),
    ))
    return _touch(db, doc)


def update_menu_item(db: Session, project_id: UUID, item_id: UUID, data: MenuItemUpdate) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    item = _menu_item(doc, item_id)
    for name, value in data.model_dump(exclude_unset=True).items():
        setattr(item, name, value.strip() if name == "name" and value else value)
    return _touch(db, doc)


def delete_menu_item(db: Session, project_id: UUID, item_id: UUID) -> WebDocumentation:
    """Delete a menu item together with its sub items."""
    doc = _load_unlocked(db, project_id)
    item = _menu_item(doc, item_id)
    db.delete(item)
    db.flush()
    db.expire(doc, ["menu_items"])
    return _touch(db, doc)


def _has_cycle(parents: Dict[UUID, Optional[UUID]], item_id: UUID) -> bool:
    current = parents.get(item_id)
    for _ in range(len(parents)):
        if current is None:
            return False
        if current == item_id:
            return True
        current = parents.get(current)
    return current is not None


def reorder_menu_items(db: Session, project_id: UUID, order: List[MenuItemOrder]) -> WebDocumentation:
    """Move and re-sort menu items. The resulting tree must not contain a loop."""
    doc = _load_unlocked(db, project_id)
    items = {item.id: item for item in doc.menu_items}
    parents = {item.id: item.parent_id for item in doc.menu_items}
    for entry in order:
        if entry.id not in items:
            raise NotFoundError("Menüpunkt", str(entry.id))
        if entry.parent_id is not None and entry.parent_id not in items:
            raise NotFoundError("Menüpunkt", str(entry.parent_id))
        parents[entry.id] = entry.parent_id

    looped = [item_id for item_id in parents if _has_cycle(parents, item_id)]
    if looped:
        raise ValidationError(
            "Ein Menüpunkt kann nicht unter sich selbst oder seinen Unterpunkten liegen",
            details={"menu_item_ids": [str(item_id) for item_id in looped]},
        )

    for entry in order:
        item = items[entry.id]
        item.parent_id = entry.parent_id
        item.sort_order = entry.sort_order
    return _touch(db, doc)


def add_default_menu_items(db: Session, project_id: UUID) -> WebDocumentation:
    """Seed the footer with Impressum and Datenschutz. Only allowed on an empty menu."""
    doc = _load_unlocked(db, project_id)
    if doc.menu_items:
        raise BusinessLogicError("Menüpunkte existieren bereits")
    for index, name in enumerate(DEFAULT_FOOTER_ITEMS):
        db.add(WebDocuMenuItem(
            web_documentation_id=doc.project_id,
            name=name,
            is_footer_menu=True,
            sort_order=index,
        ))
    return _touch(db, doc)


def update_menu_item_material(db: Session, project_id: UUID, updates: List[MenuItemMaterial]) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    for entry in updates:
        item = _menu_item(doc, entry.id)
        item.needs_images = entry.needs_images
        item.needs_texts = entry.needs_texts
        item.material_notes = entry.material_notes or None
    return _touch(db, doc)


# ============= Forms =============

def set_no_forms_required(db: Session, project_id: UUID, value: bool) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    doc.no_forms_required = value
    return _touch(db, doc)


def _form(doc: WebDocumentation, form_id: UUID) -> WebDocuForm:
    form = next((f for f in doc.forms if f.id == form_id), None)
    if form is None:
        raise NotFoundError("Formular", str(form_id))
    return form


def create_form(db: Session, project_id: UUID, data: FormCreate) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    current = max((f.sort_order for f in doc.forms), default=-1)
    db.add(WebDocuForm(
        web_documentation_id=doc.project_id,
        name=data.name.strip(),
        recipient_email=(data.recipient_email or "").strip() or None,
        sort_order=current + 1,
    ))
    # A form on the page means forms are wanted after all
    doc.no_forms_required = False
    return _touch(db, doc)


def update_form(db: Session, project_id: UUID, form_id: UUID, data: FormUpdate) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    form = _form(doc, form_id)
    values = data.model_dump(exclude_unset=True)
    if "name" in values and values["name"]:
        form.name = values["name"].strip()
    if "recipient_email" in values:
        form.recipient_email = (values["recipient_email"] or "").strip() or None
    return _touch(db, doc)


def delete_form(db: Session, project_id: UUID, form_id: UUID) -> WebDocumentation:
    doc = _load_unlocked(db, project_id)
    doc.forms.remove(_form(doc, form_id))
    return _touch(db, doc)


def update_form_fields(db: Session, project_id: UUID, form_id: UUID, selection: List[FormFieldSpec]) -> WebDocumentation:
    """
    Apply the field selection of a form in one batch.

    Enabled types are created or updated in the given order, disabled types
    are removed. The form needs a recipient email before fields are saved.
    """
    doc = _load_unlocked(db, project_id)
    form = _form(doc, form_id)
    if _blank(form.recipient_email):
        raise ValidationError(
            "Bitte zuerst eine Empfänger-E-Mail eingeben!",
            details={"form_id": str(form_id)},
        )

    existing = {field.field_type: field for field in form.fields}
    sort_order = 0
    for choice in selection:
        field = existing.pop(choice.field_type, None)
        if not choice.enabled:
            if field is not None:
                form.fields.remove(field)
            continue
        if field is None:
            field = WebDocuFormField(field_type=choice.field_type)
            form.fields.append(field)
        field.label = choice.label or None
        field.is_required = choice.is_required
        field.sort_order = sort_order
        sort_order += 1
    return _touch(db, doc)
