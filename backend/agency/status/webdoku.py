"""
Step gating for the seven-step web documentation wizard.

A step counts as saved as soon as any of its user-entered fields is present.
contact_email and website_domain are pre-filled on creation and therefore do
not count for step 1. Everything here is derived from the latest snapshot; no
client-side copy of "saved steps" is kept.
"""
import enum
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Tuple

FIRST_STEP = 1
LAST_STEP = 7

STEPS: List[Dict[str, Any]] = [
    {"number": 1, "title": "Allgemeines", "short_title": "Allg."},
    {"number": 2, "title": "Unternehmensschwerpunkte", "short_title": "Schwerpunkte"},
    {"number": 3, "title": "Websiteaufbau", "short_title": "Aufbau"},
    {"number": 4, "title": "Design & Vorgaben", "short_title": "Design"},
    {"number": 5, "title": "Formulare", "short_title": "Formulare"},
    {"number": 6, "title": "Impressum & Datenschutz", "short_title": "Rechtliches"},
    {"number": 7, "title": "Material", "short_title": "Material"},
]


class BlockReason(str, enum.Enum):
    STEP_NOT_SAVED = "STEP_NOT_SAVED"
    MISSING_RECIPIENT_EMAIL = "MISSING_RECIPIENT_EMAIL"


@dataclass(frozen=True)
class MenuItemSnapshot:
    id: Optional[str] = None
    needs_images: bool = False
    needs_texts: bool = False


@dataclass(frozen=True)
class FormSnapshot:
    id: Optional[str] = None
    recipient_email: Optional[str] = None


@dataclass(frozen=True)
class WebDocuSnapshot:
    # Step 1
    domain_status: Optional[str] = None
    urgent_notes: Optional[str] = None
    contacts: Tuple[Any, ...] = ()
    # Step 2
    company_name: Optional[str] = None
    company_focus: Optional[str] = None
    # Step 3 / 7
    menu_items: Tuple[MenuItemSnapshot, ...] = ()
    # Step 4
    has_logo: Optional[bool] = None
    has_ci_defined: Optional[bool] = None
    color_orientation: Optional[str] = None
    color_codes: Optional[str] = None
    top_website: Optional[str] = None
    flop_website: Optional[str] = None
    website_type: Optional[str] = None
    style_types: Tuple[str, ...] = ()
    start_area: Optional[str] = None
    slogan: Optional[str] = None
    teaser_specs: Optional[str] = None
    disruptor_specs: Optional[str] = None
    other_specs: Optional[str] = None
    map_integration: Optional[str] = None
    # Step 5
    no_forms_required: bool = False
    forms: Tuple[FormSnapshot, ...] = ()
    # Step 6
    imprint_from_website: Optional[bool] = None
    imprint_address: Optional[str] = None
    imprint_legal_form: Optional[str] = None
    imprint_owner: Optional[str] = None
    imprint_ceo: Optional[str] = None
    imprint_phone: Optional[str] = None
    imprint_fax: Optional[str] = None
    imprint_email: Optional[str] = None
    imprint_register_type: Optional[str] = None
    imprint_register_location: Optional[str] = None
    imprint_register_number: Optional[str] = None
    imprint_chamber: Optional[str] = None
    imprint_profession: Optional[str] = None
    imprint_country: Optional[str] = None
    imprint_vat_id: Optional[str] = None
    imprint_terms_status: Optional[str] = None
    imprint_privacy_officer: Optional[str] = None
    imprint_has_privacy_officer: Optional[bool] = None
    # Step 7
    material_logo_needed: Optional[bool] = None
    material_authcode_needed: Optional[bool] = None
    material_notes: Optional[str] = None
    material_deadline: Any = None
    # Release
    released_at: Any = None

    @classmethod
    def from_record(cls, record: Any) -> "WebDocuSnapshot":
        """Snapshot an ORM WebDocumentation (or a mapping with the same keys)."""
        if isinstance(record, Mapping):
            get = record.get
        else:
            def get(name):
                return getattr(record, name, None)

        values = {}
        for name in (f.name for f in fields(cls)):
            if name in ("contacts", "menu_items", "forms", "style_types"):
                continue
            value = get(name)
            values[name] = getattr(value, "value", value)

        menu_items = tuple(
            MenuItemSnapshot(
                id=_str_or_none(_attr(item, "id")),
                needs_images=bool(_attr(item, "needs_images")),
                needs_texts=bool(_attr(item, "needs_texts")),
            )
            for item in (get("menu_items") or [])
        )
        forms = tuple(
            FormSnapshot(id=_str_or_none(_attr(form, "id")), recipient_email=_attr(form, "recipient_email"))
            for form in (get("forms") or [])
        )
        values["no_forms_required"] = bool(values.get("no_forms_required"))
        return cls(
            contacts=tuple(get("contacts") or ()),
            menu_items=menu_items,
            forms=forms,
            style_types=tuple(get("style_types") or ()),
            **values,
        )


@dataclass(frozen=True)
class StepGateResult:
    allowed: bool
    reason: Optional[BlockReason] = None
    form_ids: Tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "allowed": self.allowed,
            "reason": self.reason.value if self.reason else None,
            "form_ids": list(self.form_ids),
        }


def _attr(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _str_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return bool(value)


def _any_filled(*values: Any) -> bool:
    return any(_filled(v) for v in values)


def _step_1(doc: WebDocuSnapshot) -> bool:
    return _any_filled(doc.domain_status, doc.urgent_notes) or len(doc.contacts) > 0


def _step_2(doc: WebDocuSnapshot) -> bool:
    return _any_filled(doc.company_name, doc.company_focus)


def _step_3(doc: WebDocuSnapshot) -> bool:
    return len(doc.menu_items) > 0


def _step_4(doc: WebDocuSnapshot) -> bool:
    return (
        doc.has_logo is not None
        or doc.has_ci_defined is not None
        or len(doc.style_types) > 0
        or _any_filled(
            doc.color_orientation,
            doc.color_codes,
            doc.top_website,
            doc.flop_website,
            doc.website_type,
            doc.start_area,
            doc.slogan,
            doc.teaser_specs,
            doc.disruptor_specs,
            doc.other_specs,
            doc.map_integration,
        )
    )


def _step_5(doc: WebDocuSnapshot) -> bool:
    return doc.no_forms_required or len(doc.forms) > 0


def _step_6(doc: WebDocuSnapshot) -> bool:
    return (
        doc.imprint_from_website is not None
        or doc.imprint_has_privacy_officer is not None
        or _any_filled(
            doc.imprint_address,
            doc.imprint_legal_form,
            doc.imprint_owner,
            doc.imprint_ceo,
            doc.imprint_phone,
            doc.imprint_fax,
            doc.imprint_email,
            doc.imprint_register_type,
            doc.imprint_register_location,
            doc.imprint_register_number,
            doc.imprint_chamber,
            doc.imprint_profession,
            doc.imprint_country,
            doc.imprint_vat_id,
            doc.imprint_terms_status,
            doc.imprint_privacy_officer,
        )
    )


def _step_7(doc: WebDocuSnapshot) -> bool:
    return (
        doc.material_logo_needed is not None
        or doc.material_authcode_needed is not None
        or _any_filled(doc.material_notes, doc.material_deadline)
        or any(item.needs_images or item.needs_texts for item in doc.menu_items)
    )


_STEP_PREDICATES = {
    1: _step_1,
    2: _step_2,
    3: _step_3,
    4: _step_4,
    5: _step_5,
    6: _step_6,
    7: _step_7,
}


def is_step_saved(step: int, doc: WebDocuSnapshot) -> bool:
    predicate = _STEP_PREDICATES.get(step)
    if predicate is None:
        return False
    return predicate(doc)


def is_step_enabled(step: int, doc: WebDocuSnapshot) -> bool:
    """Step 1 is always reachable; later steps need the previous one saved."""
    if step == FIRST_STEP:
        return True
    if not FIRST_STEP < step <= LAST_STEP:
        return False
    return is_step_saved(step - 1, doc)


def forms_missing_recipient(doc: WebDocuSnapshot) -> Tuple[str, ...]:
    return tuple(
        form.id or ""
        for form in doc.forms
        if not (form.recipient_email and form.recipient_email.strip())
    )


def can_advance(step: int, doc: WebDocuSnapshot) -> StepGateResult:
    """
    Whether "Weiter" may leave `step`. Stricter than is_step_saved for step 5:
    every form also needs a recipient email unless no forms are wanted.
    """
    if step == 5:
        if doc.no_forms_required:
            return StepGateResult(allowed=True)
        if not is_step_saved(5, doc):
            return StepGateResult(allowed=False, reason=BlockReason.STEP_NOT_SAVED)
        missing = forms_missing_recipient(doc)
        if missing:
            return StepGateResult(allowed=False, reason=BlockReason.MISSING_RECIPIENT_EMAIL, form_ids=missing)
        return StepGateResult(allowed=True)

    if is_step_saved(step, doc):
        return StepGateResult(allowed=True)
    return StepGateResult(allowed=False, reason=BlockReason.STEP_NOT_SAVED)


def is_locked(doc: WebDocuSnapshot) -> bool:
    """Released documentation is read-only until an admin revokes the release."""
    return _filled(doc.released_at)


def wizard_state(doc: WebDocuSnapshot) -> Dict[str, Any]:
    steps = []
    for step in STEPS:
        number = step["number"]
        steps.append({
            **step,
            "saved": is_step_saved(number, doc),
            "enabled": is_step_enabled(number, doc),
            "can_advance": can_advance(number, doc).as_dict(),
        })
    return {"locked": is_locked(doc), "steps": steps}
