"""
Derived lifecycle status of website projects.

The stored production fields are entered incrementally and out of order, so the
status is always re-derived from them: later milestones (online, demo) win over
material readiness even when earlier dates were never back-filled.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

from sqlalchemy import and_, or_

from agency.models import (
    MaterialStatus,
    ProductionStatus,
    ProjectStatus,
    ProjectWebsite,
    SEOStatus,
    TextitStatus,
    WebsitePriority,
)
from agency.status.dates import DateLike, to_date

EnumLike = Union[str, None]

# Pseudo-status accepted by the list filter: finished projects only
BEENDET_FILTER = "BEENDET"

PROJECT_STATUS_LABELS: Dict[ProjectStatus, str] = {
    ProjectStatus.WEBTERMIN: "Webtermin",
    ProjectStatus.MATERIAL: "Material",
    ProjectStatus.UMSETZUNG: "Umsetzung",
    ProjectStatus.DEMO: "Demo",
    ProjectStatus.ONLINE: "Online",
}

ONLINE_LABELS_BY_P_STATUS: Dict[ProductionStatus, str] = {
    ProductionStatus.BEENDET: "Beendet",
    ProductionStatus.MMW: "Online (MMW)",
    ProductionStatus.VOLLST_A_K: "Online (vollst. a.K.)",
}

MATERIAL_STATUS_LABELS: Dict[MaterialStatus, str] = {
    MaterialStatus.ANGEFORDERT: "angefordert",
    MaterialStatus.TEILWEISE: "teilweise",
    MaterialStatus.VOLLSTAENDIG: "vollständig",
    MaterialStatus.NV: "N.V.",
}

PRODUCTION_STATUS_LABELS: Dict[ProductionStatus, str] = {
    ProductionStatus.NONE: "-",
    ProductionStatus.BEENDET: "Beendet",
    ProductionStatus.MMW: "MMW",
    ProductionStatus.VOLLST_A_K: "vollst. a.K.",
}

WEBSITE_PRIORITY_LABELS: Dict[WebsitePriority, str] = {
    WebsitePriority.NONE: "-",
    WebsitePriority.PRIO_1: "Prio 1",
    WebsitePriority.PRIO_2: "Prio 2",
    WebsitePriority.PRIO_3: "Prio 3",
}

SEO_STATUS_LABELS: Dict[SEOStatus, str] = {
    SEOStatus.NEIN: "NEIN",
    SEOStatus.NEIN_NEIN: "NEIN/NEIN",
    SEOStatus.JA_NEIN: "JA/NEIN",
    SEOStatus.JA_JA: "JA/JA",
}

TEXTIT_STATUS_LABELS: Dict[TextitStatus, str] = {
    TextitStatus.NEIN: "NEIN",
    TextitStatus.NEIN_NEIN: "NEIN/NEIN",
    TextitStatus.JA_NEIN: "JA/NEIN",
    TextitStatus.JA_JA: "JA/JA",
}


def _check_exhaustive(enum_cls, table: Mapping) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"{enum_cls.__name__} labels missing for: {', '.join(missing)}")


_check_exhaustive(ProjectStatus, PROJECT_STATUS_LABELS)
_check_exhaustive(MaterialStatus, MATERIAL_STATUS_LABELS)
_check_exhaustive(ProductionStatus, PRODUCTION_STATUS_LABELS)
_check_exhaustive(WebsitePriority, WEBSITE_PRIORITY_LABELS)
_check_exhaustive(SEOStatus, SEO_STATUS_LABELS)
_check_exhaustive(TextitStatus, TEXTIT_STATUS_LABELS)


@dataclass(frozen=True)
class WebsiteProductionState:
    p_status: EnumLike = None
    web_date: DateLike = None
    demo_date: DateLike = None
    online_date: DateLike = None
    material_status: EnumLike = None
    last_material_at: DateLike = None

    @classmethod
    def from_source(cls, source: Any) -> Optional["WebsiteProductionState"]:
        """Build a snapshot from an ORM row, a mapping or an existing snapshot."""
        if source is None:
            return None
        if isinstance(source, cls):
            return source
        if isinstance(source, Mapping):
            get = source.get
        else:
            def get(name):
                return getattr(source, name, None)
        return cls(
            p_status=_enum_value(get("p_status")),
            web_date=get("web_date"),
            demo_date=get("demo_date"),
            online_date=get("online_date"),
            material_status=_enum_value(get("material_status")),
            last_material_at=get("last_material_at"),
        )


@dataclass(frozen=True)
class StatusBadge:
    status: str
    label: str
    since: Optional[datetime]


def _enum_value(value: Any) -> EnumLike:
    if value is None:
        return None
    return getattr(value, "value", value)


def normalize_production_status(value: Any) -> Optional[ProductionStatus]:
    raw = _enum_value(value)
    if not raw:
        return None
    try:
        return ProductionStatus(str(raw).strip().upper())
    except ValueError:
        return None


def normalize_material_status(value: Any) -> Optional[MaterialStatus]:
    """Map free-form material status input (imports, legacy data) onto MaterialStatus."""
    raw = _enum_value(value)
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    upper = text.upper().replace("Ä", "AE").replace("Ö", "OE").replace("Ü", "UE").replace("ß", "SS")
    simple = re.sub(r"[^A-Z]", "", upper)
    if simple in ("ANGEFORDERT", "ANGEFORDERUNG"):
        return MaterialStatus.ANGEFORDERT
    if simple in ("TEILWEISE", "TEILW"):
        return MaterialStatus.TEILWEISE
    if simple in ("VOLLSTAENDIG", "VOLLST", "JA", "FULLCONTENT", "FULLCONT") or simple.endswith("VOLLSTAENDIG"):
        return MaterialStatus.VOLLSTAENDIG
    if simple in ("NV", "NEIN", "NICHTVORHANDEN"):
        return MaterialStatus.NV
    try:
        return MaterialStatus(upper)
    except ValueError:
        return None


def derive_project_status(website: Any) -> ProjectStatus:
    state = WebsiteProductionState.from_source(website)
    if state is None:
        return ProjectStatus.WEBTERMIN

    if normalize_production_status(state.p_status) == ProductionStatus.BEENDET:
        return ProjectStatus.ONLINE
    if to_date(state.online_date):
        return ProjectStatus.ONLINE
    if to_date(state.demo_date):
        return ProjectStatus.DEMO

    material = normalize_material_status(state.material_status)
    if material == MaterialStatus.VOLLSTAENDIG:
        return ProjectStatus.UMSETZUNG
    if material == MaterialStatus.TEILWEISE:
        return ProjectStatus.MATERIAL
    if to_date(state.web_date):
        return ProjectStatus.MATERIAL

    return ProjectStatus.WEBTERMIN


def label_for_project_status(status: Any, website: Any = None) -> str:
    try:
        resolved = ProjectStatus(_enum_value(status))
    except ValueError:
        return str(_enum_value(status))

    if resolved == ProjectStatus.ONLINE:
        state = WebsiteProductionState.from_source(website)
        p_status = normalize_production_status(state.p_status) if state else None
        return ONLINE_LABELS_BY_P_STATUS.get(p_status, PROJECT_STATUS_LABELS[resolved])
    return PROJECT_STATUS_LABELS[resolved]


def get_website_status_date(status: Any, website: Any) -> Optional[datetime]:
    """Date the website has been in `status` since, falling back to earlier milestones."""
    state = WebsiteProductionState.from_source(website)
    if state is None:
        return None
    try:
        resolved = ProjectStatus(_enum_value(status))
    except ValueError:
        return None

    if resolved == ProjectStatus.WEBTERMIN:
        return to_date(state.web_date)
    if resolved in (ProjectStatus.MATERIAL, ProjectStatus.UMSETZUNG):
        return to_date(state.last_material_at) or to_date(state.web_date)
    if resolved == ProjectStatus.DEMO:
        return to_date(state.demo_date) or to_date(state.last_material_at) or to_date(state.web_date)
    if resolved == ProjectStatus.ONLINE:
        return to_date(state.online_date)
    return None


def resolve_website_status(website: Any) -> StatusBadge:
    status = derive_project_status(website)
    return StatusBadge(
        status=status.value,
        label=label_for_project_status(status, website),
        since=get_website_status_date(status, website),
    )


def _label_from_table(value: Any, table: Mapping, separator: str) -> str:
    raw = _enum_value(value)
    if raw is None:
        return "-"
    normalized = str(raw).strip().upper()
    if not normalized:
        return "-"
    for member, label in table.items():
        if member.value == normalized:
            return label
    return normalized.replace("_", separator)


def label_for_material_status(value: Any) -> str:
    normalized = normalize_material_status(value)
    if normalized is None:
        return "-"
    return MATERIAL_STATUS_LABELS[normalized]


def label_for_production_status(value: Any) -> str:
    return _label_from_table(value, PRODUCTION_STATUS_LABELS, " ")


def label_for_website_priority(value: Any) -> str:
    return _label_from_table(value, WEBSITE_PRIORITY_LABELS, " ")


def label_for_seo_status(value: Any) -> str:
    return _label_from_table(value, SEO_STATUS_LABELS, "/")


def label_for_textit_status(value: Any) -> str:
    return _label_from_table(value, TEXTIT_STATUS_LABELS, "/")


PROJECT_TYPE_LABELS = {
    "WEBSITE": "Webseite",
    "FILM": "Film",
    "SOCIAL": "Social Media",
}


def get_project_display_name(title: Optional[str], project_type: Any) -> str:
    if title:
        return title
    type_value = str(_enum_value(project_type))
    return PROJECT_TYPE_LABELS.get(type_value, type_value)


def website_status_filter(status: str):
    """
    SQL condition over ProjectWebsite matching the rows derive_project_status
    puts into `status`. Accepts the pseudo-status "BEENDET" as well.
    Returns None for unknown values.
    """
    not_done = ProjectWebsite.p_status != ProductionStatus.BEENDET
    no_online = ProjectWebsite.online_date.is_(None)
    no_demo = ProjectWebsite.demo_date.is_(None)
    pre_demo = and_(not_done, no_online, no_demo)

    if status == BEENDET_FILTER:
        return ProjectWebsite.p_status == ProductionStatus.BEENDET
    if status == ProjectStatus.ONLINE.value:
        return or_(ProjectWebsite.p_status == ProductionStatus.BEENDET, ProjectWebsite.online_date.isnot(None))
    if status == ProjectStatus.DEMO.value:
        return and_(not_done, no_online, ProjectWebsite.demo_date.isnot(None))
    if status == ProjectStatus.UMSETZUNG.value:
        return and_(pre_demo, ProjectWebsite.material_status == MaterialStatus.VOLLSTAENDIG)
    if status == ProjectStatus.MATERIAL.value:
        return and_(
            pre_demo,
            ProjectWebsite.material_status != MaterialStatus.VOLLSTAENDIG,
            or_(
                ProjectWebsite.material_status == MaterialStatus.TEILWEISE,
                ProjectWebsite.web_date.isnot(None),
            ),
        )
    if status == ProjectStatus.WEBTERMIN.value:
        return and_(
            pre_demo,
            ProjectWebsite.material_status.notin_([MaterialStatus.VOLLSTAENDIG, MaterialStatus.TEILWEISE]),
            ProjectWebsite.web_date.is_(None),
        )
    return None
