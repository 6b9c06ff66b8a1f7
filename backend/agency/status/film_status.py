"""
Derived status of film projects.

Hierarchy: Beendet > Online > Finalversion > Vorabversion > Schnitt > Dreh >
Skriptfreigabe > Skript > Scouting.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from agency.models import FilmStatus
from agency.status.dates import DateLike, is_in_past, to_date
from agency.status.project_status import StatusBadge

FILM_STATUS_LABELS: Dict[FilmStatus, str] = {
    FilmStatus.BEENDET: "Beendet",
    FilmStatus.ONLINE: "Online",
    FilmStatus.FINALVERSION: "Finalversion",
    FilmStatus.VORABVERSION: "Vorabversion",
    FilmStatus.SCHNITT: "Schnitt",
    FilmStatus.DREH: "Dreh",
    FilmStatus.SKRIPTFREIGABE: "Skriptfreigabe",
    FilmStatus.SKRIPT: "Skript",
    FilmStatus.SCOUTING: "Scouting",
}

_missing = [s.value for s in FilmStatus if s not in FILM_STATUS_LABELS]
if _missing:
    raise RuntimeError(f"FilmStatus labels missing for: {', '.join(_missing)}")


@dataclass(frozen=True)
class FilmProductionState:
    status: Optional[str] = None
    contract_start: DateLike = None
    scouting: DateLike = None
    script_to_client: DateLike = None
    script_approved: DateLike = None
    shoot_date: DateLike = None
    final_to_client: DateLike = None
    online_date: DateLike = None
    last_contact: DateLike = None
    # Sent dates of preview versions, newest first
    preview_versions: Tuple[DateLike, ...] = field(default_factory=tuple)

    @classmethod
    def from_source(cls, source: Any) -> Optional["FilmProductionState"]:
        if source is None:
            return None
        if isinstance(source, cls):
            return source
        if isinstance(source, Mapping):
            get = source.get
        else:
            def get(name):
                return getattr(source, name, None)

        previews = []
        for version in get("preview_versions") or []:
            if isinstance(version, Mapping):
                previews.append(version.get("sent_date"))
            elif hasattr(version, "sent_date"):
                previews.append(version.sent_date)
            else:
                previews.append(version)

        status = get("status")
        return cls(
            status=getattr(status, "value", status),
            contract_start=get("contract_start"),
            scouting=get("scouting"),
            script_to_client=get("script_to_client"),
            script_approved=get("script_approved"),
            shoot_date=get("shoot_date"),
            final_to_client=get("final_to_client"),
            online_date=get("online_date"),
            last_contact=get("last_contact"),
            preview_versions=tuple(previews),
        )


def derive_film_status(film: Any, now: Optional[datetime] = None) -> FilmStatus:
    state = FilmProductionState.from_source(film)
    if state is None:
        return FilmStatus.SCOUTING

    if state.status and str(state.status).upper() == FilmStatus.BEENDET.value:
        return FilmStatus.BEENDET
    if to_date(state.online_date):
        return FilmStatus.ONLINE
    if to_date(state.final_to_client):
        return FilmStatus.FINALVERSION
    if state.preview_versions:
        return FilmStatus.VORABVERSION
    # Shoot date passed means editing has started
    if is_in_past(state.shoot_date, now):
        return FilmStatus.SCHNITT
    if to_date(state.script_approved):
        return FilmStatus.DREH
    if to_date(state.script_to_client):
        return FilmStatus.SKRIPTFREIGABE
    if is_in_past(state.scouting, now):
        return FilmStatus.SKRIPT
    return FilmStatus.SCOUTING


def get_film_status_date(status: Any, film: Any) -> Optional[datetime]:
    state = FilmProductionState.from_source(film)
    if state is None:
        return None
    try:
        resolved = FilmStatus(getattr(status, "value", status))
    except ValueError:
        return None

    if resolved == FilmStatus.SCOUTING:
        return to_date(state.scouting) or to_date(state.contract_start)
    if resolved == FilmStatus.SKRIPT:
        return to_date(state.scouting)
    if resolved == FilmStatus.SKRIPTFREIGABE:
        return to_date(state.script_to_client)
    if resolved == FilmStatus.DREH:
        return to_date(state.script_approved)
    if resolved == FilmStatus.SCHNITT:
        return to_date(state.shoot_date)
    if resolved == FilmStatus.VORABVERSION:
        return to_date(state.preview_versions[0]) if state.preview_versions else None
    if resolved == FilmStatus.FINALVERSION:
        return to_date(state.final_to_client)
    if resolved == FilmStatus.ONLINE:
        return to_date(state.online_date)
    if resolved == FilmStatus.BEENDET:
        return to_date(state.online_date) or to_date(state.last_contact)
    return None


def resolve_film_status(film: Any, now: Optional[datetime] = None) -> StatusBadge:
    status = derive_film_status(film, now)
    return StatusBadge(
        status=status.value,
        label=FILM_STATUS_LABELS[status],
        since=get_film_status_date(status, film),
    )
