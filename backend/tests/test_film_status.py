"""
Tests for the derived film project status.
"""
from datetime import datetime
from types import SimpleNamespace

import pytest

from agency.models import FilmStatus
from agency.status.film_status import (
    FILM_STATUS_LABELS,
    derive_film_status,
    get_film_status_date,
    resolve_film_status,
)

NOW = datetime(2024, 6, 1, 12, 0)
PAST = datetime(2024, 5, 1)
FUTURE = datetime(2024, 7, 1)


def film(**overrides):
    values = dict(
        status=None,
        contract_start=None,
        scouting=None,
        script_to_client=None,
        script_approved=None,
        shoot_date=None,
        final_to_client=None,
        online_date=None,
        last_contact=None,
        preview_versions=[],
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def preview(sent_date):
    return SimpleNamespace(sent_date=sent_date)


@pytest.mark.unit
class TestDeriveFilmStatus:

    def test_missing_film_is_scouting(self):
        assert derive_film_status(None, NOW) == FilmStatus.SCOUTING

    def test_empty_film_is_scouting(self):
        assert derive_film_status(film(), NOW) == FilmStatus.SCOUTING

    def test_beendet_wins(self):
        assert derive_film_status(film(status="BEENDET", online_date=PAST), NOW) == FilmStatus.BEENDET
        assert derive_film_status(film(status="beendet"), NOW) == FilmStatus.BEENDET

    def test_online(self):
        assert derive_film_status(film(online_date=PAST, final_to_client=PAST), NOW) == FilmStatus.ONLINE

    def test_final_version(self):
        f = film(final_to_client=PAST, preview_versions=[preview(PAST)])
        assert derive_film_status(f, NOW) == FilmStatus.FINALVERSION

    def test_preview_version(self):
        f = film(preview_versions=[preview(PAST)], shoot_date=PAST)
        assert derive_film_status(f, NOW) == FilmStatus.VORABVERSION

    def test_shoot_date_passed_is_schnitt(self):
        assert derive_film_status(film(shoot_date=PAST, script_approved=PAST), NOW) == FilmStatus.SCHNITT

    def test_future_shoot_date_is_dreh(self):
        assert derive_film_status(film(shoot_date=FUTURE, script_approved=PAST), NOW) == FilmStatus.DREH

    def test_script_sent_is_skriptfreigabe(self):
        assert derive_film_status(film(script_to_client=PAST), NOW) == FilmStatus.SKRIPTFREIGABE

    def test_scouting_passed_is_skript(self):
        assert derive_film_status(film(scouting=PAST), NOW) == FilmStatus.SKRIPT

    def test_future_scouting_is_scouting(self):
        assert derive_film_status(film(scouting=FUTURE), NOW) == FilmStatus.SCOUTING

    def test_mapping_with_preview_dicts(self):
        data = {"preview_versions": [{"sent_date": "2024-05-02"}]}
        assert derive_film_status(data, NOW) == FilmStatus.VORABVERSION


@pytest.mark.unit
class TestFilmStatusDate:

    def test_scouting_falls_back_to_contract_start(self):
        assert get_film_status_date(FilmStatus.SCOUTING, film(contract_start=PAST)) == PAST

    def test_preview_uses_newest_version(self):
        newest = datetime(2024, 5, 20)
        f = film(preview_versions=[preview(newest), preview(PAST)])
        assert get_film_status_date("VORABVERSION", f) == newest

    def test_beendet_falls_back_to_last_contact(self):
        assert get_film_status_date(FilmStatus.BEENDET, film(last_contact=PAST)) == PAST

    @pytest.mark.parametrize("status,field", [
        (FilmStatus.SKRIPT, "scouting"),
        (FilmStatus.SKRIPTFREIGABE, "script_to_client"),
        (FilmStatus.DREH, "script_approved"),
        (FilmStatus.SCHNITT, "shoot_date"),
        (FilmStatus.FINALVERSION, "final_to_client"),
        (FilmStatus.ONLINE, "online_date"),
    ])
    def test_single_field_dates(self, status, field):
        assert get_film_status_date(status, film(**{field: PAST})) == PAST

    def test_unknown_status(self):
        assert get_film_status_date("ARCHIV", film(online_date=PAST)) is None
        assert get_film_status_date(FilmStatus.ONLINE, None) is None


@pytest.mark.unit
class TestResolveFilmStatus:

    def test_badge(self):
        badge = resolve_film_status(film(final_to_client=PAST), NOW)
        assert badge.status == "FINALVERSION"
        assert badge.label == "Finalversion"
        assert badge.since == PAST

    def test_every_status_has_a_label(self):
        assert set(FILM_STATUS_LABELS) == set(FilmStatus)
