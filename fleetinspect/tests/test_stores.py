"""
Store-level tests: each store on its own, without the engine.
"""

import pytest
from datetime import date

from fleetinspect.app.core.exceptions import ResourceNotFoundError
from fleetinspect.app.models.enums import AlertSeverity, AlertType, InspectionStatus
from fleetinspect.app.models.vehicle import Vehicle
from fleetinspect.app.schemas.inspection_report import InspectionReportCreate
from fleetinspect.app.services.alert_store import AlertStore
from fleetinspect.app.services.report_store import ReportStore
from fleetinspect.app.services.vehicle_store import VehicleStore


PHOTO = {"name": "tire.jpg", "size": 1200, "type": "image/jpeg", "data_url": "data:image/jpeg;base64,AAAA"}
VIDEO = {"name": "walkaround.mp4", "size": 5000, "type": "video/mp4", "data_url": "data:video/mp4;base64,BBBB"}


class TestReportStore:

    @pytest.mark.asyncio
    async def test_create_assigns_unique_ids(self, db_session, report_payload):
        store = ReportStore(db_session)
        first = await store.create(InspectionReportCreate(**report_payload()))
        second = await store.create(InspectionReportCreate(**report_payload()))
        await db_session.commit()

        assert first != second
        assert {r.id for r in await store.list()} == {first, second}

    @pytest.mark.asyncio
    async def test_attachments_persisted_in_order(self, db_session, report_payload):
        store = ReportStore(db_session)
        report_id = await store.create(
            InspectionReportCreate(**report_payload(photos=[PHOTO], videos=[VIDEO]))
        )
        await db_session.commit()

        report = await store.get(report_id)
        assert [f.file_name for f in report.files] == ["tire.jpg", "walkaround.mp4"]
        assert report.files[0].is_photo
        assert report.files[1].is_video

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, db_session, report_payload):
        store = ReportStore(db_session)
        for day in ("2024-01-05", "2024-03-01", "2024-02-10"):
            await store.create(InspectionReportCreate(**report_payload(date=day)))
        await db_session.commit()

        dates = [r.date for r in await store.list()]
        assert dates == [date(2024, 3, 1), date(2024, 2, 10), date(2024, 1, 5)]

    @pytest.mark.asyncio
    async def test_get_missing_report(self, db_session):
        assert await ReportStore(db_session).get("does-not-exist") is None

    @pytest.mark.asyncio
    async def test_set_status(self, db_session, report_payload):
        store = ReportStore(db_session)
        report_id = await store.create(InspectionReportCreate(**report_payload(status="fail")))

        assert await store.set_status(report_id, InspectionStatus.PENDING) is True
        await db_session.commit()

        report = await store.get(report_id)
        assert report.status == InspectionStatus.PENDING

    @pytest.mark.asyncio
    async def test_set_status_missing_report(self, db_session):
        assert await ReportStore(db_session).set_status("nope", InspectionStatus.PASS) is False


class TestVehicleStore:

    @pytest.mark.asyncio
    async def test_new_vehicle_starts_pending(self, vehicle):
        assert vehicle.status == InspectionStatus.PENDING
        assert vehicle.has_defects is False
        assert vehicle.last_inspection_date is None

    @pytest.mark.asyncio
    async def test_list_ordered_by_bus_number(self, db_session):
        store = VehicleStore(db_session)
        await store.create("B", "103")
        await store.create("A", "101")
        await store.create("C", "102")
        await db_session.commit()

        assert [v.bus_number for v in await store.list()] == ["101", "102", "103"]

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session, vehicle):
        store = VehicleStore(db_session)
        await store.update("V1", status=InspectionStatus.FAIL, has_defects=True)
        await db_session.commit()

        v1 = await db_session.get(Vehicle, "V1", populate_existing=True)
        assert v1.status == InspectionStatus.FAIL
        assert v1.has_defects is True
        assert v1.odometer_reading == 45000
        assert v1.last_inspection_date is None

    @pytest.mark.asyncio
    async def test_update_missing_vehicle(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            await VehicleStore(db_session).update("ghost", status=InspectionStatus.PASS)

    @pytest.mark.asyncio
    async def test_get_by_bus_number(self, db_session, vehicle):
        found = await VehicleStore(db_session).get_by_bus_number("101")
        assert found.id == "V1"
        assert await VehicleStore(db_session).get_by_bus_number("999") is None


class TestAlertStore:

    async def _create(self, store, vehicle_id="V1", alert_type=AlertType.FAILED_INSPECTION, day=date(2024, 3, 1)):
        return await store.create(
            vehicle_id=vehicle_id,
            bus_number="101",
            alert_type=alert_type,
            severity=AlertSeverity.HIGH,
            message="Failed inspection by John Driver - brake pad worn",
            alert_date=day,
        )

    @pytest.mark.asyncio
    async def test_created_alert_is_unresolved(self, db_session):
        store = AlertStore(db_session)
        alert_id = await self._create(store)
        await db_session.commit()

        alerts = await store.list_unresolved()
        assert [a.id for a in alerts] == [alert_id]
        assert alerts[0].resolved is False
        assert alerts[0].resolved_at is None

    @pytest.mark.asyncio
    async def test_list_unresolved_newest_first(self, db_session):
        store = AlertStore(db_session)
        await self._create(store, day=date(2024, 1, 1))
        await self._create(store, day=date(2024, 2, 1))
        await db_session.commit()

        assert [a.date for a in await store.list_unresolved()] == [date(2024, 2, 1), date(2024, 1, 1)]

    @pytest.mark.asyncio
    async def test_resolve_returns_count_and_is_idempotent(self, db_session):
        store = AlertStore(db_session)
        await self._create(store)
        await self._create(store)

        assert await store.resolve("V1", AlertType.FAILED_INSPECTION) == 2
        assert await store.resolve("V1", AlertType.FAILED_INSPECTION) == 0
        await db_session.commit()

        assert await store.list_unresolved() == []

    @pytest.mark.asyncio
    async def test_resolve_matches_vehicle_and_type_only(self, db_session):
        store = AlertStore(db_session)
        await self._create(store, vehicle_id="V1")
        await self._create(store, vehicle_id="V2")
        await self._create(store, vehicle_id="V1", alert_type=AlertType.OVERDUE_INSPECTION)

        assert await store.resolve("V1", AlertType.FAILED_INSPECTION) == 1
        await db_session.commit()

        remaining = {(a.vehicle_id, a.alert_type) for a in await store.list_unresolved()}
        assert remaining == {("V2", AlertType.FAILED_INSPECTION), ("V1", AlertType.OVERDUE_INSPECTION)}

    @pytest.mark.asyncio
    async def test_resolve_with_nothing_open(self, db_session):
        assert await AlertStore(db_session).resolve("V1", AlertType.FAILED_INSPECTION) == 0
