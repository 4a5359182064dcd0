"""
Failure Injection Tests.

A storage failure at any step of a consistency transaction must leave
reports, vehicles and alerts exactly as they were.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.exc import OperationalError

from fleetinspect.app.core.exceptions import StorageFailureError
from fleetinspect.app.models.enums import AlertType, InspectionStatus
from fleetinspect.app.models.vehicle import Vehicle
from fleetinspect.app.schemas.inspection_report import InspectionReportCreate
from fleetinspect.app.services.alert_store import AlertStore
from fleetinspect.app.services.audit import get_audit_trail
from fleetinspect.app.services.report_store import ReportStore
from fleetinspect.app.services.vehicle_store import VehicleStore


def storage_error():
    return OperationalError("INSERT INTO maintenance_alerts", {}, Exception("disk I/O error"))


@pytest.mark.asyncio
async def test_alert_failure_rolls_back_submission(db_session, consistency, vehicle, report_payload, mocker):
    """Report and vehicle writes are undone when the alert write fails."""
    mocker.patch.object(AlertStore, "create", side_effect=storage_error())

    with pytest.raises(StorageFailureError) as exc_info:
        await consistency.on_report_created(InspectionReportCreate(**report_payload(status="fail")))

    assert exc_info.value.status_code == 503
    assert exc_info.value.details["operation"] == "report submission"
    assert await ReportStore(db_session).list() == []

    v1 = await db_session.get(Vehicle, "V1", populate_existing=True)
    assert v1.status == InspectionStatus.PENDING
    assert v1.has_defects is False
    assert v1.odometer_reading == 45000
    assert v1.last_inspection_date is None
    assert await get_audit_trail(db_session) == []


@pytest.mark.asyncio
async def test_resolve_failure_keeps_alerts_open(db_session, consistency, vehicle, report_payload, mocker):
    report_id = await consistency.on_report_created(InspectionReportCreate(**report_payload(status="fail")))
    mocker.patch.object(AlertStore, "resolve", side_effect=storage_error())

    with pytest.raises(StorageFailureError):
        await consistency.on_report_status_changed(report_id, InspectionStatus.PASS)

    report = await ReportStore(db_session).get(report_id)
    await db_session.refresh(report)
    assert report.status == InspectionStatus.FAIL

    v1 = await db_session.get(Vehicle, "V1", populate_existing=True)
    assert v1.status == InspectionStatus.FAIL
    assert v1.has_defects is True

    alerts = await AlertStore(db_session).list_unresolved()
    assert [a.alert_type for a in alerts] == [AlertType.FAILED_INSPECTION]


@pytest.mark.asyncio
async def test_failure_releases_vehicle_lock(consistency, vehicle, report_payload, mock_redis, mocker):
    mocker.patch.object(AlertStore, "create", side_effect=storage_error())

    with pytest.raises(StorageFailureError):
        await consistency.on_report_created(InspectionReportCreate(**report_payload(status="fail")))

    assert await mock_redis.exists("lock:vehicle:V1") == 0


@pytest.mark.asyncio
async def test_redis_outage_is_storage_failure(db_session, consistency, vehicle, report_payload, mock_redis, mocker):
    mocker.patch.object(mock_redis, "set", side_effect=RedisConnectionError("Connection refused"))

    with pytest.raises(StorageFailureError) as exc_info:
        await consistency.on_report_created(InspectionReportCreate(**report_payload()))

    assert exc_info.value.details["operation"] == "vehicle lock"
    assert await ReportStore(db_session).list() == []


@pytest.mark.asyncio
async def test_storage_failure_over_http(client, vehicle, driver_headers, report_payload, mocker):
    mocker.patch.object(AlertStore, "create", side_effect=storage_error())

    response = await client.post("/v1/reports", json=report_payload(status="fail"), headers=driver_headers)

    assert response.status_code == 503
    assert response.json()["error_code"] == "ERR_STORAGE_001"


@pytest.mark.asyncio
async def test_vehicle_correction_failure_is_storage_failure(db_session, consistency, vehicle, mock_redis, mocker):
    mocker.patch.object(VehicleStore, "update", side_effect=storage_error())

    with pytest.raises(StorageFailureError) as exc_info:
        await consistency.update_vehicle_details("V1", odometer_reading=50000, actor_username="admin")

    assert exc_info.value.details["operation"] == "vehicle update"
    assert await mock_redis.exists("lock:vehicle:V1") == 0
    assert await get_audit_trail(db_session, target_id="V1") == []
