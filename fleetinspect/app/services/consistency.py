"""
Status/alert consistency engine.

Keeps inspection outcomes, vehicle status and maintenance alerts in
lockstep. It is the only writer of ``Vehicle.status`` / ``Vehicle.has_defects``
and the only component that creates or resolves alerts in reaction to
inspections.

Each entry point is one database transaction spanning reports, vehicles,
alerts and the audit log: every step flushes into the same session and the
engine commits once at the end, or rolls everything back on the first error.
The transaction runs while holding the vehicle's lock.
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from fleetinspect.app.core.exceptions import AppException, ResourceNotFoundError, StorageFailureError
from fleetinspect.app.models.enums import AlertSeverity, AlertType, InspectionStatus
from fleetinspect.app.models.vehicle import Vehicle
from fleetinspect.app.schemas.inspection_report import InspectionReportCreate
from fleetinspect.app.schemas.maintenance_alert import MaintenanceAlertCreate
from fleetinspect.app.services.alert_store import AlertStore
from fleetinspect.app.services.audit import AuditAction, log_event
from fleetinspect.app.services.report_store import ReportStore
from fleetinspect.app.services.vehicle_locking import VehicleLockManager
from fleetinspect.app.services.vehicle_store import VehicleStore

logger = logging.getLogger(__name__)

DEFAULT_DEFECT_TEXT = "Multiple issues detected"
STATUS_CHANGE_FAIL_TEXT = "Status changed to FAIL"


def failed_inspection_message(inspector_name: str, detail: Optional[str]) -> str:
    return f"Failed inspection by {inspector_name} - {detail or DEFAULT_DEFECT_TEXT}"


class ConsistencyEngine:

    def __init__(
        self,
        db: AsyncSession,
        reports: ReportStore,
        vehicles: VehicleStore,
        alerts: AlertStore,
        locks: VehicleLockManager,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.reports = reports
        self.vehicles = vehicles
        self.alerts = alerts
        self.locks = locks
        self.today = today

    @classmethod
    def for_session(cls, db: AsyncSession, redis) -> "ConsistencyEngine":
        """Build an engine with stores bound to ``db`` and locks on ``redis``."""
        return cls(
            db=db,
            reports=ReportStore(db),
            vehicles=VehicleStore(db),
            alerts=AlertStore(db),
            locks=VehicleLockManager(redis),
        )

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
            await self.db.commit()
        except AppException:
            await self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Rolled back %s: %s", operation, exc)
            raise StorageFailureError(operation, str(exc)) from exc

    async def on_report_created(
        self,
        report: InspectionReportCreate,
        actor_username: Optional[str] = None,
    ) -> str:
        """
        Persist a submitted report and derive vehicle status and alerts.

        Flow:
        1. Persist the report (with attachments)
        2. Mirror status, date and odometer onto the vehicle
        3. fail: open a failed_inspection alert
        4. pass: resolve the vehicle's open failed_inspection alerts

        Returns:
            The new report id

        Raises:
            ResourceNotFoundError: If the vehicle does not exist (nothing is persisted)
            StorageFailureError: If any write fails (nothing is persisted)
        """
        is_fail = report.status == InspectionStatus.FAIL

        async with self.locks.hold(report.vehicle_id):
            async with self._transaction("report submission"):
                report_id = await self.reports.create(report)

                vehicle = await self.vehicles.update(
                    report.vehicle_id,
                    status=report.status,
                    last_inspection_date=report.date,
                    odometer_reading=report.odometer_reading,
                    has_defects=is_fail,
                )

                resolved = 0
                if is_fail:
                    await self.alerts.create(
                        vehicle_id=vehicle.id,
                        bus_number=vehicle.bus_number,
                        alert_type=AlertType.FAILED_INSPECTION,
                        severity=AlertSeverity.HIGH,
                        message=failed_inspection_message(report.inspector_name, report.defect_description),
                        alert_date=report.date,
                    )
                else:
                    resolved = await self.alerts.resolve(vehicle.id, AlertType.FAILED_INSPECTION)

                await log_event(
                    self.db,
                    action=AuditAction.REPORT_SUBMITTED,
                    actor_username=actor_username,
                    target_id=report_id,
                    metadata={
                        "vehicle_id": vehicle.id,
                        "status": report.status.value,
                        "alerts_resolved": resolved,
                    },
                )

        logger.info(
            "Report %s recorded for vehicle %s with status %s",
            report_id, report.vehicle_id, report.status.value,
        )
        return report_id

    async def on_report_status_changed(
        self,
        report_id: str,
        new_status: InspectionStatus,
        actor_username: Optional[str] = None,
    ) -> None:
        """
        Apply an admin status edit to a report and its vehicle.

        The vehicle's last inspection date and odometer are left alone; they
        reflect the original submission. A change to FAIL always opens a new
        alert, even if one is already open. A change to PENDING neither opens
        nor resolves alerts.

        Raises:
            ResourceNotFoundError: If the report (or its vehicle) does not exist
            StorageFailureError: If any write fails (nothing is persisted)
        """
        async with self._transaction("report lookup"):
            report = await self.reports.get(report_id)
            if report is None:
                raise ResourceNotFoundError("Inspection report", report_id)
            vehicle_id = report.vehicle_id
            inspector_name = report.inspector_name
            previous_status = report.status

        async with self.locks.hold(vehicle_id):
            async with self._transaction("report status change"):
                if not await self.reports.set_status(report_id, new_status):
                    raise ResourceNotFoundError("Inspection report", report_id)

                vehicle = await self.vehicles.update(
                    vehicle_id,
                    status=new_status,
                    has_defects=new_status == InspectionStatus.FAIL,
                )

                resolved = 0
                if new_status == InspectionStatus.FAIL:
                    await self.alerts.create(
                        vehicle_id=vehicle.id,
                        bus_number=vehicle.bus_number,
                        alert_type=AlertType.FAILED_INSPECTION,
                        severity=AlertSeverity.HIGH,
                        message=failed_inspection_message(inspector_name, STATUS_CHANGE_FAIL_TEXT),
                        alert_date=self.today(),
                    )
                elif new_status == InspectionStatus.PASS:
                    resolved = await self.alerts.resolve(vehicle.id, AlertType.FAILED_INSPECTION)

                await log_event(
                    self.db,
                    action=AuditAction.REPORT_STATUS_CHANGED,
                    actor_username=actor_username,
                    target_id=report_id,
                    metadata={
                        "vehicle_id": vehicle.id,
                        "from": previous_status.value,
                        "to": new_status.value,
                        "alerts_resolved": resolved,
                    },
                )

        logger.info(
            "Updated report %s status %s -> %s and vehicle %s accordingly",
            report_id, previous_status.value, new_status.value, vehicle_id,
        )

    async def update_vehicle_details(
        self,
        vehicle_id: str,
        *,
        odometer_reading: Optional[int] = None,
        last_inspection_date: Optional[date] = None,
        actor_username: Optional[str] = None,
    ) -> Vehicle:
        """
        Apply an admin correction to a vehicle's odometer or inspection date.

        Status and defect flag are never touched here. Runs under the vehicle
        lock so it cannot interleave with a report submission.

        Raises:
            ResourceNotFoundError: If the vehicle does not exist
            VehicleBusyError: If the vehicle lock is not acquired in time
            StorageFailureError: If the write fails (nothing is persisted)
        """
        updated_fields = [
            name for name, value in (
                ("odometer_reading", odometer_reading),
                ("last_inspection_date", last_inspection_date),
            )
            if value is not None
        ]

        async with self.locks.hold(vehicle_id):
            async with self._transaction("vehicle update"):
                vehicle = await self.vehicles.update(
                    vehicle_id,
                    odometer_reading=odometer_reading,
                    last_inspection_date=last_inspection_date,
                )
                await log_event(
                    self.db,
                    action=AuditAction.VEHICLE_UPDATED,
                    actor_username=actor_username,
                    target_id=vehicle.id,
                    metadata={"updated_fields": updated_fields},
                )

        logger.info("Vehicle %s corrected (%s)", vehicle_id, ", ".join(updated_fields) or "no fields")
        return vehicle

    async def create_manual_alert(
        self,
        alert: MaintenanceAlertCreate,
        actor_username: Optional[str] = None,
    ) -> str:
        """
        Raise an alert by hand (admin).

        The bus number is copied from the vehicle.

        Raises:
            ResourceNotFoundError: If the vehicle does not exist
        """
        async with self._transaction("manual alert"):
            vehicle = await self.vehicles.get(alert.vehicle_id)
            if vehicle is None:
                raise ResourceNotFoundError("Vehicle", alert.vehicle_id)

            alert_id = await self.alerts.create(
                vehicle_id=vehicle.id,
                bus_number=vehicle.bus_number,
                alert_type=alert.alert_type,
                severity=alert.severity,
                message=alert.message,
                alert_date=alert.date,
            )
            await log_event(
                self.db,
                action=AuditAction.ALERT_CREATED,
                actor_username=actor_username,
                target_id=alert_id,
                metadata={
                    "vehicle_id": vehicle.id,
                    "alert_type": alert.alert_type.value,
                    "severity": alert.severity.value,
                },
            )

        return alert_id
