"""Gateway model."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Gateway:
    """Gateway information and settings.

    The fields after ``name`` were reverse-engineered from the vendor app;
    their function is mostly unknown and they are carried for completeness.
    """

    id: str | None = None
    ntp_server: str | None = None
    firmware_version: str | None = None
    current_timestamp: int | None = None  # Unix timestamp
    current_time_utc: str | None = None  # YYYY-MM-DDTHH:MM:SS.MMM
    commissioning_mode: int | None = None  # seconds left, 0 = off
    release_notes_url: str | None = None
    name: str | None = None

    time_source: int | None = None
    ota_update_state: int | None = None
    update_progress: int | None = None
    update_priority: int | None = None
    update_accepted_timestamp: int | None = None
    force_ota_update_check: str | None = None
    dst_time_offset: int | None = None
    dst_start_month: int | None = None
    dst_start_day: int | None = None
    dst_start_hour: int | None = None
    dst_start_minute: int | None = None
    dst_end_month: int | None = None
    dst_end_day: int | None = None
    dst_end_hour: int | None = None
    dst_end_minute: int | None = None
    google_home_pair_status: int | None = None
    alexa_pair_status: int | None = None
    certificate_provisioned: int | None = None

    @property
    def commissioning(self) -> bool:
        """Return True if the gateway currently accepts new devices."""
        return bool(self.commissioning_mode)
