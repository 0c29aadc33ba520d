# app/services/zone_stats_service.py
"""
Per-zone occupancy summaries for the dashboard widgets.

aggregate_zones() groups active table rows by `zona`. There is no live
table-state feed yet, so every table is reported free and the occupancy
percentage is 0 until one exists. Zones keep the order in which they first
appear in the rows.
"""

from typing import Iterable

from app.schemas.zone_stats import ZoneStat
from app.services.backend_client import BackendClient, BackendError
from app.utils.logger import get_logger

logger = get_logger(__name__)

NO_ZONE = "Sin zona"
TABLE_COLUMNS = "id, numero_mesa, capacidad, zona"


def aggregate_zones(rows: Iterable[dict]) -> list[ZoneStat]:
    stats: dict[str, ZoneStat] = {}
    for row in rows:
        zona = row.get("zona") or NO_ZONE
        zone = stats.get(zona)
        if zone is None:
            zone = stats[zona] = ZoneStat(zona=zona)
        zone.total_mesas += 1
        zone.mesas_libres += 1
    return list(stats.values())


async def fetch_restaurant_stats(backend: BackendClient) -> list[ZoneStat]:
    try:
        rows = await backend.select("mesas", TABLE_COLUMNS, filters=[("activa", "eq", True)])
    except BackendError as e:
        logger.error(f"Error fetching restaurant stats: {e.message}")
        raise
    zones = aggregate_zones(rows or [])
    logger.debug(f"Restaurant stats: {len(rows or [])} tables in {len(zones)} zones")
    return zones


async def fetch_zone_stats_view(backend: BackendClient) -> list[dict]:
    """Server-side aggregate from the `vista_estadisticas_zonas` view, returned verbatim."""
    try:
        return await backend.select("vista_estadisticas_zonas", "*", order=[("zona", True)]) or []
    except BackendError as e:
        logger.error(f"Error fetching zone stats view: {e.message}")
        raise
