# app/services/customer_service.py
"""
Customer records (`contacts`) and their CRM annotations: notes
(`cliente_notas`), tags (`cliente_tags`) and alerts (`cliente_alertas`).
Deduplication is done server-side by `registrar_cliente_si_no_existe`.
"""

from datetime import date
from typing import Iterable, Optional

from app.config import settings
from app.schemas.customer import (
    AlertCreate, AlertUpdate, CustomerCreate, CustomerRegister, CustomerUpdate, NoteCreate, TagCreate,
)
from app.services.backend_client import BackendClient, BackendError
from app.utils.logger import get_logger

logger = get_logger(__name__)

TABLE = "contacts"
NOTES_TABLE = "cliente_notas"
TAGS_TABLE = "cliente_tags"
ALERTS_TABLE = "cliente_alertas"


async def list_customers(backend: BackendClient) -> list[dict]:
    try:
        rows = await backend.select(TABLE, "*", order=[("created_at", False)],
                                    limit=settings.CUSTOMERS_PAGE_LIMIT)
    except BackendError as e:
        logger.error(f"Error fetching customers: {e.message}")
        raise
    logger.debug(f"Fetched {len(rows or [])} customers")
    return rows or []


async def get_customer(backend: BackendClient, customer_id: str) -> dict:
    return await backend.select(TABLE, "*", filters=[("id", "eq", customer_id)], single=True)


async def create_customer(backend: BackendClient, data: CustomerCreate) -> dict:
    try:
        created = await backend.insert(TABLE, data.model_dump(mode="json"))
    except BackendError as e:
        logger.error(f"Error creating customer {data.email}: {e.friendly_message} ({e.code})")
        raise
    logger.info(f"[CLIENTE] created {created.get('id')}")
    return created


async def update_customer(backend: BackendClient, customer_id: str, data: CustomerUpdate) -> dict:
    values = data.model_dump(mode="json", exclude_unset=True)
    if not values:
        return await get_customer(backend, customer_id)
    try:
        return await backend.update(TABLE, values, filters=[("id", "eq", customer_id)])
    except BackendError as e:
        logger.error(f"Error updating customer {customer_id}: {e.message}")
        raise


async def register_if_missing(backend: BackendClient, data: CustomerRegister):
    """Returns whatever the procedure returns (the existing or new customer id)."""
    return await backend.rpc("registrar_cliente_si_no_existe", {
        "p_nombre": data.nombre,
        "p_apellido": data.apellido,
        "p_email": data.email,
        "p_telefono": data.telefono,
    })


async def list_notes(backend: BackendClient, customer_id: str) -> list[dict]:
    return await backend.select(NOTES_TABLE, "*", filters=[("cliente_id", "eq", customer_id)],
                                order=[("created_at", False)]) or []


async def create_note(backend: BackendClient, customer_id: str, data: NoteCreate) -> dict:
    row = {"cliente_id": customer_id, **data.model_dump(mode="json", exclude_none=True)}
    try:
        return await backend.insert(NOTES_TABLE, row)
    except BackendError as e:
        logger.error(f"Error creating note for customer {customer_id}: {e.message}")
        raise


# ── Tags ─────────────────────────────────────────────────────────────────────
def unique_tags(rows: Iterable[dict]) -> list[dict]:
    """First occurrence of each tag name, in the order given."""
    seen = {}
    for row in rows:
        seen.setdefault(row.get("tag"), {"tag": row.get("tag"), "color": row.get("color")})
    return list(seen.values())


async def list_tags(backend: BackendClient, customer_id: str) -> list[dict]:
    return await backend.select(TAGS_TABLE, "*", filters=[("cliente_id", "eq", customer_id)],
                                order=[("created_at", False)]) or []


async def all_tags(backend: BackendClient) -> list[dict]:
    rows = await backend.select(TAGS_TABLE, "tag, color", order=[("tag", True)])
    return unique_tags(rows or [])


async def create_tag(backend: BackendClient, customer_id: str, data: TagCreate) -> dict:
    row = {"cliente_id": customer_id, **data.model_dump(mode="json", exclude_none=True)}
    try:
        created = await backend.insert(TAGS_TABLE, row)
    except BackendError as e:
        logger.error(f"Error tagging customer {customer_id} with '{data.tag}': {e.message}")
        raise
    logger.info(f"[CLIENTE] {customer_id} tagged '{data.tag}'")
    return created


async def delete_tag(backend: BackendClient, tag_id: str) -> None:
    await backend.delete(TAGS_TABLE, filters=[("id", "eq", tag_id)])


# ── Alerts ───────────────────────────────────────────────────────────────────
def is_alert_current(row: dict, today: date) -> bool:
    """Active, already started, and either open-ended or not yet past its end date."""
    if not row.get("activa"):
        return False
    inicio, fin = row.get("fecha_inicio"), row.get("fecha_fin")
    if inicio and inicio > today.isoformat():
        return False
    return fin is None or fin >= today.isoformat()


async def list_alerts(backend: BackendClient, customer_id: str) -> list[dict]:
    return await backend.select(ALERTS_TABLE, "*",
                                filters=[("cliente_id", "eq", customer_id), ("activa", "eq", True)],
                                order=[("created_at", False)]) or []


async def current_alerts(backend: BackendClient, today: Optional[date] = None) -> list[dict]:
    """Alerts in force today across all customers, most severe first."""
    today = today or date.today()
    try:
        rows = await backend.select(ALERTS_TABLE, "*, contacts:cliente_id(id, name, last_name, email)",
                                    filters=[("activa", "eq", True), ("fecha_inicio", "lte", today.isoformat())],
                                    order=[("severidad", False), ("created_at", False)])
    except BackendError as e:
        logger.error(f"Error fetching current customer alerts: {e.message}")
        raise
    return [r for r in rows or [] if is_alert_current(r, today)]


async def create_alert(backend: BackendClient, customer_id: str, data: AlertCreate) -> dict:
    row = {"cliente_id": customer_id, **data.model_dump(mode="json", exclude_none=True)}
    try:
        created = await backend.insert(ALERTS_TABLE, row)
    except BackendError as e:
        logger.error(f"Error creating alert for customer {customer_id}: {e.message}")
        raise
    logger.info(f"[CLIENTE] alert '{data.tipo_alerta}' ({data.severidad}) for {customer_id}")
    return created


async def update_alert(backend: BackendClient, alert_id: str, data: AlertUpdate) -> dict:
    values = data.model_dump(mode="json", exclude_unset=True)
    if not values:
        return await backend.select(ALERTS_TABLE, "*", filters=[("id", "eq", alert_id)], single=True)
    return await backend.update(ALERTS_TABLE, values, filters=[("id", "eq", alert_id)])


async def deactivate_alert(backend: BackendClient, alert_id: str) -> dict:
    row = await backend.update(ALERTS_TABLE, {"activa": False}, filters=[("id", "eq", alert_id)])
    logger.info(f"[CLIENTE] alert {alert_id} deactivated")
    return row
