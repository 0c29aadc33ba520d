# app/routers/customers.py
"""Customers (CRM): contacts, server-side dedup registration, notes, tags and alerts."""

from fastapi import APIRouter, Depends
from app.database import get_backend
from app.schemas.customer import (
    AlertCreate, AlertUpdate, CustomerCreate, CustomerRegister, CustomerUpdate, NoteCreate, TagCreate,
)
from app.services.backend_client import BackendClient
from app.services import customer_service

router = APIRouter()


@router.get("/customers", summary="Latest customers")
async def list_customers(backend: BackendClient = Depends(get_backend)):
    return await customer_service.list_customers(backend)


@router.post("/customers", status_code=201)
async def create_customer(body: CustomerCreate, backend: BackendClient = Depends(get_backend)):
    return await customer_service.create_customer(backend, body)


@router.post("/customers/register", summary="Register a customer unless one already exists")
async def register_customer(body: CustomerRegister, backend: BackendClient = Depends(get_backend)):
    return {"cliente_id": await customer_service.register_if_missing(backend, body)}


@router.get("/customers/tags", summary="Distinct tags in use (autocomplete)")
async def all_tags(backend: BackendClient = Depends(get_backend)):
    return await customer_service.all_tags(backend)


@router.delete("/customers/tags/{tag_id}")
async def delete_tag(tag_id: str, backend: BackendClient = Depends(get_backend)):
    await customer_service.delete_tag(backend, tag_id)
    return {"id": tag_id, "status": "deleted"}


@router.get("/customers/alerts", summary="Alerts in force today, most severe first")
async def current_alerts(backend: BackendClient = Depends(get_backend)):
    return await customer_service.current_alerts(backend)


@router.patch("/customers/alerts/{alert_id}")
async def update_alert(alert_id: str, body: AlertUpdate, backend: BackendClient = Depends(get_backend)):
    return await customer_service.update_alert(backend, alert_id, body)


@router.post("/customers/alerts/{alert_id}/deactivate")
async def deactivate_alert(alert_id: str, backend: BackendClient = Depends(get_backend)):
    return await customer_service.deactivate_alert(backend, alert_id)


@router.get("/customers/{customer_id}")
async def get_customer(customer_id: str, backend: BackendClient = Depends(get_backend)):
    return await customer_service.get_customer(backend, customer_id)


@router.patch("/customers/{customer_id}")
async def update_customer(customer_id: str, body: CustomerUpdate, backend: BackendClient = Depends(get_backend)):
    return await customer_service.update_customer(backend, customer_id, body)


@router.get("/customers/{customer_id}/notes")
async def list_notes(customer_id: str, backend: BackendClient = Depends(get_backend)):
    return await customer_service.list_notes(backend, customer_id)


@router.post("/customers/{customer_id}/notes", status_code=201)
async def create_note(customer_id: str, body: NoteCreate, backend: BackendClient = Depends(get_backend)):
    return await customer_service.create_note(backend, customer_id, body)


@router.get("/customers/{customer_id}/tags")
async def list_tags(customer_id: str, backend: BackendClient = Depends(get_backend)):
    return await customer_service.list_tags(backend, customer_id)


@router.post("/customers/{customer_id}/tags", status_code=201)
async def create_tag(customer_id: str, body: TagCreate, backend: BackendClient = Depends(get_backend)):
    return await customer_service.create_tag(backend, customer_id, body)


@router.get("/customers/{customer_id}/alerts", summary="Active alerts for one customer")
async def list_alerts(customer_id: str, backend: BackendClient = Depends(get_backend)):
    return await customer_service.list_alerts(backend, customer_id)


@router.post("/customers/{customer_id}/alerts", status_code=201)
async def create_alert(customer_id: str, body: AlertCreate, backend: BackendClient = Depends(get_backend)):
    return await customer_service.create_alert(backend, customer_id, body)
