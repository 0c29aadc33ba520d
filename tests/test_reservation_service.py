"""Unit tests for the reservation service."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date
from unittest.mock import AsyncMock
from pydantic import ValidationError
from app.schemas.reservation import ReservationCreate, ReservationUpdate
from app.services.backend_client import BackendError
from app.services import reservation_service
from app.services.reservation_service import filter_unassigned, flatten_reservation, validate_estado_reserva


def make_reservation(id, hora, mesa_id=None, estado="pendiente_confirmacion"):
    return {"id": id, "hora_reserva": hora, "mesa_id": mesa_id, "estado_reserva": estado}


class TestFilterUnassigned:
    def test_keeps_only_unassigned_pending_or_confirmed(self):
        rows = [
            make_reservation("a", "21:00"),
            make_reservation("b", "19:30", estado="confirmada"),
            make_reservation("c", "20:00", mesa_id="m1"),
            make_reservation("d", "18:00", estado="cancelada_usuario"),
            make_reservation("e", "20:15", estado="completada"),
        ]
        result = filter_unassigned(rows)
        assert [r["id"] for r in result] == ["b", "a"]

    def test_empty(self):
        assert filter_unassigned([]) == []


class TestValidation:
    def test_unknown_state_falls_back(self):
        assert validate_estado_reserva("perdida") == "pendiente_confirmacion"
        assert validate_estado_reserva(None) == "pendiente_confirmacion"

    def test_known_state_kept(self):
        assert validate_estado_reserva("no_show") == "no_show"

    def test_create_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ReservationCreate(cliente_id="c1", fecha_reserva="2026-10-19", hora_reserva="20:00",
                              numero_comensales=2, descuento=10)

    def test_create_rejects_bad_hour(self):
        with pytest.raises(ValidationError):
            ReservationCreate(cliente_id="c1", fecha_reserva="2026-10-19", hora_reserva="25:00",
                              numero_comensales=2)

    def test_update_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ReservationUpdate(id="r1")


class TestFlatten:
    def test_display_fields(self):
        row = {"id": "r1", "estado_reserva": "confirmada",
               "clientes": {"nombre": "Ana", "apellido": "Ruiz", "telefono": "+34600"},
               "mesas": {"numero_mesa": "T4"}}
        flat = flatten_reservation(row)
        assert flat["cliente_nombre"] == "Ana Ruiz"
        assert flat["numero_mesa"] == "T4"
        assert flat["telefono"] == "+34600"

    def test_missing_relations_are_normal(self):
        flat = flatten_reservation({"id": "r1", "estado_reserva": "confirmada", "clientes": None, "mesas": None})
        assert flat["cliente_nombre"] == "Cliente"
        assert flat["numero_mesa"] is None
        assert flat["telefono"] is None


class TestReservationService:
    @pytest.mark.asyncio
    async def test_unassigned_query_and_client_filter(self, backend):
        backend.select.return_value = [
            make_reservation("late", "22:00"),
            make_reservation("seated", "19:00", mesa_id="m2"),
            make_reservation("early", "19:00", estado="confirmada"),
        ]
        result = await reservation_service.unassigned_reservations(backend, date(2026, 10, 19))

        assert [r["id"] for r in result] == ["early", "late"]
        kwargs = backend.select.call_args.kwargs
        assert ("fecha_reserva", "eq", "2026-10-19") in kwargs["filters"]
        assert ("mesa_id", "is", None) in kwargs["filters"]
        assert ("estado_reserva", "in", ("pendiente_confirmacion", "confirmada")) in kwargs["filters"]
        assert kwargs["order"] == [("hora_reserva", True)]

    @pytest.mark.asyncio
    async def test_assign_table_confirms(self, backend):
        await reservation_service.assign_table(backend, "r1", "m7")
        args, kwargs = backend.update.call_args
        assert args[0] == "reservas"
        assert args[1] == {"mesa_id": "m7", "estado_reserva": "confirmada"}
        assert kwargs["filters"] == [("id", "eq", "r1")]

    @pytest.mark.asyncio
    async def test_create_sets_pending_and_iso_date(self, backend):
        backend.insert.return_value = {"id": "new"}
        data = ReservationCreate(cliente_id="c1", fecha_reserva=date(2026, 10, 20), hora_reserva="20:30",
                                 numero_comensales=4)
        created = await reservation_service.create_reservation(backend, data)

        assert created == {"id": "new"}
        row = backend.insert.call_args[0][1]
        assert row["fecha_reserva"] == "2026-10-20"
        assert row["estado_reserva"] == "pendiente_confirmacion"
        assert row["origen_reserva"] == "web"

    @pytest.mark.asyncio
    async def test_create_failure_is_reraised(self, backend):
        backend.insert = AsyncMock(side_effect=BackendError("duplicate key", code="23505", status_code=409))
        data = ReservationCreate(cliente_id="c1", fecha_reserva=date(2026, 10, 20), hora_reserva="20:30",
                                 numero_comensales=4)
        with pytest.raises(BackendError) as exc_info:
            await reservation_service.create_reservation(backend, data)
        assert exc_info.value.friendly_message == "A record with these details already exists"

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self, backend):
        await reservation_service.update_reservation(backend, "r1", ReservationUpdate(numero_comensales=6))
        assert backend.update.call_args[0][1] == {"numero_comensales": 6}

    @pytest.mark.asyncio
    async def test_availability_rpc_params(self, backend):
        backend.rpc.return_value = [{"mesa_id": "m1"}]
        result = await reservation_service.check_availability(backend, date(2026, 10, 19), "20:00", 4)

        assert result == [{"mesa_id": "m1"}]
        backend.rpc.assert_called_once_with("verificar_disponibilidad_mesa", {
            "p_fecha": "2026-10-19",
            "p_hora_inicio": "20:00",
            "p_num_comensales": 4,
            "p_duracion_minutos": 120,
        })

    @pytest.mark.asyncio
    async def test_stats_fall_back_to_live_count(self, backend):
        live_rows = [
            {"estado_reserva": "confirmada", "numero_comensales": 2},
            {"estado_reserva": "confirmada", "numero_comensales": 4},
            {"estado_reserva": "pendiente_confirmacion", "numero_comensales": 3},
        ]
        backend.select = AsyncMock(side_effect=[BackendError("no rows", code="PGRST116"), live_rows])

        stats = await reservation_service.reservation_stats(backend, date(2026, 10, 19))

        assert stats.total_reservas == 3
        assert stats.confirmadas == 2
        assert stats.pendientes == 1
        assert stats.completadas == 0
        assert stats.total_comensales == 9

    @pytest.mark.asyncio
    async def test_list_validates_states(self, backend):
        backend.select.return_value = [{"id": "r1", "estado_reserva": "???"}]
        rows = await reservation_service.list_reservations(backend, estado="confirmada")
        assert rows[0]["estado_reserva"] == "pendiente_confirmacion"
        assert ("estado_reserva", "eq", "confirmada") in backend.select.call_args.kwargs["filters"]
