"""Coerce heterogeneous upstream payloads into canonical domain records.

Upstream APIs answer either with positional rows (``[[2, "DEP-2"], ...]``)
or with keyed objects, sometimes wrapped in ``{"data": [...]}``. The shape is
resolved once per payload into ``PositionalRow`` / ``KeyedRow`` values and
then mapped field by field. Every function here is pure: malformed rows are
dropped, never raised.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from ..models.domain import Call, Depot, Supply


@dataclass(frozen=True, slots=True)
class PositionalRow:
    values: tuple[Any, ...]

    def at(self, index: int) -> Any:
        return self.values[index] if index < len(self.values) else None


@dataclass(frozen=True, slots=True)
class KeyedRow:
    fields: Mapping[str, Any]

    def first(self, *keys: str) -> Any:
        """Value of the first key present with a non-null value."""
        for key in keys:
            value = self.fields.get(key)
            if value is not None:
                return value
        return None


RawRow = Union[PositionalRow, KeyedRow]


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Where a record field lives in each row shape."""

    position: int
    keys: tuple[str, ...]

    def read(self, row: RawRow) -> Any:
        if isinstance(row, PositionalRow):
            return row.at(self.position)
        return row.first(*self.keys)


DEPOT_FIELDS = {
    "depot_id": FieldSpec(0, ("ID_DEPOSITO", "id_deposito", "id")),
    "name": FieldSpec(1, ("NOMBRE", "nombre", "name")),
    "capacity": FieldSpec(2, ("CAPACIDAD", "capacidad")),
    "current_liters": FieldSpec(3, ("LITROS_ACTUALES", "litros_actuales", "litros")),
    "percentage": FieldSpec(4, ("PORCENTAJE", "porcentaje")),
    "last_supply": FieldSpec(5, ("ULTIMO_SUMINISTRO", "ultimo_suministro")),
}

SUPPLY_FIELDS = {
    "user_id": FieldSpec(0, ("ID_USUARIO", "id_usuario", "usuario")),
    "vehicle_id": FieldSpec(1, ("ID_VEHICULO", "id_vehiculo", "vehiculo")),
    "km": FieldSpec(2, ("KM", "km")),
    "liters": FieldSpec(3, ("LITROS_SUMINISTRADOS", "litros", "LITROS")),
    "price": FieldSpec(4, ("PRECIO", "precio")),
    "timestamp": FieldSpec(5, ("FECHA Y HORA", "fecha_hora", "FECHA")),
    "pump_serial": FieldSpec(
        6, ("NUMERO_DE_SERIE_SURTIDOR", "NUMERO_SERIE_SURTIDOR", "surtidor")
    ),
    "depot_id": FieldSpec(7, ("ID_DEPOSITO", "id_deposito")),
    "fuel_id": FieldSpec(8, ("ID_COMBUSTIBLE", "id_combustible")),
}

CALL_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite number, accepting numeric strings with ``,`` decimals."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
        return value if math.isfinite(number) else None
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def parse_int(value: Any) -> Optional[int]:
    number = parse_number(value)
    if number is None or number != int(number):
        return None
    return int(number)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_rows(payload: Any) -> list[Any]:
    """Unwrap a bare list or a ``{"data": [...]}`` envelope."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping) and isinstance(payload.get("data"), list):
        return payload["data"]
    return []


def classify_rows(rows: Sequence[Any]) -> list[RawRow]:
    """Resolve the payload shape from its first element and tag every row."""
    if not rows:
        return []
    if isinstance(rows[0], (list, tuple)):
        return [PositionalRow(tuple(row)) for row in rows if isinstance(row, (list, tuple))]
    return [KeyedRow(row) for row in rows if isinstance(row, Mapping)]


def normalize_depots(payload: Any) -> list[Depot]:
    depots: list[Depot] = []
    for row in classify_rows(extract_rows(payload)):
        depot_id = parse_int(DEPOT_FIELDS["depot_id"].read(row))
        if depot_id is None:
            continue
        name = _text(DEPOT_FIELDS["name"].read(row)) or str(depot_id)
        depots.append(
            Depot(
                depot_id=depot_id,
                name=name,
                capacity=parse_number(DEPOT_FIELDS["capacity"].read(row)),
                current_liters=parse_number(DEPOT_FIELDS["current_liters"].read(row)),
                percentage=parse_number(DEPOT_FIELDS["percentage"].read(row)),
                last_supply=_text(DEPOT_FIELDS["last_supply"].read(row)),
            )
        )
    return depots


def parse_depot_level(payload: Any) -> Optional[float]:
    """Numeric leaf of a ``[[970]]`` level response, or ``None``."""
    if isinstance(payload, Mapping):
        payload = payload.get("data")
    while isinstance(payload, (list, tuple)):
        if not payload:
            return None
        payload = payload[0]
    return parse_number(payload)


def _supply_from_row(row: RawRow) -> Optional[Supply]:
    liters = parse_number(SUPPLY_FIELDS["liters"].read(row))
    timestamp = _text(SUPPLY_FIELDS["timestamp"].read(row))
    if liters is None or timestamp is None:
        return None
    serial = SUPPLY_FIELDS["pump_serial"].read(row)
    if not isinstance(serial, (str, int)) or isinstance(serial, bool):
        serial = None
    return Supply(
        user_id=parse_int(SUPPLY_FIELDS["user_id"].read(row)),
        vehicle_id=parse_int(SUPPLY_FIELDS["vehicle_id"].read(row)),
        km=parse_number(SUPPLY_FIELDS["km"].read(row)),
        liters=liters,
        price=parse_number(SUPPLY_FIELDS["price"].read(row)),
        timestamp=timestamp,
        pump_serial=serial,
        depot_id=parse_int(SUPPLY_FIELDS["depot_id"].read(row)),
        fuel_id=parse_int(SUPPLY_FIELDS["fuel_id"].read(row)),
    )


def normalize_supplies(payload: Any) -> list[Supply]:
    supplies = []
    for row in classify_rows(extract_rows(payload)):
        record = _supply_from_row(row)
        if record is not None:
            supplies.append(record)
    return supplies


def parse_call_timestamp(value: Any) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD HH:MM:SS`` (or ISO 8601) into a naive local datetime."""
    text = _text(value)
    if text is None:
        return None
    try:
        parsed = datetime.strptime(text, CALL_TIMESTAMP_FORMAT)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text.replace(" ", "T"))
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def agent_key(call: Mapping[str, Any]) -> Optional[str]:
    for key in ("agent_id", "callerid_text"):
        value = _text(call.get(key))
        if value:
            return value
    related = call.get("arr_related")
    if isinstance(related, list) and related and isinstance(related[0], Mapping):
        return _text(related[0].get("id"))
    return None


def extract_calls(payload: Any) -> list[Any]:
    if isinstance(payload, Mapping):
        data = payload.get("data")
        if isinstance(data, Mapping) and isinstance(data.get("calls"), list):
            return data["calls"]
        if isinstance(payload.get("calls"), list):
            return payload["calls"]
        return []
    if isinstance(payload, list):
        return payload
    return []


def parse_calls(payload: Any) -> list[Call]:
    calls = []
    for entry in extract_calls(payload):
        if not isinstance(entry, Mapping):
            continue
        status = entry.get("status")
        calls.append(
            Call(
                status="" if status is None else str(status),
                started_at=parse_call_timestamp(entry.get("date_start")),
                answered_at=parse_call_timestamp(entry.get("date_answer")),
                ended_at=parse_call_timestamp(entry.get("date_end")),
                agent=agent_key(entry),
            )
        )
    return calls
