"""
Grade semanal da agenda.

Semana de segunda a domingo, janela fixa 09:00–19:00 em slots de 30 minutos
(20 slots por dia). Funções puras: a página só traduz cliques em intenções.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence, Union

from services.schemas import Appointment

DAY_START = time(9, 0)
DAY_END = time(19, 0)
SLOT_MINUTES = 30
SLOT_HEIGHT_REM = 5.0


@dataclass(frozen=True)
class GridPlacement:
    row_start: int  # 1-based; pode ficar fora da grade se o início for fora da janela
    row_span: int

    def height_rem(self, slot_height: float = SLOT_HEIGHT_REM) -> float:
        return self.row_span * slot_height


@dataclass(frozen=True)
class CreateAppointment:
    start: datetime


@dataclass(frozen=True)
class ShowDetail:
    appointment: Appointment


def build_week(anchor: date) -> list[date]:
    """7 datas consecutivas a partir da segunda-feira da semana de `anchor`."""
    if isinstance(anchor, datetime):
        anchor = anchor.date()
    monday = anchor - timedelta(days=anchor.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def shift_week(anchor: date, weeks: int) -> date:
    return anchor + timedelta(days=7 * weeks)


def build_slots(day: date) -> list[datetime]:
    """Inícios dos slots de 30 min de 09:00 até (sem incluir) 19:00."""
    current = datetime.combine(day, DAY_START)
    end = datetime.combine(day, DAY_END)
    slots = []
    while current < end:
        slots.append(current)
        current += timedelta(minutes=SLOT_MINUTES)
    return slots


def place_appointment(appointment: Appointment, slots: Optional[Sequence[datetime]] = None) -> GridPlacement:
    """
    Linha inicial e quantidade de linhas ocupadas pelo agendamento.

    row_start = (hora - 9) * 2 + floor(minuto / 30) + 1
    row_span  = ceil(duração / 30), mínimo 1
    """
    origin = slots[0] if slots else datetime.combine(appointment.start.date(), DAY_START)
    offset_min = (appointment.start - origin) / timedelta(minutes=1)
    row_start = math.floor(offset_min / SLOT_MINUTES) + 1

    duration_min = (appointment.end - appointment.start) / timedelta(minutes=1)
    row_span = max(1, math.ceil(duration_min / SLOT_MINUTES))
    return GridPlacement(row_start=row_start, row_span=row_span)


def week_grid(appointments: Sequence[Appointment], anchor: date) -> dict[date, list[tuple[Appointment, GridPlacement]]]:
    """
    Agendamentos de cada dia da semana com seu posicionamento, em ordem de início.
    Espera a lista já sem cancelados (ver finance_queries.agenda_semana).
    """
    week = build_week(anchor)
    grid: dict[date, list] = {d: [] for d in week}
    for app in sorted(appointments, key=lambda a: a.start):
        day = app.start.date()
        if day in grid:
            grid[day].append((app, place_appointment(app, build_slots(day))))
    return grid


def on_empty_slot_click(day: date, slot_time: Union[datetime, time]) -> CreateAppointment:
    t = slot_time.time() if isinstance(slot_time, datetime) else slot_time
    return CreateAppointment(start=datetime.combine(day, t.replace(second=0, microsecond=0)))


def on_appointment_click(appointment: Appointment) -> ShowDetail:
    return ShowDetail(appointment=appointment)


def slot_occupied(slot: datetime, appointments: Sequence[Appointment], minutes: int = SLOT_MINUTES) -> bool:
    """True se algum agendamento cruza o intervalo [slot, slot + minutes)."""
    slot_end = slot + timedelta(minutes=minutes)
    return any(a.start < slot_end and slot < a.end for a in appointments)


def reschedule_conflict(appointment: Appointment, new_start: datetime, appointments: Sequence[Appointment]) -> bool:
    """O novo horário cruza outro agendamento (não cancelado) do mesmo barbeiro?"""
    others = [
        a for a in appointments
        if a.id != appointment.id and a.barber_id == appointment.barber_id and a.status != "canceled"
    ]
    return slot_occupied(new_start, others, minutes=appointment.duration_minutes)
