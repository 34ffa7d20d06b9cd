from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Union
import calendar

from services.schemas import Appointment, Barber


# ---------------------------------------------------------
# Período [início, fim] inclusivo
# ---------------------------------------------------------
@dataclass(frozen=True)
class DateRange:
    start: date
    end: Optional[date] = None

    def __post_init__(self):
        if self.end is None:
            object.__setattr__(self, "end", self.start)
        if self.end < self.start:
            raise ValueError("Fim do período anterior ao início.")

    @property
    def dias(self) -> int:
        """Quantidade de dias corridos do período (inclusivo)."""
        return (self.end - self.start).days + 1

    def datas(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(self.dias)]

    def contains(self, ts: Union[date, datetime]) -> bool:
        """start <= ts <= fim do último dia."""
        if not isinstance(ts, datetime):
            ts = datetime.combine(ts, time.min)
        return datetime.combine(self.start, time.min) <= ts <= end_of_day(self.end)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max)


def periodo_anterior(periodo: DateRange) -> DateRange:
    """Período imediatamente anterior, de mesmo tamanho."""
    fim = periodo.start - timedelta(days=1)
    inicio = fim - (periodo.end - periodo.start)
    return DateRange(inicio, fim)


def mes_atual(hoje: Optional[date] = None) -> DateRange:
    hoje = hoje or date.today()
    ultimo = calendar.monthrange(hoje.year, hoje.month)[1]
    return DateRange(date(hoje.year, hoje.month, 1), date(hoje.year, hoje.month, ultimo))


def mes_anterior(hoje: Optional[date] = None) -> DateRange:
    hoje = hoje or date.today()
    return mes_atual(date(hoje.year, hoje.month, 1) - timedelta(days=1))


def periodos_predefinidos(hoje: Optional[date] = None) -> dict:
    """Atalhos do seletor de período, na ordem em que aparecem."""
    return {"Mês atual": mes_atual(hoje), "Mês anterior": mes_anterior(hoje)}


# ---------------------------------------------------------
# Variação entre períodos
# ---------------------------------------------------------
def variacao_percentual(atual: float, anterior: float) -> float:
    """
    ((atual - anterior) / anterior) * 100, com as regras de borda:
    anterior == 0 -> 100 se atual > 0, senão 0.
    """
    if anterior == 0:
        return 100.0 if atual > 0 else 0.0
    if atual == 0 and anterior > 0:
        return -100.0
    return (atual - anterior) / anterior * 100


# ---------------------------------------------------------
# Comissão
# ---------------------------------------------------------
def comissao_agendamento(app: Appointment, barbers_by_id: dict[str, Barber]) -> float:
    """preço * comissão/100 se o barbeiro existir e tiver comissão > 0."""
    barber = barbers_by_id.get(app.barber_id)
    if barber is None or barber.commission <= 0:
        return 0.0
    return app.price * (barber.commission / 100)
