import pandas as pd
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional


# ---------------------------------------------------------
# Formatação (BRL, percentuais, datas)
# ---------------------------------------------------------
def fmt_brl(v: Any) -> str:
    """
    Formata valores em BRL com separadores brasileiros.
    Valores inválidos viram R$ 0,00; negativos exibem prefixo '-'.
    """
    try:
        val = float(v)
    except (ValueError, TypeError):
        val = 0.0

    s = f"{abs(val):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    prefix = "-" if val < 0 else ""
    return f"{prefix}R$ {s}"


def fmt_pct(v: float) -> str:
    """Variação com sinal e uma casa: +12,5% / -3,0%."""
    return f"{v:+.1f}%".replace(".", ",")


def parse_date_safe(d: Any) -> Optional[date]:
    """Aceita date, datetime ou string reconhecível pelo pandas; None se inválido."""
    if d is None:
        return None
    if isinstance(d, datetime):
        return d.date()
    if isinstance(d, date):
        return d
    ts = pd.to_datetime(d, errors="coerce")
    return None if pd.isna(ts) else ts.date()


def fmt_date_br(d: Any) -> str:
    obj = parse_date_safe(d)
    return obj.strftime("%d/%m/%Y") if obj else "—"


def fmt_datetime_br(d: datetime) -> str:
    return d.strftime("%d/%m/%Y às %H:%M")


WEEKDAYS_BR = ["seg", "ter", "qua", "qui", "sex", "sáb", "dom"]


def fmt_weekday_br(d: date) -> str:
    return f"{WEEKDAYS_BR[d.weekday()]} {d.strftime('%d/%m')}"


# ---------------------------------------------------------
# Tabelas
# ---------------------------------------------------------
def ordenar_registros(items: Iterable[Any], key: Optional[str], ascending: bool = True) -> list:
    """
    Ordena entidades (dataclasses) por um atributo; `key=None` mantém a ordem original.
    Texto é comparado sem diferenciar maiúsculas.
    """
    items = list(items)
    if not key:
        return items

    def _k(x):
        v = getattr(x, key, None)
        return v.lower() if isinstance(v, str) else (v if v is not None else 0)

    return sorted(items, key=_k, reverse=not ascending)


def to_dataframe(items: Iterable[Any], columns: dict[str, str]) -> pd.DataFrame:
    """Dataclasses -> DataFrame com colunas renomeadas {atributo: rótulo}."""
    rows = [asdict(x) if is_dataclass(x) else dict(x) for x in items]
    df = pd.DataFrame(rows, columns=list(columns))
    return df.rename(columns=columns)


# ---------------------------------------------------------
# Chaves únicas para widgets Streamlit
# ---------------------------------------------------------
def key_for(*parts: Any) -> str:
    return "-".join(str(p) for p in parts if p is not None)
