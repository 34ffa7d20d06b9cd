"""
Consultas financeiras e de relatório da barbearia.

Este módulo centraliza:
- filtro de período (cancelados sempre fora)
- receita, comissões, despesas e lucro
- comparação com o período anterior
- rankings, horários de pico e séries para os gráficos

Tudo é puro: mesmas coleções + mesmo período => mesmo resultado.
"""

from collections import Counter
from dataclasses import dataclass, fields
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from services.calendar_grid import build_week
from services.finance_core import (
    DateRange,
    comissao_agendamento,
    periodo_anterior,
    variacao_percentual,
)
from services.schemas import Appointment, Barber, Expense

HORAS_RELATORIO = [f"{h:02d}:00" for h in range(9, 20)]


# ---------------------------------------------------------
# Filtros
# ---------------------------------------------------------
def filtrar_agendamentos(apps: Iterable[Appointment], periodo: DateRange) -> list[Appointment]:
    """Agendamentos não cancelados com início dentro do período."""
    return [a for a in apps if a.status != "canceled" and periodo.contains(a.start)]


def agenda_semana(apps: Iterable[Appointment], anchor: date) -> list[Appointment]:
    """Agendamentos exibidos na semana da agenda (sem cancelados)."""
    semana = build_week(anchor)
    return filtrar_agendamentos(apps, DateRange(semana[0], semana[-1]))


def confirmados(apps: Iterable[Appointment], periodo: DateRange) -> list[Appointment]:
    return [a for a in filtrar_agendamentos(apps, periodo) if a.status == "confirmed"]


def despesas_no_periodo(expenses: Iterable[Expense], periodo: DateRange) -> list[Expense]:
    return [e for e in expenses if periodo.contains(e.date)]


def _by_id(barbers: Iterable[Barber]) -> dict[str, Barber]:
    return {b.id: b for b in barbers}


# ---------------------------------------------------------
# Métricas do período
# ---------------------------------------------------------
def receita_bruta(apps: Iterable[Appointment], periodo: DateRange) -> float:
    return sum(a.price for a in confirmados(apps, periodo))


def total_comissoes(apps: Iterable[Appointment], barbers: Iterable[Barber], periodo: DateRange) -> float:
    by_id = _by_id(barbers)
    return sum(comissao_agendamento(a, by_id) for a in confirmados(apps, periodo))


def total_despesas(
    apps: Iterable[Appointment],
    expenses: Iterable[Expense],
    barbers: Iterable[Barber],
    periodo: DateRange,
) -> float:
    """Comissões + despesas avulsas do período."""
    avulsas = sum(e.amount for e in despesas_no_periodo(expenses, periodo))
    return total_comissoes(apps, barbers, periodo) + avulsas


def lucro_liquido(apps, expenses, barbers, periodo: DateRange) -> float:
    return receita_bruta(apps, periodo) - total_despesas(apps, expenses, barbers, periodo)


@dataclass(frozen=True)
class Metricas:
    atendimentos: int = 0
    receita_bruta: float = 0.0
    total_comissoes: float = 0.0
    despesas_avulsas: float = 0.0
    total_despesas: float = 0.0
    lucro_liquido: float = 0.0


def calcular_metricas(
    apps: list[Appointment],
    expenses: list[Expense],
    barbers: list[Barber],
    periodo: DateRange,
) -> Metricas:
    receita = receita_bruta(apps, periodo)
    comissoes = total_comissoes(apps, barbers, periodo)
    avulsas = sum(e.amount for e in despesas_no_periodo(expenses, periodo))
    return Metricas(
        atendimentos=len(filtrar_agendamentos(apps, periodo)),
        receita_bruta=receita,
        total_comissoes=comissoes,
        despesas_avulsas=avulsas,
        total_despesas=comissoes + avulsas,
        lucro_liquido=receita - comissoes - avulsas,
    )


@dataclass(frozen=True)
class ResumoFinanceiro:
    periodo: DateRange
    atual: Metricas
    anterior: Metricas

    def variacao(self, campo: str) -> float:
        return variacao_percentual(getattr(self.atual, campo), getattr(self.anterior, campo))

    def variacoes(self) -> dict[str, float]:
        return {f.name: self.variacao(f.name) for f in fields(Metricas)}


def resumo_financeiro(
    apps: list[Appointment],
    expenses: list[Expense],
    barbers: list[Barber],
    periodo: DateRange,
) -> ResumoFinanceiro:
    """Métricas do período e do período anterior de mesmo tamanho."""
    return ResumoFinanceiro(
        periodo=periodo,
        atual=calcular_metricas(apps, expenses, barbers, periodo),
        anterior=calcular_metricas(apps, expenses, barbers, periodo_anterior(periodo)),
    )


# ---------------------------------------------------------
# Rankings (ordenação estável: empate mantém ordem de aparição)
# ---------------------------------------------------------
def _ranking(labels: list[str], n: int) -> pd.Series:
    contagem = Counter(labels)
    ordenado = sorted(contagem.items(), key=lambda kv: kv[1], reverse=True)[:n]
    return pd.Series(dict(ordenado), dtype="int64")


def top_servicos(apps: Iterable[Appointment], periodo: DateRange, n: int = 5) -> pd.Series:
    labels = [a.service or f"Serviço {a.service_id}" for a in filtrar_agendamentos(apps, periodo)]
    return _ranking(labels, n)


def top_barbeiros(
    apps: Iterable[Appointment],
    periodo: DateRange,
    barbers: Optional[Iterable[Barber]] = None,
    n: int = 4,
) -> pd.Series:
    by_id = _by_id(barbers or [])
    labels = []
    for a in filtrar_agendamentos(apps, periodo):
        b = by_id.get(a.barber_id)
        labels.append(b.name if b else (a.barber or "Sem barbeiro"))
    return _ranking(labels, n)


# ---------------------------------------------------------
# Séries para gráficos
# ---------------------------------------------------------
def horarios_movimentados(apps: Iterable[Appointment], periodo: DateRange) -> pd.Series:
    """Agendamentos por hora cheia (09:00..19:00), horas vazias com zero."""
    contagem = Counter(f"{a.start.hour:02d}:00" for a in filtrar_agendamentos(apps, periodo))
    return pd.Series({h: contagem.get(h, 0) for h in HORAS_RELATORIO}, dtype="int64")


def receita_por_forma_pagamento(apps: Iterable[Appointment], periodo: DateRange) -> pd.Series:
    """Receita confirmada por forma de pagamento, do maior para o menor."""
    rows = [
        {"forma": a.payment_method.strip(), "valor": a.price}
        for a in confirmados(apps, periodo)
        if a.payment_method and a.payment_method.strip()
    ]
    if not rows:
        return pd.Series(dtype=float)
    df = pd.DataFrame(rows)
    return (
        df.groupby("forma", sort=False)["valor"]
        .sum()
        .sort_values(ascending=False, kind="mergesort")
    )


def despesas_por_categoria(expenses: Iterable[Expense], periodo: DateRange) -> pd.Series:
    rows = [{"Categoria": e.category, "valor": e.amount} for e in despesas_no_periodo(expenses, periodo)]
    if not rows:
        return pd.Series(dtype=float)
    return (
        pd.DataFrame(rows)
        .groupby("Categoria", sort=False)["valor"]
        .sum()
        .sort_values(ascending=False, kind="mergesort")
    )


def serie_receita_despesa(
    apps: list[Appointment],
    expenses: list[Expense],
    barbers: list[Barber],
    periodo: DateRange,
) -> pd.DataFrame:
    """
    Uma linha por dia do período:
    Receita  = agendamentos confirmados do dia
    Despesas = comissões do dia + despesas avulsas do dia
    """
    dias = periodo.datas()
    by_id = _by_id(barbers)

    df_a = pd.DataFrame(
        [
            {"dia": a.start.date(), "receita": a.price, "comissao": comissao_agendamento(a, by_id)}
            for a in confirmados(apps, periodo)
        ],
        columns=["dia", "receita", "comissao"],
    )
    df_e = pd.DataFrame(
        [{"dia": e.date, "valor": e.amount} for e in despesas_no_periodo(expenses, periodo)],
        columns=["dia", "valor"],
    )

    receita = df_a.groupby("dia")["receita"].sum().reindex(dias, fill_value=0.0).astype(float)
    comissao = df_a.groupby("dia")["comissao"].sum().reindex(dias, fill_value=0.0).astype(float)
    avulsas = df_e.groupby("dia")["valor"].sum().reindex(dias, fill_value=0.0).astype(float)

    return pd.DataFrame(
        {"Receita": receita.values, "Despesas": (comissao + avulsas).values},
        index=pd.Index(dias, name="dia"),
    )
