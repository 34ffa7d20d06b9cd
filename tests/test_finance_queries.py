from datetime import date, datetime

import pytest

from services.finance_core import (
    DateRange,
    comissao_agendamento,
    mes_anterior,
    mes_atual,
    periodo_anterior,
    periodos_predefinidos,
    variacao_percentual,
)
from services.finance_queries import (
    HORAS_RELATORIO,
    agenda_semana,
    calcular_metricas,
    despesas_por_categoria,
    filtrar_agendamentos,
    horarios_movimentados,
    receita_por_forma_pagamento,
    resumo_financeiro,
    serie_receita_despesa,
    top_barbeiros,
    top_servicos,
    total_comissoes,
)
from services.schemas import Barber, Expense

MAIO = DateRange(date(2024, 5, 1), date(2024, 5, 31))


# ---------------------------------------------------------
# Período
# ---------------------------------------------------------
def test_fim_padrao_e_o_inicio():
    p = DateRange(date(2024, 5, 10))
    assert p.end == date(2024, 5, 10)
    assert p.contains(datetime(2024, 5, 10, 23, 59, 59))
    assert p.contains(date(2024, 5, 10))
    assert not p.contains(datetime(2024, 5, 11, 0, 0))


def test_periodo_invertido():
    with pytest.raises(ValueError):
        DateRange(date(2024, 5, 10), date(2024, 5, 1))


def test_periodo_anterior_de_mesmo_tamanho():
    anterior = periodo_anterior(DateRange(date(2024, 5, 10), date(2024, 5, 16)))
    assert anterior == DateRange(date(2024, 5, 3), date(2024, 5, 9))
    assert anterior.dias == 7


def test_meses():
    assert mes_atual(date(2024, 2, 10)) == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert mes_anterior(date(2024, 1, 15)) == DateRange(date(2023, 12, 1), date(2023, 12, 31))


def test_periodos_predefinidos():
    atalhos = periodos_predefinidos(date(2024, 3, 5))
    assert list(atalhos) == ["Mês atual", "Mês anterior"]
    assert atalhos["Mês anterior"] == DateRange(date(2024, 2, 1), date(2024, 2, 29))


@pytest.mark.parametrize("atual, anterior, esperado", [
    (0, 0, 0.0),
    (10, 0, 100.0),
    (0, 10, -100.0),
    (150, 100, 50.0),
    (50, 100, -50.0),
])
def test_variacao_percentual(atual, anterior, esperado):
    assert variacao_percentual(atual, anterior) == pytest.approx(esperado)


# ---------------------------------------------------------
# Métricas
# ---------------------------------------------------------
def test_cancelados_sempre_fora(make_app):
    apps = [
        make_app(datetime(2024, 5, 2, 10, 0), status="canceled", app_id="1"),
        make_app(datetime(2024, 5, 2, 11, 0), status="pending", app_id="2"),
        make_app(datetime(2024, 5, 2, 12, 0), status="confirmed", app_id="3"),
    ]
    assert [a.id for a in filtrar_agendamentos(apps, MAIO)] == ["2", "3"]
    assert [a.id for a in agenda_semana(apps, date(2024, 5, 2))] == ["2", "3"]


def test_comissao_20_porcento(make_app):
    carlos = Barber(id="1", name="Carlos", commission=20.0)
    apps = [
        make_app(datetime(2024, 5, 2, 10, 0), status="confirmed", price=100.0, app_id="1"),
        make_app(datetime(2024, 5, 3, 10, 0), status="confirmed", price=50.0, app_id="2"),
    ]
    assert total_comissoes(apps, [carlos], MAIO) == pytest.approx(30.0)


def test_comissao_sem_barbeiro_ou_zerada(make_app):
    app = make_app(datetime(2024, 5, 2, 10, 0), price=100.0, barber_id="9")
    assert comissao_agendamento(app, {}) == 0.0
    assert comissao_agendamento(app, {"9": Barber(id="9", name="X", commission=0.0)}) == 0.0


def test_cenario_um_confirmado_sem_comissao(make_app):
    apps = [make_app(datetime(2024, 5, 6, 10, 0), minutes=30, status="confirmed", price=50.0)]
    m = calcular_metricas(apps, [], [], MAIO)
    assert m.receita_bruta == 50.0
    assert m.total_despesas == 0.0
    assert m.lucro_liquido == 50.0
    assert m.atendimentos == 1


def test_pendentes_nao_geram_receita(make_app):
    apps = [make_app(datetime(2024, 5, 6, 10, 0), status="pending", price=80.0)]
    assert calcular_metricas(apps, [], [], MAIO).receita_bruta == 0.0


def test_despesas_somam_comissoes_e_avulsas(make_app, barbers):
    apps = [make_app(datetime(2024, 5, 6, 10, 0), status="confirmed", price=100.0, barber_id="1")]
    despesas = [
        Expense(id="1", description="Luz", amount=70.0, date=date(2024, 5, 6)),
        Expense(id="2", description="Fora", amount=999.0, date=date(2024, 6, 1)),
    ]
    m = calcular_metricas(apps, despesas, barbers, MAIO)
    assert m.total_comissoes == pytest.approx(20.0)
    assert m.despesas_avulsas == pytest.approx(70.0)
    assert m.total_despesas == pytest.approx(90.0)
    assert m.lucro_liquido == pytest.approx(10.0)


def test_resumo_compara_com_periodo_anterior(make_app):
    semana = DateRange(date(2024, 5, 13), date(2024, 5, 19))
    apps = [
        make_app(datetime(2024, 5, 8, 10, 0), status="confirmed", price=100.0, app_id="1"),
        make_app(datetime(2024, 5, 14, 10, 0), status="confirmed", price=150.0, app_id="2"),
    ]
    resumo = resumo_financeiro(apps, [], [], semana)
    assert resumo.anterior.receita_bruta == 100.0
    assert resumo.variacao("receita_bruta") == pytest.approx(50.0)
    assert resumo.variacoes()["atendimentos"] == 0.0


# ---------------------------------------------------------
# Rankings e séries
# ---------------------------------------------------------
def test_ranking_estavel_em_empates(make_app):
    apps = [
        make_app(datetime(2024, 5, 2, 9, 0), service="Barba", app_id="1"),
        make_app(datetime(2024, 5, 2, 10, 0), service="Corte", app_id="2"),
        make_app(datetime(2024, 5, 2, 11, 0), service="Sobrancelha", app_id="3"),
        make_app(datetime(2024, 5, 2, 12, 0), service="Corte", app_id="4"),
        make_app(datetime(2024, 5, 2, 13, 0), service="Sobrancelha", app_id="5"),
    ]
    ranking = top_servicos(apps, MAIO)
    assert list(ranking.index) == ["Corte", "Sobrancelha", "Barba"]
    assert list(ranking) == [2, 2, 1]


def test_top_barbeiros_limita_e_resolve_nome(make_app, barbers):
    apps = [
        make_app(datetime(2024, 5, 2, 9 + i, 0), barber_id=str(i), barber=f"Barbeiro {i}", app_id=str(i))
        for i in range(1, 7)
    ]
    ranking = top_barbeiros(apps, MAIO, barbers)
    assert list(ranking.index) == ["Carlos", "Rafael", "Barbeiro 3", "Barbeiro 4"]


def test_horarios_movimentados(make_app):
    apps = [
        make_app(datetime(2024, 5, 2, 10, 0), app_id="1"),
        make_app(datetime(2024, 5, 3, 10, 30), app_id="2"),
        make_app(datetime(2024, 5, 3, 18, 0), app_id="3"),
        make_app(datetime(2024, 5, 3, 18, 0), status="canceled", app_id="4"),
    ]
    serie = horarios_movimentados(apps, MAIO)
    assert list(serie.index) == HORAS_RELATORIO
    assert serie["10:00"] == 2
    assert serie["18:00"] == 1
    assert serie["09:00"] == 0
    assert serie.sum() == 3


def test_receita_por_forma_pagamento(make_app):
    apps = [
        make_app(datetime(2024, 5, 2, 10, 0), status="confirmed", price=50.0, payment_method="Pix", app_id="1"),
        make_app(datetime(2024, 5, 2, 11, 0), status="confirmed", price=80.0, payment_method="Dinheiro", app_id="2"),
        make_app(datetime(2024, 5, 2, 12, 0), status="confirmed", price=40.0, payment_method="Pix", app_id="3"),
        make_app(datetime(2024, 5, 2, 13, 0), status="confirmed", price=99.0, app_id="4"),
        make_app(datetime(2024, 5, 2, 14, 0), status="pending", price=99.0, payment_method="Pix", app_id="5"),
    ]
    serie = receita_por_forma_pagamento(apps, MAIO)
    assert serie.to_dict() == {"Pix": 90.0, "Dinheiro": 80.0}
    assert list(serie.index) == ["Pix", "Dinheiro"]


def test_despesas_por_categoria():
    despesas = [
        Expense(id="1", description="Shampoo", amount=30.0, date=date(2024, 5, 2), category="Produtos"),
        Expense(id="2", description="Aluguel", amount=900.0, date=date(2024, 5, 5), category="Infraestrutura"),
        Expense(id="3", description="Pomada", amount=20.0, date=date(2024, 5, 9), category="Produtos"),
    ]
    serie = despesas_por_categoria(despesas, MAIO)
    assert list(serie.index) == ["Infraestrutura", "Produtos"]
    assert serie["Produtos"] == 50.0
    assert despesas_por_categoria([], MAIO).empty


def test_serie_diaria_receita_despesa(make_app, barbers):
    periodo = DateRange(date(2024, 5, 1), date(2024, 5, 3))
    apps = [make_app(datetime(2024, 5, 2, 10, 0), status="confirmed", price=100.0, barber_id="1")]
    despesas = [Expense(id="1", description="Luz", amount=50.0, date=date(2024, 5, 3))]

    df = serie_receita_despesa(apps, despesas, barbers, periodo)

    assert list(df.index) == periodo.datas()
    assert list(df["Receita"]) == [0.0, 100.0, 0.0]
    assert list(df["Despesas"]) == [0.0, 20.0, 50.0]
