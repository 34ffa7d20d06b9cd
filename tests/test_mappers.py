from datetime import date, datetime

import pytest

from services.mappers import (
    api_to_appointment,
    api_to_barber,
    api_to_config,
    appointment_to_api,
    config_to_api,
    join_payment_methods,
    map_rows,
    next_numeric_id,
    parse_payment_methods,
    parse_start,
    to_float,
    wire_id,
)
from services.schemas import Config, Service


@pytest.mark.parametrize("raw, esperado", [
    (10, 10.0),
    ("25,50", 25.5),
    ("1.5", 1.5),
    ("", 0.0),
    (None, 0.0),
    ("abc", 0.0),
])
def test_to_float(raw, esperado):
    assert to_float(raw) == esperado


def test_wire_id():
    assert wire_id("12") == 12
    assert wire_id("abc-1") == "abc-1"
    assert wire_id("") is None
    assert wire_id(None) is None


def test_parse_start_ignora_segundos():
    assert parse_start("2024-05-13", "08:15:00") == datetime(2024, 5, 13, 8, 15)


@pytest.mark.parametrize("api, interno", [
    ("Confirmado", "confirmed"),
    ("Pendente", "pending"),
    ("Cancelado", "canceled"),
    (None, "pending"),
])
def test_status_do_agendamento(api, interno):
    row = {"ID": 1, "Data": "2024-05-13", "Hora": "09:00", "ID_Servico": 1, "Status": api}
    assert api_to_appointment(row, {}).status == interno


def test_fim_usa_duracao_do_servico_ou_30_min():
    row = {"ID": 1, "Data": "2024-05-13", "Hora": "09:00", "ID_Servico": 5}
    servico = Service(id="5", name="Corte + barba", price=70.0, duration=60)

    com = api_to_appointment(row, {"5": servico})
    sem = api_to_appointment(row, {})

    assert com.end == datetime(2024, 5, 13, 10, 0)
    assert com.price == 70.0
    assert com.service == "Corte + barba"
    assert sem.end == datetime(2024, 5, 13, 9, 30)
    assert sem.price == 0.0


def test_appointment_sem_id_e_sem_pagamento(make_app):
    body = appointment_to_api(make_app(datetime(2024, 5, 13, 11, 0), app_id=None))
    assert "ID" not in body
    assert "Forma_Pagamento" not in body
    assert body["Status"] == "Pendente"


def test_comissao_limitada_a_100():
    assert api_to_barber({"ID": 1, "Nome": "X", "Comissao": "150"}).commission == 100.0
    assert api_to_barber({"ID": 1, "Nome": "X", "Comissao": "-5"}).commission == 0.0


def test_observacoes_do_barbeiro():
    barber = api_to_barber({"ID": 2, "Nome": "Rafael", "Status": "Ativo", "Observacoes": "Só atende à tarde"})
    assert barber.notes == "Só atende à tarde"
    assert api_to_barber({"ID": 3, "Nome": "Y", "Observacoes": None}).notes == ""


def test_next_numeric_id():
    assert next_numeric_id(["1", "7", "3"]) == "8"
    assert next_numeric_id([]) == "1"
    assert next_numeric_id(["abc"]) == "1"


# ---------------------------------------------------------
# Formas de pagamento / configuração
# ---------------------------------------------------------
def test_parse_payment_methods():
    assert parse_payment_methods("Pix, cartão,  DINHEIRO, Boleto, Pix") == ("pix", "cartao", "dinheiro")
    assert parse_payment_methods(None) == ()


def test_formas_de_pagamento_ida_e_volta():
    original = "Dinheiro, Pix"
    config = api_to_config([{"Formas_Pagamento": original}])
    volta = config_to_api(config)["Formas_Pagamento"]
    assert set(volta.split(", ")) == set(original.split(", "))
    assert join_payment_methods(["cartao", "desconhecido"]) == "Cartão"


def test_config_aceita_objeto_unico():
    config = api_to_config({"Nome_Barbearia": "Navalha", "Enviar_Reacoes": "Sim"})
    assert config == Config(shop_name="Navalha", send_reactions=True)


def test_config_vazia():
    assert api_to_config([]) is None
    assert api_to_config(None) is None


def test_map_rows_descarta_invalidos():
    rows = [{"ID": 1, "Data": "2024-05-02", "Valor": 10}, {"ID": 2, "Data": None}, 42]
    out = map_rows(rows, lambda r: r["Data"][:4], "teste")
    assert out == ["2024"]
    assert map_rows(None, str, "teste") == []


def test_datas_de_despesa():
    from services.mappers import api_to_expense, expense_to_api

    e = api_to_expense({"ID": "3", "Descricao": "Aluguel", "Valor": 1200, "Data": "2024-05-05"})
    assert e.date == date(2024, 5, 5)
    assert e.category == "Outros"
    assert expense_to_api(e)["ID"] == 3
