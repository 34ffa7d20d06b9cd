from datetime import date, datetime

from services.schemas import Barber
from services.status import STATUS_STYLE, active_badge, status_badge, status_style
from services.utils import (
    fmt_brl,
    fmt_date_br,
    fmt_datetime_br,
    fmt_pct,
    fmt_weekday_br,
    key_for,
    ordenar_registros,
    parse_date_safe,
    to_dataframe,
)


def test_fmt_brl():
    assert fmt_brl(1234.5) == "R$ 1.234,50"
    assert fmt_brl(-10) == "-R$ 10,00"
    assert fmt_brl("x") == "R$ 0,00"


def test_fmt_pct():
    assert fmt_pct(12.5) == "+12,5%"
    assert fmt_pct(-100) == "-100,0%"


def test_datas():
    assert parse_date_safe("2024-05-10") == date(2024, 5, 10)
    assert parse_date_safe("não é data") is None
    assert fmt_date_br(datetime(2024, 5, 10, 9, 0)) == "10/05/2024"
    assert fmt_date_br(None) == "—"
    assert fmt_datetime_br(datetime(2024, 5, 10, 9, 30)) == "10/05/2024 às 09:30"
    assert fmt_weekday_br(date(2024, 5, 13)) == "seg 13/05"


def test_ordenar_registros():
    barbers = [
        Barber(id="1", name="rafael", commission=10.0),
        Barber(id="2", name="Carlos", commission=30.0),
        Barber(id="3", name="bruno", commission=20.0),
    ]
    assert [b.id for b in ordenar_registros(barbers, "name")] == ["3", "2", "1"]
    assert [b.id for b in ordenar_registros(barbers, "commission", ascending=False)] == ["2", "3", "1"]
    assert ordenar_registros(barbers, None) == barbers


def test_to_dataframe():
    df = to_dataframe([Barber(id="1", name="Carlos")], {"name": "Nome", "status": "Status"})
    assert list(df.columns) == ["Nome", "Status"]
    assert df.iloc[0]["Status"] == "active"


def test_key_for():
    assert key_for("edit", None, 3) == "edit-3"


def test_status():
    assert set(STATUS_STYLE) == {"pending", "confirmed", "canceled"}
    assert status_badge("confirmed") == "✅ Confirmado"
    assert status_style("desconhecido") == STATUS_STYLE["pending"]
    assert active_badge("inactive") == "⚪ Inativo"
