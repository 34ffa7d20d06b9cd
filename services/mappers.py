"""
Adaptadores entre o JSON do webhook (chaves em português, status textuais)
e as entidades internas de `services.schemas`.

Nada além destas funções conhece o formato do backend: as páginas e os
motores de agenda/relatórios só enxergam as dataclasses.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional

from services.schemas import (
    APPOINTMENT_STATUS_API,
    BARBER_STATUS_API,
    DEFAULT_DURATION_MIN,
    PAYMENT_METHODS,
    SERVICE_STATUS_API,
    Appointment,
    Barber,
    Config,
    Expense,
    Service,
)

logger = logging.getLogger("barbearia")

DATE_FMT = "%Y-%m-%d"
TIME_FMT = "%H:%M"

_APPOINTMENT_STATUS_FROM_API = {v: k for k, v in APPOINTMENT_STATUS_API.items()}


# ---------------------------------------------------------
# Primitivos tolerantes
# ---------------------------------------------------------
def to_float(v: Any, default: float = 0.0) -> float:
    """Converte número/str (aceita vírgula decimal) em float; `default` se inválido."""
    if v is None or v == "":
        return default
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    try:
        return float(str(v).strip().replace(",", "."))
    except ValueError:
        return default


def to_int(v: Any, default: int = 0) -> int:
    return int(round(to_float(v, float(default))))


def wire_id(item_id: Optional[str]):
    """IDs numéricos vão como inteiro (o backend compara números)."""
    if item_id is None or str(item_id).strip() == "":
        return None
    s = str(item_id).strip()
    return int(s) if s.isdigit() else s


def _str_id(v: Any) -> str:
    return "" if v is None else str(v).strip()


def parse_date(s: Any) -> date:
    if isinstance(s, datetime):
        return s.date()
    if isinstance(s, date):
        return s
    return datetime.strptime(str(s).strip()[:10], DATE_FMT).date()


def parse_start(data: Any, hora: Any) -> datetime:
    """Combina `Data` (yyyy-MM-dd) e `Hora` (HH:mm[:ss]) em horário local ingênuo."""
    d = parse_date(data)
    t = datetime.strptime(str(hora).strip()[:5], TIME_FMT).time()
    return datetime.combine(d, t)


def _sim_nao(v: Any) -> bool:
    return str(v or "Não").strip().lower() == "sim"


# ---------------------------------------------------------
# Serviços
# ---------------------------------------------------------
def api_to_service(d: dict) -> Service:
    return Service(
        id=_str_id(d.get("ID")),
        name=str(d.get("Nome") or "").strip(),
        price=to_float(d.get("Preço")),
        duration=max(to_int(d.get("Duração (min)"), DEFAULT_DURATION_MIN), 1),
        status="active" if d.get("Status") == "Ativo" else "inactive",
    )


def service_to_api(s: Service) -> dict:
    body = {
        "Nome": s.name,
        "Preço": s.price,
        "Duração (min)": s.duration,
        "Status": SERVICE_STATUS_API.get(s.status, "Desativado"),
    }
    if wire_id(s.id) is not None:
        body = {"ID": wire_id(s.id), **body}
    return body


# ---------------------------------------------------------
# Barbeiros
# ---------------------------------------------------------
def api_to_barber(d: dict) -> Barber:
    return Barber(
        id=_str_id(d.get("ID")),
        name=str(d.get("Nome") or "").strip(),
        specialty=str(d.get("Especialidade") or "").strip(),
        status="active" if d.get("Status") == "Ativo" else "inactive",
        notes=str(d.get("Observacoes") or ""),
        commission=min(max(to_float(d.get("Comissao")), 0.0), 100.0),
    )


def barber_to_api(b: Barber) -> dict:
    body = {
        "Nome": b.name,
        "Especialidade": b.specialty,
        "Comissao": b.commission,
        "Status": BARBER_STATUS_API.get(b.status, "Inativo"),
        "Observacoes": b.notes or "",
    }
    if wire_id(b.id) is not None:
        body = {"ID": wire_id(b.id), **body}
    return body


def next_numeric_id(ids: Iterable[str]) -> str:
    """Próximo ID sequencial (maior ID numérico + 1), como o backend de barbeiros espera."""
    nums = [int(i) for i in ids if str(i).isdigit()]
    return str(max(nums) + 1 if nums else 1)


# ---------------------------------------------------------
# Agendamentos
# ---------------------------------------------------------
def api_to_appointment(d: dict, services_by_id: dict[str, Service]) -> Appointment:
    """
    Converte um registro de /agenda.
    Preço e duração vêm do serviço associado; se o ID_Servico não existir,
    assume 30 minutos e preço zero.
    """
    start = parse_start(d.get("Data"), d.get("Hora"))
    service_id = _str_id(d.get("ID_Servico"))
    service = services_by_id.get(service_id)
    duration = service.duration if service else DEFAULT_DURATION_MIN
    price = service.price if service else 0.0

    payment = str(d.get("Forma_Pagamento") or "").strip() or None

    return Appointment(
        id=_str_id(d.get("ID")) or None,
        client_name=str(d.get("Cliente") or "").strip(),
        client_phone=str(d.get("Telefone_Cliente") or "").strip(),
        service_id=service_id,
        barber_id=_str_id(d.get("ID_Barbeiro")),
        start=start,
        end=start + timedelta(minutes=duration),
        service=str(d.get("Servico") or (service.name if service else "")),
        barber=str(d.get("Barbeiro") or ""),
        status=_APPOINTMENT_STATUS_FROM_API.get(d.get("Status"), "pending"),
        price=price,
        payment_method=payment,
    )


def appointment_to_api(a: Appointment) -> dict:
    """Registro completo para o POST em /agenda (substituição integral)."""
    body = {
        "Data": a.start.strftime(DATE_FMT),
        "Hora": a.start.strftime(TIME_FMT),
        "Cliente": a.client_name,
        "Telefone_Cliente": a.client_phone,
        "ID_Servico": wire_id(a.service_id),
        "Servico": a.service,
        "ID_Barbeiro": wire_id(a.barber_id),
        "Barbeiro": a.barber,
        "Status": APPOINTMENT_STATUS_API.get(a.status, "Pendente"),
    }
    if a.payment_method:
        body["Forma_Pagamento"] = a.payment_method
    if wire_id(a.id) is not None:
        body = {"ID": wire_id(a.id), **body}
    return body


# ---------------------------------------------------------
# Despesas
# ---------------------------------------------------------
def api_to_expense(d: dict) -> Expense:
    return Expense(
        id=_str_id(d.get("ID")) or None,
        description=str(d.get("Descricao") or "").strip(),
        amount=to_float(d.get("Valor")),
        date=parse_date(d.get("Data")),
        category=str(d.get("Categoria") or "Outros"),
    )


def expense_to_api(e: Expense) -> dict:
    body = {
        "Descricao": e.description,
        "Valor": e.amount,
        "Data": e.date.strftime(DATE_FMT),
        "Categoria": e.category,
    }
    if wire_id(e.id) is not None:
        body = {"ID": wire_id(e.id), **body}
    return body


# ---------------------------------------------------------
# Configuração (registro único)
# ---------------------------------------------------------
def parse_payment_methods(s: Optional[str]) -> tuple:
    """'Pix, Dinheiro' -> ('pix', 'dinheiro'); rótulos desconhecidos são ignorados."""
    by_label = {label.lower(): pm_id for pm_id, label in PAYMENT_METHODS.items()}
    out = []
    for part in (s or "").split(","):
        pm_id = by_label.get(part.strip().lower())
        if pm_id and pm_id not in out:
            out.append(pm_id)
    return tuple(out)


def join_payment_methods(ids: Iterable[str]) -> str:
    return ", ".join(PAYMENT_METHODS[i] for i in ids if i in PAYMENT_METHODS)


def _config_record(data: Any) -> Optional[dict]:
    """Aceita [registro], registro, ou linhas chave/valor [{"Chave", "Valor"}]."""
    if isinstance(data, dict):
        return data
    if not isinstance(data, list) or not data:
        return None
    rows = [r for r in data if isinstance(r, dict)]
    if rows and all("Chave" in r for r in rows):
        return {r["Chave"]: r.get("Valor") for r in rows}
    return rows[0] if rows else None


def api_to_config(data: Any) -> Optional[Config]:
    rec = _config_record(data)
    if rec is None:
        return None
    return Config(
        shop_name=str(rec.get("Nome_Barbearia") or ""),
        phone=str(rec.get("Telefone_Principal") or ""),
        address=str(rec.get("Endereco") or ""),
        operating_hours=str(rec.get("Horario_Funcionamento") or ""),
        payment_methods=parse_payment_methods(rec.get("Formas_Pagamento")),
        audio_response=_sim_nao(rec.get("Responder_Audio")),
        send_reactions=_sim_nao(rec.get("Enviar_Reacoes")),
    )


def config_to_api(c: Config) -> dict:
    return {
        "Nome_Barbearia": c.shop_name,
        "Telefone_Principal": c.phone,
        "Endereco": c.address,
        "Horario_Funcionamento": c.operating_hours,
        "Formas_Pagamento": join_payment_methods(c.payment_methods),
        "Responder_Audio": "Sim" if c.audio_response else "Não",
        "Enviar_Reacoes": "Sim" if c.send_reactions else "Não",
    }


# ---------------------------------------------------------
# Listas
# ---------------------------------------------------------
def map_rows(rows: Any, fn, label: str) -> list:
    """
    Aplica `fn` a cada dict de `rows`.
    Itens não-dict ou com campos impossíveis de converter são descartados com aviso.
    """
    if not isinstance(rows, list):
        if rows not in (None, "", {}):
            logger.warning(f"{label}: resposta não é uma lista, ignorada.")
        return []
    out = []
    for r in rows:
        if not isinstance(r, dict):
            continue
        try:
            out.append(fn(r))
        except (ValueError, TypeError) as e:
            logger.warning(f"{label}: registro ignorado ({e}): {r.get('ID')}")
    return out
