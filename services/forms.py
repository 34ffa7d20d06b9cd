"""
Validação dos formulários antes de qualquer chamada ao webhook.

Cada formulário é um modelo pydantic; `validate_form` devolve o modelo válido
ou um dicionário campo -> mensagem para exibir junto de cada campo.
"""

import re
from datetime import date, datetime, timedelta
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from services.schemas import (
    DEFAULT_DURATION_MIN,
    EXPENSE_CATEGORIES,
    PAYMENT_METHODS,
    Appointment,
    Barber,
    Config,
    Expense,
    Service,
)

DateType = date

PHONE_RE = re.compile(r"^\(\d{2}\) \d{5}-\d{4}$")


def _required(v: Optional[str], msg: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError(msg)
    return v


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# ---------------------------------------------------------
# Agendamento
# ---------------------------------------------------------
class AppointmentForm(_Form):
    client_name: str
    client_phone: str
    service_id: str
    barber_id: str
    start: datetime  # vem do slot clicado, não é editável
    payment_method: Optional[str] = None

    @field_validator("client_name", mode="before")
    @classmethod
    def _client_name(cls, v):
        return _required(v, "Nome do cliente é obrigatório.")

    @field_validator("client_phone", mode="before")
    @classmethod
    def _phone(cls, v):
        v = (v or "").strip()
        if not PHONE_RE.match(v):
            raise ValueError("Telefone deve estar no formato (99) 99999-9999.")
        return v

    @field_validator("service_id", mode="before")
    @classmethod
    def _service(cls, v):
        return _required(None if v is None else str(v), "Selecione um serviço.")

    @field_validator("barber_id", mode="before")
    @classmethod
    def _barber(cls, v):
        return _required(None if v is None else str(v), "Selecione um barbeiro.")

    @field_validator("payment_method", mode="before")
    @classmethod
    def _payment(cls, v):
        return (v or "").strip() or None

    def to_appointment(
        self,
        services: list[Service],
        barbers: list[Barber],
        appointment_id: Optional[str] = None,
        status: str = "pending",
    ) -> Appointment:
        """
        Monta o agendamento completo para o POST.
        O backend guarda os nomes de serviço e barbeiro no próprio registro.
        """
        service = next((s for s in services if s.id == self.service_id), None)
        barber = next((b for b in barbers if b.id == self.barber_id), None)
        duration = service.duration if service else DEFAULT_DURATION_MIN
        return Appointment(
            id=appointment_id,
            client_name=self.client_name,
            client_phone=self.client_phone,
            service_id=self.service_id,
            barber_id=self.barber_id,
            start=self.start,
            end=self.start + timedelta(minutes=duration),
            service=service.name if service else "",
            barber=barber.name if barber else "",
            status=status,
            price=service.price if service else 0.0,
            payment_method=self.payment_method,
        )


# ---------------------------------------------------------
# Barbeiro
# ---------------------------------------------------------
class BarberForm(_Form):
    name: str
    specialty: str
    status: Literal["active", "inactive"] = "active"
    notes: Optional[str] = None
    commission: float = 0.0

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return _required(v, "Nome do barbeiro é obrigatório.")

    @field_validator("specialty", mode="before")
    @classmethod
    def _specialty(cls, v):
        return _required(v, "Especialidade é obrigatória.")

    @field_validator("commission")
    @classmethod
    def _commission(cls, v):
        if not 0 <= v <= 100:
            raise ValueError("A comissão deve estar entre 0 e 100%.")
        return v

    def to_barber(self, barber_id: str) -> Barber:
        return Barber(
            id=barber_id,
            name=self.name,
            specialty=self.specialty,
            status=self.status,
            notes=self.notes or "",
            commission=self.commission,
        )


# ---------------------------------------------------------
# Serviço
# ---------------------------------------------------------
class ServiceForm(_Form):
    name: str
    price: float
    duration: int
    status: Literal["active", "inactive"] = "active"

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return _required(v, "Nome do serviço é obrigatório.")

    @field_validator("price")
    @classmethod
    def _price(cls, v):
        if v < 0:
            raise ValueError("O preço deve ser um número positivo.")
        return v

    @field_validator("duration")
    @classmethod
    def _duration(cls, v):
        if v < 1:
            raise ValueError("A duração deve ser de pelo menos 1 minuto.")
        return v

    def to_service(self, service_id: Optional[str] = None) -> Service:
        return Service(
            id=service_id or "",
            name=self.name,
            price=self.price,
            duration=self.duration,
            status=self.status,
        )


# ---------------------------------------------------------
# Despesa
# ---------------------------------------------------------
class ExpenseForm(_Form):
    description: str
    amount: float
    date: DateType
    category: str

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return _required(v, "A descrição é obrigatória.")

    @field_validator("amount")
    @classmethod
    def _amount(cls, v):
        if v <= 0:
            raise ValueError("O valor deve ser maior que zero.")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        if v not in EXPENSE_CATEGORIES:
            raise ValueError("A categoria é obrigatória.")
        return v

    def to_expense(self, expense_id: Optional[str] = None) -> Expense:
        return Expense(
            id=expense_id,
            description=self.description,
            amount=self.amount,
            date=self.date,
            category=self.category,
        )


# ---------------------------------------------------------
# Configurações
# ---------------------------------------------------------
class SettingsForm(_Form):
    shop_name: str
    phone: str
    address: str
    operating_hours: str
    payment_methods: list[str]
    audio_response: bool = False
    send_reactions: bool = False

    @field_validator("shop_name", mode="before")
    @classmethod
    def _shop_name(cls, v):
        return _required(v, "Nome da barbearia é obrigatório.")

    @field_validator("phone", mode="before")
    @classmethod
    def _phone(cls, v):
        return _required(v, "Telefone principal é obrigatório.")

    @field_validator("address", mode="before")
    @classmethod
    def _address(cls, v):
        return _required(v, "Endereço é obrigatório.")

    @field_validator("operating_hours", mode="before")
    @classmethod
    def _hours(cls, v):
        return _required(v, "Horário de funcionamento é obrigatório.")

    @field_validator("payment_methods")
    @classmethod
    def _payment_methods(cls, v):
        v = [p for p in v if p in PAYMENT_METHODS]
        if not v:
            raise ValueError("Você deve selecionar pelo menos uma forma de pagamento.")
        return v

    def to_config(self) -> Config:
        return Config(
            shop_name=self.shop_name,
            phone=self.phone,
            address=self.address,
            operating_hours=self.operating_hours,
            payment_methods=tuple(self.payment_methods),
            audio_response=self.audio_response,
            send_reactions=self.send_reactions,
        )

    @classmethod
    def from_config(cls, c: Config) -> dict:
        """Valores iniciais do formulário a partir da configuração salva."""
        return {
            "shop_name": c.shop_name,
            "phone": c.phone,
            "address": c.address,
            "operating_hours": c.operating_hours,
            "payment_methods": list(c.payment_methods),
            "audio_response": c.audio_response,
            "send_reactions": c.send_reactions,
        }


# ---------------------------------------------------------
# Execução da validação
# ---------------------------------------------------------
def _message(err: dict) -> str:
    ctx_err = (err.get("ctx") or {}).get("error")
    if isinstance(ctx_err, ValueError):
        return str(ctx_err)
    if err.get("type") == "missing":
        return "Campo obrigatório."
    if err.get("type", "").endswith("_parsing") or err.get("type", "").endswith("_type"):
        return "Valor inválido."
    return err.get("msg", "Valor inválido.")


def validate_form(form_cls: type[_Form], data: dict):
    """
    Retorna (modelo, {}) se válido ou (None, {campo: mensagem}) se inválido.
    """
    try:
        return form_cls.model_validate(data), {}
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for err in exc.errors():
            campo = str(err["loc"][0]) if err.get("loc") else "__all__"
            errors.setdefault(campo, _message(err))
        return None, errors
