from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

# ---------------------------------------------------------
# Vocabulário do backend (wire) <-> interno
# ---------------------------------------------------------
SERVICE_STATUS_API = {"active": "Ativo", "inactive": "Desativado"}
BARBER_STATUS_API = {"active": "Ativo", "inactive": "Inativo"}
APPOINTMENT_STATUS_API = {
    "confirmed": "Confirmado",
    "pending": "Pendente",
    "canceled": "Cancelado",
}

EXPENSE_CATEGORIES = (
    "Produtos",
    "Infraestrutura",
    "Marketing",
    "Salários",
    "Impostos",
    "Outros",
)

# id do formulário -> rótulo gravado em Formas_Pagamento
PAYMENT_METHODS = {
    "pix": "Pix",
    "cartao": "Cartão",
    "dinheiro": "Dinheiro",
}

DEFAULT_DURATION_MIN = 30


@dataclass(frozen=True)
class Service:
    id: str
    name: str
    price: float = 0.0
    duration: int = DEFAULT_DURATION_MIN
    status: str = "active"  # "active" | "inactive"


@dataclass(frozen=True)
class Barber:
    id: str
    name: str
    specialty: str = ""
    status: str = "active"
    notes: str = ""
    commission: float = 0.0  # percentual 0..100


@dataclass(frozen=True)
class Appointment:
    id: Optional[str]
    client_name: str
    client_phone: str
    service_id: str
    barber_id: str
    start: datetime
    end: datetime
    service: str = ""  # nome denormalizado pelo backend
    barber: str = ""
    status: str = "pending"  # "confirmed" | "pending" | "canceled"
    price: float = 0.0
    payment_method: Optional[str] = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start) / timedelta(minutes=1))


@dataclass(frozen=True)
class Expense:
    id: Optional[str]
    description: str
    amount: float
    date: date
    category: str = "Outros"


@dataclass(frozen=True)
class Config:
    shop_name: str = ""
    phone: str = ""
    address: str = ""
    operating_hours: str = ""
    payment_methods: tuple = ()  # ids de PAYMENT_METHODS
    audio_response: bool = False
    send_reactions: bool = False
