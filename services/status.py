# ---------------------------------------------------------
# Tratamento visual na grade da agenda
# ---------------------------------------------------------
STATUS_STYLE = {
    "confirmed": {"bg": "#1f6feb", "fg": "#ffffff", "border": "#1f6feb"},
    "pending": {"bg": "#f2cc60", "fg": "#1c1c1c", "border": "#bf8700"},
    # cancelado fica fora da agenda e dos relatórios
    "canceled": {"bg": "#f6f8fa", "fg": "#8c959f", "border": "#d0d7de"},
}


def status_style(sts: str) -> dict:
    return STATUS_STYLE.get(sts, STATUS_STYLE["pending"])


def status_badge(sts: str) -> str:
    """Representação visual do status (somente UI)."""
    return {
        "pending": "⏳ Pendente",
        "confirmed": "✅ Confirmado",
        "canceled": "🚫 Cancelado",
    }.get(sts, sts)


def active_badge(sts: str) -> str:
    return "🟢 Ativo" if sts == "active" else "⚪ Inativo"
