import streamlit as st

from services.finance_core import periodos_predefinidos
from services.utils import fmt_pct


def is_mobile() -> bool:
    """Modo mobile controlado pelo usuário na barra lateral."""
    return st.session_state.get("modo_mobile", False)


def responsive_columns(desktop: int, mobile: int = 1):
    return st.columns(mobile if is_mobile() else desktop)


def section(title: str, caption: str | None = None):
    st.subheader(title)
    if caption:
        st.caption(caption)


def kpi_cards(items, desktop_cols=3, mobile_cols=1):
    """
    Cartões de KPI: (rótulo, valor) ou (rótulo, valor, variação %).
    A variação é exibida como delta "em relação ao período anterior".
    """
    cols = responsive_columns(desktop=desktop_cols, mobile=mobile_cols)
    n = len(cols)
    for i, it in enumerate(items):
        col = cols[i % n]
        if len(it) == 3:
            label, value, delta = it
            col.metric(label, value, delta=fmt_pct(delta), help="Em relação ao período anterior")
        else:
            label, value = it
            col.metric(label, value)


def field_errors(errors: dict[str, str], labels: dict[str, str]):
    """Mostra os erros de validação campo a campo."""
    for campo, msg in errors.items():
        st.error(f"**{labels.get(campo, campo)}:** {msg}")


def responsive_dataframe(df):
    """Tabela no desktop → cartões no mobile."""
    if is_mobile():
        for row in df.to_dict(orient="records"):
            with st.container(border=True):
                for k, v in row.items():
                    st.write(f"**{k}:** {v}")
    else:
        st.dataframe(df, use_container_width=True, hide_index=True)


def date_range_picker(default, key: str):
    """
    Seletor de período: atalhos de mês ou intervalo livre.
    Devolve (início, fim) com fim = início quando só um dia foi escolhido.
    """
    atalhos = periodos_predefinidos()
    escolha = st.radio("Período", list(atalhos) + ["Personalizado"], horizontal=True, key=f"{key}_atalho")
    if escolha in atalhos:
        return atalhos[escolha].start, atalhos[escolha].end

    value = st.date_input(
        "Intervalo",
        value=(default.start, default.end),
        format="DD/MM/YYYY",
        key=key,
    )
    if isinstance(value, (tuple, list)):
        if len(value) == 2:
            return value[0], value[1]
        if len(value) == 1:
            return value[0], value[0]
        return default.start, default.end
    return value, value
