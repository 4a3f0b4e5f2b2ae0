from __future__ import annotations

import html
from typing import Optional

import streamlit as st

from monetize_ai.types import CommunityMessage, SimulationParams


def inject_brand_styles() -> None:
    st.markdown(
        """
        <style>
        :root { --brand-accent: #06b6d4; --brand-blue: #2563eb; --brand-bg: #0f172a; --brand-panel: #020617; --brand-text: #e2e8f0; }
        html, body, .stApp { font-family: Inter, Helvetica, Arial, sans-serif; color: var(--brand-text); }
        .stApp { background-color: var(--brand-bg) !important; }
        [data-testid="stSidebar"] { background-color: var(--brand-panel) !important; }
        [data-testid="stSidebar"] * { color: var(--brand-text); }
        h1, h2, h3, h4, h5, h6 { color: #f8fafc; }
        a, strong { color: var(--brand-accent); }
        .stButton>button { background-color: var(--brand-blue); color: #fff; border: 0; border-radius: 8px; }
        .stButton>button:hover { background-color: #1d4ed8; }
        .stApp header { background: transparent; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def render_brand_header() -> None:
    st.markdown(
        "<div style='padding-top:8px;'><h1 style='margin-bottom:0;'>MonetizeAI</h1>"
        "<p style='color:#94a3b8;margin-top:4px;'>Turn a raw app idea into a monetization plan.</p></div>",
        unsafe_allow_html=True,
    )
    st.divider()


def format_currency(value: float) -> str:
    return f"${value:,.0f}"


def format_chat_message(msg: CommunityMessage) -> str:
    align = "flex-end" if msg.is_me else "flex-start"
    bubble = "#1e3a8a" if msg.is_me else "#1e293b"
    color = msg.avatar_color or "#64748b"
    return (
        f"<div style='display:flex;justify-content:{align};margin:4px 0;'>"
        f"<div style='max-width:75%;background:{bubble};padding:6px 12px;border-radius:12px;'>"
        f"<span style='color:{color};font-weight:600;font-size:12px;'>{html.escape(msg.user)}</span> "
        f"<span style='color:#64748b;font-size:11px;'>{html.escape(msg.timestamp)}</span><br>"
        f"{html.escape(msg.text)}</div></div>"
    )


# Sidebar widget ranges; None means unbounded
PARAM_BOUNDS: dict[str, tuple[Optional[float], Optional[float]]] = {
    "acquisition_rate": (0.0, 100_000.0),
    "initial_users": (0.0, None),
    "conversion_rate": (0.0, 20.0),
    "churn_rate": (0.0, 50.0),
    "arpu": (0.01, None),
    "months": (1, 120),
}


def clamp_params(params: SimulationParams) -> tuple[SimulationParams, list[str]]:
    """Fit restored parameters into the sidebar widget ranges.

    Returns the adjusted parameters and one note per field that was changed.
    """
    values = params.to_dict()
    notes: list[str] = []
    for name, (low, high) in PARAM_BOUNDS.items():
        value = values[name]
        fitted = value
        if low is not None and fitted < low:
            fitted = low
        if high is not None and fitted > high:
            fitted = high
        if fitted != value:
            notes.append(f"{name} {value} is outside the adjustable range, using {fitted}")
        # Widgets are typed: months is an int slider, the rest are float inputs
        values[name] = int(fitted) if name == "months" else float(fitted)
    return SimulationParams.from_dict(values), notes
