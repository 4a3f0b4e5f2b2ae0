"""
End-to-end walkthrough of the revenue simulator (visual).

Run with:
    streamlit run scripts/e2e_walkthrough.py

Tip: set breakpoints anywhere in monetize_ai/*
"""

import io
import os

import altair as alt
import pandas as pd
import streamlit as st

from monetize_ai.analysis import aggregate, payback_month, plot_revenue
from monetize_ai.export import read_delimited_text, to_delimited_text
from monetize_ai.model import simulate_revenue
from monetize_ai.persistence import IdeaStore, apply_session_bundle, collect_session_bundle
from monetize_ai.types import SimulationParams

VISUALIZE = os.getenv("E2E_VISUALIZE", "1") != "0"

SCENARIOS = {
    "Baseline": SimulationParams(),
    "Premium price": SimulationParams(arpu=19.99),
    "Leaky bucket": SimulationParams(churn_rate=15.0),
    "Viral launch": SimulationParams(acquisition_rate=2000.0, initial_users=5000.0),
}


def _scenario_chart(frames: dict[str, pd.DataFrame]) -> None:
    if not VISUALIZE:
        return
    df = pd.concat([f.assign(Scenario=name) for name, f in frames.items()], ignore_index=True)
    chart = (
        alt.Chart(df)
        .mark_line()
        .encode(
            x=alt.X("month:Q", title="Month"),
            y=alt.Y("revenue:Q", title="MRR ($)"),
            color=alt.Color("Scenario:N", scale=alt.Scale(scheme="tableau10")),
        )
        .properties(height=320, title="MRR by scenario")
    )
    st.altair_chart(chart, width="stretch")


def main() -> None:
    st.title("E2E walkthrough")

    st.header("1. Simulate scenarios")
    results = {name: simulate_revenue(p) for name, p in SCENARIOS.items()}
    summaries = pd.DataFrame({name: aggregate(r) for name, r in results.items()}).T
    summaries["payback_month"] = [payback_month(r) for r in results.values()]
    st.dataframe(summaries, width="stretch")
    _scenario_chart({name: r.monthly for name, r in results.items()})

    st.header("2. Baseline detail")
    baseline = results["Baseline"]
    if VISUALIZE:
        st.altair_chart(plot_revenue(baseline.monthly), width="stretch")

    st.header("3. Export and parse back")
    text = to_delimited_text(baseline)
    parsed = read_delimited_text(text)
    ok = parsed["Revenue ($)"].tolist() == [r.revenue for r in baseline]
    st.write("Round trip matches:", ok)
    st.code("\n".join(text.split("\n")[:6]), language="text")

    st.header("4. Session bundle")
    store = IdeaStore()
    store.save("Walkthrough idea", "Freemium habit tracker, $9.99/month")
    bundle = collect_session_bundle(SCENARIOS["Baseline"], store.ideas, baseline)
    params, ideas = apply_session_bundle(io.BytesIO(bundle))
    st.write("Restored params:", params)
    st.write("Restored ideas:", len(ideas))


main()
