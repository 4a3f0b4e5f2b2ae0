import io
from datetime import datetime

import streamlit as st
import streamlit.components.v1 as components
from streamlit.logger import get_logger

from monetize_ai.analysis import aggregate, ending_mrr, payback_month, plot_revenue, plot_users
from monetize_ai.community import MockChatFeed
from monetize_ai.config import load_settings
from monetize_ai.export import EXPORT_FILE_NAME, to_delimited_text
from monetize_ai.generation import (
    GENERATION_FAILED_MESSAGE,
    IDEA_TEMPLATES,
    STRATEGY_EXAMPLES,
    GenerationError,
    stream_ai_monetization_tips,
    stream_market_trends,
    stream_strategy_analysis,
)
from monetize_ai.model import simulate_revenue
from monetize_ai.persistence import IdeaStore, apply_session_bundle, collect_session_bundle
from monetize_ai.types import SimulationParams, SimulationResult
from monetize_ai.ui import (
    PARAM_BOUNDS,
    clamp_params,
    format_chat_message,
    format_currency,
    inject_brand_styles,
    render_brand_header,
)

# MUST be the first Streamlit call:
st.set_page_config(page_title="MonetizeAI", layout="wide", page_icon="🚀")

# Streamlit logger (appears in deployment logs)
logger = get_logger(__name__)
logger.info("App startup: MonetizeAI")

SETTINGS = load_settings()
DEFAULT_PARAMS = SimulationParams()

if "idea_store" not in st.session_state:
    st.session_state["idea_store"] = IdeaStore()
if "chat_feed" not in st.session_state:
    st.session_state["chat_feed"] = MockChatFeed()


def _get_state(key: str, default):
    return st.session_state.get(key, default)


def _apply_pending_state_updates() -> None:
    """Apply any deferred session state updates before widgets render."""

    pending = st.session_state.pop("_pending_state_update", None)
    if isinstance(pending, dict):
        for k, v in pending.items():
            st.session_state[k] = v


def _switch_to_tab(label: str) -> None:
    st.session_state["switch_to_tab"] = label


inject_brand_styles()
_apply_pending_state_updates()


def number_input_state(label: str, *, key: str, default_value, **kwargs):
    kwargs["key"] = key
    if key not in st.session_state:
        kwargs["value"] = default_value
    return st.number_input(label, **kwargs)


def slider_state(label: str, *, key: str, default_value, **kwargs):
    kwargs["key"] = key
    if key not in st.session_state:
        kwargs["value"] = default_value
    return st.slider(label, **kwargs)


def sidebar_inputs() -> SimulationParams:
    st.sidebar.header("Simulation parameters")

    with st.sidebar.expander("Acquisition", expanded=True):
        acquisition_rate = number_input_state(
            "New users per month",
            min_value=PARAM_BOUNDS["acquisition_rate"][0],
            max_value=PARAM_BOUNDS["acquisition_rate"][1],
            default_value=float(_get_state("acquisition_rate", DEFAULT_PARAMS.acquisition_rate)),
            step=50.0,
            format="%0.0f",
            key="acquisition_rate",
        )
        initial_users = number_input_state(
            "Starting free users",
            min_value=PARAM_BOUNDS["initial_users"][0],
            default_value=float(_get_state("initial_users", DEFAULT_PARAMS.initial_users)),
            step=100.0,
            format="%0.0f",
            key="initial_users",
        )

    with st.sidebar.expander("Conversion & churn", expanded=True):
        conversion_rate = slider_state(
            "Free to paid conversion (% / month)",
            min_value=PARAM_BOUNDS["conversion_rate"][0],
            max_value=PARAM_BOUNDS["conversion_rate"][1],
            default_value=float(_get_state("conversion_rate", DEFAULT_PARAMS.conversion_rate)),
            step=0.1,
            key="conversion_rate",
        )
        churn_rate = slider_state(
            "Paid churn (% / month)",
            min_value=PARAM_BOUNDS["churn_rate"][0],
            max_value=PARAM_BOUNDS["churn_rate"][1],
            default_value=float(_get_state("churn_rate", DEFAULT_PARAMS.churn_rate)),
            step=0.5,
            key="churn_rate",
        )

    with st.sidebar.expander("Pricing", expanded=True):
        arpu = number_input_state(
            "Price per paid user ($ / month)",
            min_value=PARAM_BOUNDS["arpu"][0],
            default_value=float(_get_state("arpu", DEFAULT_PARAMS.arpu)),
            step=1.0,
            format="%0.2f",
            key="arpu",
        )

    with st.sidebar.expander("Horizon", expanded=False):
        months = slider_state(
            "Months to simulate",
            min_value=PARAM_BOUNDS["months"][0],
            max_value=PARAM_BOUNDS["months"][1],
            default_value=int(_get_state("months", DEFAULT_PARAMS.months)),
            step=1,
            key="months",
        )

    return SimulationParams(
        acquisition_rate=float(acquisition_rate),
        churn_rate=float(churn_rate),
        conversion_rate=float(conversion_rate),
        arpu=float(arpu),
        initial_users=float(initial_users),
        months=int(months),
    )


def render_kpis(result: SimulationResult) -> None:
    summary = aggregate(result)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric(f"{result.params.months}-month revenue", format_currency(summary["total_revenue"]))
    col2.metric("Total expenses", format_currency(summary["total_expenses"]))
    col3.metric("Total profit", format_currency(summary["total_profit"]))
    col4.metric("Profit margin", f"{summary['margin_percent']}%")

    col5, col6 = st.columns(2)
    col5.metric("Ending MRR", format_currency(ending_mrr(result)))
    payback = payback_month(result)
    col6.metric("Payback month (cumulative)", "—" if payback is None else str(payback))


def _stream_into(placeholder, streamer, *args) -> str:
    parts: list[str] = []

    def _on_chunk(text: str) -> None:
        parts.append(text)
        placeholder.markdown("".join(parts) + " ▌")

    full = streamer(*args, on_chunk=_on_chunk, model_name=SETTINGS.model_name)
    placeholder.markdown(full)
    return full


def render_strategy() -> None:
    st.subheader("AI Strategy Architect")
    st.caption("Turn your raw app idea into a complete business plan.")
    idea = st.text_area(
        "Describe your app idea",
        key="strategy_input",
        height=120,
        placeholder="e.g. A habit tracker for remote teams with Slack integration",
    )
    output = st.empty()
    if st.button("Generate strategy", disabled=not idea.strip(), key="generate_strategy"):
        try:
            st.session_state["strategy_result"] = _stream_into(output, stream_strategy_analysis, idea)
            st.session_state["strategy_title"] = idea.strip()
        except GenerationError as e:
            logger.error(f"Strategy generation failed: {e}")
            st.session_state.pop("strategy_result", None)
            st.error(GENERATION_FAILED_MESSAGE)
    result = st.session_state.get("strategy_result")
    if result:
        output.markdown(result)
        if st.button("Save to my ideas", key="save_strategy"):
            store: IdeaStore = st.session_state["idea_store"]
            saved = store.save(st.session_state.get("strategy_title", ""), result)
            st.success(f"Saved “{saved.title}”.")
    else:
        st.markdown("**Need inspiration?**")
        cols = st.columns(len(STRATEGY_EXAMPLES))
        for col, (label, example) in zip(cols, STRATEGY_EXAMPLES.items()):
            if col.button(label, key=f"example_{label}"):
                st.session_state["_pending_state_update"] = {"strategy_input": example}
                st.rerun()


def render_simulator(result: SimulationResult) -> None:
    st.subheader("SaaS Revenue Simulator")
    st.markdown(
        "Tweak **user acquisition** (how many people join), **conversion** (how many pay) and "
        "**churn** (how many leave) in the sidebar to see the compound effect on monthly recurring "
        "revenue and your user base."
    )
    for warning in result.params.validate():
        st.warning(warning)

    render_kpis(result)
    monthly = result.monthly
    st.altair_chart(plot_revenue(monthly), width="stretch")
    st.altair_chart(plot_users(monthly), width="stretch")

    with st.expander("Monthly details", expanded=False):
        st.dataframe(monthly, width="stretch")
    st.download_button(
        "Export CSV",
        data=to_delimited_text(result),
        file_name=EXPORT_FILE_NAME,
        mime="text/csv",
        key="export_csv",
    )
    st.caption(
        "Model: constant monthly acquisition, conversion from the free pool, paid churn, a fixed 10% "
        "free-tier attrition, and expenses of $50 plus $0.05 per user."
    )


def _render_streamed_article(key: str, button_label: str, streamer) -> None:
    output = st.empty()
    if st.button(button_label, key=f"{key}_btn"):
        try:
            st.session_state[key] = _stream_into(output, streamer)
        except GenerationError as e:
            logger.error(f"{key} generation failed: {e}")
            st.error("Failed to load content. Please check your API key and try again.")
    if st.session_state.get(key):
        output.markdown(st.session_state[key])


def render_market_trends() -> None:
    st.subheader("Market Trends")
    st.caption("What is working in app monetization right now.")
    _render_streamed_article("trends_text", "Refresh trends", stream_market_trends)


def render_ai_guide() -> None:
    st.subheader("Make Money with AI")
    _render_streamed_article("ai_guide_text", "Generate guide", stream_ai_monetization_tips)

    st.markdown("**Start from a template**")
    cols = st.columns(len(IDEA_TEMPLATES))
    for col, (label, template) in zip(cols, IDEA_TEMPLATES.items()):
        if col.button(label, key=f"template_{label}"):
            st.session_state["_pending_state_update"] = {"strategy_input": template}
            _switch_to_tab("Strategy Architect")
            st.rerun()


@st.fragment(run_every=2)
def _chat_feed_panel() -> None:
    feed: MockChatFeed = st.session_state["chat_feed"]
    feed.poll(datetime.now())
    st.caption(f"🟢 {feed.online_users} online")
    st.markdown("".join(format_chat_message(m) for m in feed.messages[-50:]), unsafe_allow_html=True)


def render_community() -> None:
    st.subheader("Founder's Lounge")
    st.caption("A simulated live feed of founders discussing strategy.")
    _chat_feed_panel()
    with st.form("chat_form", clear_on_submit=True):
        text = st.text_input("Message", key="chat_text")
        if st.form_submit_button("Send"):
            st.session_state["chat_feed"].post(text, datetime.now())


def render_saved_ideas(params: SimulationParams, result: SimulationResult) -> None:
    st.subheader("Saved Ideas")
    store: IdeaStore = st.session_state["idea_store"]
    if not len(store):
        st.info("No saved strategies yet. Generate one on the Strategy Architect tab and save it.")
    for idea in store.ideas:
        with st.expander(f"{idea.title} · {idea.date}", expanded=False):
            st.markdown(idea.content)
            if st.button("Delete", key=f"delete_{idea.id}"):
                store.delete(idea.id)
                st.rerun()

    st.divider()
    st.markdown("**Save / Load session**")
    c1, c2 = st.columns(2)
    with c1:
        include_sim = st.checkbox("Include simulation results", value=False)
        bundle = collect_session_bundle(params, store.ideas, result if include_sim else None)
        st.download_button(
            "Download session bundle (.zip)",
            data=bundle,
            file_name="monetizeai_session.zip",
            mime="application/zip",
        )
    with c2:
        for note in st.session_state.pop("restore_notes", []):
            st.warning(note)
        uploaded = st.file_uploader("Upload session bundle (.zip)", type=["zip"], key="session_bundle")
        if uploaded is not None and st.button("Restore session"):
            try:
                loaded_params, ideas = apply_session_bundle(io.BytesIO(uploaded.getvalue()))
                st.session_state["idea_store"] = IdeaStore(ideas)
                if loaded_params is not None:
                    fitted, notes = clamp_params(loaded_params)
                    st.session_state["_pending_state_update"] = fitted.to_dict()
                    st.session_state["restore_notes"] = notes
                st.success("Session restored.")
                st.rerun()
            except Exception as e:
                st.error(f"Failed to load bundle: {e}")


render_brand_header()
if not SETTINGS.has_api_key:
    st.sidebar.warning("No GEMINI_API_KEY set: AI generation is disabled.")

params = sidebar_inputs()
# Full recompute on every rerun
sim_result = simulate_revenue(params)

tab_strategy, tab_sim, tab_trends, tab_ai, tab_community, tab_saved = st.tabs(
    [
        "Strategy Architect",
        "Revenue Simulator",
        "Market Trends",
        "Make Money with AI",
        "Founder's Lounge",
        "Saved Ideas",
    ]
)

with tab_strategy:
    render_strategy()

with tab_sim:
    render_simulator(sim_result)

with tab_trends:
    render_market_trends()

with tab_ai:
    render_ai_guide()

with tab_community:
    render_community()

with tab_saved:
    render_saved_ideas(params, sim_result)

# If requested, switch tabs by simulating a click
if target := st.session_state.get("switch_to_tab"):
    components.html(
        f"""
        <script>
        const tabs = parent.document.querySelectorAll('button[role="tab"]');
        for (const t of tabs) {{
            if (t.innerText.trim() === "{target}") {{ t.click(); break; }}
        }}
        </script>
        """,
        height=0,
    )
    st.session_state["switch_to_tab"] = None
