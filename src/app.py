import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from blocklayout import WEEKDAYS, LayoutEngine, LayoutOptions
from blocklayout.frame import frame_to_week, week_to_frame
from blocklayout.placement import parse_meeting

from prometheus_client import start_http_server, Summary, Counter


# ✅ Create metrics only once
if "LAYOUT_TIME" not in st.session_state:
    st.session_state.LAYOUT_TIME = Summary(
        "layout_pass_seconds",
        "Time spent laying out the weekly calendar",
    )
LAYOUT_TIME = st.session_state.LAYOUT_TIME

if "FALLBACK_COUNTER" not in st.session_state:
    st.session_state.FALLBACK_COUNTER = Counter(
        "layout_solver_fallback_total",
        "Components that kept the heuristic layout because the LP failed",
        ["day"],
    )
FALLBACK_COUNTER = st.session_state.FALLBACK_COUNTER

# ✅ Start metrics server only once
if "metrics_started" not in st.session_state:
    start_http_server(8000)
    st.session_state.metrics_started = True


# Session State Setup
if "meetings" not in st.session_state:
    st.session_state.meetings = pd.DataFrame(columns=["day", "start", "end", "label"])

if "options" not in st.session_state:
    st.session_state.options = LayoutOptions()


# Sidebar: Inputs
st.sidebar.title("Calendar Block Layout")

st.sidebar.subheader("Layout")
strategy = st.sidebar.selectbox(
    "Column strategy", ["exact", "greedy", "heap"],
    index=["exact", "greedy", "heap"].index(st.session_state.options.strategy),
)
optimize = st.sidebar.checkbox("Widen blocks with LP", value=st.session_state.options.optimize)
st.session_state.options.strategy = strategy
st.session_state.options.optimize = optimize

# Add Meeting
st.sidebar.subheader("Add Meeting")
with st.sidebar.form("meeting_form"):
    m_label = st.text_input("Label", key="m_label")
    m_text = st.text_input("Meeting", value="MoWeFr 10:00AM - 10:50AM", key="m_text")
    add_meeting = st.form_submit_button("Add Meeting")
    if add_meeting:
        try:
            days, start, end = parse_meeting(m_text)
        except ValueError as err:
            st.sidebar.error(str(err))
        else:
            if start >= end:
                st.sidebar.error("Please ensure the meeting ends after it starts")
            else:
                rows = pd.DataFrame([
                    {"day": d, "start": start, "end": end, "label": m_label or m_text}
                    for d in days
                ])
                st.session_state.meetings = pd.concat(
                    [st.session_state.meetings, rows], ignore_index=True
                )

if st.sidebar.button("Clear"):
    st.session_state.meetings = pd.DataFrame(columns=["day", "start", "end", "label"])


# Main: Layout
st.title("Weekly Calendar Layout")

if st.session_state.meetings.empty:
    st.info("Add some meetings to see the calendar.")
    st.stop()

week = frame_to_week(st.session_state.meetings)
with LAYOUT_TIME.time():
    with LayoutEngine(st.session_state.options) as engine:
        reports = engine.layout_week(week)

for day, report in reports.items():
    if report.fallbacks:
        FALLBACK_COUNTER.labels(day=day).inc(report.fallbacks)

df = week_to_frame(week)

# Boxes, one column per weekday
fig = go.Figure()
for _, row in df.iterrows():
    x0 = WEEKDAYS.index(row["day"]) + row["left"]
    x1 = x0 + row["width"]
    fig.add_shape(
        type="rect", x0=x0, x1=x1, y0=row["start"], y1=row["end"],
        line=dict(color="black", width=1),
        fillcolor="#7f7f7f" if row["fixed"] else "#1f77b4",
        opacity=0.6,
    )
    fig.add_annotation(
        x=(x0 + x1) / 2, y=row["start"] + 10, text=row["label"],
        showarrow=False, font=dict(size=10),
    )
fig.update_xaxes(
    range=[0, len(WEEKDAYS)],
    tickvals=[i + 0.5 for i in range(len(WEEKDAYS))],
    ticktext=list(WEEKDAYS),
)
fig.update_yaxes(
    range=[df["end"].max() + 30, df["start"].min() - 30],
    title="Minutes since midnight",
)
st.plotly_chart(fig, use_container_width=True)

st.markdown("### Layout details")
st.dataframe(df)

summary = pd.DataFrame([{
    "day": day,
    "columns": r.num_columns,
    "fixed": r.num_fixed,
    "components": r.components,
    "optimized": r.optimized,
    "fallbacks": r.fallbacks,
} for day, r in reports.items()])
st.dataframe(summary)
