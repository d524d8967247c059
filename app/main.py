"""
Streamlit Frontend for Slacker Meter

DESIGN PRINCIPLES:
1. The page never holds tracker state, it reads snapshots
2. Every button maps to one TrackerService operation
3. Errors are shown next to the control that caused them

Ticks are delivered by pumping the SystemClock from a fragment
that refreshes every tick interval while a session is running.
"""

from decimal import Decimal

import streamlit as st

from slacker.config import get_settings, validate_all_settings
from slacker.history import HistoryIndexError
from slacker.orchestrator import TrackerService, create_app_components
from slacker.services.storage import StorageError
from slacker.stats import format_amount, format_duration, format_percent
from slacker.tracking import DivisionUndefinedError, InvalidInputError


# Page configuration
st.set_page_config(
    page_title="Slacker Meter",
    page_icon="🐟",
    layout="centered",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .timer-box {
        padding: 20px;
        background-color: #f1f5f9;
        border-radius: 10px;
        text-align: center;
        margin: 10px 0;
        color: #0f172a;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
</style>
""", unsafe_allow_html=True)


def get_service() -> TrackerService:
    """One TrackerService per browser session."""
    if "tracker_service" not in st.session_state:
        st.session_state.tracker_service = create_app_components()
    return st.session_state.tracker_service


def main():
    """Main application entry point."""
    service = get_service()
    settings = get_settings()
    currency = settings.app.currency_label

    st.title("🛑 Someone is slacking off! 🛑")

    render_inputs(service)
    render_controls(service)

    interval = settings.tracker.tick_interval_seconds
    run_every = interval if service.snapshot().is_running else None
    st.fragment(render_timer, run_every=run_every)(service, currency)

    st.markdown("---")
    render_goal(service)
    render_summary(service, currency)
    render_history(service, currency)

    if settings.app.debug_mode:
        render_debug(service)


def render_inputs(service: TrackerService):
    """Salary and goal inputs."""
    running = service.snapshot().is_running

    st.number_input(
        "Monthly salary",
        min_value=0.0,
        step=1000.0,
        key="monthly_salary",
        disabled=running,
        help="Spread over 30 days of 8 hours",
    )

    goal = st.number_input(
        "Daily slacking goal (hours)",
        min_value=0.0,
        step=0.1,
        value=float(service.goal_hours),
    )
    if goal != service.goal_hours:
        try:
            service.set_goal_hours(goal)
        except InvalidInputError as e:
            st.error(f"Invalid goal: {e.reason}")


def render_controls(service: TrackerService):
    """Start/stop and reset buttons."""
    col1, col2 = st.columns(2)

    with col1:
        if not service.snapshot().is_running:
            if st.button("▶️ Start slacking", type="primary"):
                try:
                    service.start(st.session_state.get("monthly_salary"))
                    st.rerun()
                except InvalidInputError:
                    st.error("Please enter a valid monthly salary!")
        else:
            if st.button("⏹️ Stop slacking", type="primary"):
                try:
                    service.stop()
                except StorageError as e:
                    st.error(f"Could not save the session: {e}")
                st.rerun()

    with col2:
        if st.button("🔄 Reset"):
            try:
                service.reset()
            except StorageError as e:
                st.error(f"Could not save the session: {e}")
            st.rerun()

    unsaved = service.unsaved_record
    if unsaved is not None:
        st.warning(
            f"Session of {format_duration(unsaved.elapsed_seconds)} was not saved."
        )
        if st.button("💾 Retry save"):
            try:
                service.retry_save()
                st.rerun()
            except StorageError as e:
                st.error(f"Could not save the session: {e}")


def render_timer(service: TrackerService, currency: str):
    """Running indicator, elapsed time and accrued amount."""
    service.pump()
    snapshot = service.snapshot()

    status = "🟢 Slacking in progress..." if snapshot.is_running else "⏸️ Paused"
    st.markdown(f"""
    <div class="timer-box">
        <div>{status}</div>
        <div class="big-number">⏱️ {format_duration(snapshot.elapsed_seconds)}</div>
        <div class="big-number">💸 {format_amount(snapshot.earned_amount)} {currency}</div>
    </div>
    """, unsafe_allow_html=True)


def render_goal(service: TrackerService):
    """Today's goal progress bar."""
    st.subheader("🎯 Today's goal")

    try:
        progress = service.goal_progress()
    except DivisionUndefinedError:
        st.info("Set a goal above zero hours to track your progress.")
        return

    st.progress(progress.clamped)
    text = f"{format_percent(progress.ratio)} (goal: {progress.goal_hours:g} hours)"
    if progress.reached:
        st.markdown(f"**🔥 {text}**")
    else:
        st.caption(text)


def render_summary(service: TrackerService, currency: str):
    """Today / week / month cards."""
    st.subheader("📊 Overview")
    summary = service.summary()

    columns = st.columns(3)
    cards = [
        ("Today", summary.today),
        ("This week", summary.week),
        ("This month", summary.month),
    ]
    for column, (label, totals) in zip(columns, cards):
        with column:
            st.metric(
                label,
                f"{format_amount(totals.earned)} {currency}",
                format_duration(totals.seconds),
                delta_color="off",
            )


def render_history(service: TrackerService, currency: str):
    """History chart and the deletable list of records."""
    st.subheader("📈 History")
    history = service.history

    if not history:
        st.info("No records yet, go slack off a bit 🐟")
        return

    points = service.chart_series()
    st.line_chart(
        {"earned": [float(point.earned) for point in points]},
        x_label="session",
        y_label=currency,
    )

    st.markdown("#### 📜 Records")
    for index, record in enumerate(history):
        col1, col2 = st.columns([5, 1])
        with col1:
            stamp = record.timestamp.astimezone().strftime("%Y-%m-%d %H:%M:%S")
            st.write(
                f"{stamp} - 💸 {format_amount(record.earned_amount)} {currency}"
                f" - ⏱ {format_duration(record.elapsed_seconds)}"
            )
        with col2:
            if st.button("🗑️", key=f"delete_{index}"):
                try:
                    service.delete_record(index)
                except (HistoryIndexError, StorageError) as e:
                    st.error(str(e))
                st.rerun()


def render_debug(service: TrackerService):
    """Configuration status and recent activity."""
    with st.expander("⚙️ Diagnostics"):
        for name, ok in validate_all_settings().items():
            if name.endswith("_error"):
                continue
            if ok:
                st.success(f"✅ {name} settings")
            else:
                st.error(f"❌ {name} settings")

        for event in service.recent_activity(limit=20):
            st.caption(f"{event.timestamp:%H:%M:%S} {event.event_type.value}: {event.description}")

        st.caption(f"Rate per second: {service.snapshot().rate.quantize(Decimal('1e-6'))}")


if __name__ == "__main__":
    main()
