"""
Streamlit Frontend for Finance Tracker

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Validate before anything is sent
3. Short, generic error messages
4. The list and summary always reflect the store

Layout:
- Three summary cards (income, expenses, balance)
- Add Transaction form
- Recent Transactions list with delete buttons
"""

import asyncio
from typing import Optional

import streamlit as st
import structlog

from finance_tracker.auth import IdentityProvider, normalize_identity
from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.models import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    TransactionKind,
    TransactionSummary,
)
from finance_tracker.orchestrator import (
    Notification,
    TransactionFormFlow,
    create_app_components,
)
from finance_tracker.queries import (
    format_display_date,
    format_rupees,
    format_signed_amount,
)


logger = structlog.get_logger(__name__)

LOAD_FAILURE_MESSAGE = "Failed to load transactions"


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .card {
        padding: 16px;
        border-radius: 10px;
        margin: 10px 0;
    }
    .card-income { background-color: #f0fdf4; border: 1px solid #bbf7d0; }
    .card-expense { background-color: #fef2f2; border: 1px solid #fecaca; }
    .card-balance { background-color: #eff6ff; border: 1px solid #bfdbfe; }
    .card-negative { background-color: #fff7ed; border: 1px solid #fed7aa; }
    .big-number {
        font-size: 1.8em;
        font-weight: bold;
    }
    .amount-income { color: #16a34a; font-weight: 600; }
    .amount-expense { color: #dc2626; font-weight: 600; }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class StreamlitIdentityProvider(IdentityProvider):
    """
    Caller identity from Streamlit's built-in authentication.

    Uses the signed-in user's email when OIDC login is configured,
    otherwise the configured local user id.
    """

    def __init__(self, fallback: Optional[str]):
        self._fallback = fallback

    def resolve_caller_identity(self) -> Optional[str]:
        user = getattr(st, "user", None)
        if user is not None and user.get("is_logged_in"):
            return normalize_identity(user.get("email") or user.get("sub"))
        return normalize_identity(self._fallback)


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def get_flow() -> TransactionFormFlow:
    """One form flow per browser session, sharing the cached accessor."""
    if "form_flow" not in st.session_state:
        accessor, activity_logger = get_components()
        st.session_state.form_flow = TransactionFormFlow(
            accessor=accessor,
            identity_provider=StreamlitIdentityProvider(
                get_settings().app.local_user_id
            ),
            activity_logger=activity_logger,
        )
    return st.session_state.form_flow


def show_notification(notification: Notification) -> None:
    if notification.level == "success":
        st.toast(notification.message, icon="✅")
    elif notification.level == "warning":
        st.toast(notification.message, icon="⚠️")
    else:
        st.toast(notification.message, icon="❌")


def main():
    """Main application entry point."""
    flow = get_flow()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Transactions", "⚙️ Settings"],
        index=0,
    )

    if page == "📊 Transactions":
        render_tracker_page(flow)
    else:
        render_settings_page()


def render_summary_cards(summary: TransactionSummary):
    """Render income, expense and balance cards."""
    col1, col2, col3 = st.columns(3)

    with col1:
        st.markdown(f"""
        <div class="card card-income">
            <h4>Total Income</h4>
            <div class="big-number">{format_rupees(summary.total_income)}</div>
        </div>
        """, unsafe_allow_html=True)

    with col2:
        st.markdown(f"""
        <div class="card card-expense">
            <h4>Total Expenses</h4>
            <div class="big-number">{format_rupees(summary.total_expenses)}</div>
        </div>
        """, unsafe_allow_html=True)

    with col3:
        style = "card-negative" if summary.is_negative else "card-balance"
        st.markdown(f"""
        <div class="card {style}">
            <h4>Balance</h4>
            <div class="big-number">{format_rupees(summary.balance)}</div>
        </div>
        """, unsafe_allow_html=True)


def render_category_breakdown(breakdown: dict[str, dict[str, float]]):
    """Render per-category totals in a collapsible panel."""
    if not breakdown["income"] and not breakdown["expense"]:
        return

    with st.expander("📂 By Category"):
        col1, col2 = st.columns(2)
        for col, kind, title in (
            (col1, "income", "Income"),
            (col2, "expense", "Expenses"),
        ):
            with col:
                st.markdown(f"**{title}**")
                totals = sorted(breakdown[kind].items(), key=lambda item: -item[1])
                if not totals:
                    st.caption("Nothing recorded")
                for category, total in totals:
                    st.markdown(f"{category}: {format_rupees(total)}")


def render_add_form(flow: TransactionFormFlow):
    """Render the Add Transaction form."""
    st.subheader("Add Transaction")

    # The kind selector lives outside the form so the
    # category list updates as soon as it changes.
    kind = st.selectbox(
        "Type",
        options=[TransactionKind.EXPENSE, TransactionKind.INCOME],
        index=0 if flow.draft.kind == TransactionKind.EXPENSE else 1,
        format_func=lambda k: k.value.title(),
    )
    flow.update_draft(kind=kind)
    choices = INCOME_CATEGORIES if kind == TransactionKind.INCOME else EXPENSE_CATEGORIES

    with st.form("add_transaction", clear_on_submit=False):
        col1, col2 = st.columns(2)
        with col1:
            amount = st.text_input("Amount (₹)", value=flow.draft.amount, placeholder="0")
            category = st.selectbox(
                "Category",
                options=[""] + list(choices),
                format_func=lambda c: c or "Select category",
            )
        with col2:
            tx_date = st.date_input("Date", value=flow.draft.date)

        description = st.text_input(
            "Description",
            value=flow.draft.description,
            placeholder="Enter description",
        )

        submitted = st.form_submit_button("Add Transaction", type="primary")

    if submitted:
        flow.update_draft(
            amount=amount,
            category=category,
            description=description,
            date=tx_date,
        )
        notification = run_async(flow.submit())
        show_notification(notification)
        if not notification.is_error:
            st.rerun()


def render_transaction_list(flow: TransactionFormFlow, transactions):
    """Render the Recent Transactions list."""
    st.subheader("Recent Transactions")

    if not transactions:
        st.info("No transactions yet. Add your first transaction above!")
        return

    for transaction in transactions:
        col1, col2, col3 = st.columns([6, 2, 1])
        with col1:
            dot = "🟢" if transaction.kind == TransactionKind.INCOME else "🔴"
            st.markdown(f"{dot} **{transaction.description}**")
            st.caption(
                f"{transaction.category} • {format_display_date(transaction.date)}"
            )
        with col2:
            css = f"amount-{transaction.kind.value}"
            st.markdown(
                f'<span class="{css}">{format_signed_amount(transaction)}</span>',
                unsafe_allow_html=True,
            )
        with col3:
            if st.button("Delete", key=f"delete-{transaction.id}"):
                notification = run_async(flow.delete(transaction.id))
                show_notification(notification)
                st.rerun()


def render_tracker_page(flow: TransactionFormFlow):
    """Render the main page."""
    st.title("💰 Finance Tracker")

    try:
        transactions, summary = run_async(flow.load())
        breakdown = run_async(flow.breakdown())
    except Exception as e:
        logger.error("transactions_load_failed", error=str(e))
        st.error(LOAD_FAILURE_MESSAGE)
        transactions, summary = [], TransactionSummary.empty()
        breakdown = {"income": {}, "expense": {}}

    render_summary_cards(summary)
    render_category_breakdown(breakdown)
    st.markdown("---")
    render_add_form(flow)
    st.markdown("---")
    render_transaction_list(flow, transactions)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    app_settings = get_settings().app
    st.markdown("### Storage")
    st.markdown(f"**Backend:** `{app_settings.storage_backend}`")

    status = validate_all_settings()
    if app_settings.uses_google_sheets:
        if status.get("google_sheets", False):
            st.success("✅ Google Sheets - Configured")
        else:
            error = status.get("google_sheets_error", "Not configured")
            st.error(f"❌ Google Sheets - {error}")
    else:
        st.info("Transactions are kept in memory and are lost on restart.")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
