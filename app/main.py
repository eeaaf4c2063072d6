"""
Streamlit Frontend for Expense Tracker

The view: it collects input, calls the ledger, and renders whatever the
ledger and the aggregation functions say. It holds no expense data of
its own; the only view state is the active category filter.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Input problems are shown next to the form, never silently fixed
3. Everything on screen is recomputed from the ledger on each run
"""

import streamlit as st

from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.formatting import (
    category_label,
    format_currency,
    format_timestamp,
)
from expense_tracker.ledger import DeletionScheduler, LedgerStore
from expense_tracker.models import ALL_CATEGORIES, Category
from expense_tracker.orchestrator import create_app_components
from expense_tracker.queries import summarize
from expense_tracker.services.storage import StorageError
from expense_tracker.validation import ValidationError


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
    .item-date {
        color: #6c757d;
        font-size: 0.85em;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_components() -> tuple[LedgerStore, DeletionScheduler]:
    """Get or create application components (cached)."""
    return create_app_components()


def main():
    """Main application entry point."""
    store, scheduler = get_components()

    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🧾 Expenses", "⚙️ Settings"],
        index=0,
    )

    if page == "🧾 Expenses":
        render_expenses_page(store, scheduler)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_add_form(store: LedgerStore):
    """Render the add-expense form."""
    st.subheader("➕ Add Expense")

    with st.form("add_expense", clear_on_submit=True):
        col1, col2, col3 = st.columns([3, 2, 2])
        with col1:
            title = st.text_input("Title *", placeholder="e.g. Coffee")
        with col2:
            amount = st.text_input("Amount (₹) *", placeholder="e.g. 150.00")
        with col3:
            category = st.selectbox(
                "Category *",
                options=list(Category),
                format_func=category_label,
            )
        submitted = st.form_submit_button("Add", type="primary")

    if submitted:
        try:
            store.add(title, amount, category)
        except ValidationError as e:
            for issue in e.issues:
                if issue.severity == "error":
                    st.error(issue.message)
        except StorageError as e:
            st.error(f"Could not save the expense: {e}")
        else:
            st.rerun()


def render_expenses_page(store: LedgerStore, scheduler: DeletionScheduler):
    """Render totals, category summary and the expense list."""
    settings = get_settings().app
    symbol = settings.currency_symbol

    st.title("🧾 My Expenses")
    render_add_form(store)
    st.markdown("---")

    active_filter = st.selectbox(
        "Filter by Category",
        options=[ALL_CATEGORIES] + [c.value for c in Category],
        format_func=lambda x: "All Categories" if x == ALL_CATEGORIES else category_label(x),
    )

    summary = summarize(store.list(), active_filter)

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("**Total Spent**")
        st.markdown(
            f'<div class="big-number">{format_currency(summary.total, symbol)}</div>',
            unsafe_allow_html=True,
        )
    with col2:
        st.metric("Transactions", summary.count)

    st.subheader("📊 By Category")
    if not summary.by_category:
        st.info("No expenses recorded.")
    for name, subtotal in summary.by_category.items():
        left, right = st.columns([3, 1])
        left.write(category_label(name))
        right.write(format_currency(subtotal, symbol))

    st.subheader("🕒 Recent")
    if not summary.visible:
        st.info("No expenses found for this category.")
        return

    for expense in summary.visible:
        left, middle, right = st.columns([5, 2, 1])
        with left:
            st.markdown(f"**{expense.title}**  \n{category_label(expense.category)}")
            st.markdown(
                f'<span class="item-date">'
                f'{format_timestamp(expense.created_at, settings.display_timezone)}'
                f'</span>',
                unsafe_allow_html=True,
            )
        middle.markdown(f"**{format_currency(expense.amount, symbol)}**")
        if right.button("🗑️", key=f"delete-{expense.id}"):
            handle = scheduler.request_delete(expense.id)
            with st.spinner("Deleting..."):
                handle.wait(timeout=scheduler.delay_seconds + 5)
            if handle.error is not None:
                st.error(f"Could not delete the expense: {handle.error}")
            else:
                st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")

    status = validate_all_settings()
    sections = [
        ("Storage", "storage"),
        ("Google Sheets", "google_sheets"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if key not in status:
            continue
        if status[key]:
            st.success(f"✅ {name} - OK")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    storage = get_settings().storage
    st.markdown(f"**Storage backend:** `{storage.backend}`")
    if storage.backend == "file":
        st.markdown(f"**Store file:** `{storage.file_path}`")
    st.markdown(
        "To change the configuration, create a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
