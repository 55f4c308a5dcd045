"""
Streamlit Frontend for Finance Tracker

This is the single-page interface: sign in, record income and expenses,
browse transactions and export reports.

DESIGN PRINCIPLES:
1. Every number on screen comes from the view models, never from the UI
2. Validation messages appear inline, next to the form
3. Switching screens never changes data
4. Exports are generated on demand and offered as downloads

Screens:
- Login / Register (shown until a valid session exists)
- Dashboard: new-transaction form + recent transactions
- Transactions: the full list, newest first
- Reports: totals, spending by category, exports
"""

import streamlit as st

from finance_tracker.audit import AuditLogger
from finance_tracker.config import validate_all_settings
from finance_tracker.models.transaction import TransactionType
from finance_tracker.orchestrator import TrackerFlow, create_app_components
from finance_tracker.reports import markdown_safe
from finance_tracker.services.auth import AuthService
from finance_tracker.views import (
    DashboardView,
    ReportsView,
    TransactionRow,
    TransactionsView,
    ViewMode,
)


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for the balance card and transaction rows
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .balance-box {
        padding: 20px;
        background-color: #ffffff;
        border-radius: 10px;
        box-shadow: 0 1px 3px rgba(0,0,0,0.1);
        margin: 10px 0 20px 0;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
        color: #111827;
    }
    .alert-text {
        color: #d97706;
    }
    .txn-row {
        display: flex;
        justify-content: space-between;
        padding: 12px 16px;
        background-color: #f9fafb;
        border-radius: 8px;
        margin-bottom: 8px;
    }
    .txn-income { color: #16a34a; font-weight: 600; }
    .txn-expense { color: #dc2626; font-weight: 600; }
    .txn-meta { color: #6b7280; font-size: 0.85em; }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_components():
    """Get or create application components (cached for the process)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Failed to initialize storage: {e}")
        return create_app_components(use_storage=False)


def main():
    """Main application entry point."""
    auth, flow, audit_logger = get_components()

    if not auth.is_authenticated():
        render_auth_page(auth)
        return

    user = auth.get_display_user()

    # Sidebar navigation
    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown(f"Signed in as **{markdown_safe(user.name)}**")
    st.sidebar.markdown("---")

    mode = st.sidebar.radio(
        "Navigate to:",
        list(ViewMode),
        format_func=lambda m: m.label,
        index=0,
    )

    st.sidebar.markdown("---")
    if st.sidebar.button("Log out"):
        auth.logout()
        st.session_state.pop("pending_export", None)
        st.rerun()

    render_settings_status()

    render_balance_card(flow)

    view = flow.view(mode)
    if isinstance(view, TransactionsView):
        render_transactions_page(view)
    elif isinstance(view, ReportsView):
        render_reports_page(view)
    else:
        render_dashboard_page(flow, view)

    render_footer(flow, audit_logger)


def render_auth_page(auth: AuthService):
    """Render the login / register gate."""
    st.title("💰 Finance Tracker")

    login_tab, register_tab = st.tabs(["Log in", "Register"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Log in", type="primary")

        if submitted:
            if auth.login(email, password):
                st.rerun()
            else:
                st.error("Invalid email or password")

    with register_tab:
        with st.form("register_form"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            submitted = st.form_submit_button("Create account", type="primary")

        if submitted:
            if not name or not email or not password:
                st.error("Please fill in all fields")
            elif auth.register(name, email, password):
                st.rerun()
            else:
                st.error("This email is already registered")


def render_balance_card(flow: TrackerFlow):
    """Render the balance card shown above every screen."""
    card = flow.balance_card()
    alert = (
        '<p class="alert-text">⚠️ Low balance alert</p>'
        if card.low_balance
        else ""
    )
    st.markdown(f"""
    <div class="balance-box">
        <p class="txn-meta">Available balance</p>
        <p class="big-number">{markdown_safe(card.balance_display)}</p>
        {alert}
    </div>
    """, unsafe_allow_html=True)


def render_transaction_rows(rows: list[TransactionRow], show_date: bool = False):
    """Render a list of transactions as styled rows."""
    if not rows:
        st.info("No transactions yet. Add your first one from the dashboard.")
        return

    for row in rows:
        icon = "⬆️" if row.is_income else "⬇️"
        css_class = "txn-income" if row.is_income else "txn-expense"
        meta = []
        if row.category_label:
            meta.append(markdown_safe(row.category_label))
        if show_date:
            meta.append(markdown_safe(row.date_display))
        meta_html = f'<div class="txn-meta">{" · ".join(meta)}</div>' if meta else ""

        st.markdown(f"""
        <div class="txn-row">
            <div>{icon} {markdown_safe(row.description)}{meta_html}</div>
            <div class="{css_class}">{markdown_safe(row.amount_display)}</div>
        </div>
        """, unsafe_allow_html=True)


def render_dashboard_page(flow: TrackerFlow, view: DashboardView):
    """Render the new-transaction form and the recent feed."""
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("New Transaction")

        type_labels = {option.value: option.label for option in view.form.types}
        transaction_type = st.radio(
            "Type",
            list(type_labels),
            format_func=lambda v: type_labels[v],
            horizontal=True,
        )

        # The category selector only exists for expenses, so the form is
        # rebuilt whenever the type changes.
        with st.form("transaction_form", clear_on_submit=True):
            amount = st.text_input("Amount", placeholder="0.00")
            description = st.text_input("Description")

            category = None
            if transaction_type == TransactionType.EXPENSE.value:
                category_labels = {option.value: option.label for option in view.form.categories}
                category = st.selectbox(
                    "Category",
                    [""] + list(category_labels),
                    format_func=lambda v: category_labels.get(v, "Select a category"),
                )

            submitted = st.form_submit_button("Add Transaction", type="primary")

        if submitted:
            transaction, result, message = flow.submit_transaction(
                transaction_type=transaction_type,
                amount_text=amount,
                description=description,
                category=category,
            )
            if transaction is None:
                st.error(message)
            else:
                st.rerun()

    with col2:
        st.subheader("Recent Transactions")
        render_transaction_rows(view.recent)


def render_transactions_page(view: TransactionsView):
    """Render the full transaction list."""
    st.title("All Transactions")
    render_transaction_rows(view.rows, show_date=True)


def render_reports_page(view: ReportsView):
    """Render totals and spending by category."""
    st.title("Reports")

    st.markdown("### Summary")
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", view.total_income_display)
    col2.metric("Total Expenses", view.total_expense_display)
    col3.metric("Balance", view.balance_display)

    st.markdown("### Spending by Category")
    for row in view.categories:
        label_col, total_col = st.columns([3, 1])
        label_col.write(row.label)
        total_col.markdown(f"**{markdown_safe(row.total_display)}**", unsafe_allow_html=True)


def render_settings_status():
    """Show which configuration sections loaded."""
    with st.sidebar.expander("Configuration"):
        status = validate_all_settings()
        for name in ("auth", "storage", "report", "app"):
            if status.get(name, False):
                st.success(f"✅ {name.title()}")
            else:
                st.error(f"❌ {name.title()}: {status.get(f'{name}_error', 'invalid')}")


def render_footer(flow: TrackerFlow, audit_logger: AuditLogger):
    """Render the export actions."""
    st.markdown("---")
    actions = flow.view(ViewMode.REPORTS).exports

    cols = st.columns(len(actions))
    for col, action in zip(cols, actions):
        with col:
            if st.button(action.label, key=f"export_{action.format.value}"):
                try:
                    st.session_state.pending_export = flow.export(action.format)
                except Exception as e:
                    st.session_state.pending_export = None
                    audit_logger.log_error(
                        error_type="export_failed",
                        error_message=str(e),
                        details={"format": action.format.value},
                    )
                    st.error(f"Export failed: {e}")

    report = st.session_state.get("pending_export")
    if report is not None:
        st.download_button(
            f"⬇️ Download {report.filename}",
            data=report.content,
            file_name=report.filename,
            mime=report.mime_type,
        )

    st.caption("© Finance Tracker. All rights reserved.")


if __name__ == "__main__":
    main()
