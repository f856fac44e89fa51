"""
Streamlit Frontend for the Partner Ledger

One page: record money received from and given to business partners,
see per-partner balances, search the transaction list.

The UI enforces the two-phase confirmation:
- Edit and Delete only create a pending confirmation
- The user confirms or cancels it in a dialog box on the page
- Nothing changes until "Confirm" is pressed
"""

import datetime as dt

import streamlit as st

from src.config import validate_all_settings
from src.models.transaction import TransactionDraft, TransactionType
from src.orchestrator import (
    ConfirmationAction,
    ConfirmationError,
    FormMode,
    PartnerTransactionFlow,
    create_app_components,
)
from src.queries.formatting import format_currency, type_badge, type_label
from src.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Partner Transactions",
    page_icon="🤝",
    layout="wide",
)

TIP_TEXT = (
    "**Tip:** For each transaction with a partner, add a separate entry. "
    "For example: add \"Received 5000\" first, then add \"Given 6000\" to get "
    "a net balance of -1000. Don't edit - delete and add a new one instead!"
)

# Raised by user actions on a loaded ledger; shown once, then the page carries on
ACTION_ERRORS = (StorageError, ConfirmationError)


def get_flow() -> PartnerTransactionFlow:
    """Get or create this session's flow."""
    if "flow" not in st.session_state:
        st.session_state.flow = create_app_components()
        st.session_state.form_revision = 0
        st.session_state.pending = None
    return st.session_state.flow


def bump_form_revision() -> None:
    """Force the form widgets to re-read their values from the draft."""
    st.session_state.form_revision += 1


def report_action_error(error: Exception) -> None:
    """Keep the message across the rerun that follows every action."""
    st.session_state.action_error = str(error)


def render_action_error():
    message = st.session_state.pop("action_error", None)
    if message:
        st.error(f"❌ {message}")


def main():
    """Main application entry point."""
    try:
        flow = get_flow()
    except StorageError as e:
        st.error(f"❌ Could not load saved transactions: {e}")
        st.info("The stored data was left untouched. Fix or remove it and reload the page.")
        return

    st.title("🤝 Partner Transactions")

    render_action_error()
    render_pending_confirmation(flow)
    render_form(flow)
    render_totals(flow)
    render_partner_balances(flow)
    render_transactions(flow)

    with st.sidebar:
        render_settings_status()


def render_pending_confirmation(flow: PartnerTransactionFlow):
    """Show the confirm/cancel box for a requested edit or delete."""
    pending = st.session_state.pending
    if pending is None:
        return

    box = st.warning if pending.action == ConfirmationAction.DELETE else st.info
    box(pending.prompt)
    col1, col2 = st.columns(2)
    with col1:
        if st.button("✅ Confirm", type="primary", key=f"confirm_{pending.token}"):
            try:
                flow.confirm(pending)
            except ACTION_ERRORS as e:
                report_action_error(e)
            st.session_state.pending = None
            bump_form_revision()
            st.rerun()
    with col2:
        if st.button("❌ Cancel", key=f"cancel_{pending.token}"):
            try:
                flow.cancel(pending)
            except ConfirmationError as e:
                report_action_error(e)
            st.session_state.pending = None
            st.rerun()


def render_form(flow: PartnerTransactionFlow):
    """Render the add/edit form."""
    editing = flow.mode == FormMode.EDIT
    st.subheader("Edit Transaction" if editing else "Add Transaction")
    if not editing:
        st.info(TIP_TEXT)

    draft = flow.draft
    errors = flow.errors
    types = list(TransactionType)

    with st.form(key=f"transaction_form_{st.session_state.form_revision}"):
        col1, col2, col3, col4 = st.columns([4, 3, 3, 2])
        with col1:
            partner_name = st.text_input(
                "Partner Name *",
                value=draft.partner_name,
                placeholder="Select or enter partner name",
            )
            if flow.summary.partners:
                st.caption("Known partners: " + ", ".join(flow.summary.partners))
            if "partner_name" in errors:
                st.error(errors["partner_name"])
        with col2:
            current_type = TransactionType(draft.type) if draft.type in {t.value for t in types} else types[0]
            transaction_type = st.selectbox(
                "Type *",
                options=types,
                index=types.index(current_type),
                format_func=lambda t: f"{type_label(t)} {'from' if t == TransactionType.RECEIVED else 'to'} Partner",
            )
        with col3:
            amount = st.text_input("Amount (Rs.) *", value=draft.amount, placeholder="0.00")
            if "amount" in errors:
                st.error(errors["amount"])
        with col4:
            try:
                initial_date = dt.date.fromisoformat(draft.date)
            except ValueError:
                initial_date = dt.date.today()
            transaction_date = st.date_input("Date *", value=initial_date)
            if "date" in errors:
                st.error(errors["date"])

        description = st.text_area(
            "Description *",
            value=draft.description,
            placeholder="Enter transaction description (e.g., Payment for vehicle sale, Interest payment, etc.)",
            height=80,
        )
        if "description" in errors:
            st.error(errors["description"])

        submitted = st.form_submit_button("Update" if editing else "Add Transaction", type="primary")

    if submitted:
        try:
            outcome = flow.submit(TransactionDraft(
                partner_name=partner_name,
                type=transaction_type.value,
                amount=amount,
                date=transaction_date.isoformat() if transaction_date else "",
                description=description,
            ))
        except StorageError as e:
            report_action_error(e)
        else:
            if outcome.success:
                bump_form_revision()
        st.rerun()

    if editing and st.button("Cancel"):
        flow.cancel_edit()
        bump_form_revision()
        st.rerun()


def render_totals(flow: PartnerTransactionFlow):
    """Totals summary, only once there is something to total."""
    summary = flow.summary
    if summary.transaction_count == 0:
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Money Received", format_currency(summary.totals.received))
    col2.metric("Money Given", format_currency(summary.totals.given))
    col3.metric("Net Balance", format_currency(summary.net_balance))


def render_partner_balances(flow: PartnerTransactionFlow):
    """One row per partner: received, given, balance."""
    balances = flow.summary.partner_balances
    if not balances:
        return

    st.subheader("Partner Balances")
    rows = [
        {
            "Partner Name": name,
            "Received": format_currency(balance.received),
            "Given": format_currency(balance.given),
            "Balance": format_currency(balance.net),
        }
        for name, balance in balances.items()
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)


def render_transactions(flow: PartnerTransactionFlow):
    """Searchable transaction list with Edit/Delete actions."""
    st.subheader("All Transactions")

    term = st.text_input(
        "Search",
        value=flow.search_term,
        placeholder="Search by partner name or description...",
        label_visibility="collapsed",
    )
    result = flow.search(term)
    st.caption(result.caption)

    if not result.matches:
        st.info(result.empty_message)
        return

    header = st.columns([3, 2, 2, 2, 4, 2])
    for col, title in zip(header, ["Partner Name", "Type", "Amount", "Date", "Description", "Actions"]):
        col.markdown(f"**{title}**")

    for transaction in result.matches:
        cols = st.columns([3, 2, 2, 2, 4, 2])
        cols[0].markdown(f"**{transaction.partner_name}**")
        badge = "🟢" if transaction.type == TransactionType.RECEIVED else "🔴"
        cols[1].markdown(f"{badge} {type_badge(transaction.type)}")
        cols[2].markdown(format_currency(transaction.amount))
        cols[3].markdown(transaction.date.strftime("%d %b %Y"))
        cols[4].markdown(transaction.description)
        with cols[5]:
            edit_col, delete_col = st.columns(2)
            if edit_col.button("✏️", key=f"edit_{transaction.id}", help="Edit"):
                request_confirmation(flow.request_edit, transaction.id)
            if delete_col.button("🗑️", key=f"delete_{transaction.id}", help="Delete"):
                request_confirmation(flow.request_delete, transaction.id)


def request_confirmation(request, transaction_id: str):
    """Open a confirmation box for an edit or delete of `transaction_id`."""
    try:
        st.session_state.pending = request(transaction_id)
    except StorageError as e:
        report_action_error(e)
    st.rerun()


def render_settings_status():
    """Show whether configuration loaded."""
    st.markdown("### Configuration")
    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name}")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")


if __name__ == "__main__":
    main()
