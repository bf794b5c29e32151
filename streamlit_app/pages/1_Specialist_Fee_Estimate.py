"""
Specialist Fee Estimate Page.

Estimates the Medicare rebate, health fund rebate and out-of-pocket cost
for a single MBS item, and shows the surgical assistant item that applies.
"""

import streamlit as st

from mbs_estimate.gateways import ApiClientError, get_api_client
from mbs_estimate.schemas.estimate import EstimateState
from mbs_estimate.services.mbs_lookup import MbsValidationError
from mbs_estimate.utils.formatting import format_aud
from mbs_estimate.utils.forms import parse_fee, parse_gap_fee

st.set_page_config(
    page_title="Specialist Fee Estimate",
    page_icon="💵",
    layout="wide",
)

st.markdown(
    """
<style>
    /* Section headers */
    .section-header {
        font-size: 1.1rem;
        font-weight: 600;
        color: #343A40;
        margin-bottom: 1rem;
        padding-bottom: 0.5rem;
        border-bottom: 2px solid #0066CC;
    }

    /* Assistant card */
    .assistant-card {
        background: white;
        border-radius: 8px;
        padding: 1rem;
        margin-bottom: 0.75rem;
        box-shadow: 0 1px 4px rgba(0, 0, 0, 0.06);
        border-left: 3px solid #0066CC;
    }
</style>
""",
    unsafe_allow_html=True,
)

st.markdown(
    """
<div style="background: linear-gradient(135deg, #0066CC 0%, #004C99 100%); color: white; padding: 1.5rem; border-radius: 10px; margin-bottom: 1.5rem;">
    <h1 style="margin: 0; font-size: 1.75rem;">💵 Specialist Fee Estimate</h1>
    <p style="margin: 0.5rem 0 0 0; opacity: 0.9;">Out-of-pocket estimate for a single MBS item</p>
</div>
""",
    unsafe_allow_html=True,
)

if "single_estimate" not in st.session_state:
    st.session_state.single_estimate = EstimateState.pending()

with st.form("single_estimate_form"):
    col1, col2, col3 = st.columns(3)
    with col1:
        item_code = st.text_input("MBS Item Number", placeholder="30175")
    with col2:
        charged_fee_text = st.text_input("Your Charged Fee ($)", placeholder="500.00")
    with col3:
        gap_fee_text = st.text_input("Assistant Gap Fee ($, optional)", placeholder="0.00")
    submitted = st.form_submit_button("Estimate", type="primary")

if submitted:
    st.session_state.single_estimate = EstimateState.pending()
    try:
        if not item_code.strip() or not charged_fee_text.strip():
            raise MbsValidationError("Please enter both MBS Item Number and Your Charged Fee.")
        charged_fee = parse_fee(charged_fee_text)
        gap_fee = parse_gap_fee(gap_fee_text)
    except MbsValidationError as e:
        st.session_state.single_estimate = EstimateState.failed(str(e))
    else:
        with st.spinner("Calculating estimate..."):
            try:
                with get_api_client() as client:
                    estimate = client.estimate_single(item_code.strip(), charged_fee, gap_fee)
                st.session_state.single_estimate = EstimateState.ready(estimate)
            except ApiClientError as e:
                st.session_state.single_estimate = EstimateState.failed(str(e))

state = st.session_state.single_estimate
if state.error:
    st.error(state.error)
elif state.is_ready:
    estimate = state.payload
    item = estimate.item

    st.markdown('<div class="section-header">Item Details</div>', unsafe_allow_html=True)
    st.markdown(f"**Item {item.item_code}**: {item.description}")
    st.markdown(f"Schedule Fee: **{format_aud(item.schedule_fee)}**")

    st.markdown('<div class="section-header">Estimate</div>', unsafe_allow_html=True)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Your Charged Fee", format_aud(estimate.charged_fee))
    col2.metric("Medicare Rebate (75%)", format_aud(estimate.medicare_rebate))
    col3.metric("Health Fund Rebate", format_aud(estimate.health_fund_rebate))
    col4.metric("Out-of-Pocket", format_aud(estimate.out_of_pocket))

    if estimate.assistant_item_code:
        st.markdown('<div class="section-header">Surgical Assistant</div>', unsafe_allow_html=True)
        description = estimate.assistant_item_description or ""
        st.markdown(
            f"""
        <div class="assistant-card">
            <strong>Item {estimate.assistant_item_code}</strong><br>
            {description}
        </div>
        """,
            unsafe_allow_html=True,
        )
        if estimate.assistant_error:
            st.warning(estimate.assistant_error)
        if estimate.assistant_gap_fee:
            st.markdown(f"Assistant Gap Fee: **{format_aud(estimate.assistant_gap_fee)}**")

    st.metric("Total Out-of-Pocket", format_aud(estimate.total_out_of_pocket))
