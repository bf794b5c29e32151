"""
Multi-Item Estimate Page.

Estimates a surgical claim with several MBS items billed together,
applying the multiple operation rule and the surgical assistant fee.
"""

import streamlit as st

from mbs_estimate.gateways import ApiClientError, get_api_client
from mbs_estimate.schemas.estimate import EstimateState
from mbs_estimate.services.mbs_lookup import MbsValidationError
from mbs_estimate.utils.formatting import format_aud
from mbs_estimate.utils.forms import parse_fee, parse_gap_fee, parse_item_codes

st.set_page_config(
    page_title="Multi-Item Estimate",
    page_icon="🧾",
    layout="wide",
)

st.markdown(
    """
<style>
    .section-header {
        font-size: 1.1rem;
        font-weight: 600;
        color: #343A40;
        margin-bottom: 1rem;
        padding-bottom: 0.5rem;
        border-bottom: 2px solid #0066CC;
    }
</style>
""",
    unsafe_allow_html=True,
)

st.markdown(
    """
<div style="background: linear-gradient(135deg, #0066CC 0%, #004C99 100%); color: white; padding: 1.5rem; border-radius: 10px; margin-bottom: 1.5rem;">
    <h1 style="margin: 0; font-size: 1.75rem;">🧾 Multi-Item Estimate</h1>
    <p style="margin: 0.5rem 0 0 0; opacity: 0.9;">Multiple operation rule: 100% / 50% / 25% of the schedule fee</p>
</div>
""",
    unsafe_allow_html=True,
)

if "multi_estimate" not in st.session_state:
    st.session_state.multi_estimate = EstimateState.pending()

with st.form("multi_estimate_form"):
    codes_text = st.text_area(
        "MBS Item Numbers",
        placeholder="30175, 30180, 105A",
        help="Separate item numbers with commas, spaces or new lines",
    )
    col1, col2 = st.columns(2)
    with col1:
        charged_fee_text = st.text_input("Total Charged Fee ($)", placeholder="2500.00")
    with col2:
        gap_fee_text = st.text_input("Assistant Gap Fee ($, optional)", placeholder="0.00")
    submitted = st.form_submit_button("Estimate", type="primary")

if submitted:
    st.session_state.multi_estimate = EstimateState.pending()
    try:
        item_codes = parse_item_codes(codes_text)
        charged_fee = parse_fee(charged_fee_text, label="Total Charged Fee")
        gap_fee = parse_gap_fee(gap_fee_text)
    except MbsValidationError as e:
        st.session_state.multi_estimate = EstimateState.failed(str(e))
    else:
        with st.spinner("Calculating estimate..."):
            try:
                with get_api_client() as client:
                    estimate = client.estimate_multiple(item_codes, charged_fee, gap_fee)
                st.session_state.multi_estimate = EstimateState.ready(estimate)
            except ApiClientError as e:
                st.session_state.multi_estimate = EstimateState.failed(str(e))

state = st.session_state.multi_estimate
if state.error:
    st.error(state.error)
elif state.is_ready:
    estimate = state.payload

    for message in estimate.lookup_errors:
        st.warning(message)

    st.markdown('<div class="section-header">Items</div>', unsafe_allow_html=True)
    rows = []
    for line in estimate.lines:
        row = {
            "Item": line.item_code,
            "Description": line.description,
            "Schedule Fee": format_aud(line.schedule_fee),
            "Rule": f"{line.scale:.0%}",
            "Fee After Rule": format_aud(line.effective_fee),
            "Medicare": format_aud(line.medicare_rebate),
            "Health Fund": format_aud(line.health_fund_rebate),
        }
        if line.out_of_pocket is not None:
            row["Out-of-Pocket"] = format_aud(line.out_of_pocket)
        rows.append(row)
    st.dataframe(rows, use_container_width=True, hide_index=True)
    st.markdown(f"Total fee after the multiple operation rule: **{format_aud(estimate.total_effective_fee)}**")

    if estimate.assistant is not None:
        assistant = estimate.assistant
        st.markdown('<div class="section-header">Surgical Assistant</div>', unsafe_allow_html=True)
        st.markdown(f"**Item {assistant.item_code}**: {assistant.description or ''}")
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Assistant Fee", format_aud(assistant.charged_fee))
        col2.metric("Medicare", format_aud(assistant.medicare_rebate))
        col3.metric("Health Fund", format_aud(assistant.health_fund_rebate))
        col4.metric("Out-of-Pocket", format_aud(assistant.out_of_pocket))
    elif estimate.assistant_item_code:
        st.info(f"Surgical assistant item {estimate.assistant_item_code} applies.")

    st.markdown('<div class="section-header">Totals</div>', unsafe_allow_html=True)
    totals = estimate.totals
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Charged", format_aud(totals.charged_fee))
    col2.metric("Total Medicare", format_aud(totals.medicare_rebate))
    col3.metric("Total Health Fund", format_aud(totals.health_fund_rebate))
    col4.metric("Total Out-of-Pocket", format_aud(totals.out_of_pocket))
