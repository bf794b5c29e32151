"""
MBS Fee Estimate - Item Search.

Landing page: search the Medicare Benefits Schedule by item number or
keywords and browse the current fees and benefits.
"""

import streamlit as st

from mbs_estimate.gateways import ApiClientError, get_api_client
from mbs_estimate.schemas.estimate import EstimateState
from mbs_estimate.services.mbs_lookup import MbsValidationError
from mbs_estimate.utils.formatting import format_aud, yes_no
from mbs_estimate.utils.forms import require_query

st.set_page_config(
    page_title="MBS Item Search",
    page_icon="🏥",
    layout="wide",
    initial_sidebar_state="expanded",
    menu_items={
        "About": "MBS Fee Estimate v1.0.0",
    },
)

st.markdown(
    """
<style>
    /* Footer */
    .footer {
        text-align: center;
        padding: 1rem;
        color: #6C757D;
        font-size: 0.85rem;
        border-top: 1px solid #DEE2E6;
        margin-top: 2rem;
    }
</style>
""",
    unsafe_allow_html=True,
)

st.markdown(
    """
<div style="background: linear-gradient(135deg, #0066CC 0%, #004C99 100%); color: white; padding: 1.5rem; border-radius: 10px; margin-bottom: 1.5rem;">
    <h1 style="margin: 0; font-size: 1.75rem;">🔎 MBS Item Search</h1>
    <p style="margin: 0.5rem 0 0 0; opacity: 0.9;">Search by item number (e.g. 30175) or keywords (e.g. knee arthroscopy)</p>
</div>
""",
    unsafe_allow_html=True,
)

with st.sidebar:
    st.markdown("### 📋 Estimators")
    st.page_link("pages/1_Specialist_Fee_Estimate.py", label="Specialist Fee Estimate")
    st.page_link("pages/2_Multi_Item_Estimate.py", label="Multi-Item Estimate")

if "search_state" not in st.session_state:
    st.session_state.search_state = EstimateState.pending()

with st.form("mbs_search"):
    col1, col2 = st.columns([4, 1])
    with col1:
        query_text = st.text_input(
            "Item number or keywords",
            placeholder="30175 or knee arthroscopy",
            key="search_query",
        )
    with col2:
        st.markdown("<br>", unsafe_allow_html=True)
        submitted = st.form_submit_button("Search", type="primary", use_container_width=True)

if submitted:
    st.session_state.search_state = EstimateState.pending()
    try:
        query = require_query(query_text)
    except MbsValidationError as e:
        st.session_state.search_state = EstimateState.failed(str(e))
    else:
        with st.spinner("Searching the fee schedule..."):
            try:
                with get_api_client() as client:
                    st.session_state.search_state = EstimateState.ready(client.search(query))
            except ApiClientError as e:
                st.session_state.search_state = EstimateState.failed(str(e))

state = st.session_state.search_state
if not state.is_pending:
    if state.error:
        st.error(state.error)
    elif state.is_ready and not state.payload:
        st.info("No results found.")
    elif state.is_ready:
        st.success(f"Found {len(state.payload)} item(s)")
        rows = [
            {
                "Item": record.item_code,
                "Description": record.description,
                "Schedule Fee": format_aud(record.schedule_fee),
                "75% Benefit": format_aud(record.benefit_75_percent),
                "85% Benefit": format_aud(record.benefit_85_percent),
                "Anaesthetic Eligible": yes_no(record.is_anaes_eligible),
                "Assistant Eligible": yes_no(record.is_assist_eligible),
            }
            for record in state.payload
        ]
        st.dataframe(rows, use_container_width=True, hide_index=True)

st.markdown(
    """
<div class="footer">
    Fees and benefits are drawn from the current Medicare Benefits Schedule. Estimates are indicative only.
</div>
""",
    unsafe_allow_html=True,
)
