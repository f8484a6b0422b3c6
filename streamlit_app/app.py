"""FX Deals Warehouse: Streamlit Dashboard Entry Point."""

import streamlit as st

st.set_page_config(
    page_title="FX Deals Warehouse",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.title("FX Deals Warehouse")
st.caption("Deal admission: validate, de-duplicate, persist, query")

with st.expander("How deals are admitted", expanded=False):
    st.markdown("""
Every submission goes through the same pipeline:

1. **Validation**: required fields, unique ID length, ISO 4217 currency codes,
   distinct currencies, positive amount with at most 4 decimal places.
2. **Duplicate check**: a deal unique ID can only ever be stored once.
3. **Commit**: the deal is stored with upper-cased currencies and gets an
   internal ID and creation time.

Stored deals are immutable.
""")

st.markdown("---")
st.markdown("Use the sidebar to navigate between pages.")
