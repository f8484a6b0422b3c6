"""Page 1: Submit Deal: form, CSV upload, sample data generator."""

import csv
import io
from datetime import datetime, time, timezone

import streamlit as st

from api_client import error_detail, seed_deals, submit_deal

CURRENCIES = ["USD", "EUR", "GBP", "JPY", "CHF", "AUD", "CAD", "NZD", "JOD", "AED"]

st.header("Submit Deal")

tab_form, tab_csv, tab_generate = st.tabs(["Single Deal", "CSV Upload", "Generate Sample Data"])

# ---------------------------------------------------------------------------
# Tab 1: Single deal form
# ---------------------------------------------------------------------------
with tab_form:
    with st.form("deal_form"):
        deal_unique_id = st.text_input("Deal Unique ID", max_chars=100)
        col1, col2 = st.columns(2)
        with col1:
            from_currency = st.selectbox("From Currency", CURRENCIES, index=0)
            deal_date = st.date_input("Deal Date (UTC)")
        with col2:
            to_currency = st.selectbox("To Currency", CURRENCIES, index=1)
            deal_time = st.time_input("Deal Time (UTC)", value=time(12, 0))

        amount = st.number_input(
            "Deal Amount", min_value=0.0001, value=1000.0, step=100.0, format="%.4f"
        )
        submitted = st.form_submit_button("Submit Deal", use_container_width=True)

    if submitted:
        timestamp = datetime.combine(deal_date, deal_time, tzinfo=timezone.utc)
        payload = {
            "deal_unique_id": deal_unique_id.strip(),
            "from_currency": from_currency,
            "to_currency": to_currency,
            "deal_timestamp": timestamp.isoformat(),
            "deal_amount": f"{amount:.4f}",
        }

        try:
            result = submit_deal(payload)
            st.success(
                f"Deal **{result['deal_unique_id']}** stored "
                f"({result['from_currency']} -> {result['to_currency']}, {result['deal_amount']})"
            )
            with st.expander("Stored Deal"):
                st.json(result)

        except Exception as e:
            st.error(f"Rejected: {error_detail(e)}")

# ---------------------------------------------------------------------------
# Tab 2: CSV upload
# ---------------------------------------------------------------------------
with tab_csv:
    st.markdown("Upload a CSV with columns: `deal_unique_id, from_currency, to_currency, deal_timestamp, deal_amount`")

    uploaded = st.file_uploader("Choose CSV file", type=["csv"])
    if uploaded is not None:
        process_btn = st.button("Process CSV", use_container_width=True)
        if process_btn:
            content = uploaded.read().decode("utf-8")
            reader = csv.DictReader(io.StringIO(content))
            results = []
            errors = []
            progress = st.progress(0)
            rows = list(reader)
            for i, row in enumerate(rows):
                payload = {key: (value or "").strip() or None for key, value in row.items()}
                try:
                    results.append(submit_deal(payload))
                except Exception as e:
                    errors.append({"row": i + 1, "deal_unique_id": payload.get("deal_unique_id"), "error": error_detail(e)})
                progress.progress((i + 1) / len(rows))

            st.success(f"Stored {len(results)} deals.")
            if errors:
                st.error(f"{len(errors)} deals rejected:")
                st.json(errors)

# ---------------------------------------------------------------------------
# Tab 3: Sample data generator
# ---------------------------------------------------------------------------
with tab_generate:
    gen_count = st.number_input("Number of deals", min_value=1, max_value=500, value=50)

    if st.button("Generate Deals", use_container_width=True):
        with st.spinner(f"Generating {gen_count} deals..."):
            try:
                result = seed_deals(count=gen_count)
                st.success(f"Generated {result['generated']} deals.")
            except Exception as e:
                st.error(f"Error: {error_detail(e)}")
