"""Page 2: Explore: KPIs and pair breakdown above the fold, queries below."""

from collections import Counter
from datetime import datetime, time, timedelta, timezone

import pandas as pd
import streamlit as st

from api_client import (
    count_deals,
    deals_by_currency_pair,
    deals_in_time_range,
    error_detail,
    get_deal,
    list_deals,
    recent_deals,
)
from charts import static_bar_chart

DISPLAY_COLS = [
    "deal_unique_id", "from_currency", "to_currency",
    "deal_amount", "deal_timestamp", "created_at",
]

st.header("Explore Deals")


def show_deals(deals: list[dict]) -> None:
    if not deals:
        st.info("No matching deals.")
        return
    df = pd.DataFrame(deals)
    st.dataframe(df[[c for c in DISPLAY_COLS if c in df.columns]], use_container_width=True, hide_index=True)
    st.caption(f"{len(deals)} deals")


# ═══════════════════════════════════════════════════════════════════════════
# ABOVE THE FOLD: totals + deals per currency pair
# ═══════════════════════════════════════════════════════════════════════════

try:
    total = count_deals()
    all_deals = list_deals()
except Exception as e:
    st.error(f"Could not load deals: {error_detail(e)}")
    st.info("Start the API server and submit or generate some deals first.")
    st.stop()

kpi1, kpi2 = st.columns(2)
kpi1.metric("Total Deals", total)
pairs = Counter(f"{d['from_currency']}/{d['to_currency']}" for d in all_deals)
kpi2.metric("Currency Pairs", len(pairs))

if pairs:
    static_bar_chart(dict(pairs.most_common(15)), "Pair", "Deals", title="Deals per Currency Pair")
else:
    st.info("No deals yet.")

# ═══════════════════════════════════════════════════════════════════════════
# BELOW THE FOLD: queries
# ═══════════════════════════════════════════════════════════════════════════

st.divider()
tab_recent, tab_lookup, tab_pair, tab_range = st.tabs(
    ["Recent", "Lookup by ID", "Currency Pair", "Time Range"]
)

with tab_recent:
    limit = st.number_input("How many", min_value=1, max_value=500, value=10)
    try:
        show_deals(recent_deals(int(limit)))
    except Exception as e:
        st.error(error_detail(e))

with tab_lookup:
    lookup_id = st.text_input("Deal Unique ID")
    if lookup_id:
        try:
            deal = get_deal(lookup_id.strip())
        except Exception as e:
            st.error(error_detail(e))
        else:
            if deal is None:
                st.warning(f"Deal {lookup_id} not found.")
            else:
                st.json(deal)

with tab_pair:
    col1, col2 = st.columns(2)
    with col1:
        pair_from = st.text_input("From Currency", value="USD", max_chars=3)
    with col2:
        pair_to = st.text_input("To Currency", value="EUR", max_chars=3)
    if st.button("Search Pair", use_container_width=True):
        try:
            show_deals(deals_by_currency_pair(pair_from, pair_to))
        except Exception as e:
            st.error(error_detail(e))

with tab_range:
    today = datetime.now(timezone.utc).date()
    col1, col2 = st.columns(2)
    with col1:
        start_date = st.date_input("From (UTC)", value=today - timedelta(days=7))
    with col2:
        end_date = st.date_input("To (UTC)", value=today)
    if st.button("Search Range", use_container_width=True):
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        end = datetime.combine(end_date, time.max, tzinfo=timezone.utc)
        try:
            show_deals(deals_in_time_range(start.isoformat(), end.isoformat()))
        except Exception as e:
            st.error(error_detail(e))
