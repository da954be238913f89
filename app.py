from __future__ import annotations

from typing import List

import streamlit as st

from core.client import VehicleApiClient
from core.config import load_settings
from core.formatting import (
    format_mileage,
    format_price,
    format_registration_date,
    vehicle_title,
)
from core.schema import SearchOutcome, Vehicle, ViewState

settings = load_settings()
API_BASE_URL = settings.api_base_url
GRID_COLUMNS = 3

st.set_page_config(
    page_title="Vehicle Search",
    page_icon="🚗",
    layout="wide",
)

st.markdown(
    """
<style>
:root {
  --panel: #141a22;
  --accent: #00e2a1;
  --muted: #9aa3b2;
  --border: #1f2633;
}
.header {
  display: flex;
  align-items: center;
  justify-content: space-between;
  margin-bottom: 1.2rem;
}
.brand {
  font-size: 1.6rem;
  font-weight: 700;
  letter-spacing: -0.02em;
}
.tagline { color: var(--muted); margin-top: 0.2rem; }
.muted { color: var(--muted); }
.vrm-badge {
  display: inline-block;
  padding: 0.2rem 0.7rem;
  border-radius: 6px;
  background: #ffd500;
  color: #111;
  font-weight: 700;
  letter-spacing: 0.06em;
}
.price { color: var(--accent); font-size: 1.3rem; font-weight: 700; }
</style>
""",
    unsafe_allow_html=True,
)

client = VehicleApiClient(API_BASE_URL, timeout=settings.api_timeout_seconds)

if "home" not in st.session_state:
    st.session_state.home = SearchOutcome(state=ViewState.idle)


def _reset_home() -> None:
    st.session_state.home = SearchOutcome(state=ViewState.idle)


def _open_vehicle(vrm: str) -> None:
    _reset_home()
    st.query_params["vrm"] = vrm


def _back_to_search() -> None:
    _reset_home()
    st.query_params.clear()


def _render_card(vehicle: Vehicle, key: str) -> None:
    with st.container(border=True):
        st.markdown(f"<span class='vrm-badge'>{vehicle.vrm}</span>", unsafe_allow_html=True)
        st.markdown(f"### {vehicle_title(vehicle)}")
        st.caption(vehicle.variant)
        st.markdown(f"<span class='price'>{format_price(vehicle.price)}</span>", unsafe_allow_html=True)
        st.markdown(f"**Mileage:** {format_mileage(vehicle.mileage)}")
        st.markdown(f"**Colour:** {vehicle.colour}")
        st.markdown(f"**Body Type:** {vehicle.body_type}")
        st.button("View details →", key=key, on_click=_open_vehicle, args=(vehicle.vrm,))


def _render_grid(vehicles: List[Vehicle]) -> None:
    st.markdown(f"**{len(vehicles)} vehicle(s) found**")
    for start in range(0, len(vehicles), GRID_COLUMNS):
        columns = st.columns(GRID_COLUMNS)
        for column, vehicle in zip(columns, vehicles[start:start + GRID_COLUMNS]):
            with column:
                _render_card(vehicle, key=f"open_{start}_{vehicle.vrm}")


def render_home() -> None:
    st.subheader("Search Vehicles")
    st.markdown(
        "<span class='muted'>Search by VRM, Make, Model, Price, Mileage, Colour, "
        "or any vehicle attribute</span>",
        unsafe_allow_html=True,
    )

    with st.form("search_form", clear_on_submit=False):
        query = st.text_input(
            "Search",
            placeholder="Enter VRM, Make, Model, Price, Mileage, or any vehicle detail...",
            key="search_query",
        )
        submitted = st.form_submit_button("🔍 Search")
    view_all = st.button("View All Vehicles")

    if submitted:
        with st.spinner("Searching vehicles..."):
            st.session_state.home = client.search(query)
    elif view_all:
        with st.spinner("Loading vehicles..."):
            st.session_state.home = client.list_all()

    outcome: SearchOutcome = st.session_state.home
    if outcome.state == ViewState.error:
        st.error(f"❌ {outcome.message}")
    elif outcome.state == ViewState.empty:
        st.info(f"ℹ️ {outcome.message}")
    elif outcome.state == ViewState.results:
        _render_grid(outcome.vehicles)


def render_detail(vrm: str) -> None:
    with st.spinner("Loading vehicle details..."):
        outcome = client.get_vehicle(vrm)

    if outcome.state == ViewState.not_found:
        st.subheader("Vehicle Not Found")
        st.markdown(outcome.message)
        st.button("← Back to Search", on_click=_back_to_search)
        return
    if outcome.state == ViewState.error or outcome.vehicle is None:
        st.subheader("❌ Error")
        st.markdown(outcome.message or f"No vehicle found with VRM: {vrm}")
        st.button("← Back to Search", on_click=_back_to_search)
        return

    vehicle = outcome.vehicle
    st.button("← Back to Search", on_click=_back_to_search)
    st.title(vehicle.vrm)
    st.markdown(f"<span class='muted'>{vehicle_title(vehicle, with_variant=True)}</span>", unsafe_allow_html=True)
    with st.container(border=True):
        st.markdown(f"**Price:** <span class='price'>{format_price(vehicle.price)}</span>", unsafe_allow_html=True)
        details = [
            ("Make", vehicle.make),
            ("Model", vehicle.model),
            ("Variant", vehicle.variant),
            ("Colour", vehicle.colour),
            ("Body Type", vehicle.body_type),
            ("Mileage", format_mileage(vehicle.mileage)),
            ("Registration Date", format_registration_date(vehicle.date_of_registration)),
            ("VRM", vehicle.vrm),
        ]
        left, right = st.columns(2)
        for i, (label, value) in enumerate(details):
            (left if i % 2 == 0 else right).markdown(f"**{label}:** {value}")


st.markdown(
    """
<div class="header">
  <div>
    <div class="brand">🚗 Vehicle Search</div>
    <div class="tagline">Find a vehicle by registration, make, model, price or mileage.</div>
  </div>
</div>
""",
    unsafe_allow_html=True,
)

with st.sidebar:
    st.subheader("API")
    st.markdown(f"**Base URL:** `{API_BASE_URL}`")
    st.caption("Set `PUBLIC_API_URL` in your shell or `.env`, then restart.")

selected_vrm = st.query_params.get("vrm")
if selected_vrm:
    render_detail(selected_vrm)
else:
    render_home()
