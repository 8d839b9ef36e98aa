import asyncio

import streamlit as st
from streamlit_folium import st_folium

from resilient_cities.config import load_settings
from resilient_cities.coordinator import DataCoordinator, RefreshFailed
from resilient_cities.geocoding import DEFAULT_LOCATION, StaticLocationResolver
from resilient_cities.render import LAYER_STYLES, build_map

st.set_page_config(page_title="Resilient Cities — Climate Layers", layout="wide")
st.title("Resilient Cities — Urban Climate Layers")
st.caption("All values are procedurally generated for demonstration; nothing here is measured data.")

# Session state: one coordinator per browser session
if "coordinator" not in st.session_state:
    st.session_state.coordinator = DataCoordinator(settings=load_settings())
    st.session_state.location = DEFAULT_LOCATION
    st.session_state.needs_refresh = True

coordinator = st.session_state.coordinator
resolver = StaticLocationResolver()

# Sidebar
st.sidebar.header("Location")
query = st.sidebar.text_input("Search a city", "")
if query:
    matches = resolver.search(query)
    if not matches:
        st.sidebar.info(f"No demo city matches '{query}'")
    else:
        names = [m.name for m in matches]
        pick = st.sidebar.selectbox("Matches", names)
        chosen = matches[names.index(pick)]
        if chosen != st.session_state.location:
            st.session_state.location = chosen
            coordinator.set_viewport(chosen.coordinate)
            st.session_state.needs_refresh = True

st.sidebar.header("Data layer")
layer_ids = list(LAYER_STYLES)
layer = st.sidebar.radio("Show", layer_ids, format_func=lambda k: LAYER_STYLES[k][0])

if st.sidebar.button("Regenerate"):
    st.session_state.needs_refresh = True

# Generate
if st.session_state.needs_refresh:
    with st.spinner("Generating climate layers…"):
        try:
            asyncio.run(coordinator.refresh())
        except RefreshFailed as e:
            st.sidebar.warning(f"Could not refresh data, showing previous round: {e}")
    st.session_state.needs_refresh = False

location = st.session_state.location
st.markdown(f"### {location.name}")

# Metrics
cols = st.columns(4)
for col, (label, value) in zip(cols, coordinator.summary.display().items()):
    col.metric(label, value)

# Map
vp = coordinator.viewport
m = build_map(coordinator.dataset, vp.center, layer=layer, zoom=vp.zoom, bounds=vp.bounds)
st_folium(m, use_container_width=True, returned_objects=[], key="main_map")

st.markdown(
"""
#### Layers
- **Temperature** – surface temperature grid; colour runs blue (cool) to red (hot). Hover for heat index.
- **Buildings** – sampled buildings coloured by energy efficiency (red = poor, green = good).
- **Flood Risk** – only cells above the inclusion threshold are drawn; darker = higher risk.

#### Metrics
- **At-Risk Area** counts retained flood cells at a nominal 0.01 km² each.
- **Carbon Impact** sums the footprint of every sampled building in the viewport.
"""
)
