"""Streamlit UI for TripArchitect - trip form, day planner, map and pool.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio  # noqa: E402

import streamlit as st  # noqa: E402
from pydantic import ValidationError  # noqa: E402

from backend.app.config import get_settings  # noqa: E402
from backend.app.controller.session import TripSession  # noqa: E402
from backend.app.errors import TripArchitectError  # noqa: E402
from backend.app.models.common import ALL_CATEGORIES, PartySize, ViewState  # noqa: E402
from backend.app.models.preferences import TripPreferences  # noqa: E402
from backend.app.persistence.storage import create_trip_storage  # noqa: E402
from backend.app.persistence.writer import PersistenceWriter  # noqa: E402
from backend.app.store.itinerary_store import POOL_DAY  # noqa: E402
from ui.helpers import (  # noqa: E402
    build_trip_session,
    chart_rows,
    cost_tier_label,
    image_url,
    map_points,
    place_caption,
)

settings = get_settings()

# Page config
st.set_page_config(
    page_title="TripArchitect",
    page_icon="🧭",
    layout="wide",
)


@st.cache_resource
def _persistence_writer() -> PersistenceWriter:
    """One storage connection and one writer thread per server process."""
    return PersistenceWriter(create_trip_storage(settings))


if "trip" not in st.session_state:
    st.session_state.trip = build_trip_session(_persistence_writer(), settings)

trip: TripSession = st.session_state.trip

# =============================================================================
# LANDING - TRIP FORM
# =============================================================================
if trip.view_state != ViewState.result:
    st.title("🧭 TripArchitect")
    st.markdown("*Tell us where you're going; we'll map out every day.*")

    with st.form("trip_form"):
        destination = st.text_input("Where to? *", value="", placeholder="Kyoto, Japan")
        duration = st.number_input("Days *", min_value=1, max_value=14, value=3, step=1)
        party_size = st.selectbox(
            "Who's going?",
            options=list(PartySize),
            index=list(PartySize).index(PartySize.couple),
            format_func=lambda p: p.value,
        )
        interests = st.text_input("Interests", placeholder="street food, temples, hiking")

        submitted = st.form_submit_button(
            "Curating..." if trip.is_generating else "✨ Plan my trip",
            type="primary",
            use_container_width=True,
            disabled=trip.is_generating,
        )

    if submitted:
        try:
            preferences = TripPreferences(
                destination=destination,
                duration=int(duration),
                party_size=party_size,
                interests=interests,
            )
        except ValidationError:
            st.error("❌ Please enter a destination.")
        else:
            with st.spinner("Curating hidden gems and routing your journey..."):
                try:
                    asyncio.run(trip.generate(preferences))
                except TripArchitectError:
                    # Message is kept on trip.error and rendered below
                    pass
            st.rerun()

    if trip.error:
        st.error(f"❌ {trip.error}")

    if trip.itinerary is not None and st.button("← Back to my trip"):
        trip.view_state = ViewState.result
        st.rerun()
    st.stop()

# =============================================================================
# RESULT - PLANNER
# =============================================================================
view = trip.view()
itinerary = view.itinerary
assert itinerary is not None

header_left, header_right = st.columns([4, 1])
with header_left:
    st.title(itinerary.trip_meta.title)
    tags = " ".join(f"`{tag}`" for tag in itinerary.trip_meta.vibe_tags)
    st.caption(f"{itinerary.trip_meta.duration} {tags}")
with header_right:
    if st.button("New trip", use_container_width=True):
        trip.go_to_landing()
        st.rerun()
    if st.button("Clear saved trip", use_container_width=True):
        trip.clear_trip()
        st.rerun()

if view.error:
    st.error(f"❌ {view.error}")

col_plan, col_map = st.columns([2, 3])
day_options = [day.day_num for day in view.days]

with col_plan:
    # --- Day selector ---
    if day_options:
        chosen_day = st.radio(
            "Day",
            options=day_options,
            index=day_options.index(view.active_day) if view.active_day in day_options else 0,
            format_func=lambda d: f"Day {d}",
            horizontal=True,
        )
        if chosen_day != view.active_day:
            trip.set_active_day(chosen_day)
            st.rerun()

    st.subheader(f"Day {view.active_day}: {view.active_day_theme}")

    # --- Scheduled places ---
    if not view.visible_pins:
        st.info("Nothing planned yet. Add places from the recommendations below.")

    move_targets = [POOL_DAY, *day_options]
    for place in view.visible_pins:
        selected = place.id == view.selected_place_id
        with st.container(border=True):
            img_col, text_col = st.columns([1, 3])
            with img_col:
                st.image(image_url(place.image_search_query or place.name), use_container_width=True)
            with text_col:
                st.markdown(f"{'**▶ ' if selected else '**'}{place.name}**")
                st.caption(place_caption(place))
                if place.short_description:
                    st.write(place.short_description)
                if place.logistics_note:
                    st.caption(f"🚶 {place.logistics_note}")

            btn_select, btn_move, btn_delete = st.columns([1, 2, 1])
            with btn_select:
                if st.button("Show", key=f"select_{place.id}"):
                    trip.select(place.id)
                    st.rerun()
            with btn_move:
                target = st.selectbox(
                    "Move to",
                    options=move_targets,
                    index=move_targets.index(place.day_index),
                    format_func=lambda d: "Recommendations" if d == POOL_DAY else f"Day {d}",
                    key=f"move_{place.id}",
                    label_visibility="collapsed",
                )
                if target != place.day_index:
                    trip.begin_drag(place.id)
                    trip.drop_on_day(target)
                    st.rerun()
            with btn_delete:
                if st.button("Remove", key=f"delete_{place.id}"):
                    trip.delete_place(place.id)
                    st.rerun()

    st.divider()

    # --- Recommendation pool ---
    st.subheader("Recommended for you")
    filter_options = [ALL_CATEGORIES, *view.available_categories]
    chosen_filter = st.selectbox(
        "Category",
        options=filter_options,
        index=filter_options.index(view.category_filter) if view.category_filter in filter_options else 0,
        format_func=lambda c: "All" if c == ALL_CATEGORIES else c.value.title(),
    )
    if chosen_filter != view.category_filter:
        trip.set_category_filter(chosen_filter)
        st.rerun()

    for place in view.recommended_pins:
        rec_text, rec_add = st.columns([4, 1])
        with rec_text:
            st.markdown(f"**{place.name}**")
            st.caption(f"{place.category_icon.value} · {place_caption(place)}")
        with rec_add:
            if st.button(f"+ Day {view.active_day}", key=f"add_{place.id}"):
                trip.begin_drag(place.id)
                trip.drop_on_day(view.active_day)
                st.rerun()

    if view.has_more_recommendations and st.button("Load more"):
        trip.load_more()
        st.rerun()

with col_map:
    points = map_points(list(view.visible_pins), view.selected_place_id)
    if points:
        st.map(
            {key: [p[key] for p in points] for key in ("lat", "lon", "color", "size")},
            latitude="lat",
            longitude="lon",
            color="color",
            size="size",
        )

    st.subheader("Trip balance")
    if view.cost_distribution:
        st.bar_chart(chart_rows(list(view.cost_distribution)), x="tier", y="places", color="color")
        for slice_ in view.cost_distribution:
            st.caption(f"{cost_tier_label(slice_.tier)}: {slice_.value}")
    if itinerary.trip_meta.total_estimated_cost is not None:
        cost = itinerary.trip_meta.total_estimated_cost
        st.metric("Estimated total", f"{cost.amount:,.0f} {cost.currency}")
