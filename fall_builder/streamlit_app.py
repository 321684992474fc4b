import logging

import streamlit as st

from fall_builder.catalog import CatalogLoadError, load_catalog
from fall_builder.config import BASE_DIR, settings
from fall_builder.constants import DEFAULT_POINTS_LIMIT, POINTS_LIMITS, SEVERITY_DANGER, SEVERITY_WARN
from fall_builder.reports import roster_pdf_bytes, roster_summary_text
from fall_builder.roster import Roster
from fall_builder.rules import get_rule_set
from fall_builder.utils import load_app_icon, safe_filename

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# --- Setup & Configuration ---
app_icon = load_app_icon(BASE_DIR / "app_icon.ico")

st.set_page_config(page_title=settings.app_name, page_icon=app_icon, layout="wide")

rules = get_rule_set(settings.rule_set)
if "roster" not in st.session_state:
    limit = settings.default_points_limit if settings.default_points_limit in POINTS_LIMITS else DEFAULT_POINTS_LIMIT
    st.session_state.roster = Roster(rules=rules, points_limit=limit)
if "flash" not in st.session_state:
    st.session_state.flash = None

roster: Roster = st.session_state.roster


# --- Helper Functions ---
@st.cache_data(show_spinner="Loading catalog...")
def get_catalog(source, timeout):
    return load_catalog(source, timeout=timeout)


def show_status(status):
    if status.severity == SEVERITY_DANGER: st.error(status.message)
    elif status.severity == SEVERITY_WARN: st.warning(status.message)
    else: st.success(status.message)


# --- CALLBACKS ---
def cb_update_points_limit(): roster.set_points_limit(int(st.session_state.points_limit_input))
def cb_update_faction(catalog): roster.select_faction(catalog.faction(st.session_state.faction_input))
def cb_delete_entry(entry_id): roster.remove_entry(entry_id)
def cb_clear_roster(): roster.clear()
def cb_add_unit(unit_name):
    result = roster.add_unit(unit_name)
    if result.status:
        st.session_state.flash = result.status


try:
    catalog = get_catalog(settings.resolved_catalog_source, settings.catalog_timeout)
except CatalogLoadError as e:
    st.error(f"Could not load the unit catalog. {e}")
    st.stop()

if roster.faction is None and catalog.factions:
    roster.select_faction(catalog.factions[0])

# --- SIDEBAR ---
with st.sidebar:
    st.title(settings.app_name)
    st.divider()

    st.header("Settings")
    st.selectbox("Points Limit", POINTS_LIMITS, index=POINTS_LIMITS.index(roster.points_limit) if roster.points_limit in POINTS_LIMITS else 0,
                 format_func=lambda p: f"{p} points", key="points_limit_input", on_change=cb_update_points_limit)

    faction_names = catalog.faction_names
    if faction_names:
        index = faction_names.index(roster.faction_name) if roster.faction_name in faction_names else 0
        st.selectbox("Faction", faction_names, index=index, key="faction_input",
                     on_change=cb_update_faction, args=(catalog,))
    else:
        st.selectbox("Faction", ["No factions found"], disabled=True)
    st.caption(f"Rule set: {rules.label}")

    st.divider()
    st.write("### Export")
    safe_name = safe_filename(f"{roster.faction_name}_{roster.points_limit}")
    if st.button("📄 Generate PDF"):
        st.download_button("Download PDF", roster_pdf_bytes(roster), f"{safe_name}.pdf", "application/pdf")

    with st.expander("📋 Text Export (Copy/Paste)"):
        st.caption("Use the copy button in the corner of the block.")
        txt_out = roster_summary_text(roster)
        st.code(txt_out, language="text")
        st.download_button("💾 Download Text", txt_out, f"{safe_name}.txt", "text/plain")

# --- MAIN PAGE ---
if st.session_state.flash is not None:
    st.toast(st.session_state.flash.message, icon="⚠️")
    st.session_state.flash = None

st.title(roster.faction_name or "No faction selected")
total = roster.total_points()
st.caption(f"{total} / {roster.points_limit}")

# --- VALIDATOR & METRICS ---
show_status(roster.status())

comp = roster.composition()
col1, col2, col3, col4, col5 = st.columns(5)
col1.metric("Total Points", f"{total} / {roster.points_limit}", delta=roster.points_limit - total)
col2.metric("Leaders", f"{comp.leaders}/{comp.required_leaders}")
col3.metric("Core", f"{comp.core}/{comp.required_core}")
col4.metric("Special", f"{comp.special}")
if comp.cap is not None: col5.metric(f"{comp.fourth_type}s", f"{comp.fourth}/{comp.cap}")
else: col5.metric(f"{comp.fourth_type}s", f"{comp.fourth}")

st.divider()

left, right = st.columns(2)
with left:
    st.subheader("Units")
    if roster.faction is None:
        st.caption("Select a faction to see units.")
    else:
        st.caption(f"Click Add to include units in your roster. {rules.describe()}")
        for u in roster.faction.sorted_units(rules):
            c_name, c_add = st.columns([4, 1])
            c_name.markdown(f"**{u.name}**  \n{u.type} · {u.points} pts")
            c_add.button("Add", key=f"add_{u.name}", on_click=cb_add_unit, args=(u.name,),
                         help=None if roster.can_add(u) else f"{u.type} cap reached")

with right:
    st.subheader(f"Roster ({len(roster)} Units)")
    ordered = roster.ordered_entries()
    if not ordered: st.info("No units yet. Add units from the left panel.")
    for entry in ordered:
        c_name, c_del = st.columns([4, 1])
        c_name.markdown(f"**{entry.name}**  \n{entry.type} · {entry.points} pts")
        c_del.button("Delete", key=f"del_{entry.id}", on_click=cb_delete_entry, args=(entry.id,))
    if ordered:
        st.button("Clear Roster", type="primary", on_click=cb_clear_roster)
