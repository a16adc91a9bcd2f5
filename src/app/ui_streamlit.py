import streamlit as st
import asyncio
import os
import sys

# Ensure project root is in sys.path
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, "../.."))
if project_root not in sys.path:
    sys.path.append(project_root)

import pandas as pd
from src.adapters.reference_adapter import ReferenceAdapter
from src.adapters.storage_adapter import JsonFileStorage
from src.core.config import CensusConfig, configure_logging
from src.core.export import EXPORT_MIME_TYPE, records_to_frame
from src.domain.errors import EmptyDatasetError, NotFoundError, ValidationError
from src.domain.models import Gender, CONDITION_ORDER
from src.services.census_service import CensusService
from src.services.reference_service import ReferenceService, SEARCH_HINT

# --- Configuration & Styling ---
st.set_page_config(
    page_title="Health Census",
    page_icon="🏥",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main .block-container { padding-top: 2rem; }
    div[data-testid="stMetricValue"] { font-size: 1.6rem; }
    .summary-card { padding: 15px; border-radius: 8px; background-color: #f8f9fa; border: 1px solid #e9ecef; margin-bottom: 20px; }
    .gender-title { font-weight: 600; margin-top: 10px; }
</style>
""", unsafe_allow_html=True)

GENDER_ICONS = {Gender.MALE: "👨", Gender.FEMALE: "👩"}

# --- Session State ---
if "census" not in st.session_state:
    config = CensusConfig.from_env()
    configure_logging(config.log_level)
    st.session_state.config = config
    st.session_state.census = CensusService(JsonFileStorage(config.storage_file), config)
    st.session_state.reference = ReferenceService(
        ReferenceAdapter(config.reference_source, timeout=config.reference_timeout)
    )

config: CensusConfig = st.session_state.config
census: CensusService = st.session_state.census
reference: ReferenceService = st.session_state.reference

# Messages set right before st.rerun() are shown on the following run
flash_message = st.session_state.pop("flash", None)
if flash_message:
    st.success(flash_message)

# --- Sidebar ---
with st.sidebar:
    st.title("🏥 Health Census")
    st.caption("Patient census & condition reference")
    st.markdown("---")

    st.header("Add Patient")
    with st.form("patient_form", clear_on_submit=True):
        name_in = st.text_input("Name")
        gender_in = st.radio("Gender", [g.value for g in Gender], index=None, horizontal=True)
        age_in = st.number_input("Age", min_value=0, max_value=200, value=None, step=1)
        condition_in = st.selectbox("Condition", [c.value for c in CONDITION_ORDER], index=None,
                                    placeholder="Select a condition")
        submitted = st.form_submit_button("Add Patient", type="primary", use_container_width=True)

    if submitted:
        try:
            record = census.add_patient(name_in, gender_in, age_in, condition_in)
            st.success(f"Patient {record.name} added successfully!")
        except ValidationError as e:
            st.error(str(e))

    st.markdown("---")
    if st.button("Refresh Statistics", use_container_width=True):
        census.refresh()
        st.success("Statistics refreshed!")

    try:
        csv_text = census.export_csv()
        st.download_button(
            "Export CSV",
            data=csv_text,
            file_name=census.export_filename(),
            mime=EXPORT_MIME_TYPE,
            use_container_width=True,
        )
    except EmptyDatasetError as e:
        st.info(str(e))

# --- Live Stats ---
stats = census.live_stats()
col_s1, col_s2, col_s3, col_s4 = st.columns(4)
col_s1.metric("Total Patients", stats.total_patients)
col_s2.metric("Average Age", stats.average_age if stats.average_age is not None else "—")
col_s3.metric("Conditions Tracked", stats.unique_conditions)
col_s4.metric("Added Today", stats.today_count)

tab_report, tab_patients, tab_search = st.tabs(["📊 Report", "🗂️ Recent Patients", "🔍 Condition Search"])

# --- Tab 1: Report ---
with tab_report:
    report = census.report()
    if not report.has_data:
        st.info("📊 No patient data available yet. Add patients to see detailed analytics.")
    else:
        col_r1, col_r2 = st.columns([3, 2])
        with col_r1:
            st.markdown(f"**Total Patients:** {report.total}")
            st.markdown("#### 📊 Conditions Breakdown")
            for row in report.conditions:
                st.markdown(f"- {row.condition.value}: **{row.count}** patients ({row.percentage:.1f}%)")

            st.markdown("#### 👥 Gender-Based Analysis")
            for section in report.genders:
                st.markdown(f"<div class='gender-title'>{GENDER_ICONS[section.gender]} {section.gender.value}</div>",
                            unsafe_allow_html=True)
                for condition, count in section.conditions:
                    st.markdown(f"- {condition.value}: **{count}**")

        with col_r2:
            chart_df = pd.DataFrame(
                {"Patients": list(census.chart_data().values())},
                index=list(census.chart_data().keys()),
            )
            st.bar_chart(chart_df)

# --- Tab 2: Recent Patients ---
with tab_patients:
    recent = census.recent_patients()
    if not recent:
        st.caption("No patients recorded yet.")
    else:
        st.dataframe(records_to_frame(recent, config.date_format), hide_index=True, use_container_width=True)

        st.markdown("##### Manage Records")
        for record in recent:
            col_p1, col_p2, col_p3 = st.columns([6, 1, 1])
            col_p1.write(f"#{record.id} · {GENDER_ICONS[record.gender]} {record.name} · {record.age} · {record.condition.value}")
            if col_p2.button("View", key=f"view_{record.id}"):
                try:
                    st.session_state.viewing = census.get_patient(record.id)
                except NotFoundError:
                    pass
            if col_p3.button("Delete", key=f"delete_{record.id}"):
                try:
                    census.delete_patient(record.id)
                    st.session_state.flash = "Patient record deleted"
                    st.rerun()
                except NotFoundError:
                    pass

        viewing = st.session_state.get("viewing")
        if viewing is not None:
            with st.expander(f"Viewing {viewing.name}'s details", expanded=True):
                st.json(viewing.to_storage())

# --- Tab 3: Condition Search ---
with tab_search:
    query = st.text_input("Search condition", placeholder="e.g. Diabetes")
    if st.button("Search", type="primary"):
        try:
            with st.spinner("Searching reference data..."):
                result = asyncio.run(reference.lookup(query))
        except ValidationError as e:
            st.error(str(e))
            result = None

        if result is not None:
            if result.error:
                st.warning(f"⚠️ An error occurred while fetching data\n\n{result.error}")
            elif not result.found:
                st.info(f'🔍 No results found for "{result.query}"\n\n{SEARCH_HINT}')
            else:
                condition = result.condition
                st.subheader(condition.name)
                image_path = os.path.join(project_root, condition.image_ref) if condition.image_ref else ""
                if image_path and os.path.exists(image_path):
                    st.image(image_path, caption=condition.name)

                col_c1, col_c2 = st.columns(2)
                with col_c1:
                    st.markdown("**🩺 Symptoms**")
                    for s in condition.symptoms:
                        st.markdown(f"- {s}")
                with col_c2:
                    st.markdown("**🛡️ Prevention**")
                    for p in condition.prevention:
                        st.markdown(f"- {p}")
                st.markdown("**💊 Treatment**")
                st.write(condition.treatment)
