"""Streamlit dashboard for the laboratory scheduling service."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

import pandas as pd
import requests
import streamlit as st

# ==========================================
# Configuration & Constants
# ==========================================
API_BASE_URL = os.getenv("LABSCHED_API_BASE_URL", "http://127.0.0.1:8000")

st.set_page_config(
    page_title="Lab Scheduling Dashboard",
    page_icon="🧪",
    layout="wide",
)


# ==========================================
# API Helper Functions
# ==========================================
def api_get(path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
    try:
        response = requests.get(f"{API_BASE_URL}{path}", params=params, timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        st.error(f"Backend request failed: {e}")
        return None


def api_post(path: str, payload: Optional[Dict[str, Any]] = None) -> Optional[Any]:
    try:
        response = requests.post(f"{API_BASE_URL}{path}", json=payload, timeout=10)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.HTTPError as e:
        detail = e.response.text if e.response is not None else str(e)
        st.error(f"Request rejected: {detail}")
        return None
    except requests.exceptions.RequestException as e:
        st.error(f"Backend connection failed: {e}")
        return None


def api_delete(path: str) -> bool:
    try:
        response = requests.delete(f"{API_BASE_URL}{path}", timeout=5)
        response.raise_for_status()
        return True
    except requests.exceptions.RequestException as e:
        st.error(f"Delete failed: {e}")
        return False


def slot_options(slots: List[Dict[str, Any]]) -> Dict[str, Dict[str, int]]:
    """Map display labels to slot payloads, keeping the server's slot order."""
    return {
        slot["label"]: {"week": slot["week"], "day": slot["day"], "period": slot["period"]}
        for slot in slots
    }


def lab_option_labels(laboratories: List[Dict[str, Any]]) -> Dict[str, int]:
    # Locations are not unique; the id keeps every lab selectable.
    return {f"{lab['location']} (#{lab['lab_id']})": lab["lab_id"] for lab in laboratories}


def build_request_payload(
    class_id: str,
    teacher: str,
    student_count: int,
    preferred: List[Dict[str, int]],
    excluded: List[Dict[str, int]],
    priority: Optional[int],
) -> Dict[str, Any]:
    """Body for ``POST /requests``; a ``None`` priority lets the server assign one."""
    return {
        "class_id": class_id,
        "teacher": teacher,
        "student_count": int(student_count),
        "preferred_slots": preferred,
        "excluded_slots": excluded,
        "priority": int(priority) if priority is not None else None,
    }


def render_stats(stats: Dict[str, Any]) -> None:
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Requests", stats.get("total_requests", 0))
    col2.metric("Placed", stats.get("successful_requests", 0))
    col3.metric("Unplaced", stats.get("failed_requests", 0))
    col4.metric("Success Rate", f"{stats.get('success_rate', 0.0):.2f}%")

    failed_classes: List[str] = stats.get("failed_classes", [])
    if failed_classes:
        st.write("### Classes Without a Lab")
        for failed_class in failed_classes:
            st.write(f"- {failed_class}")


# ==========================================
# UI Page Functions
# ==========================================
def render_laboratory_page() -> None:
    st.header("🏫 Laboratories")

    with st.form("add_laboratory", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            location = st.text_input("Location")
        with col2:
            capacity = st.number_input("Capacity", min_value=1, max_value=500, value=40)
        if st.form_submit_button("Add Laboratory", type="primary"):
            if not location.strip():
                st.warning("Enter a laboratory location.")
            elif api_post("/laboratories", {"location": location, "capacity": int(capacity)}):
                st.success("Laboratory added.")

    laboratories = api_get("/laboratories") or []
    if not laboratories:
        st.info("No laboratories registered yet.")
        return
    st.dataframe(pd.DataFrame(laboratories), use_container_width=True)

    lab_labels = lab_option_labels(laboratories)
    selected = st.selectbox("Laboratory to delete", list(lab_labels))
    if st.button("Delete Laboratory") and api_delete(f"/laboratories/{lab_labels[selected]}"):
        st.success("Laboratory deleted.")


def render_request_page() -> None:
    st.header("📝 Lab Requests")

    options = slot_options(api_get("/schedule/slots") or [])
    if not options:
        st.warning("Slot list unavailable; requests cannot be added.")

    with st.form("add_request", clear_on_submit=True):
        col1, col2, col3, col4 = st.columns(4)
        with col1:
            class_id = st.text_input("Class ID")
        with col2:
            teacher = st.text_input("Teacher")
        with col3:
            student_count = st.number_input("Students", min_value=1, max_value=500, value=30)
        with col4:
            set_priority = st.checkbox("Set priority", value=False)
            priority = st.number_input("Priority (lower first)", value=0, step=1)
        preferred = st.multiselect("Preferred slots (tried in this order)", list(options))
        excluded = st.multiselect("Unavailable slots", list(options))

        if st.form_submit_button("Add Request", type="primary"):
            if not class_id.strip() or not teacher.strip():
                st.warning("Class ID and teacher are required.")
            elif not preferred:
                st.warning("Select at least one preferred slot.")
            else:
                payload = build_request_payload(
                    class_id,
                    teacher,
                    student_count,
                    preferred=[options[label] for label in preferred],
                    excluded=[options[label] for label in excluded],
                    priority=priority if set_priority else None,
                )
                if api_post("/requests", payload):
                    st.success("Request added.")

    lab_requests = api_get("/requests") or []
    if not lab_requests:
        st.info("No pending requests.")
        return
    table = pd.DataFrame(lab_requests)[["request_id", "class_id", "student_count", "teacher", "priority"]]
    st.dataframe(table, use_container_width=True)

    request_labels = {
        f"{item['class_id']} / {item['teacher']} (#{item['request_id']})": item["request_id"]
        for item in lab_requests
    }
    selected = st.selectbox("Request to delete", list(request_labels))
    if st.button("Delete Request") and api_delete(f"/requests/{request_labels[selected]}"):
        st.success("Request deleted.")


def render_generation_page() -> None:
    st.header("⚙️ Generate Schedule")
    st.markdown(
        "Requests are placed in priority order: preferred slots first, then any "
        "remaining slot that is not marked unavailable."
    )

    if st.button("Generate Schedule", type="primary"):
        with st.spinner("Assigning laboratories..."):
            result = api_post("/schedule/generate")
            if result:
                st.success(f"Placed {result.get('satisfied_count', 0)} request(s).")
                render_stats(result.get("stats", {}))
    else:
        stats = api_get("/schedule/stats")
        if stats:
            st.subheader("Current Schedule")
            render_stats(stats)


def render_query_page() -> None:
    st.header("🔎 Timetable Query")

    mode = st.radio("Query by", ["All", "Laboratory", "Class"], horizontal=True)
    params: Dict[str, Any] = {}
    if mode == "Laboratory":
        laboratories = api_get("/laboratories") or []
        if not laboratories:
            st.warning("No laboratories to query.")
            return
        lab_labels = lab_option_labels(laboratories)
        params["lab_id"] = lab_labels[st.selectbox("Laboratory", list(lab_labels))]
    elif mode == "Class":
        class_id = st.text_input("Class ID")
        if not class_id.strip():
            st.info("Enter a class ID to query.")
            return
        params["class_id"] = class_id.strip()

    entries = api_get("/schedule", params=params)
    if entries is None:
        return
    if not entries:
        st.info("No schedule entries found.")
        return
    table = pd.DataFrame(entries)[["class_id", "teacher", "location", "slot_label"]]
    st.dataframe(table, use_container_width=True)


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    st.sidebar.title("Lab Scheduling")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigation",
        ["Laboratories", "Requests", "Generate Schedule", "Timetable"],
    )

    st.sidebar.markdown("---")
    st.sidebar.caption(f"API: {API_BASE_URL}")

    if page == "Laboratories":
        render_laboratory_page()
    elif page == "Requests":
        render_request_page()
    elif page == "Generate Schedule":
        render_generation_page()
    elif page == "Timetable":
        render_query_page()


if __name__ == "__main__":
    main()
