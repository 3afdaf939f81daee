import streamlit as st
import requests
import pandas as pd

from config import API_BASE_URL, REQUEST_TIMEOUT


# ============================================================================
# PAGE CONFIG
# ============================================================================


st.set_page_config(
    page_title="CareSync - Doctor Console",
    page_icon="👨⚕️",
    layout="wide",
    initial_sidebar_state="expanded"
)

PRIORITY_ICONS = {
    "Critical": "🔴",
    "High": "🟠",
    "Medium": "🟡",
    "Low": "🟢",
}

STOCK_ICONS = {
    "In Stock": "✅",
    "Low Stock": "⚠️",
    "Out of Stock": "❌",
}


# ============================================================================
# SESSION STATE INITIALIZATION
# ============================================================================


def init_session_state():
    """Initialize all session state variables"""
    if 'medications' not in st.session_state:
        st.session_state.medications = []


init_session_state()


# ============================================================================
# HELPER FUNCTIONS - WITH ERROR HANDLING
# ============================================================================


def call_api(method, path, **kwargs):
    """Call the backend; show the error and return None on failure"""
    try:
        response = requests.request(
            method,
            f"{API_BASE_URL}{path}",
            timeout=REQUEST_TIMEOUT,
            **kwargs
        )
        if response.status_code >= 400:
            detail = response.json().get("detail", response.text) if response.content else response.reason
            st.error(f"❌ {detail}")
            return None
        return response.json()

    except requests.exceptions.ConnectionError:
        st.error("❌ **Connection Failed**: Cannot reach backend at 127.0.0.1:8000")
        st.info("📌 Make sure backend is running: `python backend.py` on port 8000")
        return None

    except requests.exceptions.Timeout:
        st.error(f"❌ Backend timeout (>{REQUEST_TIMEOUT}s)")
        return None


def show_notifications():
    notifications = call_api("GET", "/notifications", params={"limit": 5}) or []
    for notice in reversed(notifications):
        text = f"**{notice['title']}** – {notice['message']}"
        level = notice["level"]
        if level == "error":
            st.sidebar.error(text)
        elif level == "warning":
            st.sidebar.warning(text)
        elif level == "success":
            st.sidebar.success(text)
        else:
            st.sidebar.info(text)


# ============================================================================
# SIDEBAR: CONNECTIVITY & SYNC
# ============================================================================


st.sidebar.title("🌐 Connectivity")
status = call_api("GET", "/sync/status")

if status:
    online = st.sidebar.toggle("Online", value=status["online"])
    if online != status["online"]:
        call_api("POST", "/connectivity", json={"online": online})
        st.rerun()

    st.sidebar.write(f"Sync state: **{status['state']}**")
    st.sidebar.dataframe(
        pd.DataFrame(list(status["pending"].items()), columns=["Entity", "Pending"]),
        hide_index=True,
    )
    used_kb = status["storage"]["used"] / 1024
    st.sidebar.caption(f"Local storage: {used_kb:.1f} KB of {status['storage']['available'] // 1024} KB")

    if st.sidebar.button("🔄 Sync now", disabled=not status["online"]):
        report = call_api("POST", "/sync")
        if report and report["failed"]:
            st.sidebar.error(f"Sync failed for: {', '.join(report['failed'])}")
        elif report:
            st.sidebar.success("Sync complete")

    if st.sidebar.button("🗑️ Clear local data"):
        call_api("DELETE", "/local-data")
        st.rerun()

show_notifications()


# ============================================================================
# MAIN
# ============================================================================


st.title("👨⚕️ CareSync – Doctor Console")
tab_queue, tab_pharmacy, tab_audit = st.tabs(["🩺 Patient Queue", "💊 Pharmacy", "📋 Audit Log"])


# ============================================================================
# QUEUE TAB
# ============================================================================


with tab_queue:
    stats = call_api("GET", "/dashboard")
    if stats:
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Waiting", stats["waiting"])
        c2.metric("In consultation", stats["in_consultation"])
        c3.metric("Critical", stats["critical"])
        c4.metric("Completed today", stats["completed_today"])

    queue = call_api("GET", "/queue") or []
    if not queue:
        st.info("No patients waiting")

    for patient in queue:
        icon = PRIORITY_ICONS.get(patient["priority"], "⚪")
        header = f"{icon} {patient['name']} ({patient['age']}) – score {patient['triage_score']} – {patient['status']}"
        with st.expander(header, expanded=patient["status"] == "In Consultation"):
            st.write(f"**Symptoms:** {', '.join(patient['current_symptoms']) or 'None'}")
            st.write(f"**History:** {', '.join(patient['medical_history']) or 'None'}")
            if patient["pending_sync"]:
                st.caption("📴 Pending sync")

            if patient["status"] == "Waiting":
                if st.button("▶️ Start consultation", key=f"start_{patient['id']}"):
                    call_api("PATCH", f"/patients/{patient['id']}/status", json={"status": "In Consultation"})
                    st.rerun()
                continue

            # In consultation: prescription form
            diagnosis = st.text_input("Diagnosis", key=f"dx_{patient['id']}")
            instructions = st.text_area("Instructions", key=f"ins_{patient['id']}")

            m1, m2, m3, m4, m5 = st.columns(5)
            med_name = m1.text_input("Medication", key=f"mn_{patient['id']}")
            dosage = m2.text_input("Dosage", key=f"md_{patient['id']}")
            frequency = m3.text_input("Frequency", key=f"mf_{patient['id']}")
            duration = m4.text_input("Duration", key=f"mdu_{patient['id']}")
            quantity = m5.number_input("Qty", min_value=0, value=10, key=f"mq_{patient['id']}")

            if st.button("➕ Add medication", key=f"add_{patient['id']}") and med_name:
                st.session_state.medications.append({
                    "name": med_name,
                    "dosage": dosage,
                    "frequency": frequency,
                    "duration": duration,
                    "quantity": int(quantity),
                })

            if st.session_state.medications:
                st.table(pd.DataFrame(st.session_state.medications))

            b1, b2 = st.columns(2)
            if b1.button("📝 Generate digital prescription", key=f"rx_{patient['id']}"):
                prescription = call_api("POST", "/prescriptions", json={
                    "patient_id": patient["id"],
                    "diagnosis": diagnosis,
                    "instructions": instructions,
                    "medications": st.session_state.medications,
                })
                if prescription:
                    st.session_state.medications = []
                    st.success(f"✅ Prescription {prescription['id'][:8]}... issued")

            if b2.button("✅ Complete consultation", key=f"done_{patient['id']}"):
                call_api("PATCH", f"/patients/{patient['id']}/status", json={"status": "Completed"})
                st.rerun()


# ============================================================================
# PHARMACY TAB
# ============================================================================


with tab_pharmacy:
    alerts = call_api("GET", "/pharmacy/alerts") or []
    for item in alerts:
        st.warning(f"{STOCK_ICONS[item['status']]} {item['name']}: {item['current_stock']} left (minimum {item['minimum_stock']})")

    analyze = st.checkbox("Recalculate demand from recent prescriptions")
    stock = call_api("GET", "/pharmacy/stock", params={"analyze": analyze}) or []

    for item in stock:
        c1, c2, c3, c4 = st.columns([3, 2, 2, 2])
        c1.write(f"**{item['name']}**  \nLast restocked {item['last_restocked']}")
        c2.write(f"{STOCK_ICONS[item['status']]} {item['status']}")
        c3.write(f"Predicted demand: {item['demand_prediction']}")
        new_quantity = c4.number_input(
            "On hand", min_value=0, value=item["current_stock"], key=f"stock_{item['medication_id']}"
        )
        if new_quantity != item["current_stock"]:
            call_api("PUT", f"/pharmacy/stock/{item['medication_id']}", json={"quantity": int(new_quantity)})
            st.rerun()


# ============================================================================
# AUDIT TAB
# ============================================================================


with tab_audit:
    audit = call_api("GET", "/audit-log") or []
    if audit:
        st.dataframe(pd.DataFrame(audit[::-1]), hide_index=True)
    else:
        st.info("No audit events yet")
