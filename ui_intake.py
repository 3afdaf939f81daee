"""
CareSync: Patient Intake UI (Streamlit)
Intake form with rule-based triage, scheme recommendations and offline status
"""

import streamlit as st
import requests

from config import API_BASE_URL, REQUEST_TIMEOUT

st.set_page_config(
    page_title="CareSync - Patient Intake",
    page_icon="🩺",
    layout="wide"
)

PRIORITY_ICONS = {
    "Critical": "🔴",
    "High": "🟠",
    "Medium": "🟡",
    "Low": "🟢",
}

LABELS = {
    "en": {
        "title": "🩺 CareSync – Patient Intake",
        "name": "Full name",
        "email": "Email",
        "phone": "Phone",
        "age": "Age",
        "symptoms": "Current symptoms (comma-separated)",
        "history": "Medical history (comma-separated)",
        "submit": "📤 Submit for Triage",
        "schemes": "Recommended health schemes",
    },
    "pa": {
        "title": "🩺 CareSync – ਮਰੀਜ਼ ਦਾਖਲਾ",
        "name": "ਪੂਰਾ ਨਾਮ",
        "email": "ਈਮੇਲ",
        "phone": "ਫ਼ੋਨ",
        "age": "ਉਮਰ",
        "symptoms": "ਮੌਜੂਦਾ ਲੱਛਣ (ਕੌਮੇ ਨਾਲ ਵੱਖ ਕਰੋ)",
        "history": "ਡਾਕਟਰੀ ਇਤਿਹਾਸ (ਕੌਮੇ ਨਾਲ ਵੱਖ ਕਰੋ)",
        "submit": "📤 ਟ੍ਰਾਈਏਜ ਲਈ ਭੇਜੋ",
        "schemes": "ਸਿਫਾਰਸ਼ ਕੀਤੀਆਂ ਸਿਹਤ ਯੋਜਨਾਵਾਂ",
    },
}

# ============================================================================
# SESSION STATE
# ============================================================================

if "submitted_patients" not in st.session_state:
    st.session_state.submitted_patients = []

# ============================================================================
# API HELPERS
# ============================================================================

def api_get(path: str, **params):
    try:
        response = requests.get(f"{API_BASE_URL}{path}", params=params, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.ConnectionError:
        st.error("❌ Cannot connect to backend. Ensure backend is running on port 8000.")
    except requests.exceptions.RequestException as e:
        st.error(f"❌ Error: {e}")
    return None


def submit_to_backend(payload: dict):
    """Send intake to backend for triage"""
    try:
        response = requests.post(f"{API_BASE_URL}/patients", json=payload, timeout=REQUEST_TIMEOUT)
        if response.status_code == 200:
            return response.json()
        return {"error": f"Backend error: {response.status_code} {response.text}"}
    except requests.exceptions.ConnectionError:
        return {"error": "Cannot connect to backend. Ensure backend is running on port 8000."}
    except requests.exceptions.RequestException as e:
        return {"error": str(e)}


def split_labels(text: str):
    return [item.strip() for item in text.split(",") if item.strip()]

# ============================================================================
# SIDEBAR: LANGUAGE & CONNECTIVITY
# ============================================================================

language = st.sidebar.radio("Language / ਭਾਸ਼ਾ", ["en", "pa"], format_func=lambda l: "English" if l == "en" else "ਪੰਜਾਬੀ")
labels = LABELS[language]

sync_status = api_get("/sync/status")
if sync_status:
    if sync_status["online"]:
        st.sidebar.success("🌐 Online")
    else:
        st.sidebar.warning("📴 Working offline – data will sync when connection is restored")
    pending_total = sum(sync_status["pending"].values())
    st.sidebar.metric("Pending sync", pending_total)

voice = api_get("/voice") or {}

# ============================================================================
# MAIN FORM
# ============================================================================

st.title(labels["title"])

with st.form("patient_intake_form"):
    col1, col2, col3 = st.columns(3)
    with col1:
        name = st.text_input(labels["name"])
    with col2:
        email = st.text_input(labels["email"])
    with col3:
        phone = st.text_input(labels["phone"])

    age = st.number_input(labels["age"], min_value=0, max_value=150, value=35)
    symptoms_text = st.text_area(labels["symptoms"], placeholder="e.g., chest pain, fever")
    history_text = st.text_area(labels["history"], placeholder="e.g., diabetes, hypertension")

    speak = False
    if voice.get("speak"):
        speak = st.checkbox("🔊 Read result aloud")

    submit_btn = st.form_submit_button(labels["submit"], use_container_width=True)

    if submit_btn:
        if not name.strip():
            st.error("⚠️ Please provide the patient's name")
        else:
            result = submit_to_backend({
                "name": name,
                "email": email,
                "phone": phone,
                "age": int(age),
                "symptoms": split_labels(symptoms_text),
                "medical_history": split_labels(history_text),
                "language": language,
                "speak": speak,
            })

            if "error" in result:
                st.error(f"❌ {result['error']}")
            else:
                st.session_state.submitted_patients.append(result)
                triage = result["triage"]
                icon = PRIORITY_ICONS.get(triage["priority"], "⚪")

                st.success("✅ Triage complete")
                c1, c2, c3 = st.columns(3)
                c1.metric("Score", f"{triage['score']}/10")
                c2.metric("Priority", f"{icon} {triage['priority']}")
                c3.metric("Estimated wait", f"{triage['estimated_wait_time']} min")
                st.info(triage["recommended_action"])
                st.caption(result["spoken_summary"])

                if result["patient"]["pending_sync"]:
                    st.warning("📴 Registered offline – will sync when online")

                if triage["recommended_schemes"]:
                    st.markdown(f"### {labels['schemes']}")
                    for scheme in triage["recommended_schemes"]:
                        title = scheme["name_pa"] if language == "pa" else scheme["name"]
                        benefits = scheme["benefits_pa"] if language == "pa" else scheme["benefits"]
                        st.write(f"• **{title}** – {benefits}")

# ============================================================================
# HISTORY
# ============================================================================

if st.session_state.submitted_patients:
    st.markdown("---")
    st.markdown("### 📊 Recent Submissions")

    for entry in st.session_state.submitted_patients[-5:]:
        patient = entry["patient"]
        triage = entry["triage"]
        with st.expander(f"{patient['name']} – {triage['priority']} ({triage['score']})"):
            st.write(f"**Symptoms:** {', '.join(patient['current_symptoms']) or 'None'}")
            st.write(f"**History:** {', '.join(patient['medical_history']) or 'None'}")
            st.write(f"**Status:** {patient['status']}")

# ============================================================================
# HOSPITAL DIRECTORY
# ============================================================================

with st.expander("🏥 Hospital directory"):
    hospitals = api_get("/hospitals") or []
    for hospital in hospitals:
        st.write(f"**{hospital['name']}** ({hospital['type']}) – ☎️ {hospital['phone']} – {hospital['email']}")

st.markdown("---")
st.markdown("""
⚠️ **DISCLAIMER:** Triage scores are a fixed rule-based estimate. They do not replace clinical judgment.
""")
