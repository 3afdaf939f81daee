"""
CareSync: Static Reference Data
Punjab government health schemes and the Patiala district hospital directory
"""

from typing import List, Optional

from models import HealthScheme, Hospital, SchemeCategory, HospitalType

# ============================================================================
# HEALTH SCHEMES
# ============================================================================

HEALTH_SCHEMES: List[HealthScheme] = [
    HealthScheme(
        id="janani-suraksha",
        name="Janani Suraksha Yojana",
        name_pa="ਜਨਨੀ ਸੁਰੱਖਿਆ ਯੋਜਨਾ",
        description="Financial assistance for institutional delivery",
        description_pa="ਸੰਸਥਾਗਤ ਡਿਲੀਵਰੀ ਲਈ ਵਿੱਤੀ ਸਹਾਇਤਾ",
        eligibility="Pregnant women below poverty line",
        eligibility_pa="ਗਰੀਬੀ ਰੇਖਾ ਤੋਂ ਹੇਠਾਂ ਗਰਭਵਤੀ ਔਰਤਾਂ",
        benefits="Rural: Rs. 700, Urban: Rs. 600, Home delivery: Rs. 500",
        benefits_pa="ਪੇਂਡੂ: ਰੁ. 700, ਸ਼ਹਿਰੀ: ਰੁ. 600, ਘਰੇਲੂ ਡਿਲੀਵਰੀ: ਰੁ. 500",
        category=SchemeCategory.MATERNAL,
    ),
    HealthScheme(
        id="shishu-suraksha",
        name="Shishu Suraksha Karyakram",
        name_pa="ਸ਼ਿਸ਼ੂ ਸੁਰੱਖਿਆ ਕਾਰਯਕ੍ਰਮ",
        description="Free treatment for pregnant women and children up to 1 year",
        description_pa="ਗਰਭਵਤੀ ਔਰਤਾਂ ਅਤੇ 1 ਸਾਲ ਤੱਕ ਦੇ ਬੱਚਿਆਂ ਲਈ ਮੁਫਤ ਇਲਾਜ",
        eligibility="All pregnant women and children up to 1 year",
        eligibility_pa="ਸਾਰੀਆਂ ਗਰਭਵਤੀ ਔਰਤਾਂ ਅਤੇ 1 ਸਾਲ ਤੱਕ ਦੇ ਬੱਚੇ",
        benefits="Free delivery, food for 3-7 days, free blood transfusion",
        benefits_pa="ਮੁਫਤ ਡਿਲੀਵਰੀ, 3-7 ਦਿਨ ਭੋਜਨ, ਮੁਫਤ ਖੂਨ ਚੜ੍ਹਾਉਣਾ",
        category=SchemeCategory.MATERNAL,
    ),
    HealthScheme(
        id="kanyak-sambhal",
        name="Kanyak Sambhal",
        name_pa="ਕੰਨਿਆਕ ਸੰਭਾਲ",
        description="Free treatment for girl children up to 5 years",
        description_pa="5 ਸਾਲ ਤੱਕ ਦੀਆਂ ਬੱਚੀਆਂ ਲਈ ਮੁਫਤ ਇਲਾਜ",
        eligibility="Girl children up to 5 years of age",
        eligibility_pa="5 ਸਾਲ ਤੱਕ ਦੀਆਂ ਬੱਚੀਆਂ",
        benefits="Free and zero expense treatment",
        benefits_pa="ਮੁਫਤ ਅਤੇ ਜ਼ੀਰੋ ਖਰਚ ਇਲਾਜ",
        category=SchemeCategory.CHILD,
    ),
    HealthScheme(
        id="rashtriya-bal-swasth",
        name="Rashtriya Bal Swasth Karyakram",
        name_pa="ਰਾਸ਼ਟਰੀ ਬਾਲ ਸਵਾਸਥ ਕਾਰਯਕ੍ਰਮ",
        description="Free treatment for 30 diseases for children 0-18 years",
        description_pa="0-18 ਸਾਲ ਦੇ ਬੱਚਿਆਂ ਲਈ 30 ਬਿਮਾਰੀਆਂ ਦਾ ਮੁਫਤ ਇਲਾਜ",
        eligibility="Children 0-18 years registered in Anganwadi or govt schools",
        eligibility_pa="ਆਂਗਨਵਾੜੀ ਜਾਂ ਸਰਕਾਰੀ ਸਕੂਲਾਂ ਵਿੱਚ ਰਜਿਸਟਰਡ 0-18 ਸਾਲ ਦੇ ਬੱਚੇ",
        benefits="Free treatment for 30 types of diseases",
        benefits_pa="30 ਕਿਸਮ ਦੀਆਂ ਬਿਮਾਰੀਆਂ ਦਾ ਮੁਫਤ ਇਲਾਜ",
        category=SchemeCategory.CHILD,
    ),
    HealthScheme(
        id="cancer-rahat",
        name="Mukhya Mantri Cancer Rahat Kosh Yojana",
        name_pa="ਮੁੱਖ ਮੰਤਰੀ ਕੈਂਸਰ ਰਾਹਤ ਕੋਸ਼ ਯੋਜਨਾ",
        description="Cancer treatment support up to Rs. 1.5 lakh",
        description_pa="ਕੈਂਸਰ ਦੇ ਇਲਾਜ ਲਈ 1.5 ਲੱਖ ਰੁਪਏ ਤੱਕ ਦੀ ਸਹਾਇਤਾ",
        eligibility="Cancer patients",
        eligibility_pa="ਕੈਂਸਰ ਦੇ ਮਰੀਜ਼",
        benefits="Treatment support up to Rs. 1.5 lakh",
        benefits_pa="1.5 ਲੱਖ ਰੁਪਏ ਤੱਕ ਇਲਾਜ ਦੀ ਸਹਾਇਤਾ",
        category=SchemeCategory.GENERAL,
    ),
    HealthScheme(
        id="hepatitis-c",
        name="Mukhya Mantri Hepatitis C Relief Fund",
        name_pa="ਮੁੱਖ ਮੰਤਰੀ ਹੈਪੇਟਾਈਟਿਸ ਸੀ ਰਾਹਤ ਫੰਡ",
        description="Free Hepatitis C treatment in district hospitals",
        description_pa="ਜ਼ਿਲ੍ਹਾ ਹਸਪਤਾਲਾਂ ਵਿੱਚ ਮੁਫਤ ਹੈਪੇਟਾਈਟਿਸ ਸੀ ਇਲਾਜ",
        eligibility="Hepatitis C patients",
        eligibility_pa="ਹੈਪੇਟਾਈਟਿਸ ਸੀ ਦੇ ਮਰੀਜ਼",
        benefits="Free treatment in district hospitals",
        benefits_pa="ਜ਼ਿਲ੍ਹਾ ਹਸਪਤਾਲਾਂ ਵਿੱਚ ਮੁਫਤ ਇਲਾਜ",
        category=SchemeCategory.GENERAL,
    ),
    HealthScheme(
        id="sehat-bima",
        name="Bhagat Puran Singh Sehat Bima Yojana",
        name_pa="ਭਗਤ ਪੂਰਨ ਸਿੰਘ ਸਿਹਤ ਬੀਮਾ ਯੋਜਨਾ",
        description="Health insurance for blue card holders",
        description_pa="ਨੀਲੇ ਕਾਰਡ ਧਾਰਕਾਂ ਲਈ ਸਿਹਤ ਬੀਮਾ",
        eligibility="Blue card holders",
        eligibility_pa="ਨੀਲੇ ਕਾਰਡ ਧਾਰਕ",
        benefits="Free treatment up to Rs. 50,000, Insurance cover Rs. 5 lakh",
        benefits_pa="50,000 ਰੁਪਏ ਤੱਕ ਮੁਫਤ ਇਲਾਜ, 5 ਲੱਖ ਰੁਪਏ ਬੀਮਾ ਕਵਰ",
        category=SchemeCategory.INSURANCE,
    ),
]

# ============================================================================
# HOSPITAL DIRECTORY
# ============================================================================

def _hospital(id, name, phone, email, type_, location) -> Hospital:
    return Hospital(id=id, name=name, phone=phone, email=email, type=type_, location=location)


HOSPITALS: List[Hospital] = [
    _hospital("ch-nabha", "CH Nabha", "01765-226361", "smochnabha@gmail.com", HospitalType.CH, "Nabha"),
    _hospital("ch-rajpura", "CH Rajpura", "01762-225539", "smoapjchrajpura@gmail.com", HospitalType.CH, "Rajpura"),
    _hospital("ch-samana", "CH Samana", "01764-220041", "smochsamana@gmail.com", HospitalType.CH, "Samana"),
    _hospital("phc-kauli", "PHC Kauli", "0175-2663900", "nrhmkauli@yahoo.in", HospitalType.PHC, "Kauli"),
    _hospital("phc-harpalpur", "PHC Harpalpur", "01762-260280", "nrhmhrpl@gmail.com", HospitalType.PHC, "Harpalpur"),
    _hospital("phc-bhadson", "PHC Bhadson", "01765-260116", "smobhadson@gmail.com", HospitalType.PHC, "Bhadson"),
    _hospital("phc-dudhan-sadhan", "PHC Dudhan Sadhan", "0175-2631042", "nrhmds@hotmail.com", HospitalType.PHC, "Dudhan Sadhan"),
    _hospital("phc-kalomajra", "PHC Kalomajra", "01762-258726", "smokalomajra@yahoo.com", HospitalType.PHC, "Kalomajra"),
    _hospital("phc-shutrana", "PHC Shutrana", "01764-222534", "nrhmshut@gmail.com", HospitalType.PHC, "Shutrana"),
    _hospital("chc-model-town", "CHC Model Town", "0175-2223375", "smochcmtpatiala@ymail.com", HospitalType.CHC, "Model Town"),
    _hospital("chc-ghanaur", "CHC Ghanaur", "07162-267358", "chcghanaur@yahoo.com", HospitalType.CHC, "Ghanaur"),
    _hospital("chc-badshapur", "CHC Badshapur", "01764-250474", "nrhmshut@gmail.com", HospitalType.CHC, "Badshapur"),
    _hospital("chc-patran", "CHC Patran", "01764-242752", "chcpatran5@gmail.com", HospitalType.CHC, "Patran"),
]

# ============================================================================
# LOOKUPS
# ============================================================================

def schemes_by_category(category: Optional[SchemeCategory] = None) -> List[HealthScheme]:
    """All schemes, or only those tagged with `category`"""
    if category is None:
        return list(HEALTH_SCHEMES)
    return [s for s in HEALTH_SCHEMES if s.category == category]


def hospitals_by_type(hospital_type: Optional[HospitalType] = None) -> List[Hospital]:
    if hospital_type is None:
        return list(HOSPITALS)
    return [h for h in HOSPITALS if h.type == hospital_type]


def find_hospital(hospital_id: str) -> Optional[Hospital]:
    for hospital in HOSPITALS:
        if hospital.id == hospital_id:
            return hospital
    return None
