"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_KEY = "school_admin_session"
DEFAULT_REPORT_DAYS = 30

TEACHERS_COLLECTION = "teachers"
SCHOOLS_COLLECTION = "schools"

SAVED_REMOTE_MESSAGE = "Saved to database"
SAVED_OFFLINE_MESSAGE = "Saved offline"

# Registration and first-login setup
DEFAULT_PASSWORD = "123456"
MIN_PASSWORD_LENGTH = 6
SCHOOL_ID_LENGTH = 8
CITIZEN_ID_LENGTH = 13
DEFAULT_POSITION = "ครู"
# Any position containing this word grants the director role at first login.
DIRECTOR_POSITION_KEYWORD = "ผู้อำนวยการ"
ACADEMIC_POSITIONS = (
    "เจ้าหน้าที่ธุรการ",
    "นักการภารโรง",
    "พนักงานราชการ",
    "ครูผู้ช่วย",
    "ครู",
    "ครูชำนาญการ",
    "ครูชำนาญการพิเศษ",
    "ครูเชี่ยวชาญ",
    "ครูเชี่ยวชาญพิเศษ",
    "รองผู้อำนวยการโรงเรียน",
    "ผู้อำนวยการโรงเรียน",
)
