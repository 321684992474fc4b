BASE_TYPES = ["Leader", "Core", "Special"]
UNKNOWN_TYPE_RANK = 999
DEFAULT_UNIT_TYPE = "Core"

POINTS_LIMITS = list(range(200, 501, 50))
DEFAULT_POINTS_LIMIT = 300

# Status severities, mapped to st.success / st.warning / st.error in the UI
SEVERITY_OK = "ok"
SEVERITY_WARN = "warn"
SEVERITY_DANGER = "danger"

ROSTER_TITLE = "Fall: A Game of Endings - Roster"
