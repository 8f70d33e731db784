"""Protocol constants and defaults shared across modules."""

# Seconds between job status checks
DEFAULT_POLL_INTERVAL = 10
# Seconds before a job wait is abandoned
DEFAULT_TIMEOUT = 300

STATUS_OK = 200
STATUS_ACCEPTED = 202

SERVICE_ROOT = "/redfish/v1"
REGISTRIES_URI = f"{SERVICE_ROOT}/Registries"
MANAGERS_URI = f"{SERVICE_ROOT}/Managers"
DELL_JOBS_URI = f"{MANAGERS_URI}/iDRAC.Embedded.1/Jobs/"
MANAGER_REGISTRY_ID = "ManagerAttributeRegistry"
