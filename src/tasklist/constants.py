STATE_DIR_NAME = ".tasklist"
CONFIG_FILE = "config.yaml"
STORE_DIR = "store"

DEFAULT_STORE_NAME = "todos-python"
DEFAULT_LOG_LEVEL = "WARNING"
WINDOWS_LOCK_BYTES = 4096

STORAGE_BACKENDS = {"file", "memory"}
STORAGE_FORMATS = {"json", "yaml"}
CORRUPT_POLICIES = {"fail", "reset"}

DEFAULT_STORAGE_BACKEND = "file"
DEFAULT_STORAGE_FORMAT = "json"
DEFAULT_CORRUPT_POLICY = "fail"

ROUTE_ALL = "#/"
ROUTE_ACTIVE = "#/active"
ROUTE_COMPLETED = "#/completed"
