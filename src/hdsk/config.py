# Shared constants for key derivation and path parsing

# --- Key material sizes (bytes) ---
KEY_SIZE = 32
CHAIN_CODE_SIZE = 32
OKM_SIZE = KEY_SIZE + CHAIN_CODE_SIZE
FINGERPRINT_SIZE = 16
SALT_SIZE = 16

# --- Domain separation tags ---
SALT_DOMAIN = b"SALT"
MASTER_DOMAIN = b"MASTER"
CHILD_DOMAIN = b"CHILD"

# --- Index range ---
# Indices are restricted to 0..2^31-1. String labels are hashed into the
# same range, so every accepted index fits in 31 bits.
MAX_INDEX = 0x7FFFFFFF
INDEX_MODULUS = MAX_INDEX + 1

# --- Path and schema grammar ---
ROOT = "m"
SCHEMA_DELIMITER = " / "
PATH_DELIMITER = "/"
TYPE_DELIMITER = ":"
MAX_SCHEMA_SEGMENTS = 256  # including the root segment

DEFAULT_SCHEMA = "m / application: any / purpose: any / context: any / index: num"

# --- Environment ---
DEFAULT_HASH = "sha256"
HASH_ENV = "HDSK_HASH"
SECRET_ENV = "HDSK_SECRET"
LOG_LEVEL_ENV = "HDSK_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
