# tck_core/constants.py

JSONRPC_VERSION = "2.0"

# JSON-RPC 2.0 reserved error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# implementation-defined server error carrying a ledger status in data.status
LEDGER_ERROR = -32001

INT64_MAX = 2**63 - 1
INT64_MIN = -(2**63)

# Key algorithms
ED25519 = "ed25519"
ECDSA_SECP256K1 = "ecdsa-secp256k1"
KEY_ALGORITHMS = (ED25519, ECDSA_SECP256K1)

DEFAULT_SERVER_URL = "http://localhost:8544"
DEFAULT_MIRROR_URL = "http://127.0.0.1:5551"
DEFAULT_RPC_TIMEOUT = 30.0
DEFAULT_TEST_TIMEOUT = 30.0
DEFAULT_RETRY_ATTEMPTS = 5
DEFAULT_RETRY_DELAY = 1.0
