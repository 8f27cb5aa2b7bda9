# vcdelete/constants.py
"""
Central location for constants used across the application.
"""

# ==============================================================================
# ENVIRONMENT VARIABLES
# ==============================================================================
ENV_URL = "VC_URL"
ENV_USER = "VC_USER"
ENV_PASS = "VC_PASS"
ENV_PORT = "VC_PORT"
ENV_DISABLE_SSL_VERIFY = "VC_DISABLE_SSL_VERIFY"
ENV_TASK_TIMEOUT = "VC_TASK_TIMEOUT"

DEFAULT_PORT = 443

# ==============================================================================
# ENTITY TYPES ACCEPTED BY --type
# ==============================================================================
DEFAULT_ENTITY_TYPE = "ManagedEntity"
ENTITY_TYPES = [
    "ManagedEntity",
    "VirtualMachine",
    "ClusterComputeResource",
    "Folder",
    "Datacenter",
    "ResourcePool",
    "VirtualApp",
]

# ==============================================================================
# EXIT CODES
# ==============================================================================
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 3
EXIT_AMBIGUOUS = 4

# ==============================================================================
# OUTPUT MESSAGES
# ==============================================================================
MSG_NOT_FOUND = "Unable to find a Managed Entity By name [ {name} ]"
MSG_DELETED = "Successful delete of Managed Entity Name - [ {name} ] and Entity Type - [ {type_name} ]"
MSG_FAILED = "Failed to delete Managed Entity Name - [ {name} ]: {reason}"
