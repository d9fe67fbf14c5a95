"""Global constants used throughout the image attachment component.

This module centralizes error codes, layout conventions and environment
variable names so they can be changed in one place.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================

# Configuration Errors
ERROR_CODE_CONFIGURATION_INVALID = "CONFIGURATION_INVALID"

# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_SORT_ORDER_MISMATCH = "SORT_ORDER_MISMATCH"
ERROR_CODE_UNKNOWN_SIZE_PROFILE = "UNKNOWN_SIZE_PROFILE"
ERROR_CODE_FILES_ALREADY_CAPTURED = "FILES_ALREADY_CAPTURED"
ERROR_CODE_OWNER_NOT_BOUND = "OWNER_NOT_BOUND"

# Filesystem Errors
ERROR_CODE_FILESYSTEM = "FILESYSTEM_ERROR"
ERROR_CODE_FILE_READ_FAILED = "FILE_READ_FAILED"
ERROR_CODE_DIRECTORY_CREATE_FAILED = "DIRECTORY_CREATE_FAILED"
ERROR_CODE_FILE_WRITE_FAILED = "FILE_WRITE_FAILED"
ERROR_CODE_FILE_DELETE_FAILED = "FILE_DELETE_FAILED"

# Codec Errors
ERROR_CODE_CODEC = "CODEC_ERROR"
ERROR_CODE_IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
ERROR_CODE_IMAGE_RESIZE_FAILED = "IMAGE_RESIZE_FAILED"

# Metadata / DynamoDB Errors
ERROR_CODE_METADATA_OPERATION_FAILED = "METADATA_OPERATION_FAILED"
ERROR_CODE_METADATA_CREATE_FAILED = "METADATA_CREATE_FAILED"
ERROR_CODE_METADATA_FETCH_FAILED = "METADATA_FETCH_FAILED"
ERROR_CODE_METADATA_DELETE_FAILED = "METADATA_DELETE_FAILED"
ERROR_CODE_METADATA_LIST_FAILED = "METADATA_LIST_FAILED"
ERROR_CODE_METADATA_SORT_FAILED = "METADATA_SORT_FAILED"
ERROR_CODE_METADATA_INVALID_FORMAT = "METADATA_INVALID_FORMAT"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# Layout
# ============================================================================

DEFAULT_SIZE_PROFILE: Final[str] = "original"

# Number of leading hex digest characters used per shard level.
SHARD_LEVEL_WIDTH: Final[int] = 2
SHARD_LEVELS: Final[int] = 2
SHARD_PATH_PATTERN: Final[str] = r"^/[0-9a-f]{2}/[0-9a-f]{2}$"

IMAGE_ID_PREFIX: Final[str] = "img_"

TEMP_FILE_PREFIX: Final[str] = ".tmp-"

DIRECTORY_MODE: Final[int] = 0o777


# ============================================================================
# Metadata Store
# ============================================================================

# Base-table key: one partition per owner, one item per image.
PARTITION_KEY: Final[str] = "owner_id"
SORT_KEY: Final[str] = "image_id"

# DynamoDB TransactWriteItems accepts at most 100 actions per call.
MAX_TRANSACTION_ITEMS: Final[int] = 100


# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_METADATA_TABLE_NAME = "IMAGE_METADATA_TABLE_NAME"
