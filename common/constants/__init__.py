"""Service and business logic constants."""

# ============================================================================
# Message Roles
# ============================================================================

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

# Roles a stored message may carry
MESSAGE_ROLES = (ROLE_USER, ROLE_ASSISTANT)

# Provider role used for assistant turns in the model history
PROVIDER_ROLE_MODEL = "model"

# ============================================================================
# Image Generation
# ============================================================================

# Mime type assumed when the provider omits one
DEFAULT_IMAGE_MIME_TYPE = "image/png"

# Alt text of the markdown image appended to assistant replies
GENERATED_IMAGE_ALT = "Generated Image"

# ============================================================================
# Rate Limiting Defaults
# ============================================================================

# Default rate limit for standard endpoints (requests per minute)
RATE_LIMIT_STANDARD = 100

# Rate limit for image generation (requests per minute)
RATE_LIMIT_IMAGE_GENERATION = 20

# Rate limit for guest token generation (requests per minute)
RATE_LIMIT_TOKEN_GENERATION = 10

__all__ = [
    'ROLE_USER',
    'ROLE_ASSISTANT',
    'MESSAGE_ROLES',
    'PROVIDER_ROLE_MODEL',
    'DEFAULT_IMAGE_MIME_TYPE',
    'GENERATED_IMAGE_ALT',
    'RATE_LIMIT_STANDARD',
    'RATE_LIMIT_IMAGE_GENERATION',
    'RATE_LIMIT_TOKEN_GENERATION',
]
