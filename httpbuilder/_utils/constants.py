# Environment variables
ENV_BASE_URL = "HTTPBUILDER_BASE_URL"
ENV_TIMEOUT = "HTTPBUILDER_TIMEOUT"
ENV_DISABLE_SSL_VERIFY = "HTTPBUILDER_DISABLE_SSL_VERIFY"

# Headers
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_LENGTH = "Content-Length"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_USER_AGENT = "User-Agent"

# Content types
CONTENT_TYPE_BINARY = "application/octet-stream"
CONTENT_TYPE_FORM = "application/x-www-form-urlencoded"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_JSON_UTF_8 = "application/json; charset=utf-8"
CONTENT_TYPE_MULTIPART = "multipart/form-data"
CONTENT_TYPE_TEXT = "text/plain"

# Authorization schemes
AUTHORIZATION_BASIC = "Basic"
AUTHORIZATION_BEARER = "Bearer"
AUTHORIZATION_DIGEST = "Digest"
AUTHORIZATION_OAUTH = "OAuth"

DEFAULT_CHUNK_SIZE = 8192
TRUTHY_ENV_VALUES = ("1", "true", "yes", "on")
