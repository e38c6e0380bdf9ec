"""API routes, relative to the configured IntelX base URL."""

ANALYZER_CONFIG_URL = "/api/get_analyzer_configs"
ANALYZER_HEALTHCHECK_URL = "/api/analyzer/{name}/healthcheck"

CONTENT_TYPE_JSON = "application/json"
DEFAULT_USER_AGENT = "intelx-client/0.1.0"
