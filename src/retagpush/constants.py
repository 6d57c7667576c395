"""Defaults for retagpush runs."""

DEFAULT_VERSION = "3.2.7"
DEFAULT_REPOSITORY_PREFIX = "localhost:5001"
SOURCE_PREFIX = "localhost/springcommunity"
LOG_FILE = "podman-retag-push.log"
DEFAULT_RUNTIME = "podman"
DEFAULT_CONFIG_FILE = ".retagpush.yml"

SOURCE_CLEANUP_TAG = "latest"

MAX_PUSH_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 5.0

DEFAULT_SERVICES = (
    "spring-petclinic-config-server",
    "spring-petclinic-discovery-server",
    "spring-petclinic-api-gateway",
    "spring-petclinic-visits-service",
    "spring-petclinic-vets-service",
    "spring-petclinic-customers-service",
    "spring-petclinic-admin-server",
    "spring-petclinic-genai-service",
)
