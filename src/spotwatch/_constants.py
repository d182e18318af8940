"""Internal constants shared across the package."""

IMDS_BASE_URL = "http://169.254.169.254"
NTFY_SERVER = "https://ntfy.sh"

TOKEN_PATH = "/latest/api/token"
INTERRUPTION_PATH = "/latest/meta-data/spot/instance-action"
REBALANCE_PATH = "/latest/meta-data/events/recommendations/rebalance"

TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
TOKEN_HEADER = "X-aws-ec2-metadata-token"

#: IMDSv2 token lifetime requested on every fetch (6 hours).
DEFAULT_TOKEN_TTL = 6 * 3600

DEFAULT_CHECK_INTERVAL = 5.0
IMDS_TIMEOUT = 5.0
NOTIFY_TIMEOUT = 10.0

TOPIC_ENV = "NTFY_TOPIC"

DEFAULT_TAGS = "info,cloud"
