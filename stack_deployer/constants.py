# ==========================================
# 1. Configuration Filenames
# ==========================================
CONFIG_DEPLOYER_FILE = "config_deployer.json"
CONFIG_CREDENTIALS_AWS_FILE = "config_credentials_aws.json"
DEFAULT_METADATA_FILE = "project-meta.json"

REQUIRED_CREDENTIALS_FIELDS = ["aws_access_key_id", "aws_secret_access_key"]
DEFAULT_AWS_REGION = "eu-central-1"

# ==========================================
# 2. Deployer Defaults
# ==========================================
DEFAULT_POLL_INTERVAL_SECONDS = 10
DEFAULT_MAX_OPERATION_SECONDS = 3600
DEFAULT_WAITER_DELAY_SECONDS = 30
DEFAULT_CAPABILITIES = ["CAPABILITY_NAMED_IAM"]
DEFAULT_PROVIDER_NAME = "awscloudformation"

# ==========================================
# 3. CloudFormation
# ==========================================
# Logical id of the bucket holding deployment artifacts; never an output source.
DEPLOYMENT_BUCKET_LOGICAL_ID = "DeploymentBucket"
DEPLOYMENT_BUCKET_PARAMETER = "DeploymentBucketName"

CREATE_COMPLETE = "CREATE_COMPLETE"
UPDATE_COMPLETE = "UPDATE_COMPLETE"
DELETE_COMPLETE = "DELETE_COMPLETE"

# boto3 waiter names per expected terminal status
TERMINAL_STATUS_WAITERS = {
    CREATE_COMPLETE: "stack_create_complete",
    UPDATE_COMPLETE: "stack_update_complete",
    DELETE_COMPLETE: "stack_delete_complete",
}

S3_TEMPLATE_URL_FORMAT = "https://s3.amazonaws.com/{bucket}/{key}"

# Column order of a rendered event row
EVENT_COLUMNS = [
    "resource_status",
    "logical_resource_id",
    "resource_type",
    "timestamp",
    "status_reason",
]
