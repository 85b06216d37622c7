"""
Domain Constants

Centrally manages constants shared across the batch evaluation pipeline.
"""

# Maximum number of utterances the LUIS batch testing API accepts per operation
BATCH_SIZE = 500

# Fixed delay between operation status polls (seconds)
OPERATION_STATUS_DELAY_SECONDS = 2.0

# Transient retry policy
MAX_TRANSIENT_ATTEMPTS = 5
DEFAULT_TRANSIENT_DELAY_SECONDS = 2.0

# Operation status values reported by the batch testing API
STATUS_SUCCEEDED = "succeeded"
STATUS_FAILED = "failed"

# Default base URL of the (experimental) LUIS batch testing service
DEFAULT_BATCH_ENDPOINT = "https://dialogice4.azurewebsites.net/api/v3.0/apps/"

# Header carrying the prediction key on every batch request
SUBSCRIPTION_KEY_HEADER = "Apim-Subscription-Key"
