"""
BigQuery client for reading the mirrored RTP survey tables.
Only BigQueryResponseSource uses it; the REST source never touches it.
"""

import logging

from google.cloud import bigquery

from config import PROJECT_ID, RTP_DATASET_ID

logger = logging.getLogger(__name__)

# None when credentials are missing; BigQueryResponseSource then raises ResponseFetchError
try:
    bq_client = bigquery.Client(project=PROJECT_ID)
    logger.info(f"RTP BigQuery client ready for {PROJECT_ID}.{RTP_DATASET_ID}")
except Exception as e:
    logger.warning(f"RTP BigQuery client unavailable, BigQuery source disabled: {e}")
    bq_client = None
