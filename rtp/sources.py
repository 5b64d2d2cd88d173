"""
Response sources for the outcome indicator engine.

A source exposes three read-only fetches, one per survey instrument, each
returning a list of response dicts with nested 'answers'. Two sources exist:
the data-entry app's REST endpoints and the BigQuery mirror of its tables.
"""

import logging
from collections import OrderedDict

import requests
from google.cloud import bigquery

from config import (
    PROJECT_ID, RTP_DATASET_ID, RTP_API_BASE_URL, RTP_FETCH_TIMEOUT_SECONDS,
    RTP_DATA_SOURCE, RTP_SCHOOL_RESPONSES_PATH, RTP_CONSOLIDATED_CHECKLIST_PATH,
    RTP_PARTNERS_IN_PLAY_PATH, RTP_SCHOOL_RESPONSES_TABLE, RTP_SCHOOL_ANSWERS_TABLE,
    RTP_CHECKLIST_RESPONSES_TABLE, RTP_CHECKLIST_ANSWERS_TABLE,
    RTP_PIP_RESPONSES_TABLE, RTP_PIP_ANSWERS_TABLE, RTP_SCHOOLS_TABLE, RTP_TEACHERS_TABLE,
)

logger = logging.getLogger(__name__)


class ResponseFetchError(Exception):
    """A response collection could not be fetched."""


class HttpResponseSource:
    """Fetch responses from the data-entry app's /api/rtp endpoints."""

    def __init__(self, base_url=RTP_API_BASE_URL, session=None, timeout=RTP_FETCH_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, path, itinerary_id, label):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params={'itineraryId': itinerary_id}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ResponseFetchError(f"Failed to fetch {label} for itinerary {itinerary_id}: {e}") from e

        # School responses come back as a bare list; checklist and PIP use {status, data}
        if isinstance(payload, dict):
            if payload.get('status') == 'error':
                message = payload.get('message') or payload.get('error') or 'unknown error'
                raise ResponseFetchError(f"Failed to fetch {label} for itinerary {itinerary_id}: {message}")
            payload = payload.get('data')

        if not isinstance(payload, list):
            raise ResponseFetchError(
                f"Unexpected {label} payload for itinerary {itinerary_id}: {type(payload).__name__}"
            )

        logger.info(f"Fetched {len(payload)} {label} for itinerary {itinerary_id}")
        return payload

    def fetch_school_responses(self, itinerary_id):
        return self._get(RTP_SCHOOL_RESPONSES_PATH, itinerary_id, 'school output responses')

    def fetch_consolidated_checklist_responses(self, itinerary_id):
        return self._get(RTP_CONSOLIDATED_CHECKLIST_PATH, itinerary_id, 'consolidated checklist responses')

    def fetch_partners_in_play_responses(self, itinerary_id):
        return self._get(RTP_PARTNERS_IN_PLAY_PATH, itinerary_id, 'partners in play responses')


def group_answer_rows(rows):
    """
    Fold flat response/answer join rows back into response dicts.

    Each row carries the response columns plus one answer's columns; a response
    without answers arrives as a single row with a NULL question_id.
    """
    responses = OrderedDict()
    for row in rows:
        row = dict(row.items()) if hasattr(row, 'items') else dict(row)
        response_id = row.get('id')
        if response_id not in responses:
            responses[response_id] = {
                'id': response_id,
                'itinerary_id': row.get('itinerary_id'),
                'school_id': row.get('school_id'),
                'school_name': row.get('school_name'),
                'teacher_id': row.get('teacher_id'),
                'teacher_name': row.get('teacher_name'),
                'answers': [],
            }
        if row.get('question_id') is None:
            continue
        answer = {
            'question_id': row.get('question_id'),
            'answer_value': row.get('answer_value'),
        }
        if row.get('score') is not None:
            answer['score'] = row.get('score')
        if row.get('upload_file_path'):
            answer['upload_file_path'] = row.get('upload_file_path')
        responses[response_id]['answers'].append(answer)
    return list(responses.values())


class BigQueryResponseSource:
    """Fetch responses from the BigQuery mirror of the RTP survey tables."""

    def __init__(self, client=None, project_id=PROJECT_ID, dataset_id=RTP_DATASET_ID):
        if client is None:
            from extensions import bq_client
            client = bq_client
        self.client = client
        self.project_id = project_id
        self.dataset_id = dataset_id

    def _table(self, name):
        return f"{self.project_id}.{self.dataset_id}.{name}"

    def _query(self, responses_table, answers_table, answer_columns, itinerary_id, label, with_teacher=False):
        if not self.client:
            raise ResponseFetchError('BigQuery client not initialized')

        if with_teacher:
            teacher_columns = 'r.teacher_id, t.name AS teacher_name'
            teacher_join = (
                f"LEFT JOIN `{self._table(RTP_TEACHERS_TABLE)}` t\n"
                f"                ON t.id = r.teacher_id"
            )
        else:
            teacher_columns = 'CAST(NULL AS INT64) AS teacher_id, CAST(NULL AS STRING) AS teacher_name'
            teacher_join = ''

        query = f"""
            SELECT
                r.id,
                r.itinerary_id,
                r.school_id,
                s.name AS school_name,
                {teacher_columns},
                a.question_id,
                {answer_columns}
            FROM `{self._table(responses_table)}` r
            LEFT JOIN `{self._table(RTP_SCHOOLS_TABLE)}` s
                ON s.id = r.school_id
            {teacher_join}
            LEFT JOIN `{self._table(answers_table)}` a
                ON a.response_id = r.id
            WHERE r.itinerary_id = @itinerary_id
                AND r.deleted_at IS NULL
            ORDER BY r.submitted_at DESC, r.id, a.id
        """
        job_config = bigquery.QueryJobConfig(
            query_parameters=[
                bigquery.ScalarQueryParameter("itinerary_id", "INT64", int(itinerary_id))
            ]
        )
        try:
            rows = self.client.query(query, job_config=job_config).result()
        except Exception as e:
            raise ResponseFetchError(f"Failed to fetch {label} for itinerary {itinerary_id}: {e}") from e

        responses = group_answer_rows(rows)
        logger.info(f"Fetched {len(responses)} {label} for itinerary {itinerary_id} from BigQuery")
        return responses

    def fetch_school_responses(self, itinerary_id):
        return self._query(
            RTP_SCHOOL_RESPONSES_TABLE, RTP_SCHOOL_ANSWERS_TABLE,
            'a.answer_value',
            itinerary_id, 'school output responses',
        )

    def fetch_consolidated_checklist_responses(self, itinerary_id):
        return self._query(
            RTP_CHECKLIST_RESPONSES_TABLE, RTP_CHECKLIST_ANSWERS_TABLE,
            'a.answer_value, a.upload_file_path',
            itinerary_id, 'consolidated checklist responses',
        )

    def fetch_partners_in_play_responses(self, itinerary_id):
        return self._query(
            RTP_PIP_RESPONSES_TABLE, RTP_PIP_ANSWERS_TABLE,
            'a.answer_value, a.score',
            itinerary_id, 'partners in play responses', with_teacher=True,
        )


def get_response_source():
    """Build the source selected by RTP_DATA_SOURCE."""
    if RTP_DATA_SOURCE == 'bigquery':
        return BigQueryResponseSource()
    if RTP_DATA_SOURCE == 'api':
        return HttpResponseSource()
    raise ValueError(f"Unknown RTP_DATA_SOURCE: {RTP_DATA_SOURCE}")
