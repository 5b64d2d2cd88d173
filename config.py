"""
Configuration constants and environment variables.
No project imports — this is a leaf module.
"""

import os

# BigQuery configuration
PROJECT_ID = os.environ.get('GCP_PROJECT_ID', 'msrc-data-warehouse')
RTP_DATASET_ID = os.environ.get('RTP_DATASET_ID', 'right_to_play')

# Mirrored survey tables (one response table + one answer table per instrument)
RTP_SCHOOL_RESPONSES_TABLE = 'right_to_play_school_responses'
RTP_SCHOOL_ANSWERS_TABLE = 'right_to_play_school_response_answers'
RTP_CHECKLIST_RESPONSES_TABLE = 'right_to_play_consolidated_checklist_responses'
RTP_CHECKLIST_ANSWERS_TABLE = 'right_to_play_consolidated_checklist_answers'
RTP_PIP_RESPONSES_TABLE = 'right_to_play_pip_responses'
RTP_PIP_ANSWERS_TABLE = 'right_to_play_pip_answers'

# Lookup tables joined in for display names
RTP_SCHOOLS_TABLE = 'schools'
RTP_TEACHERS_TABLE = 'teachers'

# REST endpoints of the data-entry app
RTP_API_BASE_URL = os.environ.get('RTP_API_BASE_URL', 'http://localhost:3000')
RTP_SCHOOL_RESPONSES_PATH = '/api/rtp/school-responses'
RTP_CONSOLIDATED_CHECKLIST_PATH = '/api/rtp/consolidated-checklist'
RTP_PARTNERS_IN_PLAY_PATH = '/api/rtp/partners-in-play'

# Per-fetch timeout; a timeout aborts the whole aggregation
RTP_FETCH_TIMEOUT_SECONDS = float(os.environ.get('RTP_FETCH_TIMEOUT_SECONDS', '30'))

# Where calculate_all_outcome_indicators reads from: 'api' or 'bigquery'
RTP_DATA_SOURCE = os.environ.get('RTP_DATA_SOURCE', 'api').lower()

# ── Outcome indicator constants ──
# Domain-owned values. Changing any of them changes reported indicators.
DEFAULT_LTP_THRESHOLD = 3.5

LEARNING_ENVIRONMENT_WEIGHTS = {
    'tone': 0.3,
    'effort': 0.3,
    'participation': 0.4,
}

# Question IDs in the current form schema, keyed by what the question asks
RTP_QUESTION_MAPPINGS = {
    # School Output
    'boysEnrolledQuestion': 12,
    'girlsEnrolledQuestion': 13,

    # Consolidated Checklist
    'implementationPlanQuestion': 17,
    'developmentPlanQuestion': 18,
    'lessonPlanQuestion': 19,

    # Partners in Play: learning environments
    'friendlyToneQuestion': 43,
    'acknowledgingEffortQuestion': 44,
    'pupilParticipationQuestion': 45,

    # Partners in Play: teacher skills
    'teacherSkillQ29': 29,
    'teacherSkillQ30': 30,
    'teacherSkillQ31': 31,
    'teacherSkillQ32': 32,
    'teacherSkillQ33': 33,
    'teacherSkillQ39': 39,
    'teacherSkillQ45': 45,
    'teacherSkillQ46': 46,
    'teacherSkillQ48': 48,
    'teacherSkillQ49': 49,
}
