"""
Answer lookup, value coercion and categorical scoring for RTP survey answers.

Survey submissions are frequently incomplete, so everything here degrades to
0 / False instead of raising: a missing answer, an unparseable number or an
unrecognised label never aborts an indicator calculation.
"""

import math
import re
from enum import Enum

_FLOAT_PREFIX = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')
_INT_PREFIX = re.compile(r'^\s*([+-]?\d+)')


class ObservationFrequency(Enum):
    """How often a behaviour was observed during a Partners in Play lesson."""
    FREQUENTLY = 'frequently'
    SOMETIMES = 'sometimes'
    ONLY_BOYS = 'only boys'
    ONLY_GIRLS = 'only girls'
    NOT_AT_ALL = 'not at all'
    UNKNOWN = 'unknown'

    @classmethod
    def parse(cls, raw):
        """Map a stored answer label to a member; anything unrecognised is UNKNOWN."""
        if not isinstance(raw, str):
            return cls.UNKNOWN
        label = raw.strip().lower()
        for member in cls:
            if member is not cls.UNKNOWN and member.value == label:
                return member
        return cls.UNKNOWN


# Q43: teacher uses a friendly tone
TONE_SCORES = {
    ObservationFrequency.FREQUENTLY: 5,
    ObservationFrequency.SOMETIMES: 4,
    ObservationFrequency.ONLY_BOYS: 3,
    ObservationFrequency.ONLY_GIRLS: 3,
    ObservationFrequency.NOT_AT_ALL: 0,
    ObservationFrequency.UNKNOWN: 0,
}

# Q44: teacher acknowledges pupil effort
EFFORT_SCORES = {
    ObservationFrequency.FREQUENTLY: 5,
    ObservationFrequency.SOMETIMES: 4,
    ObservationFrequency.ONLY_BOYS: 3,
    ObservationFrequency.ONLY_GIRLS: 3,
    ObservationFrequency.NOT_AT_ALL: 0,
    ObservationFrequency.UNKNOWN: 0,
}


def tone_score(answer):
    if not answer:
        return 0
    return TONE_SCORES[ObservationFrequency.parse(answer.get('answer_value'))]


def effort_score(answer):
    if not answer:
        return 0
    return EFFORT_SCORES[ObservationFrequency.parse(answer.get('answer_value'))]


def find_answer(response, question_id):
    """Return the first answer in a response for question_id, or None.

    IDs are compared loosely so that '17' from a query string matches 17
    from the database.
    """
    if not response or question_id is None:
        return None
    for answer in response.get('answers') or []:
        if not answer:
            continue
        answer_qid = answer.get('question_id')
        if answer_qid == question_id:
            return answer
        if answer_qid is not None and str(answer_qid) == str(question_id):
            return answer
    return None


def parse_float(value):
    """Parse the leading number of a value ('4.5 pts' -> 4.5). Returns 0 when there is none."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return 0
    parsed = float(match.group(1))
    return parsed if math.isfinite(parsed) else 0


def parse_int(value):
    """Parse the leading integer of a value ('10 boys' -> 10). Returns 0 when there is none."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else 0


def is_yes(answer):
    if not answer:
        return False
    value = answer.get('answer_value')
    return isinstance(value, str) and value.strip().lower() == 'yes'


def has_upload(answer):
    if not answer:
        return False
    path = answer.get('upload_file_path')
    return bool(path and str(path).strip())


def answer_score(answer):
    """Numeric score of an answer: the stored score when present, else the parsed answer value."""
    if not answer:
        return 0
    score = answer.get('score')
    if score is not None and str(score).strip() != '':
        if _FLOAT_PREFIX.match(str(score)):
            return parse_float(score)
    return parse_float(answer.get('answer_value'))


def round2(value):
    return round(float(value), 2)


def percentage_of(count, total):
    """count / total as a percentage rounded to 2 places; 0 for an empty total."""
    if not total:
        return 0
    return round2(count * 100 / total)
