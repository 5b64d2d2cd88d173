import threading

import pytest

from config import RTP_QUESTION_MAPPINGS
from rtp.indicators import (
    aggregate_outcome_indicators,
    build_question_mappings,
    calculate_all_outcome_indicators,
    enrollment_question_ids,
    learning_environment_question_ids,
    teacher_skill_question_ids,
)
from rtp.sources import ResponseFetchError

INDICATOR_KEYS = [
    'itineraryId', 'implementationPlans', 'developmentPlans', 'lessonPlans',
    'learningEnvironments', 'teacherSkills', 'enrollment', 'schoolsReached',
]


class StubSource:
    def __init__(self, school=None, checklist=None, pip=None, fail=None, block=None):
        self.school = school or []
        self.checklist = checklist or []
        self.pip = pip or []
        self.fail = fail
        self.block = block
        self.calls = []

    def _fetch(self, name, itinerary_id, data):
        self.calls.append((name, itinerary_id))
        if self.block == name:
            threading.Event().wait(1)
        if self.fail == name:
            raise ResponseFetchError(f"{name} unavailable")
        return data

    def fetch_school_responses(self, itinerary_id):
        return self._fetch('school', itinerary_id, self.school)

    def fetch_consolidated_checklist_responses(self, itinerary_id):
        return self._fetch('checklist', itinerary_id, self.checklist)

    def fetch_partners_in_play_responses(self, itinerary_id):
        return self._fetch('pip', itinerary_id, self.pip)


def test_build_question_mappings_overlays_defaults():
    mappings = build_question_mappings({'implementationPlanQuestion': 117})
    assert mappings['implementationPlanQuestion'] == 117
    assert mappings['lessonPlanQuestion'] == 19
    assert build_question_mappings(None) == RTP_QUESTION_MAPPINGS
    assert RTP_QUESTION_MAPPINGS['implementationPlanQuestion'] == 17


def test_question_id_slices():
    mappings = build_question_mappings()
    assert learning_environment_question_ids(mappings) == {'q43': 43, 'q44': 44, 'q45': 45}
    assert enrollment_question_ids(mappings) == {'boysEnrolled': 12, 'girlsEnrolled': 13}
    assert teacher_skill_question_ids(mappings) == {
        'q29': 29, 'q30': 30, 'q31': 31, 'q32': 32, 'q33': 33,
        'q39': 39, 'q45': 45, 'q46': 46, 'q48': 48, 'q49': 49,
    }


def test_aggregate_outcome_indicators(checklist_responses, school_output_responses, pip_responses):
    result = aggregate_outcome_indicators(
        5, school_output_responses, checklist_responses, pip_responses, RTP_QUESTION_MAPPINGS,
    )

    assert list(result) == INDICATOR_KEYS
    assert result['itineraryId'] == 5
    assert result['implementationPlans'] == {'percentage': 75.0, 'schoolsWithPlans': 3, 'totalSchools': 4}
    assert result['developmentPlans']['schoolsWithUploads'] == 2
    assert result['lessonPlans']['teachersWithLtPPlans'] == 2
    assert result['learningEnvironments']['environmentsWithLtP'] == 1
    assert result['teacherSkills']['teachersWithSkills'] == 1
    assert result['enrollment']['totalEnrollment'] == 35
    # 101-104 from the checklist, 101/102 from school output, 101/103 from PIP
    assert result['schoolsReached'] == {'schoolsReached': 4}


def test_aggregate_with_no_responses():
    result = aggregate_outcome_indicators(9, [], [], [])
    assert list(result) == INDICATOR_KEYS
    assert result['implementationPlans']['percentage'] == 0
    assert result['learningEnvironments']['detailedScores'] == []
    assert result['enrollment']['schoolCount'] == 0
    assert result['schoolsReached'] == {'schoolsReached': 0}


def test_aggregate_applies_threshold_to_both_weighted_indicators(pip_responses):
    result = aggregate_outcome_indicators(1, [], [], pip_responses, threshold=0)
    assert result['learningEnvironments']['environmentsWithLtP'] == 2
    assert result['teacherSkills']['teachersWithSkills'] == 2


def test_calculate_all_fetches_each_collection_once(checklist_responses, school_output_responses, pip_responses):
    source = StubSource(school=school_output_responses, checklist=checklist_responses, pip=pip_responses)

    result = calculate_all_outcome_indicators(5, RTP_QUESTION_MAPPINGS, source=source, timeout=5)

    assert sorted(source.calls) == [('checklist', 5), ('pip', 5), ('school', 5)]
    assert result == aggregate_outcome_indicators(
        5, school_output_responses, checklist_responses, pip_responses, RTP_QUESTION_MAPPINGS,
    )


@pytest.mark.parametrize('failing', ['school', 'checklist', 'pip'])
def test_calculate_all_propagates_fetch_failure(failing, caplog):
    source = StubSource(fail=failing)

    with pytest.raises(ResponseFetchError, match=f"{failing} unavailable"):
        calculate_all_outcome_indicators(3, source=source, timeout=5)

    assert 'Error calculating outcome indicators for itinerary 3' in caplog.text


def test_calculate_all_times_out_without_partial_result():
    source = StubSource(block='pip')

    with pytest.raises(TimeoutError, match='itinerary 4'):
        calculate_all_outcome_indicators(4, source=source, timeout=0.1)
