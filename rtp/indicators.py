"""
Composite outcome indicators for one itinerary.

aggregate_outcome_indicators() is the pure composition of every calculator;
calculate_all_outcome_indicators() fetches the three response collections
concurrently and feeds them to it.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from config import DEFAULT_LTP_THRESHOLD, RTP_FETCH_TIMEOUT_SECONDS, RTP_QUESTION_MAPPINGS
from rtp.calculations import (
    calculate_learning_environments_with_ltp_methods,
    calculate_schools_reached,
    calculate_schools_with_implementation_plans,
    calculate_schools_with_ltp_development_plans,
    calculate_teachers_with_ltp_lesson_plans,
    calculate_teachers_with_ltp_skills,
    calculate_total_primary_enrollment,
)

logger = logging.getLogger(__name__)

TEACHER_SKILL_QUESTIONS = ['q29', 'q30', 'q31', 'q32', 'q33', 'q39', 'q45', 'q46', 'q48', 'q49']


def build_question_mappings(overrides=None):
    """Default question IDs with the caller's overrides laid on top."""
    mappings = dict(RTP_QUESTION_MAPPINGS)
    if overrides:
        mappings.update(overrides)
    return mappings


def learning_environment_question_ids(mappings):
    return {
        'q43': mappings.get('friendlyToneQuestion'),
        'q44': mappings.get('acknowledgingEffortQuestion'),
        'q45': mappings.get('pupilParticipationQuestion'),
    }


def teacher_skill_question_ids(mappings):
    return {key: mappings.get(f"teacherSkill{key.upper()}") for key in TEACHER_SKILL_QUESTIONS}


def enrollment_question_ids(mappings):
    return {
        'boysEnrolled': mappings.get('boysEnrolledQuestion'),
        'girlsEnrolled': mappings.get('girlsEnrolledQuestion'),
    }


def aggregate_outcome_indicators(itinerary_id, school_responses, consolidated_responses, pip_responses,
                                 question_mappings=None, threshold=DEFAULT_LTP_THRESHOLD):
    """Run every indicator calculator over already-fetched responses."""
    mappings = build_question_mappings(question_mappings)

    return {
        'itineraryId': itinerary_id,
        'implementationPlans': calculate_schools_with_implementation_plans(
            consolidated_responses, mappings.get('implementationPlanQuestion')
        ),
        'developmentPlans': calculate_schools_with_ltp_development_plans(
            consolidated_responses, mappings.get('developmentPlanQuestion')
        ),
        'lessonPlans': calculate_teachers_with_ltp_lesson_plans(
            consolidated_responses, mappings.get('lessonPlanQuestion')
        ),
        'learningEnvironments': calculate_learning_environments_with_ltp_methods(
            pip_responses, learning_environment_question_ids(mappings), threshold
        ),
        'teacherSkills': calculate_teachers_with_ltp_skills(
            pip_responses, teacher_skill_question_ids(mappings), threshold
        ),
        'enrollment': calculate_total_primary_enrollment(
            school_responses, enrollment_question_ids(mappings)
        ),
        'schoolsReached': calculate_schools_reached(
            school_responses, consolidated_responses, pip_responses
        ),
    }


def calculate_all_outcome_indicators(itinerary_id, question_mappings=None, source=None,
                                     timeout=None, threshold=DEFAULT_LTP_THRESHOLD):
    """
    Fetch the three response collections for an itinerary and calculate all
    outcome indicators.

    The fetches run concurrently. Any fetch failure, or the fetches not all
    finishing within `timeout` seconds, aborts the whole calculation: the
    error is logged and re-raised, and no partial result is returned.
    """
    if source is None:
        from rtp.sources import get_response_source
        source = get_response_source()
    if timeout is None:
        timeout = RTP_FETCH_TIMEOUT_SECONDS

    logger.info(f"Calculating outcome indicators for itinerary {itinerary_id}")

    executor = ThreadPoolExecutor(max_workers=3)
    try:
        school_future = executor.submit(source.fetch_school_responses, itinerary_id)
        checklist_future = executor.submit(source.fetch_consolidated_checklist_responses, itinerary_id)
        pip_future = executor.submit(source.fetch_partners_in_play_responses, itinerary_id)
        futures = [school_future, checklist_future, pip_future]

        done, pending = wait(futures, timeout=timeout, return_when=FIRST_EXCEPTION)
        for future in futures:
            if future in done and future.exception() is not None:
                raise future.exception()
        if pending:
            raise TimeoutError(
                f"Timed out after {timeout}s fetching responses for itinerary {itinerary_id}"
            )

        school_responses = school_future.result()
        consolidated_responses = checklist_future.result()
        pip_responses = pip_future.result()
    except Exception as e:
        logger.error(f"Error calculating outcome indicators for itinerary {itinerary_id}: {e}")
        raise
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    indicators = aggregate_outcome_indicators(
        itinerary_id, school_responses, consolidated_responses, pip_responses,
        question_mappings, threshold,
    )
    logger.info(
        f"Outcome indicators for itinerary {itinerary_id}: "
        f"{indicators['schoolsReached']['schoolsReached']} schools reached"
    )
    return indicators
