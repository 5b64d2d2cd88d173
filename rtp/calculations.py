"""
Right to Play (RTP) outcome indicator calculations.

Each calculator takes one or more lists of survey responses (dicts with
'id', 'school_id', 'teacher_id', ... and an 'answers' list) plus the question
IDs it needs, and returns a new dict. Inputs are never modified, and empty or
missing inputs produce zeroed results rather than errors.
"""

from config import DEFAULT_LTP_THRESHOLD, LEARNING_ENVIRONMENT_WEIGHTS
from rtp.scoring import (
    answer_score, effort_score, find_answer, has_upload, is_yes, parse_float,
    parse_int, percentage_of, round2, tone_score,
)


def _count_matching(responses, question_id, predicate):
    return sum(1 for response in responses if predicate(find_answer(response, question_id)))


def _identity(response):
    response = response or {}
    return {
        'responseId': response.get('id'),
        'schoolId': response.get('school_id'),
        'schoolName': response.get('school_name') or 'Unknown',
        'teacherId': response.get('teacher_id'),
        'teacherName': response.get('teacher_name') or 'Unknown',
    }


def calculate_schools_with_implementation_plans(responses, question_id):
    """
    Percentage of schools with an LtP implementation plan.
    Source: Consolidated Checklist Q17, counted as a YES answer.
    """
    if not responses:
        return {'percentage': 0, 'schoolsWithPlans': 0, 'totalSchools': 0}

    schools_with_plans = _count_matching(responses, question_id, is_yes)
    total_schools = len(responses)

    return {
        'percentage': percentage_of(schools_with_plans, total_schools),
        'schoolsWithPlans': schools_with_plans,
        'totalSchools': total_schools,
    }


def calculate_schools_with_ltp_development_plans(responses, question_id):
    """
    Percentage of schools that uploaded an LtP development plan.
    Source: Consolidated Checklist Q18, counted when a file is attached.
    """
    if not responses:
        return {'percentage': 0, 'schoolsWithUploads': 0, 'totalSchools': 0}

    schools_with_uploads = _count_matching(responses, question_id, has_upload)
    total_schools = len(responses)

    return {
        'percentage': percentage_of(schools_with_uploads, total_schools),
        'schoolsWithUploads': schools_with_uploads,
        'totalSchools': total_schools,
    }


def calculate_teachers_with_ltp_lesson_plans(responses, question_id):
    """
    Percentage of teachers with LtP lesson plans.
    Source: Consolidated Checklist Q19, counted as a YES answer.
    """
    if not responses:
        return {'percentage': 0, 'teachersWithLtPPlans': 0, 'totalTeachers': 0}

    teachers_with_plans = _count_matching(responses, question_id, is_yes)
    total_teachers = len(responses)

    return {
        'percentage': percentage_of(teachers_with_plans, total_teachers),
        'teachersWithLtPPlans': teachers_with_plans,
        'totalTeachers': total_teachers,
    }


def calculate_learning_environments_with_ltp_methods(pip_responses, question_ids, threshold=DEFAULT_LTP_THRESHOLD):
    """
    Percentage of learning environments using LtP methods.
    Sources: Partners in Play Q43 (friendly tone), Q44 (acknowledging effort),
    Q45 (pupil participation, rated 1-5).

    Weighted score = 30% tone + 30% effort + 40% participation. An environment
    uses LtP methods when its unrounded weighted score is at or above the
    threshold; only the reported score is rounded.
    """
    if not pip_responses:
        return {
            'percentage': 0,
            'environmentsWithLtP': 0,
            'totalEnvironments': 0,
            'averageScore': 0,
            'detailedScores': [],
        }
    if threshold is None:
        threshold = DEFAULT_LTP_THRESHOLD
    question_ids = question_ids or {}

    scores = []
    for response in pip_responses:
        tone = tone_score(find_answer(response, question_ids.get('q43')))
        effort = effort_score(find_answer(response, question_ids.get('q44')))
        participation_answer = find_answer(response, question_ids.get('q45'))
        participation = parse_float(participation_answer.get('answer_value')) if participation_answer else 0

        weighted_score = (
            tone * LEARNING_ENVIRONMENT_WEIGHTS['tone']
            + effort * LEARNING_ENVIRONMENT_WEIGHTS['effort']
            + participation * LEARNING_ENVIRONMENT_WEIGHTS['participation']
        )

        entry = _identity(response)
        entry.update({
            'toneScore': tone,
            'effortScore': effort,
            'participationScore': round2(participation),
            'weightedScore': round2(weighted_score),
            'usesLtPMethods': weighted_score >= threshold,
        })
        scores.append(entry)

    environments_with_ltp = sum(1 for s in scores if s['usesLtPMethods'])
    total_environments = len(scores)
    average_score = sum(s['weightedScore'] for s in scores) / total_environments

    return {
        'percentage': percentage_of(environments_with_ltp, total_environments),
        'environmentsWithLtP': environments_with_ltp,
        'totalEnvironments': total_environments,
        'averageScore': round2(average_score),
        'detailedScores': scores,
    }


def calculate_teachers_with_ltp_skills(pip_responses, question_ids, threshold=DEFAULT_LTP_THRESHOLD):
    """
    Percentage of teachers with LtP skills.
    Sources: Partners in Play Q29, Q30, Q31, Q32, Q33, Q39, Q45, Q46, Q48, Q49.

    Each teacher's score is the unweighted mean of the mapped question scores
    (stored score if present, otherwise the numeric answer). A mapped question
    the teacher did not answer counts as 0.
    """
    if not pip_responses:
        return {
            'percentage': 0,
            'teachersWithSkills': 0,
            'totalTeachers': 0,
            'averageScore': 0,
            'detailedScores': [],
        }
    if threshold is None:
        threshold = DEFAULT_LTP_THRESHOLD
    question_ids = question_ids or {}

    scores = []
    for response in pip_responses:
        raw_scores = [answer_score(find_answer(response, question_id)) for question_id in question_ids.values()]
        avg_score = sum(raw_scores) / len(raw_scores) if raw_scores else 0

        entry = _identity(response)
        entry.update({
            'questionScores': [round2(score) for score in raw_scores],
            'avgScore': round2(avg_score),
            'hasLtPSkills': avg_score >= threshold,
        })
        scores.append(entry)

    teachers_with_skills = sum(1 for s in scores if s['hasLtPSkills'])
    total_teachers = len(scores)
    average_score = sum(s['avgScore'] for s in scores) / total_teachers

    return {
        'percentage': percentage_of(teachers_with_skills, total_teachers),
        'teachersWithSkills': teachers_with_skills,
        'totalTeachers': total_teachers,
        'averageScore': round2(average_score),
        'detailedScores': scores,
    }


def calculate_total_primary_enrollment(school_responses, question_ids):
    """
    Total primary enrollment across schools.
    Sources: School Output Q12 (boys enrolled), Q13 (girls enrolled).
    """
    if not school_responses:
        return {'totalEnrollment': 0, 'boysEnrollment': 0, 'girlsEnrollment': 0, 'schoolCount': 0}
    question_ids = question_ids or {}

    boys_enrollment = 0
    girls_enrollment = 0
    for response in school_responses:
        boys_answer = find_answer(response, question_ids.get('boysEnrolled'))
        girls_answer = find_answer(response, question_ids.get('girlsEnrolled'))
        boys_enrollment += parse_int(boys_answer.get('answer_value')) if boys_answer else 0
        girls_enrollment += parse_int(girls_answer.get('answer_value')) if girls_answer else 0

    return {
        'totalEnrollment': boys_enrollment + girls_enrollment,
        'boysEnrollment': boys_enrollment,
        'girlsEnrollment': girls_enrollment,
        'schoolCount': len(school_responses),
    }


def calculate_schools_reached(school_responses=None, consolidated_responses=None, pip_responses=None):
    """Number of distinct schools with any submission across the three instruments."""
    school_ids = set()
    for responses in (school_responses, consolidated_responses, pip_responses):
        for response in responses or []:
            school_id = response.get('school_id') if response else None
            if school_id is not None and school_id != '':
                school_ids.add(school_id)

    return {'schoolsReached': len(school_ids)}
