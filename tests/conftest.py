import pytest


def make_response(response_id, school_id, answers, teacher_id=None, school_name=None, teacher_name=None):
    return {
        'id': response_id,
        'school_id': school_id,
        'school_name': school_name,
        'teacher_id': teacher_id,
        'teacher_name': teacher_name,
        'answers': answers,
    }


def answer(question_id, value, **extra):
    data = {'question_id': question_id, 'answer_value': value}
    data.update(extra)
    return data


@pytest.fixture
def checklist_responses():
    return [
        make_response(1, 101, [answer(17, 'YES'), answer(18, '', upload_file_path='/uploads/rtp/plan1.pdf'), answer(19, 'yes')]),
        make_response(2, 102, [answer(17, 'yes'), answer(18, ''), answer(19, 'No')]),
        make_response(3, 103, [answer(17, 'Yes'), answer(19, ' Yes ')]),
        make_response(4, 104, [answer(17, 'No'), answer(18, '', upload_file_path='/uploads/rtp/plan4.pdf')]),
    ]


@pytest.fixture
def school_output_responses():
    return [
        make_response(10, 101, [answer(12, '10'), answer(13, '12')], school_name='Asante Primary'),
        make_response(11, 102, [answer(12, '5'), answer(13, '8')], school_name='Bolga Basic'),
    ]


@pytest.fixture
def pip_responses():
    skill_answers = [answer(qid, '4') for qid in (29, 30, 31, 32, 33, 39, 46, 48, 49)]
    return [
        make_response(
            20, 101,
            [answer(43, 'Frequently'), answer(44, 'Not at all'), answer(45, '5')] + skill_answers,
            teacher_id=7, school_name='Asante Primary', teacher_name='Ama Mensah',
        ),
        make_response(
            21, 103,
            [answer(43, 'sometimes'), answer(44, 'Only girls'), answer(45, '2')],
            teacher_id=8,
        ),
    ]
