"""Right to Play outcome indicator engine."""

from rtp.calculations import (
    calculate_learning_environments_with_ltp_methods,
    calculate_schools_reached,
    calculate_schools_with_implementation_plans,
    calculate_schools_with_ltp_development_plans,
    calculate_teachers_with_ltp_lesson_plans,
    calculate_teachers_with_ltp_skills,
    calculate_total_primary_enrollment,
)
from rtp.indicators import aggregate_outcome_indicators, calculate_all_outcome_indicators
