"""Progress math for enrollments.

Kept free of I/O so the lifecycle service can apply it inside an atomic
update together with the status change it may trigger.
"""

COMPLETION_THRESHOLD = 100.0


def calculate_progress(total_lessons: int, completed_count: int) -> float:
    """Percentage of distinct completed lessons, clamped to [0, 100].

    A course without lessons always reports 0.
    """
    if total_lessons <= 0:
        return 0.0
    percentage = completed_count / total_lessons * 100
    return max(0.0, min(COMPLETION_THRESHOLD, percentage))


def has_reached_completion(progress_percentage: float) -> bool:
    return progress_percentage >= COMPLETION_THRESHOLD
