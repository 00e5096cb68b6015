from .session import Completion

GRADE_THRESHOLDS = [
    (90, 'S'),
    (80, 'A'),
    (70, 'B'),
    (60, 'C'),
    (50, 'D'),
]
LOWEST_GRADE = 'Purgatory'


def award_completion(game, player, task, now: int) -> Completion:
    """Record the first completion of ``task`` and credit the points.

    The acting player always gets ``task.award``; their partner at this moment
    gets the same if they are still in the session.
    """
    completion = Completion(completed_by=player.id, partner=player.partner, timestamp=now)
    game.completed_tasks[task.id] = completion
    player.credit(task.award)
    partner = game.find_player(player.partner)
    if partner is not None:
        partner.credit(task.award)
    return completion


def calculate_grade(score: int, max_score: int) -> str:
    if max_score <= 0:
        return LOWEST_GRADE
    percentage = score / max_score * 100
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return LOWEST_GRADE


def scoreboard(game) -> list:
    """Players ranked by score, highest first; ties keep join order."""
    max_score = game.catalog.max_score()
    ranked = sorted(game.players, key=lambda p: p.score, reverse=True)
    return [
        {
            'rank': idx + 1,
            'id': p.id,
            'name': p.name,
            'score': p.score,
            'tasksCompleted': p.tasks_completed,
            'grade': calculate_grade(p.score, max_score),
        }
        for idx, p in enumerate(ranked)
    ]
