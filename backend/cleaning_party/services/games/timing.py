import time

ROUND_DURATION_MS = 20 * 60 * 1000

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'


def now_ms() -> int:
    return int(time.time() * 1000)


def remaining_ms(game, now: int) -> int:
    """Time left in the round, floored at zero. Full duration before start."""
    if game.start_time is None:
        return game.duration
    return max(0, game.duration - (now - game.start_time))


def is_expired(game, now: int) -> bool:
    return game.start_time is not None and remaining_ms(game, now) == 0


def round_status(game, now: int) -> dict:
    """Point-in-time view of the round.

    Nothing on the server ends a round; finished-ness is derived from
    ``startTime + duration`` whenever somebody reads the session.
    """
    if game.start_time is None:
        status = WAITING
    elif game.end_time is None and remaining_ms(game, now) > 0:
        status = PLAYING
    else:
        status = FINISHED
    return {
        'status': status,
        'startTime': game.start_time,
        'endTime': game.end_time,
        'duration': game.duration,
        'remainingMs': remaining_ms(game, now) if status != FINISHED else 0,
    }
