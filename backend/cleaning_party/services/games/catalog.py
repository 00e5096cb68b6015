import random
from typing import Optional

from .session import Task, TaskCatalog

DAILY_TASKS = [
    Task('dishes', 'Do the dishes', 3, 15),
    Task('kitchen_counter', 'Wipe kitchen counters', 2, 10),
    Task('make_beds', 'Make all beds', 2, 10),
    Task('bathroom_quick', 'Quick bathroom wipe down', 2, 10),
    Task('living_room_tidy', 'Tidy living room', 3, 15),
]

WEEKLY_TASKS = [
    Task('deep_clean_bathroom', 'Deep clean bathroom', 8, 40, partner_required=True),
    Task('vacuum_house', 'Vacuum entire house', 6, 30, partner_required=True),
    Task('deep_clean_kitchen', 'Deep clean kitchen', 10, 50, partner_required=True),
    Task('mop_floors', 'Mop all floors', 5, 25, partner_required=True),
    Task('laundry_complete', 'Complete laundry cycle', 4, 20),
]

SILLY_TASK_POOL = [
    Task('freestyle_rap', 'Perform a 30-second freestyle rap about cleaning', 1, 25),
    Task('dust_dance', 'Do the "dust bunny dance" while dusting', 2, 20),
    Task('sing_dishwashing', 'Sing an opera about dishwashing', 2, 20),
    Task('sock_puppet_show', 'Perform a sock puppet show about laundry', 3, 30, partner_required=True),
    Task('backwards_vacuum', 'Vacuum while walking backwards', 3, 25),
    Task('mop_limbo', 'Do the limbo while mopping', 2, 25),
    Task('toilet_monologue', 'Deliver a dramatic monologue to the toilet', 1, 20),
    Task('superhero_cleaning', 'Clean like your favorite superhero', 2, 20),
]

MIN_SILLY_TASKS = 3
MAX_SILLY_TASKS = 4


def pick_silly_tasks(count: int = MAX_SILLY_TASKS, rng: Optional[random.Random] = None) -> list:
    """Sample ``count`` silly tasks from the pool without replacement."""
    if not MIN_SILLY_TASKS <= count <= MAX_SILLY_TASKS:
        raise ValueError(f"silly task count must be between {MIN_SILLY_TASKS} and {MAX_SILLY_TASKS}")
    rng = rng or random.Random()
    return rng.sample(SILLY_TASK_POOL, count)


def generate_catalog(silly_count: int = MAX_SILLY_TASKS, rng: Optional[random.Random] = None) -> TaskCatalog:
    """Build the fixed task set for a new session.

    Daily and weekly lists are always the same; the silly subset is drawn
    fresh for every session.
    """
    return TaskCatalog(
        daily=list(DAILY_TASKS),
        weekly=list(WEEKLY_TASKS),
        silly=pick_silly_tasks(silly_count, rng),
    )
