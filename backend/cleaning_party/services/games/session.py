"""In-memory shape of a stored game session.

The stored JSON keeps the camelCase field names the web client polls for;
``from_dict`` / ``to_dict`` translate between that record and these objects.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_TASK_POINTS = 10


@dataclass(frozen=True)
class Task:
    id: str
    name: str
    time: int
    points: Optional[int]
    partner_required: bool = False

    @property
    def award(self) -> int:
        return self.points or DEFAULT_TASK_POINTS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Task:
        return cls(
            id=data['id'],
            name=data.get('name', data['id']),
            time=data.get('time', 0),
            points=data.get('points'),
            partner_required=bool(data.get('partnerRequired')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'time': self.time,
            'points': self.points,
            'partnerRequired': self.partner_required,
        }


@dataclass
class Player:
    id: str
    name: str
    score: int = 0
    partner: Optional[str] = None
    tasks_completed: int = 0

    def credit(self, points: int) -> None:
        self.score += points
        self.tasks_completed += 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Player:
        return cls(
            id=data['id'],
            name=data['name'],
            score=data.get('score', 0),
            partner=data.get('partner'),
            tasks_completed=data.get('tasksCompleted', 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
            'partner': self.partner,
            'tasksCompleted': self.tasks_completed,
        }


@dataclass(frozen=True)
class Completion:
    completed_by: str
    partner: Optional[str]
    timestamp: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Completion:
        return cls(
            completed_by=data['completedBy'],
            partner=data.get('partner'),
            timestamp=data['timestamp'],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'completedBy': self.completed_by,
            'partner': self.partner,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class TaskCatalog:
    daily: List[Task]
    weekly: List[Task]
    silly: List[Task]

    def all_tasks(self) -> List[Task]:
        return [*self.daily, *self.weekly, *self.silly]

    def index(self) -> Dict[str, Task]:
        return {task.id: task for task in self.all_tasks()}

    def max_score(self) -> int:
        return sum(task.award for task in self.all_tasks())


@dataclass
class GameSession:
    id: str
    catalog: TaskCatalog
    duration: int
    players: List[Player] = field(default_factory=list)
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    completed_tasks: Dict[str, Completion] = field(default_factory=dict)

    def __post_init__(self):
        self._tasks_by_id = self.catalog.index()

    def find_player(self, player_id: Optional[str]) -> Optional[Player]:
        if player_id is None:
            return None
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_player_by_name(self, name: str) -> Optional[Player]:
        for player in self.players:
            if player.name == name:
                return player
        return None

    def find_task(self, task_id: str) -> Optional[Task]:
        return self._tasks_by_id.get(task_id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GameSession:
        tasks = data.get('tasks') or {}
        catalog = TaskCatalog(
            daily=[Task.from_dict(t) for t in tasks.get('daily', [])],
            weekly=[Task.from_dict(t) for t in tasks.get('weekly', [])],
            silly=[Task.from_dict(t) for t in data.get('sillyTasks', [])],
        )
        return cls(
            id=data['id'],
            catalog=catalog,
            duration=data['duration'],
            players=[Player.from_dict(p) for p in data.get('players', [])],
            start_time=data.get('startTime'),
            end_time=data.get('endTime'),
            completed_tasks={
                task_id: Completion.from_dict(c)
                for task_id, c in (data.get('completedTasks') or {}).items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'players': [p.to_dict() for p in self.players],
            'tasks': {
                'daily': [t.to_dict() for t in self.catalog.daily],
                'weekly': [t.to_dict() for t in self.catalog.weekly],
            },
            'sillyTasks': [t.to_dict() for t in self.catalog.silly],
            'startTime': self.start_time,
            'endTime': self.end_time,
            'duration': self.duration,
            'completedTasks': {task_id: c.to_dict() for task_id, c in self.completed_tasks.items()},
        }

    @classmethod
    def loads(cls, raw: str) -> GameSession:
        return cls.from_dict(json.loads(raw))

    def dumps(self) -> str:
        return json.dumps(self.to_dict())
