"""Game session engine.

Every operation reads the whole session record from the store, applies one
rule, and writes the whole record back. The store has no transactions, so in
the default ``last_write_wins`` mode two concurrent requests on the same room
can lose one another's update. ``compare_and_swap`` mode re-reads and
re-applies the operation when the record changed underneath it, up to
``max_retries`` attempts.
"""

import json
import logging
import random
import uuid
from typing import Callable, Optional

from cleaning_party.errors import NotFoundError, ConflictError, StoreConflictError, ValidationError
from .catalog import generate_catalog, MAX_SILLY_TASKS
from .scoring import award_completion, scoreboard
from .session import GameSession, Player
from .timing import ROUND_DURATION_MS, FINISHED, now_ms, round_status

logger = logging.getLogger(__name__)

LAST_WRITE_WINS = 'last_write_wins'
COMPARE_AND_SWAP = 'compare_and_swap'
CONSISTENCY_MODES = (LAST_WRITE_WINS, COMPARE_AND_SWAP)


def game_key(session_key: str) -> str:
    return f"game:{session_key}"


def _require_text(message, *values):
    """Every value must be a non-blank string."""
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(message)


class GameEngine:
    def __init__(
        self,
        store,
        duration_ms: int = ROUND_DURATION_MS,
        silly_count: int = MAX_SILLY_TASKS,
        consistency: str = LAST_WRITE_WINS,
        max_retries: int = 3,
        clear_stale_partners: bool = False,
        validate_partner_from_catalog: bool = False,
        reject_expired_completions: bool = False,
        record_end_time: bool = False,
        clock: Callable[[], int] = now_ms,
        rng: Optional[random.Random] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        if consistency not in CONSISTENCY_MODES:
            raise ValueError(f"unknown consistency mode {consistency!r}")
        self.store = store
        self.duration_ms = duration_ms
        self.silly_count = silly_count
        self.consistency = consistency
        self.max_retries = max(1, int(max_retries))
        self.clear_stale_partners = clear_stale_partners
        self.validate_partner_from_catalog = validate_partner_from_catalog
        self.reject_expired_completions = reject_expired_completions
        self.record_end_time = record_end_time
        self.clock = clock
        self.rng = rng or random.Random()
        self.id_factory = id_factory or (lambda: uuid.uuid4().hex)

    @classmethod
    def from_config(cls, config, store, **overrides):
        options = dict(
            duration_ms=int(config.get('ROUND_DURATION_MS', ROUND_DURATION_MS)),
            silly_count=int(config.get('SILLY_TASK_COUNT', MAX_SILLY_TASKS)),
            consistency=config.get('SESSION_CONSISTENCY', LAST_WRITE_WINS),
            max_retries=int(config.get('CAS_MAX_RETRIES', 3)),
            clear_stale_partners=bool(config.get('CLEAR_STALE_PARTNERS', False)),
            validate_partner_from_catalog=bool(config.get('VALIDATE_PARTNER_FROM_CATALOG', False)),
            reject_expired_completions=bool(config.get('REJECT_EXPIRED_COMPLETIONS', False)),
            record_end_time=bool(config.get('RECORD_END_TIME', False)),
        )
        options.update(overrides)
        return cls(store, **options)

    # -- store plumbing -----------------------------------------------------

    def _new_game(self, session_key: str) -> GameSession:
        return GameSession(
            id=session_key,
            catalog=generate_catalog(self.silly_count, self.rng),
            duration=self.duration_ms,
        )

    def _transact(self, session_key: str, apply, create: bool = False):
        """Run ``apply(game, now)`` as one read-modify-write.

        ``apply`` returns ``(result, changed)``; nothing is written when
        ``changed`` is false. Validation errors raised by ``apply`` abort
        before any write.
        """
        key = game_key(session_key)
        use_cas = self.consistency == COMPARE_AND_SWAP
        attempts = self.max_retries if use_cas else 1
        for attempt in range(1, attempts + 1):
            if use_cas:
                raw, version = self.store.get_versioned(key)
            else:
                raw, version = self.store.get(key), None
            if raw is None:
                if not create:
                    raise NotFoundError('Game not found')
                game = self._new_game(session_key)
                logger.info(f"[create] game={session_key} silly={[t.id for t in game.catalog.silly]}")
            else:
                game = GameSession.loads(raw)

            result, changed = apply(game, self.clock())
            if not changed:
                return result
            if not use_cas:
                self.store.put(key, game.dumps())
                return result
            if self.store.put_if_version(key, game.dumps(), version):
                return result
            logger.warning(f"[cas-retry] game={session_key} attempt={attempt}/{attempts} version={version}")
        raise StoreConflictError('Game was updated concurrently, please retry')

    def _require_player(self, game: GameSession, player_id) -> Player:
        player = game.find_player(player_id)
        if player is None:
            raise NotFoundError('Player not found')
        return player

    # -- operations ---------------------------------------------------------

    def join(self, session_key: str, player_name: str):
        """Admit ``player_name`` into the room, creating the room on first join.

        Returns ``(player_id, game)``.
        """
        _require_text('Missing playerName or gameId', session_key, player_name)

        def apply(game, now):
            if game.find_player_by_name(player_name) is not None:
                raise ConflictError('Player name already taken')
            player = Player(id=self.id_factory(), name=player_name)
            game.players.append(player)
            logger.info(f"[join] game={game.id} player={player.id} name={player_name!r} players={len(game.players)}")
            return (player.id, game), True

        return self._transact(session_key, apply, create=True)

    def partner(self, session_key: str, player_id: str, target_player_id: str) -> GameSession:
        _require_text('Missing gameId, playerId or targetPlayerId', session_key, player_id, target_player_id)

        def apply(game, now):
            player = game.find_player(player_id)
            target = game.find_player(target_player_id)
            if player is None or target is None:
                raise NotFoundError('Player not found')
            if self.clear_stale_partners:
                self._unlink_previous(game, player, target)
                self._unlink_previous(game, target, player)
            player.partner = target.id
            target.partner = player.id
            logger.info(f"[partner] game={game.id} {player.id}<->{target.id}")
            return game, True

        return self._transact(session_key, apply)

    def _unlink_previous(self, game, player, new_partner):
        previous = game.find_player(player.partner)
        if previous is None or previous is new_partner or previous is player:
            return
        if previous.partner == player.id:
            previous.partner = None
            logger.info(f"[partner-clear] game={game.id} player={previous.id} was paired with {player.id}")

    def complete_task(self, session_key: str, player_id: str, task_id: str, partner_required: bool = False) -> GameSession:
        """Credit ``task_id`` to the player (and their partner) once per session.

        ``partner_required`` is the caller's flag; it is always honored. The
        catalog's own flag is only consulted when catalog validation is on.
        """
        _require_text('Missing gameId, playerId or taskId', session_key, player_id, task_id)

        def apply(game, now):
            player = self._require_player(game, player_id)
            task = game.find_task(task_id)
            needs_partner = bool(partner_required)
            if self.validate_partner_from_catalog and task is not None:
                needs_partner = needs_partner or task.partner_required
            if needs_partner and not player.partner:
                raise ConflictError('This task requires a partner')
            if self.reject_expired_completions and round_status(game, now)['status'] == FINISHED:
                raise ConflictError('Round is over')

            if task_id in game.completed_tasks:
                logger.info(f"[complete-dup] game={game.id} task={task_id} player={player.id}")
                return game, False
            if task is None:
                logger.warning(f"[complete-unknown] game={game.id} task={task_id} player={player.id}")
                return game, False
            award_completion(game, player, task, now)
            logger.info(
                f"[complete] game={game.id} task={task_id} player={player.id} "
                f"partner={player.partner} points={task.award}"
            )
            return game, True

        return self._transact(session_key, apply)

    def start_round(self, session_key: str) -> GameSession:
        """Start the round clock; a no-op once the round has started."""
        _require_text('Missing gameId', session_key)

        def apply(game, now):
            if game.start_time is not None:
                return game, False
            game.start_time = now
            game.end_time = None
            logger.info(f"[start] game={game.id} start={now} duration={game.duration}")
            return game, True

        return self._transact(session_key, apply)

    def get_state(self, session_key: str) -> dict:
        """Return the stored record as-is."""
        _require_text('Missing gameId', session_key)
        raw = self.store.get(game_key(session_key))
        if raw is None:
            raise NotFoundError('Game not found')
        record = json.loads(raw)
        if self.record_end_time and record.get('startTime') is not None and record.get('endTime') is None:
            closed = self._close_expired_round(session_key)
            if closed is not None:
                return closed.to_dict()
        return record

    def _close_expired_round(self, session_key: str) -> Optional[GameSession]:
        """Write ``endTime`` once the round is over; None when nothing was written."""
        def apply(game, now):
            if game.end_time is None and round_status(game, now)['status'] == FINISHED:
                game.end_time = game.start_time + game.duration
                logger.info(f"[finish] game={game.id} end={game.end_time}")
                return game, True
            return None, False

        return self._transact(session_key, apply)

    def scoreboard(self, session_key: str) -> dict:
        _require_text('Missing gameId', session_key)
        raw = self.store.get(game_key(session_key))
        if raw is None:
            raise NotFoundError('Game not found')
        game = GameSession.loads(raw)
        return {
            'gameId': game.id,
            'round': round_status(game, self.clock()),
            'maxScore': game.catalog.max_score(),
            'players': scoreboard(game),
        }
