import random
import threading
import time
from typing import List, NamedTuple, Optional, Tuple

from pairplay.questions import Question, questions_of
from pairplay.services.rooms.exceptions import RoomFull

MAX_PLAYERS = 2
CHALLENGE_POINTS = 10


class Event(NamedTuple):
    """A named payload to be broadcast to every connection of a room."""
    name: str
    payload: dict


class Player:
    def __init__(self, id: int, sid: str, name):
        self.id = id
        # Lookup key for the owning connection, used to match disconnects
        self.sid = sid
        self.name = name
        self.score = 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
        }


class GameState:
    def __init__(self):
        self.current_player_id = 1
        self.round = 1
        self.used_question_ids = set()
        self.current_question: Optional[Question] = None

    def to_dict(self):
        return {
            'currentPlayerId': self.current_player_id,
            'round': self.round,
            'usedQuestionIds': sorted(self.used_question_ids),
            'currentQuestion': self.current_question.to_dict() if self.current_question else None,
        }


class Room:
    """State machine for one two-player session.

    Phases: empty (no players) -> waiting (one player) -> active (two
    players, game state present). Once populated the game state is never
    cleared; a player leaving leaves it as it was.

    None of the operations lock. Callers hold ``room.lock`` around an
    operation and copy out the returned events before releasing it. Every
    operation returns the list of events to broadcast, already serialized,
    so the payloads reflect the state right after the mutation.
    """

    def __init__(self, code: str, created_at: Optional[float] = None):
        self.code = code
        self.players: List[Player] = []
        self.game_state: Optional[GameState] = None
        self.created_at = time.time() if created_at is None else created_at
        self.lock = threading.Lock()
        # Set once the room is removed from the registry
        self.closed = False

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    @property
    def phase(self) -> str:
        if self.game_state is not None:
            return 'active'
        return 'waiting' if self.players else 'empty'

    def roster(self):
        return [p.to_dict() for p in self.players]

    def player_by_id(self, player_id: int) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def player_for(self, sid: str) -> Optional[Player]:
        return next((p for p in self.players if p.sid == sid), None)

    def _game_payload(self, **extra):
        payload = dict(extra)
        payload['gameState'] = self.game_state.to_dict()
        return payload

    def join(self, sid: str, name) -> Tuple[Player, List[Event]]:
        if self.is_full:
            raise RoomFull(code=self.code)
        # Take the free seat; with an empty room that is 1, then 2
        taken = {p.id for p in self.players}
        player_id = next(i for i in range(1, MAX_PLAYERS + 1) if i not in taken)
        player = Player(player_id, sid, name)
        self.players.append(player)

        events = [Event('player-joined', {
            'players': self.roster(),
            'playerCount': self.player_count,
        })]
        if self.is_full:
            self.game_state = GameState()
            events.append(Event('game-start', self._game_payload(players=self.roster())))
        return player, events

    def select_mode(self, mode: str, rng=random) -> List[Event]:
        if self.game_state is None:
            return []
        pool = questions_of(mode)
        if not pool:
            return []
        used = self.game_state.used_question_ids
        eligible = [q for q in pool if q.id not in used]
        if not eligible:
            # History is shared by both modes, so this clears it for both
            used.clear()
            eligible = list(pool)
        question = rng.choice(eligible)
        used.add(question.id)
        self.game_state.current_question = question
        return [Event('question-selected', self._game_payload(question=question.to_dict()))]

    def complete_challenge(self, completed: bool) -> List[Event]:
        state = self.game_state
        if state is None:
            return []
        current = self.player_by_id(state.current_player_id)
        if completed and current is not None:
            current.score += CHALLENGE_POINTS

        state.current_player_id = 2 if state.current_player_id == 1 else 1
        if state.current_player_id == 1:
            state.round += 1
        state.current_question = None
        return [Event('challenge-completed', self._game_payload(
            completed=completed,
            players=self.roster(),
        ))]

    def skip_question(self) -> List[Event]:
        if self.game_state is None:
            return []
        self.game_state.current_question = None
        return [Event('question-skipped', self._game_payload())]

    def end_game(self) -> List[Event]:
        # Informational only, the room stays active and can be reset
        return [Event('game-ended', {'players': self.roster()})]

    def reset_game(self) -> List[Event]:
        if self.game_state is None:
            return []
        for p in self.players:
            p.score = 0
        self.game_state = GameState()
        return [Event('game-reset', self._game_payload(players=self.roster()))]

    def leave(self, sid: str) -> Tuple[Optional[Player], List[Event]]:
        """Remove the player owned by ``sid``.

        Returns no events when the room is left empty; deleting it is up to
        the caller.
        """
        player = self.player_for(sid)
        if player is None:
            return None, []
        self.players = [p for p in self.players if p.sid != sid]
        if not self.players:
            return player, []
        return player, [Event('player-left', {
            'players': self.roster(),
            'playerCount': self.player_count,
        })]
