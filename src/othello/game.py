"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of Othello -->
passes this information to the service layer, which can then pass it onwards to the API layer.

Lifecycle
----
pending --join--> black to move <--move/pass--> white to move
                        |                             |
                        +--move/pass/resign--> black won / white won / draw

Nothing leaves the three terminal states.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Self
from uuid import UUID

from src.core.exceptions import (
    GameAlreadyFinishedError,
    GameStateError,
    IllegalPassError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import (
    Color,
    GameState,
    state_label,
    to_move_state,
    winner_label,
    won_state,
)
from src.othello.moves import apply_move, has_any_legal_move
from src.othello.moves import legal_moves as legal_moves_mask
from src.othello.position import Position
from src.othello.square import PASS_MOVE, parse, square_indices, to_notation
from src.othello.status import Evaluation, Outcome, evaluate


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    game_id: UUID
    players: dict[Color, UUID]
    position: Position
    state: GameState
    version: int = 0
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        try:
            state = GameState(model.state)
        except ValueError as e:
            raise GameStateError(
                f"Invalid state code: {model.state!r}. \nPick one from {','.join([str(s.value) for s in GameState])}"
            ) from e

        try:
            position = Position(black=model.position_black, white=model.position_white)
        except ValueError as e:
            raise GameStateError(f"Stored position is corrupt: {e}") from e

        players = {
            color: player
            for color, player in [
                (Color.BLACK, model.black_player),
                (Color.WHITE, model.white_player),
            ]
            if player is not None
        }
        return cls(
            game_id=model.game_id,
            players=players,
            position=position,
            state=state,
            version=model.version,
            started_at=model.started_at,
            ended_at=model.ended_at,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            game_id=self.game_id,
            black_player=self.players.get(Color.BLACK),
            white_player=self.players.get(Color.WHITE),
            position_black=self.position.black,
            position_white=self.position.white,
            state=self.state.value,
            version=self.version,
            started_at=self.started_at,
            ended_at=self.ended_at,
        )

    @classmethod
    def new_game(cls, game_id: UUID, player: UUID, color: str) -> Self:
        """
        To start a new game with the player using the discs with the indicated color.

        NOTE the color is decided by the caller. Black always moves first, whoever ends up holding it.
        """
        try:
            player_color = Color(color.lower())
        except ValueError as e:
            raise GameStateError(
                f"Cannot create new game. Color {color} not in {','.join(Color)}."
            ) from e
        return cls(
            game_id=game_id,
            players={player_color: player},
            position=Position.starting_position(),
            state=GameState.PENDING,
        )

    # --- READ-ONLY VIEWS ---
    @property
    def is_finished(self) -> bool:
        return self.state.is_terminal

    @property
    def color_to_move(self) -> Optional[Color]:
        match self.state:
            case GameState.BLACK_TO_MOVE:
                return Color.BLACK
            case GameState.WHITE_TO_MOVE:
                return Color.WHITE
            case _:
                return None

    @property
    def status_label(self) -> str:
        return state_label(self.state)

    @property
    def winner_label(self) -> str:
        return winner_label(self.state)

    @property
    def must_pass(self) -> bool:
        """
        The side to move has no legal move but the opponent does.
        The state does not store this. It gets recomputed whenever someone asks.
        """
        color = self.color_to_move
        if color is None:
            return False
        return evaluate(self.position, color).outcome == Outcome.MUST_PASS

    def player_color(self, player: UUID) -> Color:
        """Color the player is seated with. Players not in this game are never allowed to act."""
        for color, seated in self.players.items():
            if seated == player:
                return color
        raise NotYourTurnError(f"Player {player} is not registered for this game.")

    # --- TRANSITIONS ---
    def register_player(self, player: UUID) -> Color:
        """Registering the 2nd player to an open game. Returns the color they play with."""
        self._assert_not_finished()
        if self.state != GameState.PENDING:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. status: {self.status_label}"
            )
        if player in self.players.values():
            raise GameStateError("Cannot join this game. You are already registered.")

        opponent_color = next(iter(self.players))
        player_color = opponent_color.opponent
        self.players[player_color] = player
        self._change_state(to_move_state(Color.BLACK))
        return player_color

    def legal_moves(self, player: UUID) -> list[str]:
        """
        Notations of the squares the player may play on.
        ----
        1. Check if it is your turn
        2. Yes? Generate legal moves and return them as a list of squares (empty list means you must pass).
        """
        color = self._assert_your_turn(player)
        mask = legal_moves_mask(self.position, color)
        return [to_notation(1 << index) for index in square_indices(mask)]

    def make_move(self, notation: str, player: UUID) -> int:
        """
        Attempt to place a disc
        -----

        1. make sure the game is running and it is your turn
        2. parse the square and compute the new position (raises for illegal moves, nothing gets changed then)
        3. hand the turn to the opponent
        4. update game state (if the game ended)

        Returns the encoded move for the move log.
        """
        color = self._assert_your_turn(player)
        square = parse(notation)
        new_position = apply_move(self.position, square, color)

        self.position = new_position
        self._hand_over_turn()
        return square

    def pass_turn(self, player: UUID) -> int:
        """Only allowed without any legal move on the board. The position stays the same."""
        color = self._assert_your_turn(player)
        if has_any_legal_move(self.position, color):
            raise IllegalPassError(
                "Cannot pass. You still have at least one legal move."
            )

        self._hand_over_turn()
        return PASS_MOVE

    def resign(self, player: UUID) -> None:
        """Either seated player can resign while the game is running. The opponent wins."""
        self._assert_in_progress()
        color = self.player_color(player)
        self._finish(won_state(color.opponent))

    # -- PRIVATE HELPERS ---
    def _assert_not_finished(self) -> None:
        if self.is_finished:
            raise GameAlreadyFinishedError(
                f"Game has already finished. status: {self.status_label}"
            )

    def _assert_in_progress(self) -> None:
        self._assert_not_finished()
        if self.state == GameState.PENDING:
            raise GameStateError("Game is not in progress. Waiting for a second player.")

    def _assert_your_turn(self, player: UUID) -> Color:
        """You must wait for your turn before calculating legal moves / making a move."""
        self._assert_in_progress()
        color = self.player_color(player)
        if color != self.color_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.status_label} to make a move first."
            )
        return color

    def _hand_over_turn(self) -> None:
        """Toggle the turn, then check if the opponent's side ended the game."""
        self._change_state(self.state.toggled())
        color = self.color_to_move
        assert color is not None
        evaluation = evaluate(self.position, color)
        if evaluation.is_terminal:
            self._finish(self._terminal_state(evaluation))

    def _terminal_state(self, evaluation: Evaluation) -> GameState:
        if evaluation.outcome == Outcome.DRAW:
            return GameState.DRAW
        assert evaluation.winner is not None
        return won_state(evaluation.winner)

    def _finish(self, final_state: GameState) -> None:
        self._change_state(final_state)
        self.ended_at = utc_now()

    def _change_state(self, new_state: GameState) -> None:
        self.state = new_state
