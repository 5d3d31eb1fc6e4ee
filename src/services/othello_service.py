"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    CreateGameRequest,
    CreateGameResponse,
    GameStatusRequest,
    GameStatusResponse,
    JoinGameRequest,
    JoinGameResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    PendingGame,
    PendingGamesRequest,
    PendingGamesResponse,
)
from src.core.exceptions import GameNotFoundError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.db.repository import GameRepository
from src.othello.game import Game
from src.othello.square import PASS_TOKEN, RESIGN_TOKEN, move_to_text

logger = logging.getLogger(__name__)


class OthelloService:
    """Orchestration of layers for an Othello game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(
        self, request: CreateGameRequest, game_id: UUID, color: Color
    ) -> CreateGameResponse:
        """
        First player requested to create a new game.

        NOTE the ID and the color are picked by the caller, so the outcome here is fully deterministic.
        """
        new_game = Game.new_game(game_id=game_id, player=request.player_id, color=color)
        stored_game = self.repo.create_game(new_game.to_model())
        logger.info(
            "Game %s created by %s playing %s", stored_game.game_id, request.player_id, color
        )
        return CreateGameResponse(game_id=stored_game.game_id, color=color)

    def list_pending_games(self, request: PendingGamesRequest) -> PendingGamesResponse:
        """Games the player could join (so not the ones they opened themselves)."""
        games = [
            PendingGame(game_id=model.game_id, first_player=first_player)
            for model in self.repo.pending_games(request.player_id)
            if (first_player := model.black_player or model.white_player) is not None
        ]
        return PendingGamesResponse(games=games)

    def get_status(self, request: GameStatusRequest) -> GameStatusResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        last_move = self.repo.get_last_move(request.game_id)
        return GameStatusResponse(
            game_id=request.game_id,
            status=game.status_label,
            last_move=move_to_text(last_move),
            must_pass=game.must_pass,
        )

    def join_game(self, request: JoinGameRequest) -> JoinGameResponse:
        """Second player requested to join a game."""

        # Retrieve persisted GameModel from repository and register the requested player
        game = Game.from_model(self._fetch_game(request.game_id))
        color = game.register_player(request.player_id)

        # store in repository
        self.repo.update_game(game.to_model())
        logger.info("Player %s joined game %s as %s", request.player_id, game.game_id, color)
        return JoinGameResponse(game_id=game.game_id, color=color)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves."""
        game = Game.from_model(self._fetch_game(request.game_id))
        legal_moves = game.legal_moves(request.player_id)
        return LegalMovesResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            color=game.player_color(request.player_id),
            legal_moves=legal_moves,
        )

    def submit_move(self, request: MoveRequest) -> MoveResponse:
        """
        Play a square, pass, or resign.
        -----

        Placing a disc and passing both append to the move log, in the same transaction as the game update.
        Resigning only changes the game row.
        Any error raised before the repository call leaves the stored game untouched.
        """
        game = Game.from_model(self._fetch_game(request.game_id))

        if request.move == RESIGN_TOKEN:
            game.resign(request.player_id)
            self.repo.update_game(game.to_model())
            logger.info("Player %s resigned game %s", request.player_id, game.game_id)
        else:
            if request.move == PASS_TOKEN:
                move_value = game.pass_turn(request.player_id)
            else:
                move_value = game.make_move(request.move, request.player_id)
            move_number = self.repo.get_max_move_number(game.game_id) + 1
            self.repo.commit_move_and_state(game.to_model(), move_value, move_number)
            logger.info(
                "Move %d (%s) recorded for game %s",
                move_number,
                move_to_text(move_value),
                game.game_id,
            )

        if game.is_finished:
            logger.info("Game %s finished: %s", game.game_id, game.status_label)
        return MoveResponse(
            accepted=True,
            game_continues=not game.is_finished,
            winner=game.winner_label,
        )

    # -- Internal helpers --
    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
