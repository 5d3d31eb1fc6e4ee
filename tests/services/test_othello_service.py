"""Unit tests for src/services/othello_service.py"""

from dataclasses import replace
from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.api.models import (
    CreateGameRequest,
    CreateGameResponse,
    GameStatusRequest,
    JoinGameRequest,
    LegalMovesRequest,
    MoveRequest,
    PendingGamesRequest,
)
from src.core.exceptions import (
    ConcurrencyConflictError,
    ConflictError,
    GameAlreadyFinishedError,
    GameError,
    GameNotFoundError,
    IllegalPassError,
    NotYourTurnError,
    SquareOccupiedError,
)
from src.core.models import GameModel, MoveModel
from src.core.shared_types import Color, GameState
from src.othello.square import NO_MOVE, PASS_MOVE, parse
from src.services.othello_service import OthelloService

# --- MOCK DEPENDENCIES ----
PLAYER_BLACK = UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
PLAYER_WHITE = UUID("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb")


class MockRepository:
    """Mock the GameRepository using dictionaries of game models and move logs."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}
        self._moves: dict[UUID, list[MoveModel]] = {}

    def create_game(self, game: GameModel) -> GameModel:
        if game.game_id in self._games:
            raise ConflictError(f"Game with game_id={game.game_id} already exists.")
        self._games[game.game_id] = replace(game, version=0)
        return self._games[game.game_id]

    def get_game(self, game_id: UUID) -> GameModel | None:
        game = self._games.get(game_id)
        return replace(game) if game else None

    def update_game(self, game: GameModel) -> GameModel:
        self._check_version(game)
        self._games[game.game_id] = replace(game, version=game.version + 1)
        return self._games[game.game_id]

    def get_max_move_number(self, game_id: UUID) -> int:
        return max((move.move_number for move in self.get_moves(game_id)), default=0)

    def get_last_move(self, game_id: UUID) -> int:
        moves = self.get_moves(game_id)
        return moves[-1].move_value if moves else NO_MOVE

    def commit_move_and_state(
        self, game: GameModel, move_value: int, move_number: int
    ) -> None:
        self._check_version(game)
        if move_number in {move.move_number for move in self.get_moves(game.game_id)}:
            raise ConcurrencyConflictError(f"Move {move_number} already recorded.")
        self._games[game.game_id] = replace(game, version=game.version + 1)
        self._moves.setdefault(game.game_id, []).append(
            MoveModel(
                game_id=game.game_id,
                move_number=move_number,
                move_value=move_value,
                position_black=game.position_black,
                position_white=game.position_white,
            )
        )

    def pending_games(self, excluding_player: UUID) -> list[GameModel]:
        return [
            game
            for game in self._games.values()
            if game.state == GameState.PENDING
            and excluding_player not in (game.black_player, game.white_player)
        ]

    def get_moves(self, game_id: UUID) -> list[MoveModel]:
        return self._moves.get(game_id, [])

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()
        self._moves.clear()

    def _check_version(self, game: GameModel) -> None:
        stored = self._games.get(game.game_id)
        if stored is None:
            raise GameNotFoundError(f"Game with game_id={game.game_id} not found.")
        if stored.version != game.version:
            raise ConcurrencyConflictError("Stale version.")


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> OthelloService:
    return OthelloService(mock_repository)


def _started_game(service: OthelloService) -> UUID:
    """Black created the game, white joined. Black to move."""
    created = service.create_new_game(
        CreateGameRequest(player_id=PLAYER_BLACK), game_id=uuid4(), color=Color.BLACK
    )
    service.join_game(JoinGameRequest(game_id=created.game_id, player_id=PLAYER_WHITE))
    return created.game_id


def _move(game_id: UUID, player: UUID, move: str) -> MoveRequest:
    return MoveRequest(game_id=game_id, player_id=player, move=move)


# --- SERVICE - CREATE NEW GAME ----
@pytest.mark.parametrize("color", [Color.BLACK, Color.WHITE])
def test_create_a_new_game(
    service: OthelloService, mock_repository: MockRepository, color: Color
) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    game_id = uuid4()
    response = service.create_new_game(
        CreateGameRequest(player_id=PLAYER_BLACK), game_id=game_id, color=color
    )

    assert isinstance(response, CreateGameResponse)
    assert response.game_id == game_id
    assert response.color == color

    stored_game = mock_repository.get_game(game_id)
    assert stored_game is not None
    assert stored_game.state == GameState.PENDING
    if color == Color.BLACK:
        assert stored_game.black_player == PLAYER_BLACK
        assert stored_game.white_player is None
    else:
        assert stored_game.white_player == PLAYER_BLACK
        assert stored_game.black_player is None


def test_create_with_taken_id(service: OthelloService) -> None:
    game_id = uuid4()
    request = CreateGameRequest(player_id=PLAYER_BLACK)
    service.create_new_game(request, game_id=game_id, color=Color.BLACK)
    with pytest.raises(ConflictError):
        service.create_new_game(request, game_id=game_id, color=Color.WHITE)


# --- SERVICE - LIST / JOIN ----
def test_list_pending_games(service: OthelloService) -> None:
    own = service.create_new_game(
        CreateGameRequest(player_id=PLAYER_WHITE), game_id=uuid4(), color=Color.WHITE
    )
    other = service.create_new_game(
        CreateGameRequest(player_id=PLAYER_BLACK), game_id=uuid4(), color=Color.BLACK
    )

    response = service.list_pending_games(PendingGamesRequest(player_id=PLAYER_WHITE))
    assert [(g.game_id, g.first_player) for g in response.games] == [
        (other.game_id, PLAYER_BLACK)
    ]
    assert own.game_id not in {g.game_id for g in response.games}


def test_second_player_joins_game(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    created = service.create_new_game(
        CreateGameRequest(player_id=PLAYER_WHITE), game_id=uuid4(), color=Color.WHITE
    )
    response = service.join_game(
        JoinGameRequest(game_id=created.game_id, player_id=PLAYER_BLACK)
    )

    assert response.color == Color.BLACK
    stored_game = mock_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.black_player == PLAYER_BLACK
    assert stored_game.white_player == PLAYER_WHITE
    assert stored_game.state == GameState.BLACK_TO_MOVE

    # no longer listed
    assert service.list_pending_games(PendingGamesRequest(player_id=uuid4())).games == []


def test_cannot_join_unknown_game(service: OthelloService) -> None:
    with pytest.raises(GameNotFoundError):
        service.join_game(JoinGameRequest(game_id=uuid4(), player_id=PLAYER_WHITE))


# --- SERVICE - STATUS ----
def test_status_of_new_game(service: OthelloService) -> None:
    created = service.create_new_game(
        CreateGameRequest(player_id=PLAYER_BLACK), game_id=uuid4(), color=Color.BLACK
    )
    response = service.get_status(GameStatusRequest(game_id=created.game_id))
    assert response.status == "pending"
    assert response.last_move == ""
    assert not response.must_pass


def test_status_of_unknown_game(service: OthelloService) -> None:
    with pytest.raises(GameError):
        service.get_status(GameStatusRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_getting_legal_moves(service: OthelloService) -> None:
    game_id = _started_game(service)
    response = service.legal_moves(
        LegalMovesRequest(game_id=game_id, player_id=PLAYER_BLACK)
    )
    assert response.color == Color.BLACK
    assert set(response.legal_moves) == {"d3", "c4", "f5", "e6"}


def test_getting_legal_moves_before_your_turn(service: OthelloService) -> None:
    game_id = _started_game(service)
    with pytest.raises(NotYourTurnError):
        service.legal_moves(LegalMovesRequest(game_id=game_id, player_id=PLAYER_WHITE))


# --- SERVICE - MOVES ----
def test_first_move_is_recorded(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    game_id = _started_game(service)
    response = service.submit_move(_move(game_id, PLAYER_BLACK, "d3"))

    assert response.accepted
    assert response.game_continues
    assert response.winner == ""

    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.position_black == parse("d3") | parse("d4") | parse("e4") | parse("d5")
    assert stored.position_white == parse("e5")
    assert stored.state == GameState.WHITE_TO_MOVE

    moves = mock_repository.get_moves(game_id)
    assert [(m.move_number, m.move_value) for m in moves] == [(1, parse("d3"))]

    status = service.get_status(GameStatusRequest(game_id=game_id))
    assert status.status == "white"
    assert status.last_move == "d3"


def test_illegal_move_is_not_recorded(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    game_id = _started_game(service)
    before = mock_repository.get_game(game_id)

    with pytest.raises(SquareOccupiedError):
        service.submit_move(_move(game_id, PLAYER_BLACK, "d4"))

    assert mock_repository.get_game(game_id) == before
    assert mock_repository.get_moves(game_id) == []


def test_illegal_pass_is_not_recorded(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    game_id = _started_game(service)
    with pytest.raises(IllegalPassError):
        service.submit_move(_move(game_id, PLAYER_BLACK, "pass"))
    assert mock_repository.get_moves(game_id) == []


def test_move_numbers_follow_each_other(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    game_id = _started_game(service)
    service.submit_move(_move(game_id, PLAYER_BLACK, "d3"))
    service.submit_move(_move(game_id, PLAYER_WHITE, "c3"))
    service.submit_move(_move(game_id, PLAYER_BLACK, "c4"))

    assert [m.move_number for m in mock_repository.get_moves(game_id)] == [1, 2, 3]


def test_forced_pass_is_recorded(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    """Black cannot move, white can: the pass is logged and the position stays the same."""
    game_id = _started_game(service)
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    mock_repository.update_game(
        replace(stored, position_black=parse("b1"), position_white=parse("a1"))
    )

    status = service.get_status(GameStatusRequest(game_id=game_id))
    assert status.must_pass

    response = service.submit_move(_move(game_id, PLAYER_BLACK, "PASS"))

    assert response.accepted
    assert response.game_continues
    after = mock_repository.get_game(game_id)
    assert after is not None
    assert after.state == GameState.WHITE_TO_MOVE
    assert after.position_black == parse("b1")
    assert after.position_white == parse("a1")
    assert [(m.move_number, m.move_value) for m in mock_repository.get_moves(game_id)] == [
        (1, PASS_MOVE)
    ]
    assert service.get_status(GameStatusRequest(game_id=game_id)).last_move == "pass"


def test_resign(service: OthelloService, mock_repository: MockRepository) -> None:
    """Black resigns: white wins, end time gets set, further moves are rejected."""
    game_id = _started_game(service)
    response = service.submit_move(_move(game_id, PLAYER_BLACK, "resign"))

    assert response.accepted
    assert not response.game_continues
    assert response.winner == "white"

    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.state == GameState.WHITE_WON
    assert stored.ended_at is not None
    assert mock_repository.get_moves(game_id) == []

    with pytest.raises(GameAlreadyFinishedError):
        service.submit_move(_move(game_id, PLAYER_WHITE, "d3"))
    assert service.get_status(GameStatusRequest(game_id=game_id)).status == "white_won"


def test_winning_move(service: OthelloService, mock_repository: MockRepository) -> None:
    """White wipes out black's last disc."""
    game_id = _started_game(service)
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    mock_repository.update_game(
        replace(
            stored,
            position_black=parse("b1"),
            position_white=parse("a1"),
            state=GameState.WHITE_TO_MOVE.value,
        )
    )

    response = service.submit_move(_move(game_id, PLAYER_WHITE, "c1"))

    assert not response.game_continues
    assert response.winner == "white"
    after = mock_repository.get_game(game_id)
    assert after is not None
    assert after.state == GameState.WHITE_WON
    assert after.ended_at is not None
    assert len(mock_repository.get_moves(game_id)) == 1


def test_concurrent_write_is_reported(
    service: OthelloService, mock_repository: MockRepository
) -> None:
    """Someone else wrote the game between our read and our write: the move fails loudly."""
    game_id = _started_game(service)
    stale = mock_repository.get_game(game_id)
    assert stale is not None
    service.submit_move(_move(game_id, PLAYER_BLACK, "d3"))

    # replay the old read
    mock_repository.get_game = lambda _: replace(stale)  # type: ignore[method-assign]
    with pytest.raises(ConcurrencyConflictError):
        service.submit_move(_move(game_id, PLAYER_BLACK, "c4"))
    assert len(mock_repository.get_moves(game_id)) == 1
