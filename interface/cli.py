import argparse

import chess

from chess_ai.config import CONFIG
from chess_ai.core.errors import IllegalMoveError
from chess_ai.core.utils import configure_logging
from chess_ai.session import SearchSession


def play(human_color: chess.Color, depth: int, fen: str = chess.STARTING_FEN):
    session = SearchSession(depth=depth)
    session.initialize(not human_color, fen)
    board = session.board

    while not board.is_game_over():
        print(board)
        print("----------------------------")

        if board.turn == human_color:
            user_move = input("Enter your move (uci format, e2e4): ").strip()
            if user_move == "quit":
                return session
            try:
                session.record_opponent_move(user_move)
            except IllegalMoveError:
                print("Illegal move, try again.")
                continue
        else:
            move = session.choose_own_move()
            print(f"Engine plays: {move.uci()} | Eval: {session.running_score}")

    print("Game Over")
    print(f"Result: {board.board.result()}")
    return session


def main(argv=None):
    parser = argparse.ArgumentParser(description="Play against the engine in the terminal.")
    parser.add_argument("--color", choices=["white", "black"], default="white", help="your colour")
    parser.add_argument("--depth", type=int, default=CONFIG.search.depth)
    parser.add_argument("--fen", default=chess.STARTING_FEN)
    args = parser.parse_args(argv)

    configure_logging(CONFIG.log_level)
    play(chess.WHITE if args.color == "white" else chess.BLACK, args.depth, args.fen)


if __name__ == "__main__":
    main()
