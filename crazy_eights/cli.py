"""Command-line interface for Crazy Eights."""

from __future__ import annotations

import argparse
import time
from typing import TYPE_CHECKING

from crazy_eights.cards import Suit
from crazy_eights.executor import execute_move
from crazy_eights.game import CrazyEightsGame, Rejected
from crazy_eights.move_generator import generate_legal_moves
from crazy_eights.state import GamePhase, Participant, create_initial_state

if TYPE_CHECKING:
    from crazy_eights.game import TableSnapshot
    from crazy_eights.state import GameState


def format_snapshot(snapshot: TableSnapshot) -> str:
    """Format the human player's view of the table."""
    lines = []

    lines.append("=" * 60)
    lines.append(f"Turn {snapshot.turn_number} | Phase: {snapshot.phase.name}")
    lines.append("=" * 60)

    for seat in (Participant.BOT_1, Participant.BOT_2):
        prefix = "→ " if seat == snapshot.current_player else "  "
        lines.append(f"{prefix}{seat.display_name}: [{snapshot.hand_counts[seat]} cards]")

    suit = snapshot.active_suit.label if snapshot.active_suit is not None else "-"
    lines.append(f"\nDiscard: {snapshot.top_card} | Active suit: {suit}")
    lines.append(f"Deck: {snapshot.deck_count} cards")

    prefix = "→ " if snapshot.current_player == Participant.PLAYER else "  "
    lines.append(f"\n{prefix}Your hand:")
    for i, card in enumerate(snapshot.player_hand):
        mark = "*" if card.id in snapshot.playable_card_ids else " "
        lines.append(f"  {i + 1:>2}.{mark} {card}")

    lines.append(f"\n{snapshot.message}")
    return "\n".join(lines)


def format_state(state: GameState) -> str:
    """Format the whole table, hands included, for watching bots."""
    lines = [f"Turn {state.turn_number} | {state.phase.name}"]
    for seat in Participant:
        prefix = "→ " if seat == state.current_player else "  "
        hand = ", ".join(str(c) for c in state.hand_of(seat)) or "(empty)"
        lines.append(f"{prefix}{seat.display_name}: {hand}")
    lines.append(
        f"Discard: {state.top_card} | Active suit: {state.active_suit.label} | "
        f"Deck: {len(state.deck)} cards"
    )
    return "\n".join(lines)


def _prompt_suit() -> Suit | None:
    suits = list(Suit)
    print("Choose a suit: " + ", ".join(f"{i + 1}. {s.label}" for i, s in enumerate(suits)))
    while True:
        choice = input("Suit: ").strip().lower()
        if choice == "q":
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(suits):
            return suits[int(choice) - 1]
        try:
            return Suit.from_label(choice)
        except ValueError:
            print("Please enter a suit number or name, or 'q' to quit")


def play_interactive(seed: int | None = None, delay: float = 1.0) -> None:
    """Play against two heuristic bots."""
    game = CrazyEightsGame()
    snapshot = game.new_game(seed=seed)

    print("\nWelcome to Crazy Eights!")
    print("Type a card number to play it, 'd' to draw, 'q' to quit.")
    print("Playable cards are marked with *.\n")

    while snapshot.phase != GamePhase.FINISHED:
        print(format_snapshot(snapshot))

        if game.is_bot_turn:
            time.sleep(delay)
            snapshot = game.run_bot_turn()
            continue

        if snapshot.phase == GamePhase.AWAITING_SUIT_CHOICE:
            suit = _prompt_suit()
            if suit is None:
                print("Goodbye!")
                return
            result = game.choose_suit(suit)
        else:
            choice = input("\nYour move: ").strip().lower()
            if choice == "q":
                print("Goodbye!")
                return
            if choice == "d":
                result = game.draw_card(Participant.PLAYER)
            elif choice.isdigit() and 1 <= int(choice) <= len(snapshot.player_hand):
                card = snapshot.player_hand[int(choice) - 1]
                result = game.play_card(Participant.PLAYER, card.id)
            else:
                print(f"Please enter a number 1-{len(snapshot.player_hand)}, 'd' or 'q'")
                continue

        if isinstance(result, Rejected):
            print(f"\n{result.reason}")
            snapshot = result.snapshot
        else:
            snapshot = result
        print()

    print(format_snapshot(snapshot))


def watch_game(seed: int | None = None, delay: float = 0.5, max_turns: int = 500) -> None:
    """Watch three bots play each other."""
    from strategies.heuristic import HeuristicStrategy
    from strategies.random_strategy import RandomStrategy

    strategies = (HeuristicStrategy(), HeuristicStrategy(), RandomStrategy(seed=seed))
    state = create_initial_state(seed=seed)

    print("\nWatching: " + " vs ".join(s.name for s in strategies))
    print("Press Ctrl+C to stop.\n")

    try:
        while not state.is_game_over and state.turn_number <= max_turns:
            print(format_state(state))

            acting_player = state.current_player
            strategy = strategies[acting_player]
            move = strategy.select_move(state, generate_legal_moves(state))

            print(f"\n{acting_player.display_name} ({strategy.name}): {move}")
            state = execute_move(state, move)

            time.sleep(delay)
            print("\n" + "-" * 60 + "\n")

    except KeyboardInterrupt:
        print("\nStopped.")

    print(format_state(state))
    if state.winner is not None:
        print(f"\nGAME OVER - {state.winner.display_name} wins!")


def run_games(num_games: int = 100, seed: int = 42) -> None:
    """Run a batch of heuristic vs heuristic vs random games."""
    from simulation.runner import run_batch
    from strategies.heuristic import HeuristicStrategy
    from strategies.random_strategy import RandomStrategy

    strategies = (HeuristicStrategy(), HeuristicStrategy(), RandomStrategy(seed=seed))
    names = " vs ".join(s.name for s in strategies)
    print(f"\nRunning {num_games} games: {names}")

    results = run_batch(strategies, num_games, start_seed=seed)

    print("\nResults:")
    for seat in Participant:
        wins = sum(1 for r in results if r.winner == seat.slug)
        print(f"  {seat.slug} ({strategies[seat].name}) wins: {wins} ({100*wins/num_games:.1f}%)")
    stalls = sum(1 for r in results if r.winner is None)
    avg_turns = sum(r.turns for r in results) / len(results)
    avg_duration = sum(r.duration_ms for r in results) / len(results)
    print(f"  Stalled: {stalls} ({100*stalls/num_games:.1f}%)")
    print(f"  Average turns: {avg_turns:.1f}")
    print(f"  Average duration: {avg_duration:.2f}ms")


def main() -> None:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Crazy Eights card game")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play against two bots")
    play_parser.add_argument("--seed", type=int, help="Random seed")
    play_parser.add_argument(
        "--delay", type=float, default=1.0, help="Bot thinking delay (seconds)"
    )

    watch_parser = subparsers.add_parser("watch", help="Watch bots play")
    watch_parser.add_argument("--seed", type=int, help="Random seed")
    watch_parser.add_argument(
        "--delay", type=float, default=0.5, help="Delay between moves (seconds)"
    )

    batch_parser = subparsers.add_parser("batch", help="Run many bot games")
    batch_parser.add_argument("--games", type=int, default=100, help="Number of games")
    batch_parser.add_argument("--seed", type=int, default=42, help="Random seed")

    args = parser.parse_args()

    if args.command == "play":
        play_interactive(seed=args.seed, delay=args.delay)
    elif args.command == "watch":
        watch_game(seed=args.seed, delay=args.delay)
    elif args.command == "batch":
        run_games(num_games=args.games, seed=args.seed)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
