"""Tests for the turn scheduler facade."""

from crazy_eights.cards import Card, Rank, Suit
from crazy_eights.game import CrazyEightsGame, Rejected, TableSnapshot
from crazy_eights.moves import MoveType
from crazy_eights.state import GamePhase, GameState, Participant


def c(rank: Rank, suit: Suit | None = None) -> Card:
    return Card(rank, suit)


def pad(cards: list[Card], suit: Suit = Suit.CLUBS) -> list[Card]:
    """Fill a hand up to 8 cards with twos of ``suit``."""
    return cards + [c(Rank.TWO, suit) for _ in range(8 - len(cards))]


def stacked_deck(player=(), bot1=(), bot2=(), deck=None, top=None) -> list[Card]:
    """A pre-ordered deck that deals exactly the given hands and opening card.

    Default opening card is 7♠; hands are padded with 2♣, which can't be
    played onto it.
    """
    top = top or c(Rank.SEVEN, Suit.SPADES)
    if deck is None:
        deck = [c(Rank.TWO, Suit.DIAMONDS) for _ in range(5)]
    return pad(list(player)) + pad(list(bot1)) + pad(list(bot2)) + list(deck) + [top]


def make_game(**kwargs) -> CrazyEightsGame:
    game = CrazyEightsGame()
    game.new_game(deck=stacked_deck(**kwargs))
    return game


class TestSetup:
    def test_snapshot_before_deal(self):
        game = CrazyEightsGame()
        snapshot = game.snapshot()

        assert snapshot.phase == GamePhase.SETUP
        assert snapshot.current_player is None
        assert snapshot.player_hand == ()
        assert snapshot.message == "Welcome to Crazy Eights!"

    def test_actions_rejected_before_deal(self):
        game = CrazyEightsGame()
        assert isinstance(game.play_card(Participant.PLAYER, "x"), Rejected)
        assert isinstance(game.choose_suit(Suit.HEARTS), Rejected)
        assert isinstance(game.draw_card(Participant.PLAYER), Rejected)

    def test_new_game(self):
        game = CrazyEightsGame()
        snapshot = game.new_game(seed=42)

        assert snapshot.phase == GamePhase.AWAITING_MOVE
        assert snapshot.current_player == Participant.PLAYER
        assert snapshot.hand_counts == (8, 8, 8)
        assert len(snapshot.player_hand) == 8
        assert snapshot.deck_count == 30
        assert snapshot.active_suit is not None
        assert snapshot.message == "Your turn! Match the suit or rank."
        assert snapshot.is_player_turn

    def test_reset_shares_nothing_with_previous_game(self):
        game = CrazyEightsGame()
        game.new_game(seed=1)
        game.draw_card(Participant.PLAYER)
        first = game.state
        first_ids = {card.id for card in first.deck + first.discard + sum(first.hands, ())}

        game.new_game(seed=1)
        second = game.state
        second_ids = {card.id for card in second.deck + second.discard + sum(second.hands, ())}

        assert first_ids.isdisjoint(second_ids)
        assert game.move_history == []
        assert second.turn_number == 1


class TestSnapshot:
    def test_bot_hands_are_hidden(self):
        game = CrazyEightsGame()
        snapshot = game.new_game(seed=5)

        player_ids = {card.id for card in game.state.hands[Participant.PLAYER]}
        assert {card.id for card in snapshot.player_hand} == player_ids
        assert snapshot.playable_card_ids <= player_ids
        assert not hasattr(snapshot, "hands")

    def test_playable_cards_marked(self):
        nine_s = c(Rank.NINE, Suit.SPADES)
        eight_h = c(Rank.EIGHT, Suit.HEARTS)
        game = make_game(player=[nine_s, eight_h, c(Rank.THREE, Suit.HEARTS)])

        snapshot = game.snapshot()

        assert snapshot.playable_card_ids == frozenset({nine_s.id, eight_h.id})

    def test_nothing_playable_on_bot_turn(self):
        game = make_game(player=[c(Rank.NINE, Suit.SPADES)])
        game.draw_card(Participant.PLAYER)
        assert game.snapshot().playable_card_ids == frozenset()


class TestPlayerActions:
    def test_play_ordinary_card(self):
        nine_s = c(Rank.NINE, Suit.SPADES)
        game = make_game(player=[nine_s])

        result = game.play_card(Participant.PLAYER, nine_s.id)

        assert isinstance(result, TableSnapshot)
        assert result.top_card == nine_s
        assert result.current_player == Participant.BOT_1
        assert result.hand_counts[Participant.PLAYER] == 7
        assert result.message == "You played 9♠. Bot 1 is thinking..."
        assert game.is_bot_turn

    def test_illegal_play_leaves_table_unchanged(self):
        nine_h = c(Rank.NINE, Suit.HEARTS)
        game = make_game(player=[nine_h])
        before = game.snapshot()
        state_before = game.state

        result = game.play_card(Participant.PLAYER, nine_h.id)

        assert isinstance(result, Rejected)
        assert "does not match" in result.reason
        assert result.snapshot == before
        assert game.state is state_before

    def test_unknown_card_rejected(self):
        game = make_game()
        result = game.play_card(Participant.PLAYER, "no-such-card")
        assert isinstance(result, Rejected)

    def test_play_out_of_turn_rejected(self):
        bot_card = c(Rank.NINE, Suit.SPADES)
        game = make_game(bot1=[bot_card])

        result = game.play_card(Participant.BOT_1, bot_card.id)

        assert isinstance(result, Rejected)
        assert game.state.hands[Participant.BOT_1][0] == bot_card

    def test_eight_then_suit_choice(self):
        eight = c(Rank.EIGHT, Suit.DIAMONDS)
        game = make_game(player=[eight])

        waiting = game.play_card(Participant.PLAYER, eight.id)
        assert waiting.phase == GamePhase.AWAITING_SUIT_CHOICE
        assert waiting.current_player == Participant.PLAYER
        assert waiting.active_suit == Suit.SPADES
        assert waiting.message == "Crazy 8! Choose a new suit."
        assert not game.is_bot_turn

        chosen = game.choose_suit(Suit.HEARTS)
        assert chosen.active_suit == Suit.HEARTS
        assert chosen.current_player == Participant.BOT_1
        assert chosen.phase == GamePhase.AWAITING_MOVE
        assert chosen.message == "Suit changed to hearts. Bot 1 is thinking..."

    def test_bomb_message(self):
        bomb = c(Rank.WILDCARD)
        game = make_game(player=[bomb])

        result = game.play_card(Participant.PLAYER, bomb.id)

        assert result.message == "BOMB! Choose a new suit."

    def test_suit_choice_rejected_outside_phase(self):
        game = make_game()
        result = game.choose_suit(Suit.HEARTS)
        assert isinstance(result, Rejected)
        assert result.reason == "No suit choice is pending"

    def test_draw(self):
        game = make_game()
        result = game.draw_card(Participant.PLAYER)

        assert result.hand_counts[Participant.PLAYER] == 9
        assert result.deck_count == 4
        assert result.current_player == Participant.BOT_1
        assert result.message == "You drew a card. Bot 1 is thinking..."

    def test_draw_out_of_turn_rejected(self):
        game = make_game()
        result = game.draw_card(Participant.BOT_1)
        assert isinstance(result, Rejected)
        assert result.snapshot.hand_counts == (8, 8, 8)

    def test_empty_deck_draw_skips(self):
        game = make_game(deck=[])
        result = game.draw_card(Participant.PLAYER)

        assert result.hand_counts == (8, 8, 8)
        assert result.current_player == Participant.BOT_1
        assert result.message.startswith("Draw pile is empty! Skipping turn.")


class TestBotTurns:
    def test_no_bot_turn_on_player_turn(self):
        game = make_game()
        assert game.run_bot_turn() is None

    def test_bot_eight_and_suit_applied_together(self):
        """Suit is picked from what the bot holds after playing the eight."""
        eight = c(Rank.EIGHT, Suit.CLUBS)
        bot_hand = [
            eight,
            c(Rank.TWO, Suit.HEARTS),
            c(Rank.THREE, Suit.HEARTS),
            c(Rank.FOUR, Suit.HEARTS),
            c(Rank.FOUR, Suit.CLUBS),
            c(Rank.FIVE, Suit.CLUBS),
            c(Rank.SIX, Suit.CLUBS),
            c(Rank.NINE, Suit.DIAMONDS),
        ]
        game = make_game(bot1=bot_hand)
        game.draw_card(Participant.PLAYER)

        snapshot = game.run_bot_turn()

        assert snapshot.top_card == eight
        assert snapshot.active_suit == Suit.HEARTS
        assert snapshot.current_player == Participant.BOT_2
        assert snapshot.phase == GamePhase.AWAITING_MOVE
        assert snapshot.hand_counts[Participant.BOT_1] == 7
        assert snapshot.message == "Bot 1 played an 8 and chose hearts! Bot 2 is thinking..."

        last_two = game.move_history[-2:]
        assert [r.move_type for r in last_two] == [MoveType.PLAY_CARD.name, MoveType.CHOOSE_SUIT.name]
        assert all(r.player == Participant.BOT_1 for r in last_two)

    def test_bot_draws_without_legal_card(self):
        game = make_game()
        game.draw_card(Participant.PLAYER)

        snapshot = game.run_bot_turn()

        assert snapshot.hand_counts[Participant.BOT_1] == 9
        assert snapshot.current_player == Participant.BOT_2

    def test_run_bot_turns_until_player(self):
        game = make_game()
        game.draw_card(Participant.PLAYER)

        snapshots = game.run_bot_turns()

        assert len(snapshots) == 2
        assert game.snapshot().current_player == Participant.PLAYER
        assert not game.is_bot_turn


class TestWinning:
    def _state(self, player, bot1, current=Participant.PLAYER):
        return GameState(
            hands=(tuple(player), tuple(bot1), (c(Rank.TWO, Suit.CLUBS),)),
            deck=(c(Rank.TWO, Suit.DIAMONDS),),
            discard=(c(Rank.SEVEN, Suit.SPADES),),
            active_suit=Suit.SPADES,
            current_player=current,
        )

    def test_player_wins(self):
        last = c(Rank.KING, Suit.SPADES)
        game = CrazyEightsGame()
        game.load_state(self._state([last], [c(Rank.TWO, Suit.CLUBS)]))

        result = game.play_card(Participant.PLAYER, last.id)

        assert result.phase == GamePhase.FINISHED
        assert result.winner == Participant.PLAYER
        assert result.message.startswith("You win!")
        assert not game.is_bot_turn

    def test_moves_rejected_after_win(self):
        last = c(Rank.KING, Suit.SPADES)
        game = CrazyEightsGame()
        game.load_state(self._state([last], [c(Rank.TWO, Suit.CLUBS)]))
        game.play_card(Participant.PLAYER, last.id)

        result = game.draw_card(Participant.PLAYER)

        assert isinstance(result, Rejected)
        assert result.reason == "Game is already over"

    def test_bot_wins_with_eight(self):
        eight = c(Rank.EIGHT, Suit.HEARTS)
        game = CrazyEightsGame()
        game.load_state(self._state([c(Rank.TWO, Suit.CLUBS)], [eight], current=Participant.BOT_1))

        snapshot = game.run_bot_turn()

        assert snapshot.phase == GamePhase.FINISHED
        assert snapshot.winner == Participant.BOT_1
        assert snapshot.message == "Bot 1 wins!"
        assert len(game.move_history) == 1


class TestFullGames:
    def test_games_play_out_without_rejections(self):
        for seed in range(10):
            game = CrazyEightsGame()
            snapshot = game.new_game(seed=seed)

            for _ in range(1000):
                if snapshot.phase == GamePhase.FINISHED:
                    break
                if game.is_bot_turn:
                    snapshot = game.run_bot_turn()
                elif snapshot.phase == GamePhase.AWAITING_SUIT_CHOICE:
                    snapshot = game.choose_suit(Suit.HEARTS)
                else:
                    playable = [card for card in snapshot.player_hand if card.id in snapshot.playable_card_ids]
                    if playable:
                        snapshot = game.play_card(Participant.PLAYER, playable[0].id)
                    else:
                        snapshot = game.draw_card(Participant.PLAYER)
                assert isinstance(snapshot, TableSnapshot)

            assert game.state.card_count == 55
