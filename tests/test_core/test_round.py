"""
Tests for the round controller: dealing, street reveals, showdown and leaders.
"""

import random

import pytest
from passivepoker.core.card import Deck, parse_cards
from passivepoker.core.match import new_match, apply_scoring
from passivepoker.core.round import (
    RoundState, start_round, advance, evaluate_leaders, get_leaders, get_showdown_result,
)
from passivepoker.core.rules import RoundPhase, PhaseError, cards_per_round


def play_to(state, phase):
    while state.phase != phase:
        advance(state)
    return state


class TestStartRound:
    """Tests for starting a round."""

    def test_start_round_deals_hole_cards(self, three_player_match, rng):
        state = start_round(three_player_match, rng=rng)

        assert state.phase == RoundPhase.DEALING
        assert state.round_number == 1
        assert three_player_match.round_number == 1
        assert state.board == []
        for player in state.players:
            assert len(player.hole_cards) == 2

    def test_no_burn_before_hole_cards(self, three_player_match, rng):
        state = start_round(three_player_match, rng=rng)
        assert state.cursor == 6

    def test_hole_cards_are_distinct(self, three_player_match, rng):
        state = start_round(three_player_match, rng=rng)
        cards = [c for p in state.players for c in p.hole_cards]
        assert len(set(cards)) == 6

    def test_round_robin_deal(self, two_player_match, rigged):
        """One card at a time around the table, twice."""
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        state = start_round(two_player_match, rng=rng)

        assert state.players[0].hole_cards == parse_cards("As Ah")
        assert state.players[1].hole_cards == parse_cards("Ks Kh")
        assert state.deck.dealt_cards == parse_cards("As Ks Ah Kh")

    def test_deal_events_highest_card_first(self, three_player_match, rng):
        """Deal events are ordered by rank, then suit (♠ > ♥ > ♦ > ♣)."""
        state = start_round(three_player_match, rng=rng)
        dealt = [e for e in state.history if e["action"] == "CARD_DEALT"]
        assert len(dealt) == 6

        by_card = {str(c): p.player_id for p in state.players for c in p.hole_cards}
        cards = sorted(
            (c for p in state.players for c in p.hole_cards),
            key=lambda c: (c.rank, c.suit),
            reverse=True,
        )
        assert [e["card"] for e in dealt] == [str(c) for c in cards]
        for event in dealt:
            assert by_card[event["card"]] == event["player"]

    def test_new_round_resets_table(self, two_player_match, rng):
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.SHOWDOWN)
        winners = get_showdown_result(state).winners
        assert winners

        state = start_round(two_player_match, rng=rng)
        assert state.round_number == 2
        assert state.board == []
        assert state.cursor == 4
        for player in state.players:
            assert len(player.hole_cards) == 2
            assert player.last_win is False
            assert player.last_hand_name is None
            assert player.last_best_cards == []

    def test_start_round_after_champion(self, two_player_match, rng):
        two_player_match.champion_id = "p0"
        with pytest.raises(PhaseError):
            start_round(two_player_match, rng=rng)


class TestStreets:
    """Tests for flop, turn and river."""

    def test_phase_sequence(self, three_player_match, rng):
        state = start_round(three_player_match, rng=rng)
        phases = []
        while state.phase != RoundPhase.SHOWDOWN:
            advance(state)
            phases.append(state.phase)
        assert phases == [RoundPhase.FLOP, RoundPhase.TURN, RoundPhase.RIVER, RoundPhase.SHOWDOWN]

    def test_board_and_cursor(self, three_player_match, rng):
        """Each street burns one card before drawing."""
        state = start_round(three_player_match, rng=rng)

        advance(state)
        assert len(state.board) == 3
        assert state.cursor == 6 + 4

        advance(state)
        assert len(state.board) == 4
        assert state.cursor == 6 + 6

        advance(state)
        assert len(state.board) == 5
        assert state.cursor == 6 + 8

        advance(state)
        assert state.cursor == cards_per_round(3)

    def test_burn_cards_never_reach_the_board(self, two_player_match, rigged):
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.RIVER)

        assert state.board == parse_cards("2d 7c 9d Jc 4h")
        burns = [c for c in state.deck.dealt_cards if c not in state.board]
        burns = [c for c in burns if all(c not in p.hole_cards for p in state.players)]
        assert len(burns) == 3

    def test_history_order(self, two_player_match, rng):
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.SHOWDOWN)
        actions = [e["action"] for e in state.history]
        assert actions == ["CARD_DEALT"] * 4 + ["FLOP", "TURN", "RIVER", "SHOWDOWN"]

    def test_advance_past_showdown(self, two_player_match, rng):
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.SHOWDOWN)
        with pytest.raises(PhaseError):
            advance(state)

    def test_advance_from_idle(self, two_player_match):
        state = RoundState(round_number=1, players=two_player_match.players, deck=Deck())
        with pytest.raises(PhaseError):
            advance(state)

    def test_full_table_never_exhausts_deck(self, rng):
        match = new_match([f"P{i}" for i in range(9)])
        for _ in range(5):
            state = play_to(start_round(match, rng=rng), RoundPhase.SHOWDOWN)
            assert state.cursor == 26


class TestShowdown:
    """Tests for winner determination."""

    def test_single_winner(self, two_player_match, rigged):
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.SHOWDOWN)
        result = get_showdown_result(state)

        assert result.winners == ["p0"]
        assert result.per_player["p0"].vector == (1, 14, 11, 9, 7)
        assert result.per_player["p1"].vector == (1, 13, 11, 9, 7)
        assert result.highlighted_board_cards == parse_cards("7c 9d Jc")

        alice, bob = state.players
        assert alice.last_win is True
        assert set(alice.last_best_cards) == set(parse_cards("As Ah Jc 9d 7c"))
        assert alice.last_hand_name == "One Pair"
        assert bob.last_win is False
        assert bob.last_best_cards == []
        assert bob.last_hand_name == "One Pair"

    def test_showdown_does_not_touch_points(self, two_player_match, rigged):
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        play_to(start_round(two_player_match, rng=rng), RoundPhase.SHOWDOWN)
        assert [p.points for p in two_player_match.players] == [0, 0]

    def test_mirror_hands_both_win(self, two_player_match, rigged):
        """Identical vectors: both players win and both score a full point."""
        rng = rigged(["As Kd", "Ah Kc"], "2d 7c 9s Jh 4c")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.SHOWDOWN)
        result = get_showdown_result(state)

        assert result.winners == ["p0", "p1"]
        apply_scoring(two_player_match, result)
        assert [p.points for p in two_player_match.players] == [1, 1]

    def test_board_plays_for_everyone(self, three_player_match, rigged):
        rng = rigged(["2c 3c", "2d 3d", "4h 5h"], "As Ks Qs Js 10s")
        state = play_to(start_round(three_player_match, rng=rng), RoundPhase.SHOWDOWN)
        result = get_showdown_result(state)

        assert result.winners == ["p0", "p1", "p2"]
        assert result.highlighted_board_cards == state.board
        assert all(p.last_hand_name == "Royal Flush" for p in state.players)

    def test_every_player_has_a_hand_name(self, three_player_match, rng):
        state = play_to(start_round(three_player_match, rng=rng), RoundPhase.SHOWDOWN)
        result = get_showdown_result(state)
        assert set(result.per_player) == {"p0", "p1", "p2"}
        for player in state.players:
            assert player.last_hand_name == result.per_player[player.player_id].name

    def test_winners_hold_the_best_vector(self, three_player_match, rng):
        for _ in range(20):
            state = play_to(start_round(three_player_match, rng=rng), RoundPhase.SHOWDOWN)
            result = get_showdown_result(state)
            best = max(h.sort_key for h in result.per_player.values())
            expected = [pid for pid, h in result.per_player.items() if h.sort_key == best]
            assert result.winners == expected
            for card in result.highlighted_board_cards:
                assert card in state.board

    def test_showdown_result_before_showdown(self, two_player_match, rng):
        state = start_round(two_player_match, rng=rng)
        with pytest.raises(PhaseError):
            get_showdown_result(state)
        advance(state)
        with pytest.raises(PhaseError):
            get_showdown_result(state)


class TestLeaders:
    """Tests for flop/turn leader detection."""

    def test_no_leaders_pre_flop(self, two_player_match, rng):
        state = start_round(two_player_match, rng=rng)
        result = evaluate_leaders(state.players, [])
        assert result.is_empty
        assert result.per_leader_cards == {}
        assert get_leaders(state).is_empty

    def test_leaders_on_flop(self, two_player_match, rigged):
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.FLOP)
        result = get_leaders(state)

        assert result.leaders == ["p0"]
        assert set(result.per_leader_cards["p0"]) == set(parse_cards("As Ah 2d 7c 9d"))
        assert result.highlighted_board_cards == parse_cards("2d 7c 9d")

    def test_leaders_on_turn(self, two_player_match, rigged):
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.TURN)
        result = get_leaders(state)

        assert result.leaders == ["p0"]
        assert set(result.per_leader_cards["p0"]) == set(parse_cards("As Ah Jc 9d 7c"))
        assert result.highlighted_board_cards == parse_cards("7c 9d Jc")

    def test_leader_can_change(self, two_player_match, rigged):
        """Bob hits a set of kings on the turn."""
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Kc 4h")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.FLOP)
        assert get_leaders(state).leaders == ["p0"]
        advance(state)
        assert get_leaders(state).leaders == ["p1"]

    def test_tied_leaders(self, two_player_match, rigged):
        rng = rigged(["As Kd", "Ah Kc"], "2d 7c 9s Jh 4c")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.FLOP)
        assert get_leaders(state).leaders == ["p0", "p1"]

    def test_leaders_do_not_score(self, two_player_match, rigged):
        rng = rigged(["As Ah", "Ks Kh"], "2d 7c 9d Jc 4h")
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.TURN)
        get_leaders(state)
        assert all(p.points == 0 and not p.last_win for p in state.players)

    def test_leaders_outside_flop_and_turn(self, two_player_match, rng):
        state = play_to(start_round(two_player_match, rng=rng), RoundPhase.RIVER)
        with pytest.raises(PhaseError):
            get_leaders(state)
        advance(state)
        with pytest.raises(PhaseError):
            get_leaders(state)


class TestDeterminism:
    """Injected random sources make deals reproducible."""

    def test_same_seed_same_round(self):
        boards = []
        for _ in range(2):
            match = new_match(["Alice", "Bob", "Carol"])
            state = play_to(start_round(match, rng=random.Random(2024)), RoundPhase.SHOWDOWN)
            boards.append((
                [list(p.hole_cards) for p in state.players],
                list(state.board),
                get_showdown_result(state).winners,
            ))
        assert boards[0] == boards[1]
