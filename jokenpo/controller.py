from __future__ import annotations

import logging
import random
from collections.abc import Callable
from functools import partial

from jokenpo.audio import AudioTransport, InMemoryAudio, SafeAudio, Track
from jokenpo.config import CHANT_SOUNDS, ChantMode, GameSettings
from jokenpo.core import captions
from jokenpo.core.commentary import comment
from jokenpo.core.events import CHAMPION_EVENTS, RoundResult, SpecialEvent, special_events
from jokenpo.core.moves import GLYPHS, Move, Outcome, parse_move, resolve
from jokenpo.core.opponent import MoveGenerator, RandomOpponent
from jokenpo.core.rules import standings
from jokenpo.fsm import RoundFSM, RoundPhase
from jokenpo.presentation import NullSink, PresentationSink, SafeSink
from jokenpo.session import InvariantViolation, Session
from jokenpo.suspense import SuspenseManager
from jokenpo.timers import AsyncioTimer, Cancellable, Timer

logger = logging.getLogger(__name__)

RoundListener = Callable[[RoundResult], None]

OUTCOME_SOUNDS: dict[Outcome, str] = {
    Outcome.draw: "draw",
    Outcome.player_wins: "win",
    Outcome.opponent_wins: "fail",
}

MATCH_POINT_TRACKS = (Track.match_point_player, Track.match_point_opponent)


class RoundController:
    """Runs rounds against the automated opponent.

    A round is a single scheduled continuation: `play_round` performs the shaking phase
    synchronously, then the timer fires `_complete_round` which reveals, resolves, scores,
    evaluates threshold events and releases the session. While a round is in flight the
    session is busy and further `play_round` calls are dropped.
    """

    def __init__(
        self,
        *,
        session: Session | None = None,
        sink: PresentationSink | None = None,
        audio: AudioTransport | None = None,
        timer: Timer | None = None,
        opponent: MoveGenerator | None = None,
        rng: random.Random | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self.session = session or Session()
        self.sink = SafeSink(sink or NullSink())
        self.audio = SafeAudio(audio or InMemoryAudio())
        self.timer = timer or AsyncioTimer()
        self.rng = rng or random.Random()
        self.opponent = opponent or RandomOpponent(rng=self.rng)
        self.suspense = SuspenseManager(session=self.session, audio=self.audio)
        self.fsm = RoundFSM()

        self.chant_mode = self.settings.chant_mode
        self.music_on = self.settings.music_on
        self.last_result: RoundResult | None = None

        self._pending: Cancellable | None = None
        self._listeners: list[RoundListener] = []

    # -- read accessors -------------------------------------------------

    @property
    def player_score(self) -> int:
        return self.session.player_score

    @property
    def opponent_score(self) -> int:
        return self.session.opponent_score

    @property
    def busy(self) -> bool:
        return self.session.busy

    @property
    def suspense_active(self) -> bool:
        return self.session.suspense_active

    @property
    def phase(self) -> RoundPhase:
        return self.fsm.phase

    def add_listener(self, listener: RoundListener) -> None:
        self._listeners.append(listener)

    # -- host operations ------------------------------------------------

    def start(self) -> None:
        """Render the idle scene and align audio with the starting score."""

        if self.music_on:
            self.audio.play(Track.background)
        self.render_idle()
        self.suspense.sync()

    def play_round(self, move: Move | str) -> bool:
        """Start a round. Returns False (and does nothing) while another round is in flight."""

        human = parse_move(move)
        if self.session.busy:
            logger.debug("round rejected: session busy (phase=%s)", self.fsm.phase)
            return False

        self.session.busy = True
        before = self.session.score
        try:
            self.fsm.begin()
            opponent_move = self.opponent.generate()

            if self.suspense.active and not self.session.is_sudden_death_tie:
                self.suspense.stop()

            self._render_shaking()
            self._pending = self.timer.after(
                self.settings.reveal_delay_ms,
                partial(self._complete_round, human, opponent_move, before),
            )
        except BaseException:
            self._release()
            raise

        logger.debug("round started: %s vs %s", human, opponent_move)
        return True

    def reset(self) -> None:
        """Zero the match. Suspense is stopped without resuming background music."""

        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self.fsm.in_flight:
            self.fsm.abort()

        self.session.reset()
        self.last_result = None
        self.suspense.stop(resume_background=False)
        self.suspense.sync()

        self._render_scores()
        self.render_idle()

        # Music switched on by the host comes back after a reset.
        if self.music_on and not self.audio.is_playing(Track.background):
            self.audio.play(Track.background)

        self._verify()
        logger.info("session reset")

    def close(self) -> None:
        """Stop a session for good: cancel the pending reveal and silence its cues, without re-rendering."""

        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self.fsm.in_flight:
            self.fsm.abort()
        self.session.busy = False
        self._stop_match_point_cues()
        self.suspense.stop(resume_background=False)
        self._listeners.clear()
        logger.info("session closed at %s", self.session.score)

    def toggle_music(self) -> bool:
        self.music_on = not self.music_on
        if not self.music_on:
            self.audio.pause(Track.background)
            self.suspense.forget_background()
        elif not self.suspense.active:
            # While the suspense loop plays, music waits for the next reset.
            self.audio.play(Track.background)
        return self.music_on

    def toggle_chant_mode(self) -> ChantMode:
        self.chant_mode = ChantMode.hands if self.chant_mode == ChantMode.voice else ChantMode.voice
        return self.chant_mode

    def preview_move(self, move: Move | str) -> None:
        self.sink.play_sound(parse_move(move).value)

    def render_idle(self) -> None:
        self.sink.show_hands("closed")
        self.sink.show_bubble("player", "?")
        self.sink.show_bubble("opponent", "?")
        self.sink.show_caption(captions.IDLE_CAPTION)
        self.sink.show_headline(captions.IDLE_HEADLINE)
        self.sink.show_scene("initial", captions.INITIAL_SCENE)

    # -- round phases ---------------------------------------------------

    def _render_shaking(self) -> None:
        self.sink.show_hands("shaking")
        self.sink.show_bubble("player", "...", "shake")
        self.sink.show_bubble("opponent", "...", "shake")
        self.sink.show_caption(captions.shake_caption(self.rng), "shake")
        self.sink.show_headline(captions.SHAKE_HEADLINE)
        self.sink.play_sound(CHANT_SOUNDS[self.chant_mode])

    def _complete_round(self, human: Move, opponent_move: Move, before: tuple[int, int]) -> None:
        self._pending = None
        try:
            self.fsm.reveal()
            self.sink.show_hands("open")
            self.sink.show_bubble("player", GLYPHS[human])
            self.sink.show_bubble("opponent", GLYPHS[opponent_move])

            outcome = resolve(human, opponent_move)
            self.fsm.resolve()
            result = self._resolve_round(human, opponent_move, outcome)
            self._verify(before=before)
        finally:
            self._release()

        logger.info(
            "round completed: %s vs %s -> %s, score %s, events %s",
            human,
            opponent_move,
            outcome,
            result.score_after,
            ",".join(result.special_events),
        )
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:
                logger.warning("round listener failed", exc_info=True)

    def _resolve_round(self, human: Move, opponent_move: Move, outcome: Outcome) -> RoundResult:
        category, image = captions.scene_for(outcome, self.rng)
        self.sink.show_scene(category, image)

        caption = captions.outcome_caption(outcome, self.rng)
        self.sink.show_caption(caption, captions.SCENE_CATEGORIES[outcome])
        self.sink.play_sound(OUTCOME_SOUNDS[outcome])

        self.session.award(outcome)
        if outcome == Outcome.player_wins:
            self.sink.highlight_score("player", "pulse")
            self.sink.show_bubble("player", GLYPHS[human], "win")
            self.sink.show_bubble("opponent", GLYPHS[opponent_move], "lose")
        elif outcome == Outcome.opponent_wins:
            self.sink.highlight_score("opponent", "pulse")
            self.sink.show_bubble("opponent", GLYPHS[opponent_move], "win")
            self.sink.show_bubble("player", GLYPHS[human], "lose")

        self._render_scores()

        headline = [captions.HEADLINES[outcome]]
        events = special_events(self.session.player_score, self.session.opponent_score)
        for event in events:
            line = self._apply_special_event(event)
            if line:
                headline.append(line)

        commentary = comment(self.session.player_score, self.session.opponent_score, outcome)
        headline.append(commentary)
        text = " ".join(headline)
        self.sink.show_headline(text)

        self.suspense.sync()

        result = RoundResult.now(
            human_move=human,
            opponent_move=opponent_move,
            outcome=outcome,
            score_after=self.session.score,
            special_events=events,
            caption=caption,
            headline=text,
            commentary=commentary,
        )
        self.last_result = result
        return result

    def _apply_special_event(self, event: SpecialEvent) -> str:
        """Play the cue for a threshold event and return the text appended to the headline."""

        if event == SpecialEvent.sudden_death_tie:
            # Sudden death outranks any match-point cue still ringing from the previous round.
            self._stop_match_point_cues()
            self.suspense.start()
            return captions.pick_variant(captions.SUDDEN_DEATH_CAPTIONS, self.rng)

        if event == SpecialEvent.player_match_point:
            self.audio.restart(Track.match_point_player)
            return captions.PLAYER_MATCH_POINT_CAPTION

        if event == SpecialEvent.opponent_match_point:
            self.audio.restart(Track.match_point_opponent)
            return captions.OPPONENT_MATCH_POINT_CAPTION

        if event in CHAMPION_EVENTS:
            self._stop_match_point_cues()
            self.suspense.stop(resume_background=False)
            if event == SpecialEvent.player_champion:
                self.audio.restart(Track.epic_win)
                return captions.PLAYER_CHAMPION_CAPTION
            self.audio.restart(Track.game_over)
            return captions.OPPONENT_CHAMPION_CAPTION

        return ""

    def _stop_match_point_cues(self) -> None:
        for track in MATCH_POINT_TRACKS:
            if self.audio.is_playing(track):
                self.audio.stop(track)

    def _render_scores(self) -> None:
        for side, standing in standings(self.session.player_score, self.session.opponent_score).items():
            self.sink.highlight_score(side, standing)

    def _release(self) -> None:
        self.session.busy = False
        if self.fsm.in_flight:
            if self.fsm.phase == RoundPhase.resolving:
                self.fsm.settle()
            else:
                self.fsm.abort()

    def _verify(self, *, before: tuple[int, int] | None = None) -> None:
        problems = self.session.violations(before=before)
        if not problems:
            return
        if self.settings.strict_invariants:
            raise InvariantViolation("; ".join(problems))
        logger.error("session invariant violated, resyncing: %s", "; ".join(problems))
        self.suspense.sync()
