from __future__ import annotations

import logging

from jokenpo.audio import SafeAudio, Track
from jokenpo.session import Session

logger = logging.getLogger(__name__)


class SuspenseManager:
    """Sudden-death tension mode (looping cue while the score is tied one win from the title).

    Contract:
      - `sync()` is idempotent: it only starts or stops when the session disagrees with the score.
      - the background track is resumed only if this manager paused it.
    """

    def __init__(self, *, session: Session, audio: SafeAudio) -> None:
        self.session = session
        self.audio = audio
        self._background_was_playing = False

    @property
    def active(self) -> bool:
        return self.session.suspense_active

    def sync(self) -> None:
        if self.session.is_sudden_death_tie:
            self.start()
        elif self.active:
            self.stop()

    def start(self) -> None:
        if self.active:
            return

        if self.audio.is_playing(Track.background):
            self.audio.pause(Track.background)
            self._background_was_playing = True
        else:
            self._background_was_playing = False

        self.audio.set_loop(Track.suspense_tie, True)
        self.audio.seek(Track.suspense_tie, 0)
        self.audio.play(Track.suspense_tie)
        self.session.suspense_active = True
        logger.info("suspense mode on at %s", self.session.score)

    def forget_background(self) -> None:
        """Host switched the music off while suspense is on: do not bring it back on exit."""

        self._background_was_playing = False

    def stop(self, *, resume_background: bool = True) -> None:
        if not self.active:
            return

        self.audio.set_loop(Track.suspense_tie, False)
        self.audio.pause(Track.suspense_tie)
        self.audio.seek(Track.suspense_tie, 0)
        self.session.suspense_active = False

        if resume_background and self._background_was_playing:
            self.audio.play(Track.background)
        self._background_was_playing = False
        logger.info("suspense mode off at %s (resume_background=%s)", self.session.score, resume_background)
