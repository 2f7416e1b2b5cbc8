"""Per-question countdown."""
from dataclasses import dataclass

TIMER_SECONDS = 30


@dataclass
class Countdown:
    """Cooperative countdown ticked once per second by its owner.

    Reaching zero stops the clock and locks answering until reset() is
    called for the next question.
    """

    seconds: int = TIMER_SECONDS
    time_left: int = TIMER_SECONDS
    running: bool = False
    expired: bool = False

    def start(self) -> None:
        self.time_left = self.seconds
        self.expired = False
        self.running = True

    def pause(self) -> None:
        self.running = False

    def resume(self) -> None:
        if not self.expired and self.time_left > 0:
            self.running = True

    def reset(self) -> None:
        """Rearm for the next question, keeping the running flag."""
        self.time_left = self.seconds
        self.expired = False

    def tick(self) -> bool:
        """Advance one second; returns True while another tick should be scheduled."""
        if not self.running:
            return False
        if self.time_left > 0:
            self.time_left -= 1
        if self.time_left <= 0:
            self.running = False
            self.expired = True
            return False
        return True

    def advance(self, seconds: float) -> None:
        for _ in range(int(seconds)):
            if not self.tick():
                break

    @property
    def locked(self) -> bool:
        return self.expired
