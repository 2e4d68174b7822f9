from pydantic import BaseModel


class Countdown(BaseModel):
    """
    Per-question timer, driven by one `tick()` per second.

    Armed when a question is presented and cancelled on every transition out
    of it. Once it has fired it stays disarmed until re-armed, so expiry is
    reported exactly once.
    """

    duration: int | None = None
    remaining: int | None = None
    armed: bool = False

    def arm(self, duration: int | None) -> None:
        self.duration = duration
        self.remaining = duration
        self.armed = duration is not None and duration > 0

    def cancel(self) -> None:
        self.armed = False

    def tick(self) -> bool:
        """Advances one second. Returns True on the tick that expires it."""
        if not self.armed or self.remaining is None:
            return False
        self.remaining = max(self.remaining - 1, 0)
        if self.remaining == 0:
            self.armed = False
            return True
        return False

    @property
    def fraction_left(self) -> float:
        if not self.duration or self.remaining is None:
            return 0.0
        return self.remaining / self.duration
