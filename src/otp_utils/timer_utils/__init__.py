"""Countdown clock and OTP event stream utilities."""

from .countdown import CountdownClock, CountdownEvent, Tick, WindowChanged, countdown_for
from .otp_timer import CodeChanged, Countdown, OTPEvent, OTPEventStream, OTPProvider, shifted_time_source
from .publisher import EventPublisher, Subscription
from .ticker import ThreadingTicker, TickHandle, Ticker

__all__ = [
    "CountdownClock",
    "CountdownEvent",
    "Tick",
    "WindowChanged",
    "countdown_for",
    "CodeChanged",
    "Countdown",
    "OTPEvent",
    "OTPEventStream",
    "OTPProvider",
    "shifted_time_source",
    "EventPublisher",
    "Subscription",
    "ThreadingTicker",
    "TickHandle",
    "Ticker",
]
