"""WSJT-X network message definitions.

Field order is wire order. Message layouts follow WSJT-X's
``Network/NetworkMessage.hpp``; "In" means the message is consumed by WSJT-X,
"Out" means WSJT-X produces it.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional, Union

from pydantic import Field

from ..registry import register_message
from .base import BaseMessage, Direction
from .fields import Int32, NotOnWire, QColor, UInt8, UInt32, UInt64, Utf8


@register_message
class HeartbeatMessage(BaseMessage):
    """Periodic presence announcement, sent every 15 seconds.

    Servers use it to detect clients appearing and disappearing; clients use the
    reply to learn the schema the server negotiated.
    """

    id: str = Utf8(serialization_alias="id")
    max_schema: int = UInt32(serialization_alias="maxSchemaVersion")
    version: str = Utf8(serialization_alias="version")
    revision: str = Utf8(serialization_alias="revision")

    wsjtx_type: ClassVar[int] = 0
    wsjtx_direction: ClassVar[Direction] = Direction.BOTH


@register_message
class StatusMessage(BaseMessage):
    """Snapshot of WSJT-X state, sent whenever relevant state changes.

    ``tx_message`` was added in WSJT-X 2.3 and is absent from older senders.
    """

    id: str = Utf8(serialization_alias="id")
    dial_frequency: int = UInt64(serialization_alias="dialFrequency")
    mode: str = Utf8(serialization_alias="mode")
    dx_call: str = Utf8(serialization_alias="dxCall")
    report: str = Utf8(serialization_alias="report")
    tx_mode: str = Utf8(serialization_alias="txMode")
    tx_enabled: bool = Field(default=False, serialization_alias="txEnabled")
    transmitting: bool = Field(default=False, serialization_alias="transmitting")
    decoding: bool = Field(default=False, serialization_alias="decoding")
    rx_df: int = UInt32(serialization_alias="rxDeltaFreq")
    tx_df: int = UInt32(serialization_alias="txDeltaFreq")
    de_call: str = Utf8(serialization_alias="deCall")
    de_grid: str = Utf8(serialization_alias="deGrid")
    dx_grid: str = Utf8(serialization_alias="dxGrid")
    tx_watchdog: bool = Field(default=False, serialization_alias="txWatchdog")
    sub_mode: str = Utf8(serialization_alias="submode")
    fast_mode: bool = Field(default=False, serialization_alias="fastMode")
    special_operation_mode: int = UInt8(serialization_alias="specialMode")
    frequency_tolerance: int = UInt32(serialization_alias="frequencyTolerance")
    tr_period: int = UInt32(serialization_alias="txRxPeriod")
    configuration_name: str = Utf8(serialization_alias="configName")
    tx_message: str = Utf8(trailing=True, serialization_alias="txMessage")

    wsjtx_type: ClassVar[int] = 1
    wsjtx_direction: ClassVar[Direction] = Direction.OUT


@register_message
class DecodeMessage(BaseMessage):
    """A decode from the Band Activity window.

    ``new`` is True for a fresh decode and False when replaying old decodes in
    response to a :class:`ReplayMessage`.
    """

    id: str = Utf8(serialization_alias="id")
    new: bool = Field(default=False, serialization_alias="new")
    time: int = UInt32(serialization_alias="time")
    snr: int = Int32(serialization_alias="snr")
    delta_time_sec: float = Field(default=0.0, serialization_alias="deltaTime")
    delta_frequency_hz: int = UInt32(serialization_alias="deltaFrequency")
    mode: str = Utf8(serialization_alias="mode")
    message: str = Utf8(serialization_alias="message")
    low_confidence: bool = Field(default=False, serialization_alias="lowConfidence")
    off_air: bool = Field(default=False, serialization_alias="offAir")

    wsjtx_type: ClassVar[int] = 2
    wsjtx_direction: ClassVar[Direction] = Direction.OUT


# Window values for ClearMessage
CLEAR_BAND_ACTIVITY = 0
CLEAR_RX_FREQUENCY = 1
CLEAR_BOTH = 2


@register_message
class ClearMessage(BaseMessage):
    """Band Activity decodes were discarded, or a request to clear windows.

    ``window`` is only present when a controller sends this to WSJT-X:
    0 clears Band Activity, 1 clears Rx Frequency, 2 clears both.
    """

    id: str = Utf8(serialization_alias="id")
    window: int = UInt8(trailing=True, serialization_alias="window")

    wsjtx_type: ClassVar[int] = 3
    wsjtx_direction: ClassVar[Direction] = Direction.BOTH


@register_message
class ReplyMessage(BaseMessage):
    """Start a QSO as if the user double-clicked a prior CQ or QRZ decode.

    WSJT-X ignores the request unless it exactly matches a decode it holds.
    ``modifiers`` carries Qt keyboard modifier bits (e.g. 0x02 Shift).
    """

    id: str = Utf8(serialization_alias="id")
    time: int = UInt32(serialization_alias="time")
    snr: int = Int32(serialization_alias="snr")
    delta_time_sec: float = Field(default=0.0, serialization_alias="deltaTime")
    delta_frequency_hz: int = UInt32(serialization_alias="deltaFrequency")
    mode: str = Utf8(serialization_alias="mode")
    message: str = Utf8(serialization_alias="message")
    low_confidence: bool = Field(default=False, serialization_alias="lowConfidence")
    modifiers: int = UInt8(serialization_alias="modifiers")

    wsjtx_type: ClassVar[int] = 4
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class QsoLoggedMessage(BaseMessage):
    """Sent when the user accepts the Log QSO dialog.

    ``adif_propagation_mode`` was added in WSJT-X 2.4.
    """

    id: str = Utf8(serialization_alias="id")
    date_time_off: Optional[datetime] = Field(default=None, serialization_alias="dateTimeOff")
    dx_call: str = Utf8(serialization_alias="dxCall")
    dx_grid: str = Utf8(serialization_alias="dxGrid")
    tx_frequency: int = UInt64(serialization_alias="txFrequency")
    mode: str = Utf8(serialization_alias="mode")
    report_sent: str = Utf8(serialization_alias="reportSent")
    report_received: str = Utf8(serialization_alias="reportReceived")
    tx_power: str = Utf8(serialization_alias="txPower")
    comments: str = Utf8(serialization_alias="comments")
    name: str = Utf8(serialization_alias="name")
    date_time_on: Optional[datetime] = Field(default=None, serialization_alias="dateTimeOn")
    operator_call: str = Utf8(serialization_alias="operatorCall")
    my_call: str = Utf8(serialization_alias="myCall")
    my_grid: str = Utf8(serialization_alias="myGrid")
    exchange_sent: str = Utf8(serialization_alias="exchangeSent")
    exchange_received: str = Utf8(serialization_alias="exchangeReceived")
    adif_propagation_mode: str = Utf8(trailing=True, serialization_alias="propagationMode")

    wsjtx_type: ClassVar[int] = 5
    wsjtx_direction: ClassVar[Direction] = Direction.OUT


@register_message
class CloseMessage(BaseMessage):
    """Sent by a client just before it shuts down; sent to WSJT-X it closes the program."""

    id: str = Utf8(serialization_alias="id")

    wsjtx_type: ClassVar[int] = 6
    wsjtx_direction: ClassVar[Direction] = Direction.BOTH


@register_message
class ReplayMessage(BaseMessage):
    """Ask WSJT-X to resend every decode still in its Band Activity window."""

    id: str = Utf8(serialization_alias="id")

    wsjtx_type: ClassVar[int] = 7
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class HaltTxMessage(BaseMessage):
    """Stop transmitting now, or only auto-TX at the end of the period."""

    id: str = Utf8(serialization_alias="id")
    auto_tx_only: bool = Field(default=False, serialization_alias="autoTxOnly")

    wsjtx_type: ClassVar[int] = 8
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class FreeTextMessage(BaseMessage):
    """Replace the free text message, optionally selecting it for transmission."""

    id: str = Utf8(serialization_alias="id")
    text: str = Utf8(serialization_alias="text")
    send: bool = Field(default=False, serialization_alias="send")

    wsjtx_type: ClassVar[int] = 9
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class WSPRDecodeMessage(BaseMessage):
    """A WSPR decode."""

    id: str = Utf8(serialization_alias="id")
    new: bool = Field(default=False, serialization_alias="new")
    time: int = UInt32(serialization_alias="time")
    snr: int = Int32(serialization_alias="snr")
    delta_time: float = Field(default=0.0, serialization_alias="deltaTime")
    frequency: int = UInt64(serialization_alias="frequency")
    drift: int = Int32(serialization_alias="drift")
    callsign: str = Utf8(serialization_alias="callsign")
    grid: str = Utf8(serialization_alias="grid")
    power: int = Int32(serialization_alias="power")
    off_air: bool = Field(default=False, serialization_alias="offAir")

    wsjtx_type: ClassVar[int] = 10
    wsjtx_direction: ClassVar[Direction] = Direction.OUT


@register_message
class LocationMessage(BaseMessage):
    """Override the Maidenhead grid locator for the rest of the session."""

    id: str = Utf8(serialization_alias="id")
    location: str = Utf8(serialization_alias="location")

    wsjtx_type: ClassVar[int] = 11
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class LoggedAdifMessage(BaseMessage):
    """The ADIF record of a QSO the user just logged."""

    id: str = Utf8(serialization_alias="id")
    adif: str = Utf8(serialization_alias="adif")

    wsjtx_type: ClassVar[int] = 12
    wsjtx_direction: ClassVar[Direction] = Direction.OUT


@register_message
class HighlightCallsignMessage(BaseMessage):
    """Highlight a callsign in the Band Activity window.

    Colors are CSS color strings (``"red"``, ``"#eb4034"``). Setting ``reset``
    sends invalid colors instead, which clears the highlighting; ``reset`` is not
    itself a wire field. An empty color string is also sent as the invalid color.
    Invalid colors decode as ``""``; ``reset`` is set only when both are invalid.
    """

    id: str = Utf8(serialization_alias="id")
    callsign: str = Utf8(serialization_alias="callsign")
    background_color: str = QColor(serialization_alias="backgroundColor")
    foreground_color: str = QColor(serialization_alias="foregroundColor")
    highlight_last: bool = Field(default=False, serialization_alias="highlightLast")
    reset: bool = NotOnWire(default=False, serialization_alias="reset")

    wsjtx_type: ClassVar[int] = 13
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class SwitchConfigurationMessage(BaseMessage):
    """Switch to a named configuration, which must already exist."""

    id: str = Utf8(serialization_alias="id")
    configuration_name: str = Utf8(serialization_alias="configurationName")

    wsjtx_type: ClassVar[int] = 14
    wsjtx_direction: ClassVar[Direction] = Direction.IN


@register_message
class ConfigureMessage(BaseMessage):
    """Change several settings at once.

    Empty strings mean "no change", as does ``NO_CHANGE_U32`` for
    ``frequency_tolerance`` and ``rx_df``. WSJT-X silently ignores invalid values.
    """

    id: str = Utf8(serialization_alias="id")
    mode: str = Utf8(serialization_alias="mode")
    frequency_tolerance: int = UInt32(serialization_alias="frequencyTolerance")
    submode: str = Utf8(serialization_alias="submode")
    fast_mode: bool = Field(default=False, serialization_alias="fastMode")
    tr_period: int = UInt32(serialization_alias="trPeriod")
    rx_df: int = UInt32(serialization_alias="rxDF")
    dx_call: str = Utf8(serialization_alias="dxCall")
    dx_grid: str = Utf8(serialization_alias="dxGrid")
    generate_messages: bool = Field(default=False, serialization_alias="generateMessages")

    wsjtx_type: ClassVar[int] = 15
    wsjtx_direction: ClassVar[Direction] = Direction.IN


Message = Union[
    HeartbeatMessage,
    StatusMessage,
    DecodeMessage,
    ClearMessage,
    ReplyMessage,
    QsoLoggedMessage,
    CloseMessage,
    ReplayMessage,
    HaltTxMessage,
    FreeTextMessage,
    WSPRDecodeMessage,
    LocationMessage,
    LoggedAdifMessage,
    HighlightCallsignMessage,
    SwitchConfigurationMessage,
    ConfigureMessage,
]
