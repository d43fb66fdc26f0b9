"""
Encoding channels.

Only the distinctions this package needs are modelled: which channels
are positional, how secondary channels map to their primary channel,
and which channels are backed by a scale.
"""

from enum import Enum


class Channel(Enum):
    """Encoding channels of a mark."""

    # Position
    X = "x"
    Y = "y"
    X2 = "x2"
    Y2 = "y2"

    # Polar position
    THETA = "theta"
    THETA2 = "theta2"
    RADIUS = "radius"
    RADIUS2 = "radius2"

    # Mark properties
    COLOR = "color"
    FILL = "fill"
    STROKE = "stroke"
    OPACITY = "opacity"
    SIZE = "size"
    SHAPE = "shape"
    STROKE_WIDTH = "strokeWidth"
    ANGLE = "angle"

    # Non-scale channels
    TEXT = "text"
    TOOLTIP = "tooltip"
    HREF = "href"
    DETAIL = "detail"
    KEY = "key"
    ORDER = "order"


POSITION_SCALE_CHANNELS = (Channel.X, Channel.Y)


_NON_SCALE_CHANNELS = {
    Channel.X2,
    Channel.Y2,
    Channel.THETA2,
    Channel.RADIUS2,
    Channel.TEXT,
    Channel.TOOLTIP,
    Channel.HREF,
    Channel.DETAIL,
    Channel.KEY,
    Channel.ORDER,
}


_MAIN_RANGE_CHANNEL = {
    Channel.X2: Channel.X,
    Channel.Y2: Channel.Y,
    Channel.THETA2: Channel.THETA,
    Channel.RADIUS2: Channel.RADIUS,
}


def is_scale_channel(channel: Channel) -> bool:
    return channel not in _NON_SCALE_CHANNELS


def get_main_range_channel(channel: Channel) -> Channel:
    """x2 -> x, y2 -> y; every other channel maps to itself."""
    return _MAIN_RANGE_CHANNEL.get(channel, channel)


def get_size_type(channel: Channel) -> str:
    """x -> "width", y -> "height"."""
    if channel == Channel.X:
        return "width"
    if channel == Channel.Y:
        return "height"
    raise ValueError(f"Channel {channel.value} has no size type")


def get_position_scale_channel(size_type: str) -> Channel:
    """"width" -> x, "height" -> y."""
    if size_type == "width":
        return Channel.X
    if size_type == "height":
        return Channel.Y
    raise ValueError(f"Unknown size type: {size_type}")


def get_size_type_from_layout_size_type(layout_size_type: str) -> str:
    """childWidth -> width, childHeight -> height."""
    if layout_size_type == "childWidth":
        return "width"
    if layout_size_type == "childHeight":
        return "height"
    return layout_size_type
