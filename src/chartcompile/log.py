"""
Warning categories and messages raised while compiling a chart.

Nothing in this package aborts compilation on bad chart content.
Recoverable problems are reported with ``warnings.warn`` using the
categories below, so callers can filter or escalate them.
"""

from typing import Any


class CompileWarning(UserWarning):
    """Base category for all chart compilation warnings."""
    pass


class MergeConflictWarning(CompileWarning):
    """Two explicit values disagree during a merge; the first one wins."""
    pass


class ChannelRequiredWarning(CompileWarning):
    """An encoding needs a companion channel that was not supplied."""
    pass


def merge_conflicting_property(property: str, property_of: str, v1: Any, v2: Any) -> str:
    owner = f' for "{property_of}"' if property_of else ""
    return (
        f'Conflicting {property} property "{v1}" and "{v2}"{owner}. '
        f'Using "{v1}".'
    )


def channel_required_for_binned(channel: str) -> str:
    return f'Channel {channel} is required for "binned" bin.'
