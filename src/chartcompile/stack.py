"""
Stack descriptor produced by the stacking stage.
"""

from dataclasses import dataclass
from typing import Optional

from chartcompile.channel import Channel


@dataclass(frozen=True)
class StackProperties:
    """
    Properties:
        field_channel: Channel holding the stacked measure (x or y)
        group_by_channel: Channel the stack is grouped by, if any
        offset: "zero", "center" or "normalize"
        impute: Whether gaps in the stack domain are filled. When set,
            the bin mid point is precomputed as a field.
    """

    field_channel: Channel
    group_by_channel: Optional[Channel] = None
    offset: str = "zero"
    impute: bool = False
