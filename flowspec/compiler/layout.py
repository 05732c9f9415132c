"""Deterministic placement of nodes rebuilt from a specification.

Specs carry no geometry. Steps are spread evenly between the entry node at the
top and the terminal node at the bottom, alternating left and right.
"""

from flowspec.models.graph_model import Position


ENTRY_POSITION = Position(x=0, y=0)
TERMINAL_POSITION = Position(x=0, y=600)

VERTICAL_SPAN = 500  # height available between entry and terminal
TOP_MARGIN = 50
SIDE_OFFSET = 200


def place_steps(step_count: int) -> list[Position]:
    """Position of each step, indexed like the ``nodes`` list."""
    spacing = VERTICAL_SPAN / (step_count + 1)
    return [
        Position(
            x=-SIDE_OFFSET if index % 2 == 0 else SIDE_OFFSET,
            y=spacing * (index + 1) + TOP_MARGIN,
        )
        for index in range(step_count)
    ]
