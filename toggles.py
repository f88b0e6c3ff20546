# toggles.py
"""
Toggle state for the filter pipeline.

Holds one flag per filter stage, the recording and running flags and the
number of clockwise quarter turns to apply.
"""

from typing import Dict, List

# Boolean stage flags, in the order the pipeline applies them.
STAGE_FLAGS = (
    "gaussian",
    "canny",
    "sobel",
    "brightness",
    "contrast",
    "negative",
    "grayscale",
    "half_size_x",
    "half_size_y",
)
MIRROR_FLAGS = ("mirror_x", "mirror_y")
FLAGS = STAGE_FLAGS + MIRROR_FLAGS + ("record", "capture")


class ToggleState:
    """
    Flat record of which stages are active.

    ``capture`` is the running flag of the capture loop; every other flag
    starts disabled.
    """

    def __init__(self, **flags):
        for name in FLAGS:
            setattr(self, name, False)
        self.capture = True
        self.rotations = 0

        for name, value in flags.items():
            if name == "rotations":
                self.rotations = int(value) % 4
            elif name in FLAGS:
                setattr(self, name, bool(value))
            else:
                raise KeyError(f"Unknown toggle: {name}")

    def flip(self, name: str) -> bool:
        """Invert one boolean flag and return its new value."""
        if name not in FLAGS:
            raise KeyError(f"Unknown toggle: {name}")
        value = not getattr(self, name)
        setattr(self, name, value)
        return value

    def rotate(self) -> int:
        """Add one clockwise quarter turn (wraps after three)."""
        self.rotations = (self.rotations + 1) % 4
        return self.rotations

    def stop(self) -> None:
        self.capture = False

    def enabled_stages(self) -> List[str]:
        """Names of the active pipeline stages, in application order."""
        stages = [name for name in STAGE_FLAGS if getattr(self, name)]
        if self.rotations:
            stages.append("rotate")
        if self.mirror_x or self.mirror_y:
            stages.append("mirror")
        return stages

    def as_dict(self) -> Dict[str, object]:
        state = {name: getattr(self, name) for name in FLAGS}
        state["rotations"] = self.rotations
        return state

    def __repr__(self) -> str:
        return f"ToggleState({', '.join(self.enabled_stages()) or 'none'})"
