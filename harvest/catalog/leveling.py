"""升级经验曲线。threshold(level) 为从 level 升到 level+1 所需经验，恒为正且随等级不减"""


class FlatCurve:
    """每级固定经验"""

    def __init__(self, per_level: int = 100):
        if per_level <= 0:
            raise ValueError("per_level 必须大于0")
        self.per_level = per_level

    def __call__(self, level: int) -> int:
        return self.per_level

    def __repr__(self):
        return f"FlatCurve({self.per_level})"


class LinearCurve:
    """经验需求 = per_level * level"""

    def __init__(self, per_level: int = 100):
        if per_level <= 0:
            raise ValueError("per_level 必须大于0")
        self.per_level = per_level

    def __call__(self, level: int) -> int:
        return self.per_level * max(1, level)

    def __repr__(self):
        return f"LinearCurve({self.per_level})"


CURVES = {
    "flat": FlatCurve,
    "linear": LinearCurve,
}


def make_curve(name: str, per_level: int = 100):
    try:
        return CURVES[name](per_level)
    except KeyError:
        raise ValueError(f"未知的经验曲线: {name}") from None
